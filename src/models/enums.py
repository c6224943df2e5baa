from enum import Enum


class SizeCategory(str, Enum):
    X_SMALL = "X-Small"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    X_LARGE = "X-Large"


class AgeBracket(str, Enum):
    # Declaration order is the match order used when parsing division text
    TINY = "Tiny"
    MINI = "Mini"
    YOUTH = "Youth"
    JUNIOR = "Junior"
    SENIOR = "Senior"
    U16 = "U16"
    U18 = "U18"
    OPEN = "Open"


class FlagMode(str, Enum):
    """How a boolean division flag (Flex, D2) restricts the ranking."""

    ANY = "Any"
    ONLY = "Only"
    EXCLUDE = "Exclude"

    def matches(self, value: bool) -> bool:
        if self is FlagMode.ONLY:
            return value
        if self is FlagMode.EXCLUDE:
            return not value
        return True
