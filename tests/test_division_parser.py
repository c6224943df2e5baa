import pytest

from src.models.enums import SizeCategory
from src.normalization.division_parser import (
    match_size,
    parse_age_bracket,
    parse_d2,
    parse_flex,
    parse_level,
    parse_size,
)


@pytest.mark.parametrize(
    "division,expected",
    [
        ("L3 Junior - Flex", "L3"),
        ("l 5 Senior", "L5"),
        ("  L1 Tiny", "L1"),
        ("L8 Open", None),
        ("Junior L3", None),
        ("L12 Senior", None),
    ],
)
def test_parse_level(division, expected):
    assert parse_level(division) == expected


@pytest.mark.parametrize(
    "division,expected",
    [
        ("L3 Junior - Flex", "Junior"),
        ("L2  YOUTH - D2", "Youth"),
        ("L6 U18 Coed", "U18"),
        ("L4 Open", "Open"),
        ("L3 Prep", None),
    ],
)
def test_parse_age_bracket(division, expected):
    assert parse_age_bracket(division) == expected


def test_flags_are_whole_words():
    assert parse_d2("L3 Junior - D2 - Small")
    assert not parse_d2("L3 Junior - D22")
    assert parse_flex("L3 Junior - FLEX")
    assert not parse_flex("L3 Junior - Flexible")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Small", SizeCategory.SMALL),
        ("x-small", SizeCategory.X_SMALL),
        ("X  Large", SizeCategory.X_LARGE),
        ("L3 Junior - Small", None),
    ],
)
def test_match_size_is_exact(value, expected):
    assert match_size(value) == expected


@pytest.mark.parametrize(
    "division,expected",
    [
        ("L3 Junior - Flex - D2 - Small", SizeCategory.SMALL),
        ("L3 Junior - Flex - Small", SizeCategory.SMALL),
        ("L3 Junior - Flex - Large", SizeCategory.LARGE),
        ("L3 Junior - Flex - X-Large", SizeCategory.X_LARGE),
        ("L3 Junior - X-Small - D2", SizeCategory.X_SMALL),
        ("L2 Youth - X-Large", SizeCategory.X_LARGE),
        ("L1 Mini - Large", SizeCategory.LARGE),
        ("Medium", SizeCategory.MEDIUM),
        ("L3 Junior", None),
    ],
)
def test_parse_size(division, expected):
    assert parse_size(division) == expected
