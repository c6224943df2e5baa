from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from src.models.enums import SizeCategory


class SizeObservation(BaseModel):
    model_config = ConfigDict(frozen=True)

    weekend_date: Optional[str] = None
    size: Optional[SizeCategory] = None


def order_history(observations: Iterable[SizeObservation]) -> List[SizeObservation]:
    """Most recent weekend first; undated observations sort as the oldest."""
    # sorted() with reverse=True keeps equal keys in their original order
    return sorted(observations, key=lambda o: o.weekend_date or "", reverse=True)


def resolve_size(history: Iterable[SizeObservation]) -> Optional[SizeCategory]:
    """Latest known size wins; None when no observation carries a size."""
    for observation in order_history(history):
        if observation.size is not None:
            return observation.size
    return None
