"""
kairosdb API Schemas - Pydantic Models for Response Validation
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def parse_sample(pair: Any) -> Tuple[int, float]:
    """Validate one [time, value] pair from a result group."""
    if not isinstance(pair, (list, tuple)) or len(pair) != 2:
        raise ValueError(f"sample must be a [time, value] pair, got {pair!r}")
    time, value = pair
    if not _number(time) or not _number(value):
        raise ValueError(f"sample elements must be numeric, got {pair!r}")
    if isinstance(time, float) and not (math.isfinite(time) and time.is_integer()):
        raise ValueError(f"sample time must be an integer, got {time!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"sample value must be finite, got {value!r}")
    return int(time), value


class ResultGroup(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    values: List[Any]
    tags: Dict[str, Any] = Field(default_factory=dict)
    group_by: List[Any] = Field(default_factory=list)

    @field_validator("values")
    @classmethod
    def check_values(cls, v: List[Any]) -> List[Tuple[int, float]]:
        return [parse_sample(pair) for pair in v]


class QueryEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sample_size: Optional[int] = None
    results: List[ResultGroup]


class QueryResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    queries: List[QueryEntry]


class NameListResponse(BaseModel):
    results: List[str]


class VersionResponse(BaseModel):
    version: str
