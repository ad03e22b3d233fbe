"""Provider-agnostic filter structures."""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class TermsFilter(BaseModel):
    """Field value must be one of ``values``."""

    kind: Literal["terms"] = "terms"
    field: str
    values: List[str] = Field(..., min_length=1)


class RangeFilter(BaseModel):
    """Numeric field must fall within the inclusive bounds."""

    kind: Literal["range"] = "range"
    field: str
    gte: Optional[float] = None
    lte: Optional[float] = None

    @model_validator(mode="after")
    def _require_a_bound(self) -> "RangeFilter":
        if self.gte is None and self.lte is None:
            raise ValueError(f"range filter on '{self.field}' needs gte or lte")
        return self


FilterClause = Union[TermsFilter, RangeFilter]


class QueryFilter(BaseModel):
    """Conjunction of filter clauses."""

    clauses: List[FilterClause] = Field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.clauses)
