# catalog_browser/models/filter_criteria.py

"""Immutable filter/sort snapshot consumed by the product pipeline."""

from dataclasses import dataclass, field
from enum import Enum


class SortKey(str, Enum):
    """Supported orderings for the product listing."""

    NAME = "name"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING = "rating"


@dataclass(frozen=True)
class FilterCriteria:
    """User-selected search, filter and sort inputs.

    ``None`` and empty values mean "no restriction" for their stage.
    """

    search: str = ""
    min_rating: float | None = None
    categories: frozenset[str] = field(
        default_factory=lambda: frozenset[str]()
    )
    min_price: float | None = None
    max_price: float | None = None
    sort: SortKey | None = None
