"""
Domain logic package
Element classification, rule-based filtering, scoring and ranking.
"""

from .elements import (
    Element,
    ElementRoles,
    InvalidDigitError,
    RELATION_MATRIX,
    classify,
    transform,
    element_counts,
    roles,
)
from .filters import (
    StaticBalanceFilter,
    CustomFilterSet,
    CompatibilityFilter,
    AbsoluteBalanceFilter,
)
from .scoring import ScoringEngine
from .ranking import rank_results

__all__ = [
    "Element",
    "ElementRoles",
    "InvalidDigitError",
    "RELATION_MATRIX",
    "classify",
    "transform",
    "element_counts",
    "roles",
    "StaticBalanceFilter",
    "CustomFilterSet",
    "CompatibilityFilter",
    "AbsoluteBalanceFilter",
    "ScoringEngine",
    "rank_results",
]
