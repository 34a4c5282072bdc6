"""Domain services.

Exports:
    - ComparisonOp: Predicate operators (=, !=, <, <=, >, >=)
    - Condition: Unbound single-column predicate
    - BoundCondition: Predicate resolved against a table schema
    - matching_rows: Filter rows through an optional bound condition
"""

from minirel.domain.services.condition import (
    BoundCondition,
    ComparisonOp,
    Condition,
    matching_rows,
)

__all__ = [
    "BoundCondition",
    "ComparisonOp",
    "Condition",
    "matching_rows",
]
