"""Value objects for the engine domain.

Exports:
    - Value: Immutable tagged scalar (String, Int, Float, Boolean, Null)
    - ValueKind: The kind tag of a Value
    - INT64_MIN, INT64_MAX: Bounds of the Int kind
"""

from minirel.domain.value_objects.value import INT64_MAX, INT64_MIN, Value, ValueKind

__all__ = [
    "Value",
    "ValueKind",
    "INT64_MIN",
    "INT64_MAX",
]
