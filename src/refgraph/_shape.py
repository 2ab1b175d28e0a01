"""Value shapes and reserved names.

Every value held by a Reference is one of three shapes: object (a mapping
of name -> child), array (a sequence of children) or scalar (anything else,
Decimal and str included).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from refgraph._errors import ReservedNameCollision

RESERVED_NAMES: frozenset[str] = frozenset({"set", "get", "on", "valueOf", "startingValue"})

OBJECT = "object"
ARRAY = "array"
SCALAR = "scalar"


def shape_of(value: object) -> str:
    if isinstance(value, Mapping):
        return OBJECT
    if isinstance(value, (list, tuple)):
        return ARRAY
    return SCALAR


def is_structural(value: object) -> bool:
    return shape_of(value) != SCALAR


def check_reserved(keys: Iterable[object]) -> None:
    """Raise ReservedNameCollision for the first reserved key."""
    for key in keys:
        if key in RESERVED_NAMES:
            raise ReservedNameCollision(key)


def check_reserved_tree(value: object) -> None:
    """check_reserved() over every object nested in value."""
    shape = shape_of(value)
    if shape == OBJECT:
        check_reserved(value.keys())
        members = value.values()
    elif shape == ARRAY:
        members = value
    else:
        return
    for member in members:
        check_reserved_tree(member)
