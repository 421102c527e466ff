"""Closed classification of values into container shapes.

The dispatcher resolves a shape once per node and looks the differ up in a
registry keyed by Shape, instead of inspecting types inside each differ.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence, Set
from enum import Enum
from typing import Any

# Sequences that are compared as single values.
_ATOMIC_SEQUENCES = (str, bytes, bytearray, memoryview)


class Shape(str, Enum):
    KEYED = "keyed"
    SEQUENCE = "sequence"
    COLLECTION = "collection"
    COMPOSITE = "composite"
    LEAF = "leaf"


# Expected runtime types for each container shape (used for typed views).
SHAPE_TYPES: dict[Shape, type | tuple[type, ...]] = {
    Shape.KEYED: Mapping,
    Shape.SEQUENCE: Sequence,
    Shape.COLLECTION: Set,
}


def shape_of(value: Any) -> Shape:
    if isinstance(value, Mapping):
        return Shape.KEYED
    if isinstance(value, _ATOMIC_SEQUENCES):
        return Shape.LEAF
    if isinstance(value, Sequence):
        return Shape.SEQUENCE
    if isinstance(value, Set):
        return Shape.COLLECTION
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Shape.COMPOSITE
    if isinstance(value, type) or callable(value):
        return Shape.LEAF
    if hasattr(value, "__dict__"):
        return Shape.COMPOSITE
    return Shape.LEAF
