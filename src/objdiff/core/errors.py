"""Exceptions raised by the diff engine.

Every failure aborts the whole comparison; no partial tree is returned.
"""

from __future__ import annotations

from typing import Any


class ObjectDiffError(Exception):
    """Base class for all objdiff errors."""


class ConfigurationError(ObjectDiffError, ValueError):
    """A DiffConfig was built with inconsistent options."""


class ShapeMismatchError(ObjectDiffError, TypeError):
    """A value was viewed as a container shape it does not have.

    This signals a dispatch bug, never a property of the input data.
    """

    def __init__(self, value: Any, expected: type | tuple[type, ...], path: str = "") -> None:
        self.value = value
        self.expected = expected
        self.path = path
        names = (
            ", ".join(t.__name__ for t in expected)
            if isinstance(expected, tuple)
            else expected.__name__
        )
        where = f" at {path}" if path else ""
        super().__init__(f"Expected {names}{where}, got {type(value).__name__}")


class AccessorResolutionError(ObjectDiffError):
    """An accessor could not read from its target for a reason other than absence."""


class DepthLimitExceeded(ObjectDiffError):
    """The object graph is nested deeper than the configured max_depth."""

    def __init__(self, path: str, max_depth: int) -> None:
        self.path = path
        self.max_depth = max_depth
        super().__init__(f"Depth limit {max_depth} exceeded at {path}")
