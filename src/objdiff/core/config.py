"""Configuration for the diff engine."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from objdiff.core.errors import ConfigurationError
from objdiff.core.path import PropertyPath

Comparator = Callable[[Any, Any], bool]


class SamenessStrategy(str, Enum):
    """How container short-circuits decide that two values are the same.

    IDENTITY only skips a subtree when both sides are the same object.
    EQUALITY also skips structurally equal subtrees (Python ``==``).
    CUSTOM delegates to DiffConfig.comparator.
    """

    IDENTITY = "identity"
    EQUALITY = "equality"
    CUSTOM = "custom"


def _normalize_paths(paths: Any) -> frozenset[PropertyPath]:
    if isinstance(paths, (str, PropertyPath)):
        paths = (paths,)
    normalized = set()
    for path in paths:
        if isinstance(path, PropertyPath):
            normalized.add(path)
            continue
        try:
            normalized.add(PropertyPath.parse(path))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid path {path!r}: {exc}") from exc
    return frozenset(normalized)


@dataclass(frozen=True)
class DiffConfig:
    """Immutable configuration for a comparison.

    Attributes:
        return_unchanged_nodes: Attach unchanged children too (full-tree inspection).
        sameness: Strategy for the container identity short-circuit.
        comparator: Equality function used when sameness is CUSTOM.
        ignored_paths: Paths whose nodes are IGNORED (subtrees included).
        included_paths: If non-empty, only these subtrees are compared.
        force_equal_paths: Paths always reported UNTOUCHED.
        equals_only_paths: Paths compared as a whole value, never descended.
        equals_only_types: Types compared as a whole value, never descended.
        treat_defaults_as_unassigned: A side equal to the fresh default counts as absent.
        max_depth: Nesting limit; deeper paths abort the comparison.
    """

    return_unchanged_nodes: bool = False
    sameness: SamenessStrategy = SamenessStrategy.EQUALITY
    comparator: Comparator | None = None
    ignored_paths: frozenset[PropertyPath] = field(default_factory=frozenset)
    included_paths: frozenset[PropertyPath] = field(default_factory=frozenset)
    force_equal_paths: frozenset[PropertyPath] = field(default_factory=frozenset)
    equals_only_paths: frozenset[PropertyPath] = field(default_factory=frozenset)
    equals_only_types: tuple[type, ...] = ()
    treat_defaults_as_unassigned: bool = False
    max_depth: int | None = None

    def __post_init__(self) -> None:
        # Frozen: normalise through object.__setattr__.
        object.__setattr__(self, "sameness", SamenessStrategy(self.sameness))
        for name in ("ignored_paths", "included_paths", "force_equal_paths", "equals_only_paths"):
            object.__setattr__(self, name, _normalize_paths(getattr(self, name)))
        object.__setattr__(self, "equals_only_types", tuple(self.equals_only_types))

        if self.sameness is SamenessStrategy.CUSTOM and self.comparator is None:
            raise ConfigurationError("sameness=CUSTOM requires a comparator")
        if self.comparator is not None and not callable(self.comparator):
            raise ConfigurationError("comparator must be callable")
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigurationError(f"max_depth must be >= 0, got {self.max_depth}")

    def with_options(self, **changes: Any) -> DiffConfig:
        return dataclasses.replace(self, **changes)
