"""The working/base/fresh triple compared at one graph position."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from objdiff.core.accessors import Accessor, RootAccessor
from objdiff.core.config import DiffConfig, SamenessStrategy
from objdiff.core.errors import ShapeMismatchError


@dataclass(frozen=True)
class Instances:
    """Values under comparison plus the accessor that produced them.

    Attributes:
        accessor: How these values were reached from their parent.
        working: The new version (None when absent).
        base: The old version (None when absent).
        fresh: Default template, only used to detect unassigned defaults.
    """

    accessor: Accessor = field(default_factory=RootAccessor)
    working: Any = None
    base: Any = None
    fresh: Any = None

    @classmethod
    def of(cls, working: Any, base: Any, fresh: Any = None) -> Instances:
        return cls(RootAccessor(), working, base, fresh)

    def access(self, accessor: Accessor) -> Instances:
        """Drill all three values through `accessor`."""
        return Instances(
            accessor=accessor,
            working=accessor.resolve(self.working),
            base=accessor.resolve(self.base),
            fresh=accessor.resolve(self.fresh),
        )

    @property
    def type(self) -> type | None:
        if self.working is not None:
            return type(self.working)
        if self.base is not None:
            return type(self.base)
        return None

    # --- Comparison ---

    def are_same(self, config: DiffConfig) -> bool:
        """Sameness check used to skip whole subtrees."""
        if config.sameness is SamenessStrategy.IDENTITY:
            return self.working is self.base
        if config.sameness is SamenessStrategy.CUSTOM:
            return bool(config.comparator(self.working, self.base))
        return self.working is self.base or self.working == self.base

    def are_equal(self, config: DiffConfig) -> bool:
        """Value equality for leaves. Identity is never strong enough here."""
        if config.comparator is not None:
            return bool(config.comparator(self.working, self.base))
        return self.working is self.base or self.working == self.base

    def has_been_added(self, config: DiffConfig) -> bool:
        if self.working is None:
            return False
        if self.base is None:
            return True
        return self._is_unassigned(self.base, config) and not self._is_unassigned(
            self.working, config
        )

    def has_been_removed(self, config: DiffConfig) -> bool:
        if self.base is None:
            return False
        if self.working is None:
            return True
        return self._is_unassigned(self.working, config) and not self._is_unassigned(
            self.base, config
        )

    def _is_unassigned(self, value: Any, config: DiffConfig) -> bool:
        if not config.treat_defaults_as_unassigned or self.fresh is None:
            return False
        return value == self.fresh

    # --- Typed views ---

    def working_as(self, expected: type | tuple[type, ...]) -> Any:
        return self._view(self.working, expected)

    def base_as(self, expected: type | tuple[type, ...]) -> Any:
        return self._view(self.base, expected)

    def fresh_as(self, expected: type | tuple[type, ...]) -> Any:
        return self._view(self.fresh, expected)

    def _view(self, value: Any, expected: type | tuple[type, ...]) -> Any:
        if value is not None and not isinstance(value, expected):
            raise ShapeMismatchError(value, expected, str(self.accessor.element))
        return value
