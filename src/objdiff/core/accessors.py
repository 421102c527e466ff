"""Accessors locate a value inside its parent container.

An accessor is pure: resolving it never mutates the target. Resolving
against None, a missing key or an out-of-range index yields None, so
the three sides of a comparison can be drilled in lockstep even when one
of them is absent.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence, Set
from typing import Any

from objdiff.core.errors import AccessorResolutionError
from objdiff.core.path import (
    ROOT_ELEMENT,
    CollectionItemElement,
    IndexElement,
    MapKeyElement,
    PropertyElement,
)


class Accessor(ABC):
    """Reads the value at one slot of a container."""

    @property
    @abstractmethod
    def element(self) -> PropertyElement:
        """Path element used to address the node built from this accessor."""
        ...

    @abstractmethod
    def resolve(self, target: Any) -> Any:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.element})"


class RootAccessor(Accessor):
    @property
    def element(self) -> PropertyElement:
        return ROOT_ELEMENT

    def resolve(self, target: Any) -> Any:
        return target


class MapEntryAccessor(Accessor):
    def __init__(self, key: Any) -> None:
        self.key = key

    @property
    def element(self) -> PropertyElement:
        return MapKeyElement(self.key)

    def resolve(self, target: Any) -> Any:
        if target is None:
            return None
        if not isinstance(target, Mapping):
            raise AccessorResolutionError(
                f"Cannot read key {self.key!r} from {type(target).__name__}"
            )
        return target.get(self.key)


class SequenceIndexAccessor(Accessor):
    def __init__(self, index: int) -> None:
        self.index = index

    @property
    def element(self) -> PropertyElement:
        return IndexElement(self.index)

    def resolve(self, target: Any) -> Any:
        if target is None:
            return None
        if not isinstance(target, Sequence) or isinstance(target, (str, bytes, bytearray)):
            raise AccessorResolutionError(
                f"Cannot read index {self.index} from {type(target).__name__}"
            )
        if 0 <= self.index < len(target):
            return target[self.index]
        return None


class CollectionItemAccessor(Accessor):
    """Finds the member of a collection equal to a reference item.

    Set members have no address other than their own value, so the item
    itself is the key. `members` maps id(collection) to an {item: member}
    index built once per side; without one, sets are probed by hashing and
    sequences are scanned.
    """

    def __init__(self, item: Any, members: Mapping[int, Mapping[Any, Any]] | None = None) -> None:
        self.item = item
        self._members = members if members is not None else {}

    @property
    def element(self) -> PropertyElement:
        return CollectionItemElement(self.item)

    def resolve(self, target: Any) -> Any:
        if target is None:
            return None
        if not isinstance(target, (Set, Sequence)) or isinstance(target, (str, bytes, bytearray)):
            raise AccessorResolutionError(
                f"Cannot look up item {self.item!r} in {type(target).__name__}"
            )
        index = self._members.get(id(target))
        if index is not None:
            return index.get(self.item)
        if isinstance(target, Set):
            return self.item if self.item in target else None
        for candidate in target:
            if candidate == self.item:
                return candidate
        return None
