"""Contract shared by all specialized differs.

A differ builds the node for one graph position. Container differs
re-enter the dispatcher for every child key; the dispatcher is the only
place that decides which differ handles a value.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Iterable

from objdiff.core.accessors import Accessor
from objdiff.core.config import DiffConfig
from objdiff.core.instances import Instances
from objdiff.core.models import Node

if TYPE_CHECKING:
    from objdiff.differs.delegating import DelegatingDiffer


class Differ(ABC):
    """Base class for shape-specific differs."""

    def __init__(self, delegate: DelegatingDiffer) -> None:
        self.delegate = delegate

    @property
    def config(self) -> DiffConfig:
        return self.delegate.config

    @abstractmethod
    def compare(self, parent: Node | None, instances: Instances) -> Node:
        ...

    def handle_children(
        self,
        node: Node,
        instances: Instances,
        keys: Iterable[Any],
        accessor_for: Callable[[Any], Accessor],
    ) -> None:
        """Compare every key and fold the results into `node`.

        `accessor_for` builds the child accessor for a key. Children with
        changes are attached and upgrade `node` to CHANGED; unchanged
        children are attached only when return_unchanged_nodes is set.
        """
        for key in keys:
            accessor = accessor_for(key)
            child = self.delegate.delegate(node, instances.access(accessor))
            if child.has_changes:
                node.mark_changed()
                node.add_child(child)
            elif self.config.return_unchanged_nodes:
                node.add_child(child)
