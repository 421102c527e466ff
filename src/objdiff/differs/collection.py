"""Differ for unordered collections (sets, frozensets).

Members have no address other than their value, so each item is its own
key: items only in working are added, items only in base are removed and
items in both are compared through the dispatcher (equal by construction,
so they only surface when unchanged nodes are retained or a policy or
custom comparator says otherwise).
"""

from __future__ import annotations

from collections.abc import Iterable, Set
from typing import Any

from objdiff.core.instances import Instances
from objdiff.core.models import CollectionNode, Node, NodeState
from objdiff.differs.base import Differ


class CollectionDiffer(Differ):
    def compare(self, parent: Node | None, instances: Instances) -> CollectionNode:
        node = CollectionNode(instances.accessor, parent)

        if self.delegate.is_ignored(parent, instances):
            node.state = NodeState.IGNORED
            return node

        working = instances.working_as(Set)
        base = instances.base_as(Set)
        node.index_items(working, base, instances.fresh_as(Set))

        if working is not None and base is None:
            node.state = NodeState.ADDED
            self.handle_children(node, instances, _ordered(working), node.accessor_for_item)
        elif working is None and base is not None:
            node.state = NodeState.REMOVED
            self.handle_children(node, instances, _ordered(base), node.accessor_for_item)
        elif instances.are_same(self.config):
            node.state = NodeState.UNTOUCHED
        else:
            for items in (
                _ordered(item for item in working if item not in base),
                _ordered(item for item in base if item not in working),
                _ordered(item for item in working if item in base),
            ):
                self.handle_children(node, instances, items, node.accessor_for_item)
        return node


# Item types whose members are totally ordered among themselves.
_ORDERED_KINDS = ((int, float), (str,), (bytes,))


def _ordered(items: Iterable[Any]) -> list[Any]:
    """Sort for deterministic child order.

    Natural order is only used when every item is of one totally ordered
    kind: sets of sets compare by inclusion, which sorted() accepts without
    producing a stable order. Everything else is ordered by repr().
    """
    items = list(items)
    for kinds in _ORDERED_KINDS:
        if all(isinstance(item, kinds) for item in items):
            return sorted(items)
    return sorted(items, key=repr)
