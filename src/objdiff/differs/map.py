"""Differ for keyed containers (dicts and other Mappings).

Algorithm:
    1. Build a MapNode; stop with IGNORED if the policy says so.
    2. Index the keys of working, base and fresh.
    3. Classify presence:
       - only working present  -> ADDED, every working key descended
       - only base present     -> REMOVED, every base key descended
       - same by sameness      -> UNTOUCHED, nothing descended
       - otherwise             -> added, removed, then common keys descended
    4. Each child goes back through the dispatcher; changed children
       upgrade this node to CHANGED.

Keys keep the insertion order of the working mapping (base order for
removed keys), so output is deterministic without requiring sortable keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from objdiff.core.instances import Instances
from objdiff.core.models import MapNode, Node, NodeState
from objdiff.differs.base import Differ


class MapDiffer(Differ):
    def compare(self, parent: Node | None, instances: Instances) -> MapNode:
        node = MapNode(instances.accessor, parent)

        if self.delegate.is_ignored(parent, instances):
            node.state = NodeState.IGNORED
            return node

        working = instances.working_as(Mapping)
        base = instances.base_as(Mapping)
        node.index_keys(working, base, instances.fresh_as(Mapping))

        if working is not None and base is None:
            node.state = NodeState.ADDED
            self.handle_children(node, instances, list(working), node.accessor_for_key)
        elif working is None and base is not None:
            node.state = NodeState.REMOVED
            self.handle_children(node, instances, list(base), node.accessor_for_key)
        elif instances.are_same(self.config):
            node.state = NodeState.UNTOUCHED
        else:
            for keys in (
                find_added_keys(working, base),
                find_removed_keys(working, base),
                find_common_keys(working, base),
            ):
                self.handle_children(node, instances, keys, node.accessor_for_key)
        return node


def find_added_keys(working: Mapping[Any, Any], base: Mapping[Any, Any]) -> list[Any]:
    return [key for key in working if key not in base]


def find_removed_keys(working: Mapping[Any, Any], base: Mapping[Any, Any]) -> list[Any]:
    return [key for key in base if key not in working]


def find_common_keys(working: Mapping[Any, Any], base: Mapping[Any, Any]) -> list[Any]:
    excluded = set(find_added_keys(working, base)) | set(find_removed_keys(working, base))
    return [key for key in working if key not in excluded]
