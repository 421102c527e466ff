"""Differ for values compared as a whole.

Handles primitives, strings, composite records (no property
introspection) and pairs whose shapes differ. Nothing is descended.
"""

from __future__ import annotations

from objdiff.core.instances import Instances
from objdiff.core.models import Node, NodeState
from objdiff.differs.base import Differ


class LeafDiffer(Differ):
    def compare(self, parent: Node | None, instances: Instances) -> Node:
        node = Node(instances.accessor, parent)
        if self.delegate.is_ignored(parent, instances):
            node.state = NodeState.IGNORED
        elif instances.has_been_added(self.config):
            node.state = NodeState.ADDED
        elif instances.has_been_removed(self.config):
            node.state = NodeState.REMOVED
        elif instances.are_equal(self.config):
            node.state = NodeState.UNTOUCHED
        else:
            node.state = NodeState.CHANGED
        return node
