"""Differ for ordered sequences (lists, tuples).

Elements are addressed by position, like a shared prefix walk:
    - indexes present in both are compared element-wise
    - tail indexes only in working are added
    - tail indexes only in base are removed

No LCS alignment is attempted; an insertion at the front shows up as a
change at every following index.
"""

from __future__ import annotations

from collections.abc import Sequence

from objdiff.core.accessors import SequenceIndexAccessor
from objdiff.core.instances import Instances
from objdiff.core.models import Node, NodeState
from objdiff.differs.base import Differ


class SequenceDiffer(Differ):
    def compare(self, parent: Node | None, instances: Instances) -> Node:
        node = Node(instances.accessor, parent)

        if self.delegate.is_ignored(parent, instances):
            node.state = NodeState.IGNORED
            return node

        working = instances.working_as(Sequence)
        base = instances.base_as(Sequence)

        if working is not None and base is None:
            node.state = NodeState.ADDED
            self.handle_children(node, instances, range(len(working)), SequenceIndexAccessor)
        elif working is None and base is not None:
            node.state = NodeState.REMOVED
            self.handle_children(node, instances, range(len(base)), SequenceIndexAccessor)
        elif instances.are_same(self.config):
            node.state = NodeState.UNTOUCHED
        else:
            shared = min(len(working), len(base))
            for indexes in (
                range(shared, len(working)),
                range(shared, len(base)),
                range(shared),
            ):
                self.handle_children(node, instances, indexes, SequenceIndexAccessor)
        return node
