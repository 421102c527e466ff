"""The dispatcher: single entry and re-entry point for every comparison.

For each graph position it:
    1. asks the policy whether the node is ignored (IGNORED, no descent)
    2. enforces the optional depth limit
    3. short-circuits force-equal nodes and positions where both sides are None
    4. resolves the value's Shape and hands over to the registered differ

It keeps no state between calls; configuration and policy are fixed at
construction, so one instance can serve any number of comparisons.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from objdiff.core.config import DiffConfig
from objdiff.core.errors import DepthLimitExceeded, ObjectDiffError
from objdiff.core.instances import Instances
from objdiff.core.models import Node, NodeState
from objdiff.core.path import PropertyPath
from objdiff.core.policy import ConfigurationPolicy, DiffPolicy, PolicyDecision
from objdiff.core.shapes import Shape, shape_of
from objdiff.differs.base import Differ
from objdiff.differs.collection import CollectionDiffer
from objdiff.differs.leaf import LeafDiffer
from objdiff.differs.map import MapDiffer
from objdiff.differs.sequence import SequenceDiffer

logger = logging.getLogger("objdiff.dispatcher")

DifferFactory = Callable[["DelegatingDiffer"], Differ]

DEFAULT_DIFFERS: dict[Shape, DifferFactory] = {
    Shape.KEYED: MapDiffer,
    Shape.SEQUENCE: SequenceDiffer,
    Shape.COLLECTION: CollectionDiffer,
    Shape.COMPOSITE: LeafDiffer,
    Shape.LEAF: LeafDiffer,
}


class DelegatingDiffer:
    """Selects and invokes the differ matching each value's shape."""

    def __init__(
        self,
        config: DiffConfig | None = None,
        policy: DiffPolicy | None = None,
        differs: Mapping[Shape, DifferFactory] | None = None,
    ) -> None:
        self.config = config or DiffConfig()
        self.policy = policy or ConfigurationPolicy(self.config)
        factories = dict(DEFAULT_DIFFERS)
        if differs:
            factories.update(differs)
        self._differs: dict[Shape, Differ] = {
            shape: factory(self) for shape, factory in factories.items()
        }
        self._leaf = self._differs.get(Shape.LEAF) or LeafDiffer(self)

    # --- Policy ---

    def path_for(self, parent: Node | None, instances: Instances) -> PropertyPath:
        if parent is None:
            return PropertyPath.root()
        return parent.path.child(instances.accessor.element)

    def decide(self, parent: Node | None, instances: Instances) -> PolicyDecision:
        return self.policy.decide(self.path_for(parent, instances), instances)

    def is_ignored(self, parent: Node | None, instances: Instances) -> bool:
        return self.decide(parent, instances).ignore

    # --- Dispatch ---

    def delegate(self, parent: Node | None, instances: Instances) -> Node:
        path = self.path_for(parent, instances)
        decision = self.policy.decide(path, instances)

        if decision.ignore:
            node = Node(instances.accessor, parent)
            node.state = NodeState.IGNORED
            return node

        max_depth = self.config.max_depth
        if max_depth is not None and path.depth > max_depth:
            raise DepthLimitExceeded(str(path), max_depth)

        if decision.force_equal or (instances.working is None and instances.base is None):
            return Node(instances.accessor, parent)

        if decision.equals_only:
            return self._leaf.compare(parent, instances)

        differ = self._differ_for(instances, path)
        return differ.compare(parent, instances)

    def _differ_for(self, instances: Instances, path: PropertyPath) -> Differ:
        if instances.working is not None:
            shape = shape_of(instances.working)
            if instances.base is not None and shape_of(instances.base) is not shape:
                logger.debug(
                    "Shape mismatch at %s (%s vs %s), comparing as leaf",
                    path,
                    shape.value,
                    shape_of(instances.base).value,
                )
                return self._leaf
        else:
            shape = shape_of(instances.base)

        differ = self._differs.get(shape)
        if differ is None:
            raise ObjectDiffError(f"No differ registered for shape {shape.value!r} at {path}")
        return differ
