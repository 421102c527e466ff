"""Public entry points for computing a diff tree.

Usage:
    from objdiff import compute_diff

    root = compute_diff({"a": 1, "b": 2}, {"a": 1, "c": 3})
    root.state                 # NodeState.CHANGED
    root.child("b").state      # NodeState.ADDED
    root.child("c").state      # NodeState.REMOVED

The first argument is the working (new) version, the second the base (old)
one. An optional `fresh` value acts as a default template: with
`treat_defaults_as_unassigned`, a side equal to it counts as absent.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from objdiff.core.config import DiffConfig
from objdiff.core.instances import Instances
from objdiff.core.models import Node
from objdiff.core.policy import DiffPolicy
from objdiff.core.shapes import Shape
from objdiff.differs.delegating import DelegatingDiffer, DifferFactory

logger = logging.getLogger("objdiff.differ")


class ObjectDiffer:
    """Compares object graphs with a fixed configuration and policy."""

    def __init__(
        self,
        config: DiffConfig | None = None,
        policy: DiffPolicy | None = None,
        differs: Mapping[Shape, DifferFactory] | None = None,
    ) -> None:
        self.config = config or DiffConfig()
        self._dispatcher = DelegatingDiffer(self.config, policy, differs)

    @property
    def policy(self) -> DiffPolicy:
        return self._dispatcher.policy

    def compare(self, working: Any, base: Any, fresh: Any = None) -> Node:
        """Build the diff tree of `working` against `base`.

        Any exception aborts the comparison; no partial tree is returned.
        """
        root = self._dispatcher.delegate(None, Instances.of(working, base, fresh))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Compared %s against %s: %s (%d changed nodes)",
                type(working).__name__,
                type(base).__name__,
                root.state.value,
                sum(1 for _ in root.iter_changes()),
            )
        return root


def compute_diff(
    working: Any,
    base: Any,
    *,
    fresh: Any = None,
    config: DiffConfig | None = None,
    policy: DiffPolicy | None = None,
) -> Node:
    """Compute the diff tree between two object graphs.

    Args:
        working: The new version.
        base: The old version.
        fresh: Optional default template drilled alongside both versions.
        config: Comparison options; defaults to DiffConfig().
        policy: Ignore/equality policy; defaults to one built from `config`.

    Returns:
        The root Node, addressed by "/".
    """
    return ObjectDiffer(config, policy).compare(working, base, fresh)
