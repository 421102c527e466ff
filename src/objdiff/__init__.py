"""objdiff — structural diff trees for nested object graphs.

Usage:
    from objdiff import compute_diff, DiffConfig

    root = compute_diff(new_payload, old_payload, config=DiffConfig(ignored_paths={"/secret"}))
    for node in root.iter_changes():
        print(node.path, node.state.value)
"""

from objdiff.core.config import DiffConfig, SamenessStrategy
from objdiff.core.differ import ObjectDiffer, compute_diff
from objdiff.core.errors import (
    AccessorResolutionError,
    ConfigurationError,
    DepthLimitExceeded,
    ObjectDiffError,
    ShapeMismatchError,
)
from objdiff.core.models import CollectionNode, MapNode, Node, NodeState, Visit
from objdiff.core.path import PropertyPath
from objdiff.core.policy import CallablePolicy, DiffPolicy, PolicyDecision

__version__ = "0.1.0"
__all__ = [
    "compute_diff",
    "ObjectDiffer",
    "DiffConfig",
    "SamenessStrategy",
    "Node",
    "MapNode",
    "CollectionNode",
    "NodeState",
    "Visit",
    "PropertyPath",
    "DiffPolicy",
    "CallablePolicy",
    "PolicyDecision",
    "ObjectDiffError",
    "ConfigurationError",
    "ShapeMismatchError",
    "AccessorResolutionError",
    "DepthLimitExceeded",
]
