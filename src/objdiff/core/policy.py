"""Ignore / equality policy consulted before every node is built.

A policy maps a node path (plus the values found there) to a decision:

    ignore      : the node is IGNORED, nothing below it is compared
    force_equal : the node is UNTOUCHED whatever its values are
    equals_only : the values are compared as a whole, never descended

Policies must be deterministic for a given path. Errors raised by a policy
propagate: a wrong decision would silently corrupt the diff.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from objdiff.core.config import DiffConfig
from objdiff.core.path import PropertyPath

if TYPE_CHECKING:
    from objdiff.core.instances import Instances

logger = logging.getLogger("objdiff.policy")


@dataclass(frozen=True)
class PolicyDecision:
    ignore: bool = False
    force_equal: bool = False
    equals_only: bool = False


DEFAULT_DECISION = PolicyDecision()
IGNORE = PolicyDecision(ignore=True)


class DiffPolicy(ABC):
    """Decides how the node at a given path is treated."""

    @abstractmethod
    def decide(self, path: PropertyPath, instances: Instances) -> PolicyDecision:
        ...


class CallablePolicy(DiffPolicy):
    """Adapts a plain function `(path, instances) -> PolicyDecision`."""

    def __init__(self, func: Callable[[PropertyPath, Instances], PolicyDecision]) -> None:
        self._func = func

    def decide(self, path: PropertyPath, instances: Instances) -> PolicyDecision:
        return self._func(path, instances)


class ConfigurationPolicy(DiffPolicy):
    """Default policy driven by the path and type rules of a DiffConfig.

    Paths match element by element, never by their rendered text.
    """

    def __init__(self, config: DiffConfig) -> None:
        self.config = config

    def decide(self, path: PropertyPath, instances: Instances) -> PolicyDecision:
        if self._is_ignored(path):
            logger.debug("Ignoring %s", path)
            return IGNORE
        if path in self.config.force_equal_paths:
            return PolicyDecision(force_equal=True)
        if path in self.config.equals_only_paths or self._is_equals_only_type(instances):
            return PolicyDecision(equals_only=True)
        return DEFAULT_DECISION

    def _is_ignored(self, path: PropertyPath) -> bool:
        if path in self.config.ignored_paths:
            return True
        included = self.config.included_paths
        if not included or path.depth == 0:
            return False
        for candidate in included:
            # Ancestors stay open so the walk can reach the included subtree.
            if path == candidate or path.is_child_of(candidate) or path.is_parent_of(candidate):
                return False
        return True

    def _is_equals_only_type(self, instances: Instances) -> bool:
        types = self.config.equals_only_types
        if not types:
            return False
        value_type = instances.type
        return value_type is not None and issubclass(value_type, types)
