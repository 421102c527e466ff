"""The diff tree.

A Node records where a value lives (its PropertyPath), how it changed
(its NodeState) and, for containers, the child nodes that carry changes.
Nodes refer to their parent by path only; ownership flows strictly from
parent to child. Trees are fully built before they reach the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterator

from objdiff.core.accessors import Accessor, CollectionItemAccessor, MapEntryAccessor
from objdiff.core.path import PropertyElement, PropertyPath


class NodeState(str, Enum):
    IGNORED = "ignored"
    ADDED = "added"
    REMOVED = "removed"
    UNTOUCHED = "untouched"
    CHANGED = "changed"


_CHANGE_STATES = frozenset({NodeState.ADDED, NodeState.REMOVED, NodeState.CHANGED})


class Visit(str, Enum):
    """Visitor verdicts for Node.visit()."""

    CONTINUE = "continue"
    SKIP_CHILDREN = "skip_children"
    STOP = "stop"


NodeVisitor = Callable[["Node"], "Visit | None"]


class Node:
    """One vertex of the diff tree."""

    def __init__(self, accessor: Accessor, parent: Node | None = None) -> None:
        self.accessor = accessor
        self.parent_path: PropertyPath | None = parent.path if parent is not None else None
        if self.parent_path is None:
            self.path = PropertyPath.root()
        else:
            self.path = self.parent_path.child(accessor.element)
        self._state = NodeState.UNTOUCHED
        self._children: dict[PropertyElement, Node] = {}
        self._child_changes = False

    # --- State ---

    @property
    def state(self) -> NodeState:
        return self._state

    @state.setter
    def state(self, value: NodeState) -> None:
        if self._state is NodeState.IGNORED and value is not NodeState.IGNORED:
            raise ValueError(f"{self.path} is IGNORED; its state is final")
        self._state = NodeState(value)

    def mark_changed(self) -> None:
        """Record a changed child. Only UNTOUCHED is upgraded."""
        if self._state is NodeState.UNTOUCHED:
            self._state = NodeState.CHANGED

    @property
    def has_changes(self) -> bool:
        if self._state in _CHANGE_STATES:
            return True
        return self._child_changes

    @property
    def is_added(self) -> bool:
        return self._state is NodeState.ADDED

    @property
    def is_removed(self) -> bool:
        return self._state is NodeState.REMOVED

    @property
    def is_changed(self) -> bool:
        return self._state is NodeState.CHANGED

    @property
    def is_untouched(self) -> bool:
        return self._state is NodeState.UNTOUCHED

    @property
    def is_ignored(self) -> bool:
        return self._state is NodeState.IGNORED

    @property
    def is_root(self) -> bool:
        return self.parent_path is None

    @property
    def element(self) -> PropertyElement:
        return self.path.last

    # --- Children ---

    @property
    def children(self) -> Mapping[PropertyElement, Node]:
        return MappingProxyType(self._children)

    @property
    def has_children(self) -> bool:
        return bool(self._children)

    def add_child(self, node: Node) -> None:
        if self._state is NodeState.IGNORED:
            raise ValueError(f"Cannot attach children to IGNORED node {self.path}")
        if node.parent_path != self.path:
            raise ValueError(f"{node.path} is not a child of {self.path}")
        self._children[node.element] = node
        # Children are attached fully built, so their flag is final here.
        self._child_changes = self._child_changes or node.has_changes

    def child(self, key: Any) -> Node | None:
        """Find a direct child by path element or by its raw key."""
        if isinstance(key, PropertyPath):
            return self.get_child(key)
        try:
            found = self._children.get(key)
        except TypeError:
            found = None
        if found is not None:
            return found
        for element, node in self._children.items():
            if element.key == key and type(element.key) is type(key):
                return node
        return None

    def get_child(self, path: PropertyPath | str) -> Node | None:
        """Find a descendant by its absolute path.

        Paths always start at the tree root, so a path that does not run
        through this node finds nothing; use child() to step down relative
        to a node. A string is parsed first; if that finds nothing (or the
        string cannot be parsed) it is matched against the rendered paths,
        which is how nodes under non-string keys are reached by text.
        """
        if isinstance(path, str):
            return self._get_child_by_string(path)
        if path == self.path:
            return self
        if not path.is_child_of(self.path):
            return None
        node: Node | None = self
        for element in path.elements[len(self.path):]:
            node = node._children.get(element)
            if node is None:
                return None
        return node

    def _get_child_by_string(self, text: str) -> Node | None:
        text = text.strip()
        try:
            parsed = PropertyPath.parse(text)
        except ValueError:
            rendered = text if text.startswith("/") else "/" + text
        else:
            found = self.get_child(parsed)
            if found is not None:
                return found
            rendered = str(parsed)
        for node in self.iter_nodes():
            if str(node.path) == rendered:
                return node
        return None

    # --- Traversal ---

    def visit(self, visitor: NodeVisitor) -> bool:
        """Depth-first pre-order traversal.

        Returns False if the visitor stopped the traversal.
        """
        verdict = visitor(self)
        if verdict is Visit.STOP:
            return False
        if verdict is Visit.SKIP_CHILDREN:
            return True
        for node in self._children.values():
            if not node.visit(visitor):
                return False
        return True

    def iter_nodes(self) -> Iterator[Node]:
        yield self
        for node in self._children.values():
            yield from node.iter_nodes()

    def iter_changes(self) -> Iterator[Node]:
        """Yield every node whose own state is ADDED, REMOVED or CHANGED."""
        for node in self.iter_nodes():
            if node._state in _CHANGE_STATES:
                yield node

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "state": self._state.value,
            "children": [node.to_dict() for node in self._children.values()],
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r}, {self._state.value})"


class MapNode(Node):
    """Node for keyed containers.

    Keys of all three sides are indexed once so accessors can be built for
    any key without going back to the original containers.
    """

    def __init__(self, accessor: Accessor, parent: Node | None = None) -> None:
        super().__init__(accessor, parent)
        self._keys: dict[Any, Any] = {}

    def index_keys(self, *mappings: Mapping[Any, Any] | None) -> None:
        for mapping in mappings:
            if mapping is None:
                continue
            for key in mapping:
                self._keys.setdefault(key, key)

    @property
    def keys(self) -> list[Any]:
        return list(self._keys)

    def accessor_for_key(self, key: Any) -> MapEntryAccessor:
        return MapEntryAccessor(self._keys.get(key, key))


class CollectionNode(Node):
    """Node for unordered collections, addressed by item value."""

    def __init__(self, accessor: Accessor, parent: Node | None = None) -> None:
        super().__init__(accessor, parent)
        self._items: dict[Any, Any] = {}
        self._members: dict[int, dict[Any, Any]] = {}

    def index_items(self, *collections: Iterable[Any] | None) -> None:
        """Index every side once so item lookups stay constant time."""
        for collection in collections:
            if collection is None or id(collection) in self._members:
                continue
            members = {item: item for item in collection}
            self._members[id(collection)] = members
            for item in members:
                self._items.setdefault(item, item)

    @property
    def items(self) -> list[Any]:
        return list(self._items)

    def accessor_for_item(self, item: Any) -> CollectionItemAccessor:
        return CollectionItemAccessor(self._items.get(item, item), self._members)
