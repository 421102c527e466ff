"""Tests for shape dispatch, policy handling and the leaf differ."""

import dataclasses
import logging

import pytest

from objdiff import (
    CallablePolicy,
    DepthLimitExceeded,
    DiffConfig,
    MapNode,
    Node,
    NodeState,
    ObjectDiffer,
    PolicyDecision,
    PropertyPath,
    compute_diff,
)
from objdiff.core.instances import Instances
from objdiff.core.path import MapKeyElement
from objdiff.core.shapes import Shape, shape_of
from objdiff.differs.base import Differ
from objdiff.differs.delegating import DelegatingDiffer
from objdiff.differs.leaf import LeafDiffer
from objdiff.differs.map import MapDiffer


@dataclasses.dataclass
class Settings:
    model: str = "gpt-4"
    temperature: float = 0.7


class SpyLeafDiffer(LeafDiffer):
    """Leaf differ that records every path it is asked to compare."""

    seen: list[str] = []

    def compare(self, parent, instances):
        node = super().compare(parent, instances)
        SpyLeafDiffer.seen.append(str(node.path))
        return node


class FieldDiffer(Differ):
    """Minimal composite differ comparing dataclass fields as map entries."""

    def compare(self, parent, instances):
        as_dict = Instances(
            instances.accessor,
            dataclasses.asdict(instances.working) if instances.working is not None else None,
            dataclasses.asdict(instances.base) if instances.base is not None else None,
        )
        return MapDiffer(self.delegate).compare(parent, as_dict)


@pytest.fixture(autouse=True)
def reset_spy():
    SpyLeafDiffer.seen = []
    yield


class TestShapes:
    def test_shape_of(self):
        assert shape_of({"a": 1}) is Shape.KEYED
        assert shape_of([1]) is Shape.SEQUENCE
        assert shape_of((1,)) is Shape.SEQUENCE
        assert shape_of({1}) is Shape.COLLECTION
        assert shape_of(frozenset()) is Shape.COLLECTION
        assert shape_of(Settings()) is Shape.COMPOSITE
        assert shape_of("text") is Shape.LEAF
        assert shape_of(b"raw") is Shape.LEAF
        assert shape_of(3.5) is Shape.LEAF
        assert shape_of(Settings) is Shape.LEAF


class TestDispatch:
    def test_map_shape_yields_map_node(self):
        assert isinstance(compute_diff({"a": 1}, {"a": 2}), MapNode)

    def test_shape_mismatch_compares_as_leaf(self):
        root = compute_diff({"a": 1}, [1])
        assert type(root) is Node
        assert root.state is NodeState.CHANGED
        assert not root.children

    def test_working_shape_wins_when_base_missing(self):
        root = compute_diff([1], None)
        assert root.state is NodeState.ADDED
        assert root.child(0).state is NodeState.ADDED

    def test_composite_defaults_to_leaf(self):
        root = compute_diff(Settings(model="claude"), Settings())
        assert root.state is NodeState.CHANGED
        assert not root.children
        assert compute_diff(Settings(), Settings()).state is NodeState.UNTOUCHED

    def test_registered_composite_differ(self):
        differ = ObjectDiffer(differs={Shape.COMPOSITE: FieldDiffer})
        root = differ.compare(Settings(temperature=0.2), Settings())
        assert root.state is NodeState.CHANGED
        assert root.child("temperature").state is NodeState.CHANGED
        assert root.child("model") is None

    def test_both_none_skips_differs(self):
        dispatcher = DelegatingDiffer(differs={Shape.LEAF: SpyLeafDiffer})
        root = dispatcher.delegate(None, Instances.of(None, None))
        assert root.state is NodeState.UNTOUCHED
        assert SpyLeafDiffer.seen == []

    def test_dispatcher_is_reusable(self):
        differ = ObjectDiffer()
        first = differ.compare({"a": 1}, {"a": 2})
        second = differ.compare({"a": 1}, {"a": 1})
        assert first.state is NodeState.CHANGED
        assert second.state is NodeState.UNTOUCHED


class TestPolicy:
    def test_ignored_node_never_reaches_a_differ(self):
        policy = CallablePolicy(
            lambda path, instances: PolicyDecision(ignore=str(path) == "/secret")
        )
        differ = ObjectDiffer(policy=policy, differs={Shape.LEAF: SpyLeafDiffer})
        root = differ.compare({"secret": 1, "x": 1}, {"secret": 2, "x": 2})
        assert "/secret" not in SpyLeafDiffer.seen
        assert "/x" in SpyLeafDiffer.seen
        assert root.child("secret") is None
        assert root.child("x").state is NodeState.CHANGED

    def test_policy_sees_every_path(self):
        seen = []

        def decide(path, instances):
            seen.append(str(path))
            return PolicyDecision()

        compute_diff({"a": {"b": 1}}, {"a": {"b": 2}}, policy=CallablePolicy(decide))
        assert {"/", "/a", "/a/b"} <= set(seen)

    def test_policy_errors_propagate(self):
        def decide(path, instances):
            raise RuntimeError("policy store unavailable")

        with pytest.raises(RuntimeError, match="policy store unavailable"):
            compute_diff({"a": 1}, {"a": 2}, policy=CallablePolicy(decide))

    def test_force_equal_path(self):
        config = DiffConfig(force_equal_paths={"/a"}, return_unchanged_nodes=True)
        root = compute_diff({"a": {"x": 1}, "b": 1}, {"a": {"x": 2}, "b": 1}, config=config)
        assert root.state is NodeState.UNTOUCHED
        assert root.child("a").state is NodeState.UNTOUCHED
        assert not root.child("a").children

    def test_equals_only_path(self):
        config = DiffConfig(equals_only_paths={"/blob"})
        root = compute_diff({"blob": {"x": 1, "y": 2}}, {"blob": {"x": 1, "y": 3}}, config=config)
        blob = root.child("blob")
        assert blob.state is NodeState.CHANGED
        assert type(blob) is Node
        assert not blob.children

    def test_equals_only_type(self):
        config = DiffConfig(equals_only_types=(list,))
        root = compute_diff({"items": [1, 2]}, {"items": [1, 3]}, config=config)
        items = root.child("items")
        assert items.state is NodeState.CHANGED
        assert not items.children

    def test_included_paths(self):
        working = {"a": {"b": 1, "c": 1}, "d": 1}
        base = {"a": {"b": 2, "c": 2}, "d": 2}
        root = compute_diff(working, base, config=DiffConfig(included_paths={"/a/b"}))
        assert root.get_child("/a/b").state is NodeState.CHANGED
        assert root.get_child("/a/c") is None
        assert root.child("d") is None

    def test_included_paths_mark_others_ignored(self):
        config = DiffConfig(included_paths={"/a"}, return_unchanged_nodes=True)
        root = compute_diff({"a": {"x": 1}, "d": 1}, {"a": {"x": 2}, "d": 2}, config=config)
        assert root.child("d").state is NodeState.IGNORED
        assert root.get_child("/a/x").state is NodeState.CHANGED

    def test_ignored_string_key_leaves_int_key_alone(self):
        config = DiffConfig(ignored_paths={"/1"})
        root = compute_diff({"1": "a", 1: "x"}, {"1": "b", 1: "y"}, config=config)
        assert root.state is NodeState.CHANGED
        assert root.child("1") is None
        assert root.child(1).state is NodeState.CHANGED

    def test_int_key_ignored_by_path_object(self):
        by_int = PropertyPath.root().child(MapKeyElement(1))
        root = compute_diff(
            {"1": "a", 1: "x"}, {"1": "b", 1: "y"}, config=DiffConfig(ignored_paths={by_int})
        )
        assert root.child(1) is None
        assert root.child("1").state is NodeState.CHANGED

    def test_key_with_separator_is_not_a_nested_path(self):
        working = {"a/b": 1, "a": {"b": 1}}
        base = {"a/b": 2, "a": {"b": 2}}
        root = compute_diff(working, base, config=DiffConfig(ignored_paths={"/a/b"}))
        assert root.state is NodeState.CHANGED
        assert root.child("a/b").state is NodeState.CHANGED
        assert root.child("a") is None

        root = compute_diff(working, base, config=DiffConfig(ignored_paths={"/a\\/b"}))
        assert root.child("a/b") is None
        assert root.get_child("/a/b").state is NodeState.CHANGED

    def test_bracketed_key_is_not_an_index(self):
        config = DiffConfig(ignored_paths={"/[0]"})
        root = compute_diff({"[0]": 1}, {"[0]": 2}, config=config)
        assert root.child("[0]").state is NodeState.CHANGED
        assert compute_diff([1], [2], config=config).state is NodeState.UNTOUCHED

    def test_included_set_item(self):
        config = DiffConfig(included_paths={"/tags{'ai'}"}, return_unchanged_nodes=True)
        root = compute_diff({"tags": {"ai", "ml"}, "x": 1}, {"tags": set(), "x": 2}, config=config)
        assert root.get_child("/tags{'ai'}").state is NodeState.ADDED
        assert root.get_child("/tags{'ml'}").state is NodeState.IGNORED
        assert root.child("x").state is NodeState.IGNORED


class TestDepthLimit:
    def test_exceeding_depth_aborts(self):
        config = DiffConfig(max_depth=1)
        with pytest.raises(DepthLimitExceeded) as excinfo:
            compute_diff({"a": {"b": {"c": 1}}}, {"a": {"b": {"c": 2}}}, config=config)
        assert excinfo.value.path == "/a/b"

    def test_within_depth(self):
        root = compute_diff({"a": {"b": 1}}, {"a": {"b": 2}}, config=DiffConfig(max_depth=2))
        assert root.get_child("/a/b").state is NodeState.CHANGED


class TestLeafDiffer:
    def test_defaults_as_unassigned(self):
        config = DiffConfig(treat_defaults_as_unassigned=True)
        root = compute_diff({"retries": 3}, {"retries": 0}, fresh={"retries": 0}, config=config)
        assert root.child("retries").state is NodeState.ADDED

        root = compute_diff({"retries": 0}, {"retries": 3}, fresh={"retries": 0}, config=config)
        assert root.child("retries").state is NodeState.REMOVED

    def test_defaults_are_assigned_by_default(self):
        root = compute_diff({"retries": 3}, {"retries": 0}, fresh={"retries": 0})
        assert root.child("retries").state is NodeState.CHANGED

    def test_custom_comparator_for_leaves(self):
        config = DiffConfig(comparator=lambda w, b: str(w).lower() == str(b).lower())
        root = compute_diff({"name": "Alice"}, {"name": "ALICE"}, config=config)
        assert root.state is NodeState.UNTOUCHED


class TestLogging:
    def test_ignored_paths_are_logged(self, caplog):
        config = DiffConfig(ignored_paths={"/secret"})
        with caplog.at_level(logging.DEBUG, logger="objdiff"):
            compute_diff({"secret": 1, "a": {}}, {"secret": 2, "a": []}, config=config)
        assert "Ignoring /secret" in caplog.text
        assert "Shape mismatch at /a" in caplog.text
