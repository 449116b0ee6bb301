"""Tests for TreeSpec counts, equality, hashing and immutability."""

from __future__ import annotations

from collections import namedtuple

import pytest

from treespec.core.exceptions import StructuralError
from treespec.core.kinds import NodeKind
from treespec.core.node import DictKeys, Node
from treespec.core.spec import TreeSpec
from treespec.engine import flatten

Pair = namedtuple("Pair", ["left", "right"])


class Box:
    def __init__(self, *items):
        self.items = list(items)


def _register_box(registry, aux="box"):
    return registry.register(
        Box,
        lambda box: (box.items, aux),
        lambda data, children: Box(*children),
    )


def test_empty_spec_counts() -> None:
    spec = TreeSpec()
    assert spec.num_leaves() == 0
    assert spec.num_nodes() == 0
    assert not spec.is_leaf()


def test_counts_follow_root_node(registry, settings) -> None:
    leaves, spec = flatten(([1, 2], {"a": None, "b": 3}), registry=registry, settings=settings)
    assert leaves == [1, 2, 3]
    assert spec.num_leaves() == 3
    # leaf, leaf, list, none, leaf, dict, tuple
    assert spec.num_nodes() == 7
    assert [node.kind for node in spec.traversal] == [
        NodeKind.LEAF,
        NodeKind.LEAF,
        NodeKind.LIST,
        NodeKind.NONE,
        NodeKind.LEAF,
        NodeKind.DICT,
        NodeKind.TUPLE,
    ]
    root = spec.traversal[-1]
    assert (root.num_leaves, root.num_nodes) == (3, 7)


def test_single_leaf_spec(registry, settings) -> None:
    _, spec = flatten(42, registry=registry, settings=settings)
    assert spec.is_leaf()
    assert spec.num_leaves() == 1


def test_equality_is_reflexive_and_symmetric(registry, settings) -> None:
    _, a = flatten([1, (2, 3)], registry=registry, settings=settings)
    _, b = flatten(["x", ("y", "z")], registry=registry, settings=settings)
    assert a == a
    assert a == b and b == a
    assert hash(a) == hash(b)


def test_equality_ignores_stored_counts() -> None:
    honest = TreeSpec([Node.leaf(), Node.leaf(), Node(NodeKind.LIST, 2, None, 2, 3)])
    skewed = TreeSpec([Node.leaf(), Node.leaf(), Node(NodeKind.LIST, 2, None, 99, 99)])
    assert honest.equals(skewed)


def test_inequality_on_kind_arity_and_metadata(registry, settings) -> None:
    def spec_of(value):
        return flatten(value, registry=registry, settings=settings)[1]

    assert spec_of([1, 2]) != spec_of((1, 2))
    assert spec_of([1, 2]) != spec_of([1, 2, 3])
    assert spec_of({"a": 1, "b": 2}) != spec_of({"b": 1, "a": 2})
    assert spec_of(Pair(1, 2)) != spec_of((1, 2))
    assert spec_of([None]) != spec_of([1])


def test_dict_specs_equal_under_sorted_order(registry, sorted_settings) -> None:
    _, a = flatten({"a": 1, "b": 2}, registry=registry, settings=sorted_settings)
    _, b = flatten({"b": 1, "a": 2}, registry=registry, settings=sorted_settings)
    assert a == b


def test_custom_equality_requires_same_registration(registry, settings) -> None:
    from treespec.registry import TypeRegistry

    other_registry = TypeRegistry()
    _register_box(registry)
    _register_box(other_registry)

    _, a = flatten(Box(1, 2), registry=registry, settings=settings)
    _, b = flatten(Box(3, 4), registry=registry, settings=settings)
    _, c = flatten(Box(1, 2), registry=other_registry, settings=settings)
    assert a == b
    assert a != c


def test_custom_equality_compares_aux_data(registry, settings) -> None:
    registry.register(
        Box,
        lambda box: (box.items, type(box.items[0]).__name__),
        lambda data, children: Box(*children),
    )
    _, ints = flatten(Box(1, 2), registry=registry, settings=settings)
    _, more_ints = flatten(Box(3, 4), registry=registry, settings=settings)
    _, strs = flatten(Box("a", "b"), registry=registry, settings=settings)
    assert ints == more_ints
    assert ints != strs


def test_spec_is_immutable(registry, settings) -> None:
    _, spec = flatten([1], registry=registry, settings=settings)
    with pytest.raises(AttributeError):
        spec._traversal = ()


def test_comparison_with_other_types() -> None:
    assert TreeSpec() != "TreeSpec()"
    assert TreeSpec() == TreeSpec()


def test_node_rejects_illegal_metadata() -> None:
    with pytest.raises(StructuralError):
        Node(NodeKind.LEAF, 0, DictKeys(("a",)), 1, 1)
    with pytest.raises(StructuralError):
        Node(NodeKind.DICT, 1, None, 1, 2)
    with pytest.raises(StructuralError):
        Node(NodeKind.DICT, 2, DictKeys(("a",)), 2, 3)
    with pytest.raises(StructuralError):
        Node(NodeKind.NONE, 1, None, 0, 1)
    with pytest.raises(StructuralError):
        Node(NodeKind.DICT, 2, DictKeys(("a", "a")), 2, 3)
    with pytest.raises(StructuralError):
        Node(NodeKind.DICT, 1, DictKeys(([1],)), 1, 2)


def test_traversal_entries_must_be_nodes() -> None:
    with pytest.raises(StructuralError):
        TreeSpec([("leaf",)])
