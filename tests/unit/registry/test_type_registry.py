"""Tests for the type registry."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict, deque, namedtuple

import pytest

from treespec.core.exceptions import DuplicateRegistrationError, RegistrationError
from treespec.core.kinds import NodeKind
from treespec.registry import TypeRegistry, default_registry

Point = namedtuple("Point", ["x", "y"])


class Box:
    def __init__(self, *items):
        self.items = list(items)


def _to_children(box):
    return box.items, None


def _from_children(aux, children):
    return Box(*children)


@pytest.mark.parametrize(
    "value, kind",
    [
        ((1,), NodeKind.TUPLE),
        ([1], NodeKind.LIST),
        ({"a": 1}, NodeKind.DICT),
        (None, NodeKind.NONE),
        (Point(1, 2), NodeKind.NAMEDTUPLE),
        (OrderedDict(), NodeKind.CUSTOM),
        (deque(), NodeKind.CUSTOM),
        (1.5, NodeKind.LEAF),
        ("text", NodeKind.LEAF),
    ],
)
def test_classify(registry, value, kind) -> None:
    assert registry.classify(value)[0] is kind


def test_classify_returns_custom_registration(registry) -> None:
    registration = registry.register(Box, _to_children, _from_children)
    kind, found = registry.classify(Box())
    assert kind is NodeKind.CUSTOM
    assert found is registration
    assert registration.name == "Box"
    assert registration.handle is Box


def test_subclasses_are_not_registered_implicitly(registry) -> None:
    class MyList(list):
        pass

    assert registry.classify(MyList([1]))[0] is NodeKind.LEAF


def test_namedtuple_detection_can_be_disabled(registry) -> None:
    assert registry.classify(Point(1, 2), detect_namedtuples=False)[0] is NodeKind.LEAF


def test_duplicate_registration(registry) -> None:
    registry.register(Box, _to_children, _from_children)
    with pytest.raises(DuplicateRegistrationError) as excinfo:
        registry.register(Box, _to_children, _from_children)
    assert excinfo.value.get_context_data()["type_name"] == "Box"


def test_builtin_types_cannot_be_reregistered(registry) -> None:
    with pytest.raises(DuplicateRegistrationError):
        registry.register(list, _to_children, _from_children)
    with pytest.raises(DuplicateRegistrationError):
        registry.register(OrderedDict, _to_children, _from_children)


def test_register_validates_arguments(registry) -> None:
    with pytest.raises(RegistrationError):
        registry.register(Box(), _to_children, _from_children)
    with pytest.raises(RegistrationError):
        registry.register(Box, "not callable", _from_children)


def test_lookup_by_handle(registry) -> None:
    registration = registry.register(Box, _to_children, _from_children)
    assert registry.lookup_by_handle(Box) is registration
    assert registry.lookup_by_handle(OrderedDict).type is OrderedDict
    # Built-in kinds are not custom handles.
    assert registry.lookup_by_handle(tuple) is None
    assert registry.lookup_by_handle(int) is None
    assert registry.lookup_by_handle("Box") is None


def test_registry_without_standard_types() -> None:
    bare = TypeRegistry(include_standard=False)
    assert bare.classify(OrderedDict(a=1))[0] is NodeKind.LEAF
    assert list in bare
    assert OrderedDict not in bare


def test_registered_types(registry) -> None:
    registry.register(Box, _to_children, _from_children)
    assert {tuple, list, dict, type(None), OrderedDict, deque, Box} <= set(registry.registered_types())


def test_registration_is_logged(registry, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="treespec"):
        registry.register(Box, _to_children, _from_children)
    assert any("Registered custom tree node type" in record.getMessage() for record in caplog.records)


def test_default_registry_is_shared() -> None:
    assert default_registry() is default_registry()


def test_concurrent_registration_and_lookup(registry) -> None:
    classes = [type(f"Node{i}", (), {}) for i in range(32)]
    errors = []

    def register(cls):
        try:
            registry.register(cls, _to_children, _from_children)
        except Exception as exc:  # pragma: no cover - surfaced by the assertion below
            errors.append(exc)

    def lookup():
        for _ in range(200):
            registry.classify([1])

    threads = [threading.Thread(target=register, args=(cls,)) for cls in classes]
    threads += [threading.Thread(target=lookup) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert not errors
    assert all(registry.classify(cls())[0] is NodeKind.CUSTOM for cls in classes)
