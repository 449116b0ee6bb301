"""Custom registrations for the ``collections`` containers."""

from __future__ import annotations

from collections import OrderedDict, defaultdict, deque
from typing import TYPE_CHECKING, Any, List, Sequence, Tuple

if TYPE_CHECKING:
    from treespec.registry.type_registry import TypeRegistry


def _ordereddict_to_children(
    value: "OrderedDict[Any, Any]",
) -> Tuple[List[Any], Tuple[Any, ...]]:
    return list(value.values()), tuple(value.keys())


def _ordereddict_from_children(
    keys: Tuple[Any, ...], children: List[Any]
) -> "OrderedDict[Any, Any]":
    return OrderedDict(zip(keys, children))


def _ordereddict_format(keys: Tuple[Any, ...], children: Sequence[str]) -> str:
    items = ", ".join(f"({key!r}, {child})" for key, child in zip(keys, children))
    return f"OrderedDict([{items}])"


def _defaultdict_to_children(
    value: "defaultdict[Any, Any]",
) -> Tuple[List[Any], Tuple[Any, Tuple[Any, ...]]]:
    return list(value.values()), (value.default_factory, tuple(value.keys()))


def _defaultdict_from_children(
    aux: Tuple[Any, Tuple[Any, ...]], children: List[Any]
) -> "defaultdict[Any, Any]":
    factory, keys = aux
    return defaultdict(factory, zip(keys, children))


def _defaultdict_format(aux: Tuple[Any, Tuple[Any, ...]], children: Sequence[str]) -> str:
    factory, keys = aux
    items = ", ".join(f"{key!r}: {child}" for key, child in zip(keys, children))
    return f"defaultdict({factory!r}, {{{items}}})"


def _deque_to_children(value: "deque[Any]") -> Tuple[List[Any], Any]:
    return list(value), value.maxlen


def _deque_from_children(maxlen: Any, children: List[Any]) -> "deque[Any]":
    return deque(children, maxlen=maxlen)


def _deque_format(maxlen: Any, children: Sequence[str]) -> str:
    suffix = "" if maxlen is None else f", maxlen={maxlen}"
    return f"deque([{', '.join(children)}]{suffix})"


def register_standard_types(registry: "TypeRegistry") -> None:
    """Register OrderedDict, defaultdict and deque on ``registry``."""
    registry.register(
        OrderedDict,
        _ordereddict_to_children,
        _ordereddict_from_children,
        formatter=_ordereddict_format,
    )
    registry.register(
        defaultdict,
        _defaultdict_to_children,
        _defaultdict_from_children,
        formatter=_defaultdict_format,
    )
    registry.register(deque, _deque_to_children, _deque_from_children, formatter=_deque_format)


__all__ = ["register_standard_types"]
