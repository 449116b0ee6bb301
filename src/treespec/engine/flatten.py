"""Flatten engine: nested value -> (leaves, TreeSpec).

The walk is depth-first with children before parents, driven by an explicit
work stack so deeply nested inputs never hit the interpreter recursion limit.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from treespec.core.exceptions import CyclicStructureError, UnsortableKeysError
from treespec.core.kinds import NodeKind
from treespec.core.node import CustomData, DictKeys, Node, RecordType
from treespec.core.spec import TreeSpec
from treespec.config import TreeSpecSettings
from treespec.registry.type_registry import Registration, TypeRegistry

IsLeafFn = Callable[[Any], bool]

_VISIT = 0
_EMIT = 1


def _dict_keys(value: Dict[Any, Any], order: str) -> Tuple[Any, ...]:
    if order == "sorted":
        try:
            return tuple(sorted(value))
        except TypeError as exc:
            raise UnsortableKeysError(f"Cannot sort dict keys {list(value)!r}: {exc}") from exc
    return tuple(value)


def _expand(
    value: Any, kind: NodeKind, registration: Optional[Registration], settings: TreeSpecSettings
) -> Tuple[List[Any], Any]:
    """Return ``(children, metadata)`` for a container value."""
    if kind is NodeKind.TUPLE or kind is NodeKind.LIST:
        return list(value), None
    if kind is NodeKind.NAMEDTUPLE:
        return list(value), RecordType(type(value))
    if kind is NodeKind.DICT:
        keys = _dict_keys(value, settings.dict_key_order)
        return [value[key] for key in keys], DictKeys(keys)
    children, aux_data = registration.to_children(value)
    return list(children), CustomData(registration, aux_data)


def flatten(
    tree: Any,
    *,
    registry: TypeRegistry,
    settings: TreeSpecSettings,
    is_leaf: Optional[IsLeafFn] = None,
) -> Tuple[List[Any], TreeSpec]:
    """Flatten ``tree`` into its leaves and a TreeSpec.

    Args:
        tree: Value to flatten.
        registry: Registry used to classify every visited value.
        settings: Controls dict key order and named-tuple detection.
        is_leaf: Optional predicate; values for which it returns True are
            leaves regardless of their type.

    Returns:
        The leaves in traversal order and the spec describing their layout.

    Raises:
        CyclicStructureError: If a container contains itself.
        UnsortableKeysError: If sorted key order is configured and a dict's
            keys cannot be ordered.
    """
    leaves: List[Any] = []
    traversal: List[Node] = []
    # id -> value; holding the value keeps its id from being reused while active.
    active: Dict[int, Any] = {}
    # Entries: (_VISIT, value) or (_EMIT, kind, metadata, arity, node_start, leaf_start, value_id).
    stack: List[Tuple[Any, ...]] = [(_VISIT, tree)]

    while stack:
        entry = stack.pop()
        if entry[0] == _EMIT:
            _, kind, metadata, arity, node_start, leaf_start, value_id = entry
            active.pop(value_id, None)
            traversal.append(
                Node(
                    kind=kind,
                    arity=arity,
                    metadata=metadata,
                    num_leaves=len(leaves) - leaf_start,
                    num_nodes=len(traversal) - node_start + 1,
                )
            )
            continue

        value = entry[1]
        if is_leaf is not None and is_leaf(value):
            leaves.append(value)
            traversal.append(Node.leaf())
            continue

        kind, registration = registry.classify(
            value, detect_namedtuples=settings.detect_namedtuples
        )
        if kind is NodeKind.LEAF:
            leaves.append(value)
            traversal.append(Node.leaf())
            continue
        if kind is NodeKind.NONE:
            traversal.append(Node.none())
            continue

        value_id = id(value)
        if value_id in active:
            raise CyclicStructureError(
                f"Cannot flatten a {type(value).__name__} that contains itself."
            )
        active[value_id] = value

        children, metadata = _expand(value, kind, registration, settings)
        stack.append((_EMIT, kind, metadata, len(children), len(traversal), len(leaves), value_id))
        stack.extend((_VISIT, child) for child in reversed(children))

    return leaves, TreeSpec(traversal)


__all__ = ["flatten", "IsLeafFn"]
