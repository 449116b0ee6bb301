"""Unflatten engine: (TreeSpec, leaves) -> nested value."""

from __future__ import annotations

from typing import Any, Iterable, List

from treespec.core.exceptions import ArityError, LeafCountError, StructuralError
from treespec.core.kinds import NodeKind
from treespec.core.node import Node
from treespec.core.spec import TreeSpec

_MISSING = object()


def make_node(node: Node, children: List[Any]) -> Any:
    """Build the container described by ``node`` from its reconstructed children."""
    if len(children) != node.arity:
        raise ArityError("Node arity did not match.")
    kind = node.kind
    if kind is NodeKind.TUPLE:
        return tuple(children)
    if kind is NodeKind.LIST:
        return children
    if kind is NodeKind.DICT:
        return dict(zip(node.metadata.keys, children))
    if kind is NodeKind.NAMEDTUPLE:
        return node.metadata.type(*children)
    if kind is NodeKind.CUSTOM:
        return node.metadata.registration.from_children(node.metadata.aux_data, children)
    raise StructuralError(f"make_node not implemented for {kind.name} nodes.")


def unflatten(spec: TreeSpec, leaves: Iterable[Any]) -> Any:
    """Reconstruct the value described by ``spec`` from ``leaves``.

    Args:
        spec: Structure to rebuild.
        leaves: Exactly ``spec.num_leaves()`` values, in traversal order.

    Returns:
        The reconstructed value.

    Raises:
        LeafCountError: If there are too few or too many leaves.
        ArityError: If a node needs more children than have been rebuilt.
        StructuralError: If the traversal does not reduce to a single root.
    """
    agenda: List[Any] = []
    it = iter(leaves)
    leaf_count = 0
    for index, node in enumerate(spec.traversal):
        if len(agenda) < node.arity:
            raise ArityError("Too few elements for TreeSpec node.", node_index=index)
        if node.kind is NodeKind.LEAF:
            leaf = next(it, _MISSING)
            if leaf is _MISSING:
                raise LeafCountError(
                    f"Too few leaves for TreeSpec; expected {spec.num_leaves()}, got {leaf_count}.",
                    expected=spec.num_leaves(),
                    received=leaf_count,
                )
            agenda.append(leaf)
            leaf_count += 1
        elif node.kind is NodeKind.NONE:
            agenda.append(None)
        else:
            split = len(agenda) - node.arity
            children = agenda[split:]
            del agenda[split:]
            agenda.append(make_node(node, children))

    if next(it, _MISSING) is not _MISSING:
        raise LeafCountError(
            f"Too many leaves for TreeSpec; expected {spec.num_leaves()}.",
            expected=spec.num_leaves(),
        )
    if len(agenda) != 1:
        raise StructuralError("TreeSpec traversal did not yield a singleton.")
    return agenda[0]


__all__ = ["unflatten", "make_node"]
