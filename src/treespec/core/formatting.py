"""Canonical text rendering of a TreeSpec traversal."""

from __future__ import annotations

from typing import List, Sequence

from treespec.core.exceptions import ArityError, StructuralError
from treespec.core.kinds import NodeKind
from treespec.core.node import CustomData, Node


def _format_custom(metadata: CustomData, children: List[str]) -> str:
    registration = metadata.registration
    if registration.formatter is not None:
        return registration.formatter(metadata.aux_data, children)
    data = "" if metadata.aux_data is None else f"[{metadata.aux_data}]"
    return f"{registration.name}{data}({', '.join(children)})"


def format_traversal(traversal: Sequence[Node]) -> str:
    """Render ``traversal`` as ``TreeSpec(<structure>)``.

    Leaves render as ``*``; containers render in their Python literal form
    with children substituted.

    Raises:
        ArityError: If a node needs more fragments than have been rendered.
        StructuralError: If the traversal does not reduce to one root.
    """
    if not traversal:
        return "TreeSpec()"

    agenda: List[str] = []
    for index, node in enumerate(traversal):
        if len(agenda) < node.arity:
            raise ArityError("Too few elements for container.", node_index=index)
        split = len(agenda) - node.arity
        children = agenda[split:]
        del agenda[split:]

        if node.kind is NodeKind.LEAF:
            representation = "*"
        elif node.kind is NodeKind.NONE:
            representation = "None"
        elif node.kind is NodeKind.TUPLE:
            # One-element tuples keep their trailing comma.
            trailing = "," if node.arity == 1 else ""
            representation = f"({', '.join(children)}{trailing})"
        elif node.kind is NodeKind.LIST:
            representation = f"[{', '.join(children)}]"
        elif node.kind is NodeKind.DICT:
            items = (f"{key!r}: {child}" for key, child in zip(node.metadata.keys, children))
            representation = f"{{{', '.join(items)}}}"
        elif node.kind is NodeKind.NAMEDTUPLE:
            record = node.metadata
            items = (f"{field}={child}" for field, child in zip(record.fields, children))
            representation = f"{record.name}({', '.join(items)})"
        elif node.kind is NodeKind.CUSTOM:
            representation = _format_custom(node.metadata, children)
        else:
            raise StructuralError(f"Unknown node kind {node.kind!r}.")
        agenda.append(representation)

    if len(agenda) != 1:
        raise StructuralError("TreeSpec traversal did not yield a singleton.")
    return f"TreeSpec({agenda[0]})"


__all__ = ["format_traversal"]
