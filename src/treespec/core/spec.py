"""
TreeSpec: the structural half of a flattened value.

A TreeSpec is an immutable post-order traversal of ``Node`` records. Flatten a
value once, then reuse its TreeSpec to rebuild values of the same shape from
any leaf sequence, compare shapes, render them, or persist them.

Example:
    >>> leaves, spec = tree_flatten(tree=([1, 2], 3))
    >>> leaves
    [1, 2, 3]
    >>> spec
    TreeSpec(([*, *], *))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple

from treespec.core.exceptions import StructuralError
from treespec.core.formatting import format_traversal
from treespec.core.kinds import NodeKind
from treespec.core.node import Node

if TYPE_CHECKING:
    from treespec.registry.type_registry import TypeRegistry
    from treespec.serialization import NodeRecord


class TreeSpec:
    """Immutable post-order traversal describing a nested structure.

    Args:
        traversal: Nodes in post-order. Counts are trusted; callers building
            specs from untrusted input go through ``deserialize`` instead.
    """

    __slots__ = ("_traversal",)

    def __init__(self, traversal: Iterable[Node] = ()) -> None:
        nodes = tuple(traversal)
        for node in nodes:
            if not isinstance(node, Node):
                raise StructuralError(
                    f"TreeSpec traversal entries must be Node, got {type(node).__name__}."
                )
        object.__setattr__(self, "_traversal", nodes)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("TreeSpec is immutable")

    @property
    def traversal(self) -> Tuple[Node, ...]:
        return self._traversal

    def num_leaves(self) -> int:
        if not self._traversal:
            return 0
        return self._traversal[-1].num_leaves

    def num_nodes(self) -> int:
        return len(self._traversal)

    def is_leaf(self) -> bool:
        """Return True if this spec describes a single bare leaf."""
        return len(self._traversal) == 1 and self._traversal[0].kind is NodeKind.LEAF

    def equals(self, other: "TreeSpec") -> bool:
        """Structural equality.

        Compares kind, arity and metadata position by position. ``num_leaves``
        and ``num_nodes`` are derived from the rest and are not compared.
        """
        if len(self._traversal) != len(other._traversal):
            return False
        for a, b in zip(self._traversal, other._traversal):
            if a.kind is not b.kind or a.arity != b.arity:
                return False
            if (a.metadata is None) != (b.metadata is None):
                return False
            if a.metadata is not None and a.metadata != b.metadata:
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeSpec):
            return NotImplemented
        return self.equals(other)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(tuple((node.kind, node.arity) for node in self._traversal))

    def to_string(self) -> str:
        return format_traversal(self._traversal)

    def __repr__(self) -> str:
        return self.to_string()

    __str__ = __repr__

    def unflatten(self, leaves: Iterable[Any]) -> Any:
        """Rebuild a value of this shape from ``leaves``."""
        from treespec.engine.unflatten import unflatten

        return unflatten(self, leaves)

    def serialize(self) -> List["NodeRecord"]:
        """Return the six-field record form of this spec."""
        from treespec.serialization import serialize

        return serialize(self)

    @classmethod
    def deserialize(
        cls, records: Sequence[Sequence[Any]], registry: Optional["TypeRegistry"] = None
    ) -> "TreeSpec":
        """Rebuild a spec from records produced by ``serialize``."""
        from treespec.serialization import deserialize

        return deserialize(records, registry=registry)

    def __reduce__(self):
        # Custom handles resolve against the default registry on unpickle.
        return (_from_records, (self.serialize(),))


def _from_records(records: Sequence[Sequence[Any]]) -> TreeSpec:
    from treespec.serialization import deserialize

    return deserialize(records)


__all__ = ["TreeSpec"]
