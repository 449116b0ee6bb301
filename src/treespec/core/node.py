"""Traversal nodes and their per-kind metadata.

Metadata is a small sum type keyed by ``NodeKind``: ``DictKeys`` for dicts,
``RecordType`` for named tuples, ``CustomData`` for registry-defined types and
nothing for every other kind. ``Node`` refuses any other pairing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Hashable, Optional, Tuple, Union

from treespec.core.exceptions import StructuralError
from treespec.core.kinds import NodeKind

if TYPE_CHECKING:
    from treespec.registry.type_registry import Registration


@dataclass(frozen=True, slots=True)
class DictKeys:
    """Ordered keys of a dict node; position ``i`` pairs with child ``i``."""

    keys: Tuple[Hashable, ...]


@dataclass(frozen=True, slots=True)
class RecordType:
    """Named-tuple class of a NAMEDTUPLE node."""

    type: type

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(self.type._fields)

    @property
    def name(self) -> str:
        return self.type.__name__


@dataclass(frozen=True, slots=True, eq=False)
class CustomData:
    """Registration handle plus the auxiliary data its ``to_children`` returned.

    Two values are equal only when they point at the same registration object
    and their auxiliary data compare equal.
    """

    registration: "Registration"
    aux_data: Any

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CustomData):
            return NotImplemented
        if self.registration is not other.registration:
            return False
        return bool(self.aux_data == other.aux_data)

    def __hash__(self) -> int:
        return id(self.registration)


def _keys_unique(keys: Tuple[Hashable, ...]) -> bool:
    try:
        return len(set(keys)) == len(keys)
    except TypeError:
        return False


NodeMetadata = Union[DictKeys, RecordType, CustomData]

_METADATA_FOR_KIND = {
    NodeKind.DICT: DictKeys,
    NodeKind.NAMEDTUPLE: RecordType,
    NodeKind.CUSTOM: CustomData,
}


@dataclass(frozen=True, slots=True)
class Node:
    """One post-order entry of a TreeSpec traversal.

    Attributes:
        kind: Node kind tag.
        arity: Number of immediate children consumed from the working stack.
        metadata: Kind-specific metadata, ``None`` for LEAF/NONE/TUPLE/LIST.
        num_leaves: Leaves in the subtree rooted here, inclusive.
        num_nodes: Nodes in the subtree rooted here, inclusive.
    """

    kind: NodeKind
    arity: int
    metadata: Optional[NodeMetadata]
    num_leaves: int
    num_nodes: int

    def __post_init__(self) -> None:
        expected = _METADATA_FOR_KIND.get(self.kind)
        if expected is None:
            if self.metadata is not None:
                raise StructuralError(f"{self.kind.name} node cannot carry metadata.")
        elif not isinstance(self.metadata, expected):
            raise StructuralError(
                f"{self.kind.name} node requires {expected.__name__} metadata, "
                f"got {type(self.metadata).__name__}."
            )
        if not self.kind.is_container and self.arity != 0:
            raise StructuralError(f"{self.kind.name} node must have arity 0.")
        if self.kind is NodeKind.DICT and len(self.metadata.keys) != self.arity:
            raise StructuralError("Number of keys and entries does not match.")
        if self.kind is NodeKind.DICT and not _keys_unique(self.metadata.keys):
            raise StructuralError("Dict node keys must be unique and hashable.")
        if self.kind is NodeKind.NAMEDTUPLE and len(self.metadata.fields) != self.arity:
            raise StructuralError("Number of fields and entries does not match.")

    @classmethod
    def leaf(cls) -> "Node":
        return cls(NodeKind.LEAF, 0, None, 1, 1)

    @classmethod
    def none(cls) -> "Node":
        return cls(NodeKind.NONE, 0, None, 0, 1)

    def structure_key(self) -> Tuple[Any, ...]:
        """Fields that participate in TreeSpec equality."""
        return (self.kind, self.arity, self.metadata)


__all__ = ["Node", "NodeMetadata", "DictKeys", "RecordType", "CustomData"]
