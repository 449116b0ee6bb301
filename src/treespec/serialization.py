"""Record form of a TreeSpec for persistence and interchange.

Each node becomes a six-field record::

    (kind_code, arity, metadata, custom_type, num_leaves, num_nodes)

``metadata`` is the key list for DICT, the named-tuple class for NAMEDTUPLE and
the auxiliary data for CUSTOM, ``None`` otherwise. ``custom_type`` is the
registered class for CUSTOM nodes, ``None`` otherwise. Decoding validates every
record and replays the traversal, so a spec that deserializes cleanly can be
unflattened and rendered without internal-consistency faults.
"""

from __future__ import annotations

import logging
from collections import abc
from typing import Any, List, NamedTuple, Optional, Sequence

from treespec.core.exceptions import MalformedRecordError, UnknownCustomTypeError
from treespec.core.kinds import NodeKind
from treespec.core.node import CustomData, DictKeys, Node, NodeMetadata, RecordType
from treespec.core.spec import TreeSpec
from treespec.registry.type_registry import TypeRegistry, default_registry

logger = logging.getLogger(__name__)

RECORD_FIELDS = 6


class NodeRecord(NamedTuple):
    """Serialized form of a single traversal node."""

    kind_code: int
    arity: int
    metadata: Any
    custom_type: Optional[type]
    num_leaves: int
    num_nodes: int


def serialize(spec: TreeSpec) -> List[NodeRecord]:
    """Encode ``spec`` as a list of ``NodeRecord``."""
    records: List[NodeRecord] = []
    for node in spec.traversal:
        metadata: Any = None
        custom_type: Optional[type] = None
        if node.kind is NodeKind.DICT:
            metadata = list(node.metadata.keys)
        elif node.kind is NodeKind.NAMEDTUPLE:
            metadata = node.metadata.type
        elif node.kind is NodeKind.CUSTOM:
            metadata = node.metadata.aux_data
            custom_type = node.metadata.registration.handle
        records.append(
            NodeRecord(
                int(node.kind), node.arity, metadata, custom_type, node.num_leaves, node.num_nodes
            )
        )
    return records


def _int_field(value: Any, name: str, index: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedRecordError(f"Field {name} must be an integer, got {value!r}", index)
    return value


def _decode_metadata(
    kind: NodeKind, arity: int, metadata: Any, handle: Any, index: int, registry: TypeRegistry
) -> Optional[NodeMetadata]:
    if kind is NodeKind.CUSTOM:
        if handle is None:
            raise MalformedRecordError("Custom node is missing its type handle", index)
        registration = registry.lookup_by_handle(handle)
        if registration is None:
            raise UnknownCustomTypeError(handle, record_index=index)
        return CustomData(registration, metadata)

    if handle is not None:
        raise MalformedRecordError(f"{kind.name} node cannot carry a custom type handle", index)
    if kind is NodeKind.DICT:
        if not isinstance(metadata, (list, tuple)):
            raise MalformedRecordError("Dict node metadata must be a key sequence", index)
        if len(metadata) != arity:
            raise MalformedRecordError("Number of keys and entries does not match", index)
        try:
            distinct = len(set(metadata))
        except TypeError:
            raise MalformedRecordError("Dict node keys must be hashable", index) from None
        if distinct != len(metadata):
            raise MalformedRecordError("Dict node keys must be unique", index)
        return DictKeys(tuple(metadata))
    if kind is NodeKind.NAMEDTUPLE:
        is_record = (
            isinstance(metadata, type)
            and issubclass(metadata, tuple)
            and hasattr(metadata, "_fields")
        )
        if not is_record:
            raise MalformedRecordError(
                "NamedTuple node metadata must be a named tuple class", index
            )
        if len(metadata._fields) != arity:
            raise MalformedRecordError("Number of fields and entries does not match", index)
        return RecordType(metadata)
    if metadata is not None:
        raise MalformedRecordError(f"{kind.name} node cannot carry metadata", index)
    return None


def deserialize(
    records: Sequence[Sequence[Any]], registry: Optional[TypeRegistry] = None
) -> TreeSpec:
    """Decode records produced by ``serialize``.

    Args:
        records: Sequence of six-field records.
        registry: Registry resolving custom type handles; defaults to the
            process-wide registry.

    Returns:
        The decoded TreeSpec.

    Raises:
        MalformedRecordError: If any record or the overall traversal is invalid.
        UnknownCustomTypeError: If a custom type handle is not registered.
    """
    if registry is None:
        registry = default_registry()
    if isinstance(records, (str, bytes)) or not isinstance(records, abc.Sequence):
        raise MalformedRecordError("Serialized TreeSpec must be a sequence of records")

    traversal: List[Node] = []
    # Replay stack of (num_leaves, num_nodes) per completed subtree.
    counts: List[tuple] = []
    for index, record in enumerate(records):
        if (
            isinstance(record, (str, bytes))
            or not isinstance(record, abc.Sequence)
            or len(record) != RECORD_FIELDS
        ):
            raise MalformedRecordError(f"Record must have exactly {RECORD_FIELDS} fields", index)
        kind_code, arity, metadata, handle, num_leaves, num_nodes = record

        kind_code = _int_field(kind_code, "kind_code", index)
        try:
            kind = NodeKind(kind_code)
        except ValueError:
            raise MalformedRecordError(f"Unknown kind code {kind_code}", index) from None
        arity = _int_field(arity, "arity", index)
        if arity < 0:
            raise MalformedRecordError("Arity must be non-negative", index)
        if not kind.is_container and arity != 0:
            raise MalformedRecordError(f"{kind.name} node must have arity 0", index)
        node_metadata = _decode_metadata(kind, arity, metadata, handle, index, registry)
        num_leaves = _int_field(num_leaves, "num_leaves", index)
        num_nodes = _int_field(num_nodes, "num_nodes", index)

        if len(counts) < arity:
            raise MalformedRecordError("Too few elements for container", index)
        split = len(counts) - arity
        children = counts[split:]
        del counts[split:]
        if kind is NodeKind.LEAF:
            expected = (1, 1)
        elif kind is NodeKind.NONE:
            expected = (0, 1)
        else:
            expected = (sum(c[0] for c in children), sum(c[1] for c in children) + 1)
        if (num_leaves, num_nodes) != expected:
            raise MalformedRecordError(
                f"Stored counts {(num_leaves, num_nodes)} do not match traversal {expected}", index
            )
        counts.append(expected)
        traversal.append(Node(kind, arity, node_metadata, num_leaves, num_nodes))

    if traversal and len(counts) != 1:
        raise MalformedRecordError("Serialized traversal does not form a single tree")
    logger.debug("Deserialized TreeSpec with %d records", len(traversal))
    return TreeSpec(traversal)


__all__ = ["NodeRecord", "RECORD_FIELDS", "serialize", "deserialize"]
