"""Core data model: node kinds, nodes, TreeSpec and errors."""

from treespec.core.exceptions import *  # noqa: F401,F403
from treespec.core.exceptions import __all__ as _exception_names
from treespec.core.kinds import NodeKind
from treespec.core.node import CustomData, DictKeys, Node, NodeMetadata, RecordType
from treespec.core.spec import TreeSpec

__all__ = [
    "NodeKind",
    "Node",
    "NodeMetadata",
    "DictKeys",
    "RecordType",
    "CustomData",
    "TreeSpec",
    *_exception_names,
]
