"""Closed set of node kinds appearing in a TreeSpec traversal."""

from enum import IntEnum


class NodeKind(IntEnum):
    """Kind tag for a traversal node.

    The integer value doubles as the ``kind_code`` of a serialized record and
    must stay stable across releases.
    """

    LEAF = 0
    NONE = 1
    TUPLE = 2
    NAMEDTUPLE = 3
    LIST = 4
    DICT = 5
    CUSTOM = 6

    @property
    def is_container(self) -> bool:
        return self not in (NodeKind.LEAF, NodeKind.NONE)


__all__ = ["NodeKind"]
