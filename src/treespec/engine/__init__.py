"""Flatten and unflatten engines."""

from treespec.engine.flatten import IsLeafFn, flatten
from treespec.engine.unflatten import make_node, unflatten

__all__ = ["flatten", "unflatten", "make_node", "IsLeafFn"]
