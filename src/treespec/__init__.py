"""treespec: flatten nested containers into leaves plus a reusable structure.

    >>> from treespec import tree_flatten, tree_unflatten
    >>> leaves, spec = tree_flatten(tree={"a": 1, "b": (2, [3])})
    >>> leaves
    [1, 2, 3]
    >>> spec
    TreeSpec({'a': *, 'b': (*, [*])})
    >>> tree_unflatten(spec=spec, leaves=[10, 20, 30])
    {'a': 10, 'b': (20, [30])}
"""

from treespec.api import (
    register_tree,
    register_tree_class,
    tree_flatten,
    tree_leaves,
    tree_map,
    tree_structure,
    tree_unflatten,
)
from treespec.config import (
    TreeSpecSettings,
    configure_logging,
    get_settings,
    load_settings,
    set_settings,
)
from treespec.core.exceptions import (
    ArityError,
    ConfigurationError,
    CyclicStructureError,
    DuplicateRegistrationError,
    InternalConsistencyError,
    LeafCountError,
    MalformedRecordError,
    RegistrationError,
    SerializationError,
    StructuralError,
    StructureMismatchError,
    TreeSpecError,
    UnknownCustomTypeError,
    UnsortableKeysError,
    UsageError,
)
from treespec.core.kinds import NodeKind
from treespec.core.node import Node
from treespec.core.spec import TreeSpec
from treespec.engine import flatten, unflatten
from treespec.registry import Registration, TypeRegistry, default_registry
from treespec.serialization import NodeRecord, deserialize, serialize

__version__ = "0.1.0"

__all__ = [
    # Structure
    "NodeKind",
    "Node",
    "TreeSpec",
    # Engines
    "flatten",
    "unflatten",
    "serialize",
    "deserialize",
    "NodeRecord",
    # Registry
    "Registration",
    "TypeRegistry",
    "default_registry",
    # Helpers
    "register_tree",
    "register_tree_class",
    "tree_flatten",
    "tree_unflatten",
    "tree_leaves",
    "tree_structure",
    "tree_map",
    # Settings
    "TreeSpecSettings",
    "load_settings",
    "get_settings",
    "set_settings",
    "configure_logging",
    # Errors
    "TreeSpecError",
    "UsageError",
    "LeafCountError",
    "SerializationError",
    "MalformedRecordError",
    "UnknownCustomTypeError",
    "RegistrationError",
    "DuplicateRegistrationError",
    "StructureMismatchError",
    "CyclicStructureError",
    "UnsortableKeysError",
    "ConfigurationError",
    "InternalConsistencyError",
    "ArityError",
    "StructuralError",
]
