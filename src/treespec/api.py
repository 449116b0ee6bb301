"""
Tree Utilities

Keyword-only helpers over the flatten/unflatten engines:
  • register_tree: Registers a type with its custom flatten and unflatten functions.
  • tree_flatten: Flattens an object into its leaves and a TreeSpec.
  • tree_unflatten: Reconstructs an object from a TreeSpec and a leaf sequence.
  • tree_leaves / tree_structure: Either half of tree_flatten.
  • tree_map: Applies a function leaf-wise across one or more same-shaped trees.

Every helper takes optional ``registry`` and ``settings`` arguments and falls
back to the process-wide defaults when they are omitted.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple, Type, TypeVar

from treespec.config import TreeSpecSettings, get_settings
from treespec.core.exceptions import RegistrationError, StructureMismatchError
from treespec.core.spec import TreeSpec
from treespec.engine.flatten import IsLeafFn, flatten
from treespec.engine.unflatten import unflatten
from treespec.registry.type_registry import (
    FormatterFn,
    FromChildrenFn,
    Registration,
    ToChildrenFn,
    TypeRegistry,
    default_registry,
)

T = TypeVar("T")


def register_tree(
    *,
    cls: Type[T],
    flatten_func: ToChildrenFn,
    unflatten_func: FromChildrenFn,
    formatter: Optional[FormatterFn] = None,
    registry: Optional[TypeRegistry] = None,
) -> Registration:
    """Registers a type with its custom flatten and unflatten functions.

    Args:
        cls: The type to register.
        flatten_func: Returns ``(children, aux_data)`` for an instance of ``cls``.
        unflatten_func: Rebuilds an instance from ``(aux_data, children)``.
        formatter: Optional ``(aux_data, child_strings) -> str`` used when
            rendering TreeSpecs containing ``cls``.
        registry: Target registry; defaults to the process-wide one.

    Returns:
        The new registration.

    Raises:
        DuplicateRegistrationError: If `cls` is already registered.
    """
    registry = registry if registry is not None else default_registry()
    return registry.register(cls, flatten_func, unflatten_func, formatter=formatter)


def register_tree_class(cls: Type[T], *, registry: Optional[TypeRegistry] = None) -> Type[T]:
    """Class decorator registering ``cls`` through its own tree protocol.

    ``cls`` must define ``tree_flatten(self) -> (children, aux_data)`` and a
    classmethod ``tree_unflatten(aux_data, children)``.
    """
    has_protocol = callable(getattr(cls, "tree_flatten", None)) and callable(
        getattr(cls, "tree_unflatten", None)
    )
    if not has_protocol:
        raise RegistrationError(f"{cls.__name__} must define tree_flatten and tree_unflatten.")
    register_tree(
        cls=cls,
        flatten_func=lambda obj: obj.tree_flatten(),
        unflatten_func=cls.tree_unflatten,
        registry=registry,
    )
    return cls


def tree_flatten(
    *,
    tree: Any,
    is_leaf: Optional[IsLeafFn] = None,
    registry: Optional[TypeRegistry] = None,
    settings: Optional[TreeSpecSettings] = None,
) -> Tuple[List[Any], TreeSpec]:
    """Flattens a tree object into its leaves and a TreeSpec.

    Args:
        tree: The tree-like object to flatten.
        is_leaf: Optional predicate forcing matching values to be leaves.
        registry: Registry used for classification.
        settings: Flatten settings.

    Returns:
        A tuple of the leaf list and the TreeSpec describing the structure.
    """
    return flatten(
        tree,
        registry=registry if registry is not None else default_registry(),
        settings=settings if settings is not None else get_settings(),
        is_leaf=is_leaf,
    )


def tree_unflatten(*, spec: TreeSpec, leaves: Sequence[Any]) -> Any:
    """Reconstructs an object from its TreeSpec and a list of leaves.

    Raises:
        LeafCountError: If ``leaves`` does not hold exactly ``spec.num_leaves()`` items.
    """
    return unflatten(spec, leaves)


def tree_leaves(
    *,
    tree: Any,
    is_leaf: Optional[IsLeafFn] = None,
    registry: Optional[TypeRegistry] = None,
    settings: Optional[TreeSpecSettings] = None,
) -> List[Any]:
    leaves, _ = tree_flatten(tree=tree, is_leaf=is_leaf, registry=registry, settings=settings)
    return leaves


def tree_structure(
    *,
    tree: Any,
    is_leaf: Optional[IsLeafFn] = None,
    registry: Optional[TypeRegistry] = None,
    settings: Optional[TreeSpecSettings] = None,
) -> TreeSpec:
    _, spec = tree_flatten(tree=tree, is_leaf=is_leaf, registry=registry, settings=settings)
    return spec


def tree_map(
    *,
    func: Callable[..., Any],
    tree: Any,
    rest: Sequence[Any] = (),
    is_leaf: Optional[IsLeafFn] = None,
    registry: Optional[TypeRegistry] = None,
    settings: Optional[TreeSpecSettings] = None,
) -> Any:
    """Maps ``func`` over the leaves of ``tree`` and the trees in ``rest``.

    ``func`` receives one leaf from each tree. The result has the structure of
    ``tree``.

    Raises:
        StructureMismatchError: If any tree in ``rest`` has a different structure.
    """
    leaves, spec = tree_flatten(tree=tree, is_leaf=is_leaf, registry=registry, settings=settings)
    other_leaves: List[List[Any]] = []
    for position, other in enumerate(rest):
        leaves_i, spec_i = tree_flatten(
            tree=other, is_leaf=is_leaf, registry=registry, settings=settings
        )
        if spec_i != spec:
            error = StructureMismatchError(f"Tree structures differ: {spec} vs {spec_i}.")
            error.add_context(position=position)
            raise error
        other_leaves.append(leaves_i)
    mapped = [func(*args) for args in zip(leaves, *other_leaves)]
    return unflatten(spec, mapped)


__all__ = [
    "register_tree",
    "register_tree_class",
    "tree_flatten",
    "tree_unflatten",
    "tree_leaves",
    "tree_structure",
    "tree_map",
]
