"""Thread-safe registry classifying values into TreeSpec node kinds.

The registry answers one question for the flatten engine: is this value a leaf,
a built-in container, or a registered custom container? Custom registrations
also carry the functions that take such a value apart and put it back together,
and an optional display convention used by ``TreeSpec.to_string``.

Examples:
    >>> registry = TypeRegistry()
    >>> registry.classify([1, 2])[0]
    <NodeKind.LIST: 4>
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from treespec._internal.concurrency import ReadWriteLock
from treespec.core.exceptions import DuplicateRegistrationError, RegistrationError
from treespec.core.kinds import NodeKind

logger = logging.getLogger(__name__)

ToChildrenFn = Callable[[Any], Tuple[Iterable[Any], Any]]
FromChildrenFn = Callable[[Any, List[Any]], Any]
FormatterFn = Callable[[Any, Sequence[str]], str]

_BUILTIN_KINDS = {
    tuple: NodeKind.TUPLE,
    list: NodeKind.LIST,
    dict: NodeKind.DICT,
    type(None): NodeKind.NONE,
}


@dataclass(frozen=True, slots=True, eq=False)
class Registration:
    """A registered container type.

    Registrations compare by identity: two custom nodes belong to the same type
    only if they reference the same ``Registration`` object.

    Attributes:
        type: The concrete class, also used as the serialization handle.
        kind: Node kind values of this class flatten to.
        to_children: ``value -> (children, aux_data)``; CUSTOM only.
        from_children: ``(aux_data, children) -> value``; CUSTOM only.
        formatter: ``(aux_data, child_strings) -> str`` display convention.
    """

    type: type
    kind: NodeKind
    to_children: Optional[ToChildrenFn] = None
    from_children: Optional[FromChildrenFn] = None
    formatter: Optional[FormatterFn] = None

    @property
    def name(self) -> str:
        return self.type.__name__

    @property
    def handle(self) -> type:
        return self.type


class TypeRegistry:
    """Maps concrete runtime types to node kinds and custom registrations.

    Lookup is by exact type; subclasses of registered types are leaves unless
    registered themselves (named tuples are the one heuristic exception, see
    ``classify``). Lookups share a read lock, registration takes the write lock.

    Args:
        include_standard: Also register ``OrderedDict``, ``defaultdict`` and
            ``deque`` as custom containers.
    """

    def __init__(self, *, include_standard: bool = True) -> None:
        self._lock = ReadWriteLock()
        self._table: Dict[type, Registration] = {
            cls: Registration(type=cls, kind=kind) for cls, kind in _BUILTIN_KINDS.items()
        }
        if include_standard:
            from treespec.registry.standard import register_standard_types

            register_standard_types(self)

    def register(
        self,
        cls: type,
        to_children: ToChildrenFn,
        from_children: FromChildrenFn,
        *,
        formatter: Optional[FormatterFn] = None,
    ) -> Registration:
        """Register ``cls`` as a custom container.

        Args:
            cls: Concrete class to register.
            to_children: Returns ``(children, aux_data)`` for an instance.
            from_children: Rebuilds an instance from ``(aux_data, children)``.
            formatter: Optional display convention for ``to_string``.

        Returns:
            The new registration.

        Raises:
            RegistrationError: If ``cls`` is not a class or a function is not callable.
            DuplicateRegistrationError: If ``cls`` is already registered.
        """
        if not isinstance(cls, type):
            raise RegistrationError(f"Expected a class to register, got {cls!r}.")
        if not callable(to_children) or not callable(from_children):
            raise RegistrationError(
                f"to_children and from_children for {cls.__name__} must be callable."
            )
        if formatter is not None and not callable(formatter):
            raise RegistrationError(f"formatter for {cls.__name__} must be callable.")

        registration = Registration(
            type=cls,
            kind=NodeKind.CUSTOM,
            to_children=to_children,
            from_children=from_children,
            formatter=formatter,
        )
        with self._lock.write():
            if cls in self._table:
                raise DuplicateRegistrationError(cls)
            self._table[cls] = registration
        logger.debug("Registered custom tree node type %s", cls.__qualname__)
        return registration

    def lookup(self, cls: type) -> Optional[Registration]:
        """Return the registration for exactly ``cls``, if any."""
        with self._lock.read():
            return self._table.get(cls)

    def lookup_by_handle(self, handle: Any) -> Optional[Registration]:
        """Resolve a serialized custom-type handle to its CUSTOM registration."""
        if not isinstance(handle, type):
            return None
        registration = self.lookup(handle)
        if registration is None or registration.kind is not NodeKind.CUSTOM:
            return None
        return registration

    def classify(
        self, value: Any, *, detect_namedtuples: bool = True
    ) -> Tuple[NodeKind, Optional[Registration]]:
        """Classify ``value`` into a node kind.

        Args:
            value: Any Python object.
            detect_namedtuples: Treat unregistered tuple subclasses exposing
                ``_fields`` as named tuples.

        Returns:
            ``(kind, registration)``; the registration is ``None`` for leaves
            and detected named tuples.
        """
        cls = type(value)
        registration = self.lookup(cls)
        if registration is not None:
            return registration.kind, registration
        # Named tuples can only be identified heuristically, by their _fields attribute.
        if detect_namedtuples and isinstance(value, tuple) and hasattr(cls, "_fields"):
            return NodeKind.NAMEDTUPLE, None
        return NodeKind.LEAF, None

    def registered_types(self) -> Tuple[type, ...]:
        with self._lock.read():
            return tuple(self._table)

    def __contains__(self, cls: object) -> bool:
        return isinstance(cls, type) and self.lookup(cls) is not None


_default_registry: Optional[TypeRegistry] = None
_default_registry_lock = threading.Lock()


def default_registry() -> TypeRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is not None:
        return _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = TypeRegistry()
        return _default_registry


__all__ = [
    "Registration",
    "TypeRegistry",
    "default_registry",
    "ToChildrenFn",
    "FromChildrenFn",
    "FormatterFn",
]
