"""
Exception hierarchy for treespec.

Two families are kept apart. ``UsageError`` subclasses describe problems the
caller can fix (wrong number of leaves, bad serialized input, duplicate
registrations). ``InternalConsistencyError`` subclasses signal a TreeSpec
that could not have been produced by flatten or a validated deserialize; they
are assertions and should never be caught and retried.
"""

import logging
from typing import Any, Dict, Optional


class TreeSpecError(Exception):
    """Base class for all treespec exceptions."""

    def __init__(self, message: str = "An error occurred in treespec"):
        self.message = message
        self.diagnostic_context: Dict[str, Any] = {}
        super().__init__(message)

    def add_context(self, **kwargs: Any) -> None:
        """Adding diagnostic context to the exception.

        Args:
            **kwargs: Key-value pairs to add to the diagnostic context.
        """
        self.diagnostic_context.update(kwargs)

    def get_context_data(self) -> Dict[str, Any]:
        """Retrieving a copy of the diagnostic context data."""
        return self.diagnostic_context.copy()

    def log_with_context(self, logger: logging.Logger, level: int = logging.ERROR) -> None:
        """Logging the error with its full diagnostic context.

        Args:
            logger: Logger to use for recording the error
            level: Logging level (default: ERROR)
        """
        logger.log(
            level,
            f"{self.__class__.__name__}: {self.message}",
            extra={"structured_data": self.get_context_data()},
        )


class UsageError(TreeSpecError, ValueError):
    """Raised for caller-correctable problems."""


class LeafCountError(UsageError):
    """Raised when unflatten receives too few or too many leaves."""

    def __init__(self, message: str, expected: int, received: Optional[int] = None):
        super().__init__(message)
        self.expected = expected
        self.received = received
        self.add_context(expected=expected)
        if received is not None:
            self.add_context(received=received)


class SerializationError(UsageError):
    """Base class for errors decoding serialized TreeSpec records."""


class MalformedRecordError(SerializationError):
    """Raised when a serialized record violates the record format."""

    def __init__(
        self, message: str = "Malformed serialized TreeSpec", record_index: Optional[int] = None
    ):
        if record_index is not None:
            message = f"{message} (record {record_index})"
        super().__init__(message)
        self.record_index = record_index
        if record_index is not None:
            self.add_context(record_index=record_index)


class UnknownCustomTypeError(SerializationError):
    """Raised when a record references a custom type the registry does not know."""

    def __init__(self, handle: Any, record_index: Optional[int] = None):
        super().__init__(f"Unknown custom type in serialized TreeSpec: {handle!r}.")
        self.handle = handle
        self.add_context(handle=repr(handle))
        if record_index is not None:
            self.add_context(record_index=record_index)


class RegistrationError(UsageError):
    """Base class for type registry errors."""


class DuplicateRegistrationError(RegistrationError):
    """Raised when a type is registered twice."""

    def __init__(self, cls: type):
        type_name = getattr(cls, "__qualname__", repr(cls))
        super().__init__(f"Type {type_name} is already registered as a tree node.")
        self.add_context(type_name=type_name)


class StructureMismatchError(UsageError):
    """Raised when trees expected to share a structure do not."""


class CyclicStructureError(UsageError):
    """Raised when a container is reachable from itself during flatten."""


class UnsortableKeysError(UsageError):
    """Raised when sorted key order is requested for keys that cannot be ordered."""


class ConfigurationError(UsageError):
    """Raised when settings fail validation."""


class InternalConsistencyError(TreeSpecError, RuntimeError):
    """Raised when a TreeSpec violates its own structural invariants."""


class ArityError(InternalConsistencyError):
    """Raised when a node needs more children than the working stack holds."""

    def __init__(
        self, message: str = "Too few elements for TreeSpec node.", node_index: Optional[int] = None
    ):
        super().__init__(message)
        if node_index is not None:
            self.add_context(node_index=node_index)


class StructuralError(InternalConsistencyError):
    """Raised when a traversal does not reduce to exactly one root."""


__all__ = [
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
