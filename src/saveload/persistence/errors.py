from __future__ import annotations


class PersistenceError(Exception):
    """Base exception for save/load errors."""


class AlreadyInitializedError(PersistenceError):
    """Raised when a second SaveLoadManager is created while one is live."""


class NotInitializedError(PersistenceError):
    """Raised when the live SaveLoadManager is requested before creation."""


class ManagerClosedError(NotInitializedError):
    """Raised when a closed SaveLoadManager is asked to save, load or change a record."""


class NotFoundError(PersistenceError, FileNotFoundError):
    """Raised when the file for a Load operation does not exist."""


class StorageError(PersistenceError, OSError):
    """Raised when the underlying storage fails (permissions, disk, ...)."""


class RecordValidationError(PersistenceError, ValueError):
    """Raised when a record field is assigned an out-of-domain value."""


class InvalidPlayerError(PersistenceError, ValueError):
    """Raised for a player id outside the fixed roster."""


class EncodeError(PersistenceError):
    """Raised when a record cannot be encoded."""


class CodecError(PersistenceError):
    """Base for decode failures."""


class FormatError(CodecError):
    """The byte stream is not the expected record kind, version or shape."""


class CorruptionError(CodecError):
    """The byte stream has the right kind but inconsistent contents."""
