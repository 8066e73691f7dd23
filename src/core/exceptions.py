"""Custom exceptions. Every layer raises a subclass of GameError, so callers can catch the whole family at once."""


class GameError(Exception):
    """Base class of all errors raised by this package."""


class SerializationError(GameError):
    """A persisted snapshot (or a serialized payload) could not be turned back into domain objects."""


class InvalidRequestError(GameError):
    """Incoming request data does not pass validation."""


class NoPieceAtSourceError(GameError):
    """A move references a cell without a living piece."""


class IllegalMoveError(GameError):
    """The configured legality check refused a move."""


class RepositoryError(GameError):
    """The storage backend failed to persist a change. The pending transaction was rolled back."""


class ConfigError(GameError):
    """The configuration files cannot be combined into a valid configuration."""
