class MiniDungeonError(Exception):
    """Base exception for the MiniDungeon project."""


class InvalidConfigurationError(MiniDungeonError, ValueError):
    """Raised when the engine or its settings are constructed with invalid values."""


class SnapshotError(MiniDungeonError):
    """Raised when a saved snapshot cannot be encoded, decoded or restored."""


class SaveNotFoundError(SnapshotError):
    """Raised when loading from an empty save slot."""
