"""Exceptions raised by the placement core."""


class PlacementError(Exception):
    """Base class for placement failures"""


class ConfigurationError(PlacementError, ValueError):
    """Configuration cannot produce a valid placement (e.g. zero bins)"""


class HashConversionError(PlacementError, ArithmeticError):
    """Hash input or output could not be converted to a bin index"""


class PersistenceError(PlacementError, OSError):
    """Saving bins failed; the in-memory placement is still valid"""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Unable to save bins to {path}: {reason}")
        self.path = path
        self.reason = reason
