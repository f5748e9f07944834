"""Exception hierarchy for the spatial LED model."""


class SledError(Exception):
    """Base class for every error raised by :mod:`spatial_led`."""


class ConstructionError(SledError):
    """Raised when a layout cannot be turned into a :class:`~spatial_led.sled.Sled`."""


class LedLookupError(SledError, LookupError):
    """Raised when a single LED, segment or vertex does not exist."""


class ValidationError(SledError, ValueError):
    """Raised for malformed requests such as inverted ranges or zero directions."""


class DataKeyError(SledError, KeyError):
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class DataTypeError(SledError, TypeError):
    pass


__all__ = [
    "SledError",
    "ConstructionError",
    "LedLookupError",
    "ValidationError",
    "DataKeyError",
    "DataTypeError",
]
