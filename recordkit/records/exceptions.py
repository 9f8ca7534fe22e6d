from recordkit.exceptions import DataError


class RecordError(DataError):
    """Base class for record type and record instance errors."""

    pass


class ConfigurationError(RecordError):
    """
    Exception raised for malformed or inconsistent record type declarations.

    Raised when a type is declared, never when its records are used.
    """

    pass


class UnknownFieldError(RecordError, KeyError):
    """Exception raised when a record is accessed with a field name its type does not declare."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class RecordTypeNotFound(RecordError, LookupError):
    """Exception raised when looking up a record type that has not been declared."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class SerializationError(RecordError):
    """Exception raised for serialization errors."""

    pass


__all__ = [
    "RecordError",
    "ConfigurationError",
    "UnknownFieldError",
    "RecordTypeNotFound",
    "SerializationError",
]
