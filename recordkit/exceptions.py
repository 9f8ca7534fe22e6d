class DataError(Exception):
    """Base class for data errors."""

    pass


__all__ = ["DataError"]
