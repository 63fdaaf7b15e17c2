"""
Exceptions raised by spindex.

Each class also derives from the closest builtin, so callers can catch
``LookupError``, ``ValueError`` or ``ZeroDivisionError`` as usual.
"""


class SpIndexError(Exception):
    """Base exception for spindex errors."""
    pass


class InvalidArgumentError(SpIndexError, ValueError):
    """Raised for malformed arguments: bad permutation, negative extent, wrong rank."""
    pass


class StateError(SpIndexError, RuntimeError):
    """Raised when an operation conflicts with the object's setup state."""
    pass


class MissingKeyError(SpIndexError, KeyError):
    """Raised when a sparse value or name was never registered."""
    pass


class OutOfRangeError(SpIndexError, IndexError):
    """Raised when a dense index or coordinate falls outside its extent."""
    pass


class DivisionByZeroError(SpIndexError, ZeroDivisionError):
    """Raised when inverting a zero value or weight."""
    pass


class UnitsError(SpIndexError, ValueError):
    """Raised when a unit string cannot be parsed or converted."""
    pass
