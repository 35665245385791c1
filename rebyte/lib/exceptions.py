"""
Exception types used by rebyte units and library code.
"""
from __future__ import annotations


class RebyteException(Exception):
    """
    Base class for all exceptions that are raised deliberately by rebyte code.
    """


class RebyteCriticalException(RebyteException):
    """
    If this exception is raised by a unit, the execution of that unit is aborted immediately.
    """


class HexdumpError(RebyteException, ValueError):
    """
    Base class for all errors of the hexdump decoding engine.
    """


class InvalidConfiguration(HexdumpError):
    """
    Raised when a hexdump option has an unrecognized value. The offending option name and value
    are available as `option` and `value`.
    """
    def __init__(self, option: str, value, message: str | None = None):
        self.option = option
        self.value = value
        if message is None:
            message = F'invalid value for {option}: {value!r}'
        super().__init__(message)


class MalformedToken(HexdumpError):
    """
    Raised when a field of the dump does not match the grammar expected for the configured
    encoding or address base.
    """
    def __init__(self, field: str, line: int, column: int, reason: str | None = None):
        self.field = field
        self.line = line
        self.column = column
        message = F'malformed token {field!r} in line {line}, column {column}'
        if reason:
            message = F'{message}: {reason}'
        super().__init__(message)


class WordOverflow(HexdumpError):
    """
    Raised when a parsed value does not fit into the word width of the configured encoding.
    """
    def __init__(self, field: str, line: int, column: int, width: int):
        self.field = field
        self.line = line
        self.column = column
        self.width = width
        unit = 'byte' if width == 1 else 'bytes'
        super().__init__(
            F'value {field!r} in line {line}, column {column} does not fit into {width} {unit}')
