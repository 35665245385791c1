"""
Log output of units and the settings that can be made through environment variables. All
variables carry the prefix `REBYTE_` and are read whenever the setting is queried:

- `REBYTE_VERBOSITY`: the log level of units on the command line, either a number of `-v`
  switches or the name of a `rebyte.lib.environment.LogLevel`.
- `REBYTE_TERM_SIZE`: the width of the command line help text.
"""
from __future__ import annotations

import logging
import os

from enum import IntEnum

Logger = logging.Logger


class LogLevel(IntEnum):
    """
    Log levels of units; the standard levels are extended by two levels above `CRITICAL`.
    """
    NOTSET   = logging.NOTSET    # noqa
    DEBUG    = logging.DEBUG     # noqa
    INFO     = logging.INFO      # noqa
    WARNING  = logging.WARNING   # noqa
    ERROR    = logging.ERROR     # noqa
    CRITICAL = logging.CRITICAL  # noqa

    NONE = logging.CRITICAL + 50
    """
    No log output at all; set by the `--quiet` switch.
    """
    DETACHED = logging.CRITICAL + 100
    """
    The unit was created in code. It does not log and raises all exceptions to the caller.
    """

    @classmethod
    def FromVerbosity(cls, verbosity: int) -> LogLevel:
        """
        The level that corresponds to the given number of `-v` switches.
        """
        if verbosity < 0:
            return cls.DETACHED
        levels = (cls.WARNING, cls.INFO, cls.DEBUG)
        return levels[min(verbosity, len(levels) - 1)]


class UnitLogFormatter(logging.Formatter):
    """
    Formats records as `(time) kind in unit: message`.
    """

    KINDS = {
        logging.DEBUG    : 'verbose',
        logging.INFO     : 'comment',
        logging.WARNING  : 'warning',
    }

    def __init__(self):
        super().__init__('({asctime}) {kind} in {name}: {message}', datefmt='%H:%M:%S', style='{')

    def formatMessage(self, record: logging.LogRecord) -> str:
        record.kind = self.KINDS.get(record.levelno, 'failure')
        return super().formatMessage(record)


def logger(name: str) -> Logger:
    """
    The logger for the unit with the given name. It writes to stderr and does not propagate; the
    filtering by level happens in the unit.
    """
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(UnitLogFormatter())
        log.addHandler(handler)
        log.setLevel(logging.DEBUG)
        log.propagate = False
    return log


class environment:

    @staticmethod
    def verbosity() -> LogLevel | None:
        value = os.environ.get('REBYTE_VERBOSITY', '').strip()
        if not value:
            return None
        if value.isdigit():
            return LogLevel.FromVerbosity(int(value))
        try:
            return LogLevel[value.upper()]
        except KeyError:
            names = ', '.join(level.name for level in LogLevel)
            logger(__name__).warning(F'ignoring unknown verbosity {value!r}, choose from: {names}')
            return None

    @staticmethod
    def term_size() -> int:
        try:
            return max(int(os.environ['REBYTE_TERM_SIZE'], 0), 0)
        except (KeyError, ValueError):
            return 0
