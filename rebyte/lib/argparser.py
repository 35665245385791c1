"""
The argument parser used for the command line interface of every `rebyte.units.Unit`.
"""
from __future__ import annotations

from argparse import ArgumentParser, HelpFormatter

from rebyte.lib.environment import environment


class ArgparseError(ValueError):
    """
    Raised by `rebyte.lib.argparser.UnitArgumentParser` instead of terminating the process, so
    that units assembled in code report invalid arguments as an exception. The parser that failed
    is available as `parser`.
    """
    def __init__(self, parser: UnitArgumentParser, message: str):
        self.parser = parser
        super().__init__(message)


class UnitHelpFormatter(HelpFormatter):
    """
    Lists each option with its metavar only once, i.e. `-e, --encoding ENCODING`. The width of
    the help text is taken from `REBYTE_TERM_SIZE` when it is set.
    """

    def __init__(self, prog: str):
        super().__init__(prog, max_help_position=30, width=environment.term_size() or None)

    def _format_action_invocation(self, action):
        if not action.option_strings or action.nargs == 0:
            return super()._format_action_invocation(action)
        metavar = self._format_args(action, action.dest.upper())
        return F'{", ".join(action.option_strings)} {metavar}'


class UnitArgumentParser(ArgumentParser):

    def __init__(self, prog: str, description: str):
        super().__init__(
            prog=prog,
            description=description,
            add_help=False,
            formatter_class=UnitHelpFormatter,
        )

    def error(self, message):
        raise ArgparseError(self, message)

    def exit_with_usage(self, message):
        """
        Print the usage and the message to stderr and exit, which is what `error` does for a
        regular argument parser.
        """
        self.print_usage()
        self.exit(2, F'{self.prog}: error: {message}\n')
