"""
Units are the building blocks of rebyte. A unit is a class deriving from `rebyte.units.Unit` that
implements `process`, which receives the input as a `bytearray` and returns the output. A unit
that also implements `reverse` can run in reverse mode: with the `-R` switch on the command line,
or by negating it in code.

The parameters of `__init__` become the command line interface of the unit. Each parameter can be
annotated with a `rebyte.units.Arg` that controls how it is parsed. When the body of `__init__` is
only `pass`, the parameters are forwarded to `rebyte.units.Unit.__init__` and end up as members of
the `args` namespace:

    from rebyte.lib.types import Param, buf
    from rebyte.units import Arg, Unit

    class prepend(Unit):
        def __init__(self, prefix: Param[buf, Arg.Binary(help='Data to prepend.')]):
            pass

        def process(self, data):
            return self.args.prefix + data

### Pipelines

In code, the `|` operator connects units. The left end of a pipeline can be a byte string, a
string or a readable binary stream. The right end can be `bytes`, `str`, a `bytearray` that the
output is appended to, a writable stream, any callable, a literal ellipsis to obtain the raw
output, or `None` to discard it:

    >>> B'BINARY REBYTE' | xor(0x13) | bytes
    b'QZ]RAJ3AVQJGV'

Units created in code are detached from their logger: errors are raised to the caller. Units that
run from the command line log errors and produce no output instead.
"""
from __future__ import annotations

import abc
import argparse
import copy
import functools
import inspect
import sys

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from rebyte.lib.argformats import bounded_number, multibin, number
from rebyte.lib.argparser import ArgparseError, UnitArgumentParser
from rebyte.lib.environment import Logger, LogLevel, environment, logger
from rebyte.lib.exceptions import RebyteCriticalException, RebyteException
from rebyte.lib.tools import (
    documentation,
    exception_to_string,
    isbuffer,
    isstream,
    normalize_to_display,
    normalize_to_identifier,
)

if TYPE_CHECKING:
    from typing import Self
    from rebyte.lib.types import buf

    _E = TypeVar('_E', bound=Enum)


class Entry:
    """
    Marker base class of every unit that can be executed from the command line.
    """


class Arg:
    """
    The description of a command line argument of a unit. It stores the positional and keyword
    arguments that are later passed to `argparse.ArgumentParser.add_argument`. Arguments that
    share a `group` name are mutually exclusive.
    """
    __slots__ = 'args', 'kwargs', 'group'

    class preset:
        """
        Default of every argument whose value was given as a keyword in code.
        """

    args: list[str]
    kwargs: dict[str, Any]
    group: str | None

    def __init__(self, *args: str, group: str | None = None, **kwargs):
        self.args = list(args)
        self.group = group
        self.kwargs = kwargs

    def __repr__(self):
        spec = [repr(a) for a in self.args]
        spec.extend(F'{k}={v!r}' for k, v in self.kwargs.items())
        return F'Arg({", ".join(spec)})'

    @classmethod
    def _build(cls, args: tuple[str, ...], group: str | None, **kwargs):
        return cls(*args, group=group, **{k: v for k, v in kwargs.items() if v is not None})

    @classmethod
    def Switch(cls, *args: str, off: bool = False, help: str | None = None, group: str | None = None):
        """
        A boolean flag. It is `False` by default and becomes `True` when given, unless `off` is
        set, which reverses both values.
        """
        return cls._build(args, group, help=help, action='store_false' if off else 'store_true')

    @classmethod
    def Binary(cls, *args: str, help: str | None = None, metavar: str | None = None, group: str | None = None):
        """
        An argument in multibin format, see `rebyte.lib.argformats`.
        """
        if metavar is None and args:
            metavar = 'B'
        return cls._build(args, group, help=help, metavar=metavar, type=multibin)

    @classmethod
    def Number(
        cls,
        *args: str,
        bound: tuple[int | None, int | None] | None = None,
        help: str | None = None,
        metavar: str = 'N',
        group: str | None = None,
    ):
        """
        An integer argument, optionally restricted to a closed interval.
        """
        convert = number if bound is None else bounded_number(*bound)
        return cls._build(args, group, help=help, metavar=metavar, type=convert)

    @classmethod
    def Option(
        cls,
        *args: str,
        choices: type[Enum],
        help: str | None = None,
        metavar: str | None = None,
        group: str | None = None,
    ):
        """
        An argument whose value is one of the members of an enumeration. On the command line, the
        members are displayed in lower case with dashes as separators.
        """
        names = [normalize_to_display(name).casefold() for name in choices.__members__]
        return cls._build(args, group, help=help, metavar=metavar or choices.__name__,
            choices=names, type=str.casefold)

    @classmethod
    def Choice(
        cls,
        *args: str,
        choices: list,
        help: str | None = None,
        metavar: str | None = None,
        type: Callable[[str], Any] = str.lower,
        group: str | None = None,
    ):
        """
        An argument whose value is one of a fixed list of choices.
        """
        return cls._build(args, group, help=help, metavar=metavar, choices=choices, type=type)

    @staticmethod
    def AsOption(value, cls: type[_E]) -> _E | None:
        """
        Convert the value of an `rebyte.units.Arg.Option` argument to a member of the enumeration
        `cls`. The value can be a member, a member name in any case and with any word separator,
        or a member value. `None` is returned unchanged.
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = normalize_to_identifier(value).casefold()
            for name, member in cls.__members__.items():
                if name.casefold() == wanted:
                    return member
        try:
            return cls(value)
        except ValueError:
            pass
        options = ', '.join(normalize_to_display(name) for name in cls.__members__)
        raise ValueError(F'{value!r} is not a valid {cls.__name__}, choose from: {options}')

    @property
    def positional(self) -> bool:
        return any(not a.startswith('-') for a in self.args)

    @classmethod
    def Infer(cls, parameter: inspect.Parameter, symbols: dict[str, Any]) -> Arg:
        """
        Compute the argument for a parameter of a unit constructor from its annotation and its
        default value. A parameter without option strings becomes a positional argument, and a
        parameter that only has short option strings receives a long one derived from its name.
        """
        annotation = parameter.annotation
        if isinstance(annotation, str):
            annotation = eval(annotation, symbols)
        if isinstance(annotation, Arg):
            arg = cls(*annotation.args, group=annotation.group, **annotation.kwargs)
        else:
            arg = cls()
        if not arg.args:
            arg.args.append(parameter.name)
        elif not arg.positional:
            if not any(a.startswith('--') for a in arg.args):
                arg.args.append(F'--{normalize_to_display(parameter.name)}')
            arg.kwargs.setdefault('dest', parameter.name)
        default = parameter.default
        if default is not parameter.empty:
            if isinstance(default, Enum):
                default = default.name
            arg.kwargs.setdefault('default', default)
            if arg.positional:
                arg.kwargs.setdefault('nargs', argparse.OPTIONAL)
        if arg.kwargs.get('action', 'store') == 'store':
            arg.kwargs.setdefault('type', multibin)
        else:
            arg.kwargs.pop('default', None)
        return arg

    def help(self) -> str | None:
        text = self.kwargs.get('help')
        if text is None or '{default}' not in text:
            return text
        default = self.kwargs.get('default')
        if isinstance(default, str):
            default = normalize_to_display(default)
        elif isbuffer(default):
            default = F'h:{bytes(default).hex()}'
        return text.replace('{default}', str(default))

    def add_to(self, container, preset: bool = False):
        """
        Add this argument to an argument parser or an argument group. If `preset` is set, the value
        was already given as a keyword: the argument becomes optional and its default is
        `rebyte.units.Arg.preset`.
        """
        kwargs = dict(self.kwargs, help=self.help())
        if preset:
            kwargs['default'] = Arg.preset
            if self.positional:
                kwargs.setdefault('nargs', argparse.OPTIONAL)
        container.add_argument(*self.args, **kwargs)


def _normalized(operation: Callable[[Unit, bytearray], Any]):
    @functools.wraps(operation)
    def wrapped(self: Unit, data) -> bytearray:
        if data is None:
            data = bytearray()
        elif not isinstance(data, bytearray):
            data = bytearray(data)
        result = operation(self, data)
        if result is None:
            return bytearray()
        if isinstance(result, str):
            return bytearray(result.encode(self.codec))
        if inspect.isgenerator(result):
            return bytearray().join(result)
        if not isinstance(result, bytearray):
            result = bytearray(result)
        return result
    return wrapped


def _is_stub(function) -> bool:
    try:
        code = function.__code__.co_code
    except AttributeError:
        return False
    return code == (lambda: None).__code__.co_code


class Executable(abc.ABCMeta):
    """
    The metaclass of all units. It normalizes the input and output of `process` and `reverse` to
    the `bytearray` type, compiles the argument specification from the signature of `__init__`,
    and generates the body of `__init__` when the unit only declares its parameters.
    """
    _arguments: dict[str, Arg]
    is_reversible: bool
    logger: Logger
    name: str

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any], abstract=False):
        for method in ('process', 'reverse'):
            if method in namespace:
                namespace[method] = _normalized(namespace[method])
        if not abstract and not any(issubclass(b, Entry) for b in bases):
            bases += (Entry,)
        return super().__new__(mcs, name, bases, namespace)

    def __init__(cls, name: str, bases: tuple[type, ...], namespace: dict[str, Any], abstract=False):
        super().__init__(name, bases, namespace)
        cls.name = normalize_to_display(name)
        cls.logger = logger(cls.name)
        cls.is_reversible = callable(getattr(cls, 'reverse', None))

        symbols = vars(sys.modules[cls.__module__])
        parameters = [
            p for p in list(inspect.signature(cls.__init__).parameters.values())[1:]
            if p.kind is not p.VAR_KEYWORD and p.kind is not p.VAR_POSITIONAL
        ]
        cls._arguments = {p.name: Arg.Infer(p, symbols) for p in parameters}

        if _is_stub(cls.__init__):
            cls.__init__ = cls._forwarding_init(bases[0], parameters)

    def _forwarding_init(cls, base: type, parameters: list[inspect.Parameter]):
        names = [p.name for p in parameters]
        defaults = {p.name: p.default for p in parameters if p.default is not p.empty}
        stub = cls.__init__

        @functools.wraps(stub)
        def __init__(self, *args, **keywords):
            if len(args) > len(names):
                raise TypeError(F'{cls.__name__} takes at most {len(names)} positional arguments')
            keywords.update(zip(names, args))
            for key, value in defaults.items():
                keywords.setdefault(key, value)
            base.__init__(self, **keywords)

        return __init__

    def __or__(cls, other):
        return cls() | other

    def __ror__(cls, other) -> Unit:
        return other | cls()

    def __neg__(cls) -> Unit:
        return -cls()


class Unit(metaclass=Executable, abstract=True):
    """
    The base class of all rebyte units. It implements the generic command line options, logging,
    and the pipeline syntax.
    """
    codec = 'UTF8'

    args: argparse.Namespace
    log_level: LogLevel

    def __init__(self, **keywords):
        keywords.setdefault('reverse', False)
        for name, argument in self._arguments.items():
            value = keywords.get(name)
            convert = argument.kwargs.get('type')
            if value is None or convert is None or convert is str:
                continue
            if isinstance(value, str) or convert is multibin and isinstance(value, int):
                keywords[name] = convert(value)
        self.args = argparse.Namespace(**keywords)
        self.log_level = LogLevel.DETACHED
        self._source = None

    def process(self, data: bytearray) -> buf | None:
        """
        Implemented by every unit; the default passes the input through unchanged.
        """
        return data

    def _log(self, level: LogLevel, messages: tuple) -> bool:
        if level < self.log_level:
            return False
        if messages:
            self.logger.log(level, ' '.join(self._render(m) for m in messages))
        return True

    def _render(self, message) -> str:
        if callable(message):
            message = message()
        if isinstance(message, BaseException):
            return exception_to_string(message)
        if isbuffer(message):
            text = bytes(message).decode(self.codec, 'replace')
            return text if text.isprintable() else bytes(message).hex().upper()
        return str(message)

    def log_fail(self, *messages) -> bool:
        """
        Log the messages at the error level. Messages can be callables which are only evaluated
        when the message is emitted. The return value indicates whether the level is enabled, so
        calling the method without messages tests the log level.
        """
        return self._log(LogLevel.ERROR, messages)

    def log_warn(self, *messages) -> bool:
        return self._log(LogLevel.WARNING, messages)

    def log_info(self, *messages) -> bool:
        return self._log(LogLevel.INFO, messages)

    def log_debug(self, *messages) -> bool:
        return self._log(LogLevel.DEBUG, messages)

    def _handle(self, error: Exception) -> None:
        if self.log_level >= LogLevel.DETACHED or isinstance(error, RebyteCriticalException):
            raise error
        if isinstance(error, RebyteException):
            self.log_fail(error)
        else:
            self.log_fail(F'{error.__class__.__name__}:', error)
        if self.log_debug():
            import traceback
            traceback.print_exc(file=sys.stderr)

    def act(self, data: buf) -> bytearray:
        """
        Apply the reverse operation if the unit runs in reverse mode and `process` otherwise.
        Units that are not detached log exceptions and return an empty result.
        """
        operation = self.reverse if self.args.reverse else self.process
        try:
            return operation(data)
        except Exception as error:
            self._handle(error)
            return bytearray()

    def __call__(self, data: buf | None = None) -> bytearray:
        return self.act(data)

    def read(self) -> bytearray:
        """
        Obtain the input from the source that was connected with `|` and return the output.
        """
        source = self._source
        if isinstance(source, Unit):
            source = source.read()
        elif isstream(source):
            source = source.read()
        return self.act(source)

    def __neg__(self) -> Self:
        if not self.is_reversible:
            raise NotImplementedError(F'The unit {self.name} has no reverse operation.')
        clone = copy.copy(self)
        clone.args = argparse.Namespace(**vars(self.args))
        clone.args.reverse = not self.args.reverse
        return clone

    def __ror__(self, source) -> Self:
        if isinstance(source, str):
            source = source.encode(self.codec)
        elif source is not None and not isinstance(source, Unit) and not isstream(source):
            source = bytearray(source)
        self._source = source
        return self

    def __or__(self, target):
        if isinstance(target, Executable):
            target = target()
        if isinstance(target, Unit):
            target._source = self
            return target
        output = self.read()
        if target is ... or target is None:
            return output if target is ... else None
        if target is str:
            return output.decode(self.codec)
        if isinstance(target, bytearray):
            target.extend(output)
            return target
        if isinstance(target, type):
            return target(output)
        if hasattr(target, 'write'):
            target.write(output)
            return target
        if callable(target):
            return target(output)
        raise TypeError(F'Cannot connect a unit to an object of type {type(target).__name__}.')

    def __bytes__(self):
        return self | bytes

    @classmethod
    def argparser(cls, **keywords) -> UnitArgumentParser:
        """
        The argument parser of the unit's command line. Arguments whose names occur in `keywords`
        become optional.
        """
        parser = UnitArgumentParser(cls.name, documentation(cls))
        generic = parser.add_argument_group('generic options')
        generic.add_argument('-h', '--help', action='help', help='Show this help message and exit.')
        generic.add_argument('-Q', '--quiet', action='store_true', default=Arg.preset if 'quiet' in keywords else False,
            help='Disable all log output.')
        generic.add_argument('-v', '--verbose', action='count', default=0,
            help='Increase the log level, can be given twice.')
        if cls.is_reversible:
            generic.add_argument('-R', '--reverse', action='store_true', default=Arg.preset if 'reverse' in keywords else False,
                help='Use the reverse operation.')
        groups = {}
        for name, argument in cls._arguments.items():
            container = parser
            if argument.group is not None:
                if argument.group not in groups:
                    groups[argument.group] = parser.add_mutually_exclusive_group()
                container = groups[argument.group]
            try:
                argument.add_to(container, name in keywords)
            except Exception as error:
                raise RebyteCriticalException(F'Failed to add argument {argument!r}: {error!s}') from error
        return parser

    @classmethod
    def assemble(cls, *argv: str, **keywords) -> Unit:
        """
        Create a unit from command line arguments. Keywords provide values for arguments that are
        not given on the command line; giving a value both ways is an error.
        """
        parser = cls.argparser(**keywords)
        options = vars(parser.parse_args(list(argv)))
        for name, value in keywords.items():
            if options.get(name, Arg.preset) is not Arg.preset:
                parser.error(F'the argument {name} was given on the command line and as a keyword')
            options[name] = value
        quiet = options.pop('quiet')
        verbose = options.pop('verbose')
        reverse = options.pop('reverse', False)
        try:
            unit = cls(**options)
        except (ValueError, argparse.ArgumentTypeError) as error:
            parser.error(str(error))
        unit.args.reverse = reverse
        unit.log_level = LogLevel.NONE if quiet else LogLevel.FromVerbosity(verbose)
        return unit

    @classmethod
    def run(cls, argv=None) -> None:
        """
        Command line entry point: the unit reads its input from stdin and writes to stdout.
        """
        try:
            unit = cls.assemble(*(sys.argv[1:] if argv is None else argv))
        except ArgparseError as error:
            error.parser.exit_with_usage(str(error))
            return
        except Exception as error:
            cls.logger.critical(F'initialization failed: {exception_to_string(error)}')
            return
        level = environment.verbosity()
        if level is not None:
            unit.log_level = level
        data = B'' if sys.stdin.isatty() else sys.stdin.buffer.read()
        try:
            output = data | unit | ...
        except KeyboardInterrupt:
            cls.logger.warning('aborting due to keyboard interrupt')
        except RebyteCriticalException as error:
            cls.logger.critical(exception_to_string(error))
        else:
            sys.stdout.buffer.write(output)
            sys.stdout.buffer.flush()


__all__ = [
    'Arg',
    'Entry',
    'Executable',
    'LogLevel',
    'Unit',
]
