"""
Reconstruction of binary data from the textual output of the `od` and `hexdump` command line
tools. The entry point is `rebyte.lib.hexdump.decode_hexdump`, which is a shortcut for creating a
`rebyte.lib.hexdump.DumpFormatConfig` and calling `rebyte.lib.hexdump.HexdumpDecoder.decode`.

    >>> decode_hexdump('00000000  68 65 6c 6c 6f  |hello|', encoding='hex_bytes')
    b'hello'

The decoder understands the following layouts:

- `hexdump` and `hexdump -C` style rows with a hexadecimal address and an optional `|...|` preview,
- `od` style rows with an octal address (or any other address base, see `od -A`),
- `*` lines, which both tools emit instead of repeating identical rows,
- the address-only summary line at the end of the output, which gives the exact size of the data.
"""
from __future__ import annotations

import enum
import re
import struct

from dataclasses import dataclass
from typing import Iterator, NamedTuple

from rebyte.lib.exceptions import InvalidConfiguration, MalformedToken, WordOverflow
from rebyte.lib.tools import normalize_to_identifier


class DumpStyle(str, enum.Enum):
    od = 'od'
    hexdump = 'hexdump'


class Endian(str, enum.Enum):
    little = 'little'
    big = 'big'
    network = 'network'


class WordKind(enum.IntEnum):
    INTEGER = 0
    FLOAT = 1
    CHAR = 2
    NAMED = 3


class EncodingInfo(NamedTuple):
    base: int
    width: int
    kind: WordKind


class Encoding(str, enum.Enum):
    binary = 'binary'
    octal = 'octal'
    octal_bytes = 'octal_bytes'
    octal_shorts = 'octal_shorts'
    octal_ints = 'octal_ints'
    octal_quads = 'octal_quads'
    decimal = 'decimal'
    decimal_bytes = 'decimal_bytes'
    decimal_shorts = 'decimal_shorts'
    decimal_ints = 'decimal_ints'
    decimal_quads = 'decimal_quads'
    hex = 'hex'
    hex_chars = 'hex_chars'
    hex_bytes = 'hex_bytes'
    hex_shorts = 'hex_shorts'
    hex_ints = 'hex_ints'
    hex_quads = 'hex_quads'
    named_chars = 'named_chars'
    floats = 'floats'
    doubles = 'doubles'

    @property
    def info(self) -> EncodingInfo:
        return ENCODINGS[self]


def _table() -> dict[Encoding, EncodingInfo]:
    table = {
        Encoding.binary      : EncodingInfo(2, 1, WordKind.INTEGER), # noqa
        Encoding.octal       : EncodingInfo(8, 2, WordKind.INTEGER), # noqa
        Encoding.decimal     : EncodingInfo(10, 2, WordKind.INTEGER), # noqa
        Encoding.hex         : EncodingInfo(16, 2, WordKind.INTEGER), # noqa
        Encoding.hex_chars   : EncodingInfo(8, 1, WordKind.CHAR), # noqa
        Encoding.named_chars : EncodingInfo(16, 1, WordKind.NAMED), # noqa
        Encoding.floats      : EncodingInfo(10, 4, WordKind.FLOAT), # noqa
        Encoding.doubles     : EncodingInfo(10, 8, WordKind.FLOAT), # noqa
    }
    for prefix, base in (('octal', 8), ('decimal', 10), ('hex', 16)):
        for suffix, width in (('bytes', 1), ('shorts', 2), ('ints', 4), ('quads', 8)):
            table[Encoding[F'{prefix}_{suffix}']] = EncodingInfo(base, width, WordKind.INTEGER)
    return table


ENCODINGS = _table()

ADDRESS_BASES = (0, 8, 10, 16)

NAMED_CHARS = {name: code for code, name in enumerate((
    'nul', 'soh', 'stx', 'etx', 'eot', 'enq', 'ack', 'bel',
    'bs',  'ht',  'nl',  'vt',  'ff',  'cr',  'so',  'si',
    'dle', 'dc1', 'dc2', 'dc3', 'dc4', 'nak', 'syn', 'etb',
    'can', 'em',  'sub', 'esc', 'fs',  'gs',  'rs',  'us',
    'sp',
))}
NAMED_CHARS['lf'] = 0x0A
NAMED_CHARS['del'] = 0x7F

CHAR_ESCAPES = {
    '\\0': 0x00,
    '\\a': 0x07,
    '\\b': 0x08,
    '\\t': 0x09,
    '\\n': 0x0A,
    '\\v': 0x0B,
    '\\f': 0x0C,
    '\\r': 0x0D,
    '\\\\': 0x5C,
}

_DIGITS = {
    0x02: re.compile('[01]+'),
    0x08: re.compile('[0-7]+'),
    0x0A: re.compile('[-+]?[0-9]+'),
    0x10: re.compile('(?:0[xX])?[0-9a-fA-F]+'),
}

_FLOAT = re.compile(R'[-+]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?|inf|infinity|nan)', flags=re.IGNORECASE)
_ADDRESS = {
    8: re.compile('[0-7]+'),
    10: re.compile('[0-9]+'),
    16: re.compile('[0-9a-fA-F]+'),
}

_WORD = re.compile(R'\S+')
_PREVIEW = re.compile(R'\s+(?:\|.*\||>.*<)\s*$')


def _option(cls: type[enum.Enum], option: str, value):
    if isinstance(value, cls):
        return value
    if isinstance(value, str):
        key = normalize_to_identifier(value).lower()
        try:
            return cls[key]
        except KeyError:
            pass
    raise InvalidConfiguration(option, value)


@dataclass(frozen=True)
class DumpFormatConfig:
    """
    Describes the layout of a dump. The options `dump_style`, `encoding` and `endian` may be
    given as members of their enumeration or as strings; the address base defaults to 8 for the
    `od` and 16 for the `hexdump` style, and 0 indicates that rows have no address column.
    """
    dump_style: DumpStyle = DumpStyle.hexdump
    encoding: Encoding = Encoding.hex
    endian: Endian = Endian.little
    segment_length: int = 16
    address_base: int | None = None

    def __post_init__(self):
        _set = object.__setattr__
        _set(self, 'dump_style', _option(DumpStyle, 'dump_style', self.dump_style))
        _set(self, 'encoding', _option(Encoding, 'encoding', self.encoding))
        _set(self, 'endian', _option(Endian, 'endian', self.endian))
        sl = self.segment_length
        if isinstance(sl, bool) or not isinstance(sl, int) or sl <= 0:
            raise InvalidConfiguration('segment_length', sl, F'segment length must be a positive integer, got {sl!r}')
        ab = self.address_base
        if ab is None:
            ab = 8 if self.dump_style is DumpStyle.od else 16
        if isinstance(ab, bool) or ab not in ADDRESS_BASES:
            raise InvalidConfiguration('address_base', ab)
        _set(self, 'address_base', ab)

    @property
    def word_width(self) -> int:
        return self.encoding.info.width

    @property
    def numeric_base(self) -> int:
        return self.encoding.info.base

    @property
    def word_kind(self) -> WordKind:
        return self.encoding.info.kind

    @property
    def byteorder(self) -> str:
        return 'little' if self.endian is Endian.little else 'big'

    @property
    def words_per_row(self) -> int:
        return max(1, self.segment_length // self.word_width)


class Token(NamedTuple):
    text: str
    line: int
    column: int


class ScannedLine(NamedTuple):
    """
    The result of scanning a single line: the address, if the line has one, whether the line is
    a repetition marker, and the words of the line.
    """
    address: int | None
    repeat: bool
    tokens: Iterator[Token]


def _nothing() -> Iterator[Token]:
    yield from ()


class Tokenizer:
    """
    Splits the lines of a dump into words. The address column is parsed and removed, as is the
    printable preview that some formats append to each row.
    """

    def __init__(self, config: DumpFormatConfig):
        self.config = config

    def _address(self, field: str, line: int, column: int) -> int:
        base = self.config.address_base
        text = field[:-1] if field.endswith(':') else field
        if base == 16 and text[:2] in ('0x', '0X'):
            text = text[2:]
        if _ADDRESS[base].fullmatch(text) is None:
            raise MalformedToken(field, line, column, F'not a base {base} address')
        return int(text, base)

    def _words(self, body: str, offset: int, line: int) -> Iterator[Token]:
        if self.config.word_kind is not WordKind.NAMED:
            body = _PREVIEW.sub('', body)
        for k, match in enumerate(_WORD.finditer(body)):
            if k >= self.config.words_per_row:
                break
            yield Token(match.group(), line, offset + match.start() + 1)

    def _cells(self, body: str, offset: int, line: int) -> Iterator[Token]:
        count = self.config.words_per_row
        for k in range(0, len(body), 4):
            if count <= 0:
                break
            cell = body[k:k + 4]
            text = cell.strip()
            if not text and len(cell) < 4:
                break
            count -= 1
            yield Token(text, line, offset + k + 1)

    def scan(self, text: str, line: int) -> ScannedLine:
        text = text.rstrip('\r\n')
        if not text.strip():
            return ScannedLine(None, False, _nothing())
        if text.strip() == '*':
            if not self.config.address_base:
                raise MalformedToken('*', line, text.index('*') + 1, 'repetition without address column')
            return ScannedLine(None, True, _nothing())
        address = None
        offset = 0
        if self.config.address_base:
            match = _WORD.search(text)
            address = self._address(match.group(), line, match.start() + 1)
            offset = match.end()
        body = text[offset:]
        if self.config.word_kind is WordKind.CHAR:
            tokens = self._cells(body, offset, line)
        else:
            tokens = self._words(body, offset, line)
        return ScannedLine(address, False, tokens)


class WordDecoder:
    """
    Converts a single token into the bytes of the word it represents.
    """

    def __init__(self, config: DumpFormatConfig):
        self.config = config
        kind = config.word_kind
        if kind is WordKind.FLOAT:
            self._decode = self._float
        elif kind is WordKind.CHAR:
            self._decode = self._char
        elif kind is WordKind.NAMED:
            self._decode = self._named
        else:
            self._decode = self._integer

    def decode(self, token: Token) -> bytes:
        return self._decode(token)

    def _integer(self, token: Token) -> bytes:
        base = self.config.numeric_base
        size = self.config.word_width
        if _DIGITS[base].fullmatch(token.text) is None:
            raise MalformedToken(token.text, token.line, token.column, F'not a base {base} number')
        value = int(token.text, base)
        bits = size * 8
        if value < 0:
            if value < -(1 << (bits - 1)):
                raise WordOverflow(token.text, token.line, token.column, size)
            value += 1 << bits
        try:
            return value.to_bytes(size, self.config.byteorder)
        except OverflowError:
            raise WordOverflow(token.text, token.line, token.column, size)

    def _float(self, token: Token) -> bytes:
        if _FLOAT.fullmatch(token.text) is None:
            raise MalformedToken(token.text, token.line, token.column, 'not a floating point number')
        fmt = 'f' if self.config.word_width == 4 else 'd'
        fmt = F'{"<" if self.config.byteorder == "little" else ">"}{fmt}'
        try:
            return struct.pack(fmt, float(token.text))
        except (OverflowError, struct.error):
            raise WordOverflow(token.text, token.line, token.column, self.config.word_width)

    def _named(self, token: Token) -> bytes:
        text = token.text
        try:
            return bytes((NAMED_CHARS[text.lower()],))
        except KeyError:
            pass
        if len(text) == 1 and text.isprintable():
            return text.encode('utf8')
        raise MalformedToken(text, token.line, token.column, 'unknown character name')

    def _char(self, token: Token) -> bytes:
        text = token.text
        if not text:
            return B'\x20'
        if text == '**':
            return B''
        try:
            return bytes((CHAR_ESCAPES[text],))
        except KeyError:
            pass
        if len(text) == 3 and _DIGITS[8].fullmatch(text):
            value = int(text, 8)
            if value > 0xFF:
                raise WordOverflow(text, token.line, token.column, 1)
            return bytes((value,))
        if len(text) == 1:
            return text.encode('utf8')
        raise MalformedToken(text, token.line, token.column, 'not a character')


class HexdumpDecoder:
    """
    Reconstructs the data from a complete dump. The rows are decoded in order; a repetition marker
    causes the preceding row to be repeated until the address of the next row is reached, and an
    address-only line at the end of the input determines the size of the output.
    """

    def __init__(self, config: DumpFormatConfig | None = None, **options):
        if config is None:
            config = DumpFormatConfig(**options)
        elif options:
            raise TypeError('options can not be specified together with a configuration object')
        self.config = config
        self.tokenizer = Tokenizer(config)
        self.words = WordDecoder(config)

    def decode(self, text: str | bytes | bytearray | memoryview) -> bytes:
        if not isinstance(text, str):
            data = bytes(text)
            try:
                text = data.decode('utf8')
            except UnicodeDecodeError:
                text = data.decode('latin1')

        output = bytearray()
        first = None
        final = None
        previous_address = None
        previous_row = B''
        pending = False
        trailing = False
        pad_cells = self.config.word_kind is WordKind.CHAR

        for lineno, line in enumerate(text.split('\n'), 1):
            scanned = self.tokenizer.scan(line, lineno)
            if scanned.repeat:
                pending = True
                continue
            row = bytearray()
            for token in scanned.tokens:
                row.extend(self.words.decode(token))
            address = scanned.address
            if address is None:
                if row:
                    final = None
                    trailing = False
                output.extend(row)
                continue
            if first is None:
                first = address
            if pad_cells and trailing:
                # blank cells at the end of a row may have been stripped
                missing = min(address - previous_address, self.config.segment_length) - len(previous_row)
                if missing > 0:
                    output.extend(B'\x20' * missing)
                    previous_row += B'\x20' * missing
            if pending and previous_address is not None and previous_row:
                count = (address - previous_address) // len(previous_row) - 1
                for _ in range(count):
                    output.extend(previous_row)
            pending = False
            if row:
                final = None
                previous_address = address
                previous_row = bytes(row)
                output.extend(row)
                trailing = True
            else:
                final = address

        if final is not None and first is not None:
            size = final - first
            if 0 <= size < len(output):
                del output[size:]

        return bytes(output)


def decode_hexdump(
    text: str | bytes | bytearray | memoryview,
    dump_style: DumpStyle | str = DumpStyle.hexdump,
    encoding: Encoding | str = Encoding.hex,
    endian: Endian | str = Endian.little,
    segment_length: int = 16,
    address_base: int | None = None,
) -> bytes:
    """
    Decode the given dump text and return the bytes that were dumped.
    """
    config = DumpFormatConfig(dump_style, encoding, endian, segment_length, address_base)
    return HexdumpDecoder(config).decode(text)


__all__ = [
    'DumpStyle',
    'Encoding',
    'Endian',
    'WordKind',
    'EncodingInfo',
    'DumpFormatConfig',
    'Token',
    'ScannedLine',
    'Tokenizer',
    'WordDecoder',
    'HexdumpDecoder',
    'decode_hexdump',
]
