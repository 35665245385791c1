#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import re

from rebyte.lib.types import Param
from rebyte.units import Arg, Unit


class esc(Unit):
    """
    Decodes C-style escape sequences and hex escapes of the form `\\xNN`. In reverse mode, every
    byte of the input is encoded as a hex escape sequence.
    """
    _UNESCAPE = {
        BR'a': B'\x07',
        BR'b': B'\x08',
        BR'e': B'\x1B',
        BR'f': B'\x0C',
        BR'n': B'\x0A',
        BR'r': B'\x0D',
        BR't': B'\x09',
        BR'v': B'\x0B',
        B'\\': B'\x5C',
        BR"'": B'\x27',
        BR'"': B'\x22'
    }

    def __init__(
        self,
        upper: Param[bool, Arg.Switch('-U', help='Use uppercase hexadecimal digits when encoding.')] = False,
        greedy: Param[bool, Arg.Switch('-g', help='Replace \\x by x when it is not followed by two hex digits.')] = False,
    ):
        super().__init__(upper=upper, greedy=greedy)

    def process(self, data):
        def unescape(match):
            c = match[1]
            if c[0] == 0x78:
                if len(c) > 1:
                    return bytes((int(c[1:], 16),))
                return c if self.args.greedy else match[0]
            if 0x30 <= c[0] <= 0x37:
                # octal escape sequence
                return bytes((int(c, 8) & 0xFF,))
            return self._UNESCAPE.get(c, c)
        return re.sub(
            RB'\\(x[a-fA-F0-9]{1,2}|[0-7]{1,3}|.)', unescape, data, flags=re.DOTALL)

    def reverse(self, data):
        fmt = RB'\x%02X' if self.args.upper else RB'\x%02x'
        string = bytearray(4 * len(data))
        for k in range(len(data)):
            a = k * 4
            b = k * 4 + 4
            string[a:b] = fmt % data[k]
        return string
