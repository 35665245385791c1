from __future__ import annotations

import re

from rebyte.units import Unit


class jsesc(Unit):
    """
    Decodes and encodes JavaScript string escapes. Decoding understands backslash escapes as
    well as the forms `\\uXXXX` and `%uXXXX` with up to four hex digits, and `\\xXX`, `\\XX` and
    `%XX` with up to two hex digits. A pair of escaped surrogates is combined into one character.
    When encoding, printable ASCII characters other than the percent sign are kept, common
    control characters use their backslash escape, other characters below 256 are encoded as
    `\\xXX` and all remaining characters as `\\uXXXX`. Bytes that are not part of a valid UTF8
    sequence are encoded as `\\xXX` one at a time.
    """
    _ESCAPE = {
        0x08: '\\b',
        0x09: '\\t',
        0x0A: '\\n',
        0x0B: '\\v',
        0x0C: '\\f',
        0x0D: '\\r',
        0x22: '\\"',
        0x25: '\\x25',
        0x5C: '\\\\',
    }
    _UNESCAPE = {
        B'b': B'\b',
        B't': B'\t',
        B'n': B'\n',
        B'v': B'\v',
        B'f': B'\f',
        B'r': B'\r',
    }
    _PATTERN = re.compile(
        RB'[\\%]u([dD][89abAB][0-9a-fA-F]{2})[\\%]u([dD][c-fC-F][0-9a-fA-F]{2})'
        RB'|[\\%]u([0-9a-fA-F]{1,4})'
        RB'|\\([btnvfr])'
        RB'|(?:\\x?|%)([0-9a-fA-F]{1,2})'
        RB'|\\(.)', flags=re.DOTALL)

    def process(self, data):
        def unescape(match: re.Match[bytes]):
            high, low, wide, letter, narrow, other = match.groups()
            if high:
                code = 0x10000 + ((int(high, 16) - 0xD800) << 10) + (int(low, 16) - 0xDC00)
            elif wide:
                code = int(wide, 16)
            elif narrow:
                code = int(narrow, 16)
            elif letter:
                return self._UNESCAPE[letter]
            else:
                return other
            # unpaired surrogates are kept in their three byte form
            return chr(code).encode(self.codec, 'surrogatepass')
        return self._PATTERN.sub(unescape, data)

    def reverse(self, data):
        def escape(c: str):
            o = ord(c)
            if o in self._ESCAPE:
                return self._ESCAPE[o]
            if 0x20 <= o < 0x7F:
                return c
            if o < 0x100:
                return F'\\x{o:02X}'
            if 0xDC80 <= o <= 0xDCFF:
                return F'\\x{o - 0xDC00:02X}'
            if o < 0x10000:
                return F'\\u{o:04X}'
            pair = c.encode('utf-16be')
            return F'\\u{pair[:2].hex().upper()}\\u{pair[2:].hex().upper()}'
        text = data.decode(self.codec, 'surrogateescape')
        return ''.join(escape(c) for c in text).encode('ascii')
