from __future__ import annotations

import base64
import binascii
import enum
import re

from rebyte.lib.types import Param
from rebyte.units import Arg, Unit


class B64Mode(str, enum.Enum):
    normal = 'normal'
    strict = 'strict'
    url = 'url'
    urlsafe = 'url'


class b64(Unit):
    """
    Base64 encoding and decoding. In the default `normal` mode, encoded output is split into lines
    of 60 characters, each terminated by a line break, and decoding ignores any character that is
    not part of the alphabet. The `strict` mode neither produces nor accepts line breaks, and the
    `url` mode uses the URL-safe alphabet.
    """
    def __init__(
        self,
        mode: Param[str, Arg.Option('-m', choices=B64Mode, help='Choose the mode, the default is {default}.')] = B64Mode.normal,
    ):
        super().__init__(mode=mode)

    @property
    def _mode(self) -> B64Mode:
        return Arg.AsOption(self.args.mode, B64Mode)

    def reverse(self, data):
        mode = self._mode
        if mode is B64Mode.strict:
            return base64.b64encode(data)
        if mode is B64Mode.url:
            return base64.urlsafe_b64encode(data)
        encoded = base64.b64encode(data)
        output = bytearray()
        for k in range(0, len(encoded), 60):
            output.extend(encoded[k:k + 60])
            output.extend(B'\n')
        return output

    def process(self, data: bytearray):
        mode = self._mode
        self.log_debug(F'decoding in {mode.name} mode')
        try:
            if mode is B64Mode.strict:
                return base64.b64decode(data, validate=True)
            if mode is B64Mode.url:
                data.extend(B'=' * (-len(data) % 4))
                return base64.urlsafe_b64decode(data)
        except binascii.Error as E:
            raise ValueError(F'invalid base64 input: {E!s}') from E
        data = re.sub(B'[^A-Za-z0-9+/]', B'', data)
        padding = -len(data) % 4
        if padding == 3:
            self.log_info('discarding a single trailing base64 character')
            data = data[:-1]
            padding = 0
        return base64.b64decode(data + B'=' * padding)
