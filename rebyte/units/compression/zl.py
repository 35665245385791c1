from __future__ import annotations

import zlib

from rebyte.lib.types import Param
from rebyte.units import Arg, Unit


class zl(Unit):
    """
    ZLib compression and decompression. When decompressing, the unit detects whether the data
    has a ZLIB header, a GZIP header, or no header at all.
    """

    def __init__(
        self,
        level: Param[int, Arg.Number('-l', bound=(0, 9), help='Specify a compression level between 0 and 9.')] = 6,
        window: Param[int, Arg.Number('-w', bound=(8, 15), help='Manually specify the window size between 8 and 15.')] = 15,
        raw: Param[bool, Arg.Switch('-r', group='MODE', help='Compress without any header.')] = False,
        gzip_header: Param[bool, Arg.Switch('-g', group='MODE', help='Use a GZIP header.')] = False
    ):
        if raw and gzip_header:
            raise ValueError('You can only specify one header type (RAW or GZIP).')
        return super().__init__(level=level, window=window, raw=raw, gzip_header=gzip_header)

    def _modes(self, data: bytearray):
        window = self.args.window
        if data[0:2] == B'\x1F\x8B' or self.args.gzip_header:
            return [0x10 | window, window | 0x20, -window]
        if len(data) > 1 and data[0] & 0x0F == 0x08 and (data[0] << 8 | data[1]) % 31 == 0 and not self.args.raw:
            return [window, window | 0x20, -window]
        return [-window, window | 0x20]

    def process(self, data: bytearray):
        if not data:
            return data
        error = None
        for mode in self._modes(data):
            zl = zlib.decompressobj(mode)
            try:
                out = zl.decompress(data)
                out += zl.flush()
            except zlib.error as E:
                self.log_info(F'decompressing with mode {mode:+d} failed: {E!s}')
                error = error or E
                continue
            if not zl.eof:
                self.log_info(F'decompressing with mode {mode:+d} did not reach the end of the stream')
                error = error or ValueError('The compressed stream is truncated.')
                continue
            if zl.unused_data:
                self.log_warn(F'ignoring {len(zl.unused_data)} bytes of excess data after compressed stream')
            self.log_debug(F'decompressed {len(out)} bytes using mode {mode:+d}')
            return out
        raise error

    def reverse(self, data: bytearray):
        mode = self.args.window
        if self.args.raw:
            mode = -mode
        if self.args.gzip_header:
            mode |= 0x10
        self.log_debug(F'using mode {mode:+d} for compression')
        zl = zlib.compressobj(self.args.level, zlib.DEFLATED, mode)
        zz = zl.compress(data)
        return zz + zl.flush(zlib.Z_FINISH)
