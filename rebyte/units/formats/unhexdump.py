from __future__ import annotations

from rebyte.lib.hexdump import DumpFormatConfig, DumpStyle, Encoding, Endian, HexdumpDecoder
from rebyte.lib.types import Param
from rebyte.units import Arg, Unit


class unhexdump(Unit):
    """
    Convert the output of the `od` and `hexdump` command line tools back to the original data.
    The encoding has to match the output format of the tool: For example, `hexdump -C` output
    is decoded with the encoding `hex-bytes`, the default output of `hexdump` with `hex`, and the
    output of `od -c` with `hex-chars`. Rows that were elided with a `*` line are restored, and
    the size of the output is taken from the final address line if the dump has one.
    """
    def __init__(
        self,
        encoding: Param[str, Arg.Option('-e', choices=Encoding,
            help='The encoding of the words in the dump, the default is {default}.')] = Encoding.hex,
        style: Param[str, Arg.Option('-s', choices=DumpStyle,
            help='The tool that produced the dump, the default is {default}.')] = DumpStyle.hexdump,
        endian: Param[str, Arg.Option('-E', choices=Endian,
            help='Byte order of multi-byte words, the default is {default}.')] = Endian.little,
        segment: Param[int, Arg.Number('-l', bound=(1, None),
            help='Number of bytes in each row of the dump, the default is {default}.')] = 16,
        address: Param[int, Arg.Choice('-a', choices=[0, 8, 10, 16], type=int, metavar='BASE',
            help=(
                'Base of the address column: 8, 10, or 16. Use 0 if the rows have no address column. '
                'By default, this is 8 for od and 16 for hexdump.'))] = None,
    ):
        super().__init__(encoding=encoding, style=style, endian=endian, segment=segment, address=address)
        self.config = DumpFormatConfig(
            dump_style=self.args.style,
            encoding=self.args.encoding,
            endian=self.args.endian,
            segment_length=self.args.segment,
            address_base=self.args.address,
        )

    def process(self, data: bytearray):
        config = self.config
        self.log_info(lambda: (
            F'decoding {config.dump_style.name} dump with encoding {config.encoding.name}, '
            F'{config.word_width} byte words in {config.endian.name} endian, '
            F'{config.segment_length} bytes per row, address base {config.address_base}'))
        decoded = HexdumpDecoder(config).decode(data)
        self.log_debug(F'decoded {len(decoded)} bytes from {len(data)} bytes of input')
        return decoded
