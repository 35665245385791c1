from __future__ import annotations

from Cryptodome.Util.strxor import strxor

from rebyte.lib.types import Param, buf
from rebyte.units import Arg, Unit


class xor(Unit):
    """
    Form the exclusive or of the input data with the given key. The key is repeated as often as
    necessary to cover the entire input. An integer literal argument is used as a key of the
    smallest possible size, i.e. `xor 0x41` uses the single byte key `A`. In code, the key can
    also be given as a list of byte values.
    """
    def __init__(self, key: Param[buf, Arg.Binary(help='The key to combine the data with.')]):
        pass

    def _expand(self, size: int) -> bytes:
        key = bytes(self.args.key)
        if not key:
            raise ValueError('The key must not be empty.')
        n = len(key)
        return bytes(key[k % n] for k in range(size))

    def process(self, data: bytearray):
        if not data:
            return data
        self.log_debug(lambda: F'using key {bytes(self.args.key).hex()} of length {len(self.args.key)}')
        return strxor(bytes(data), self._expand(len(data)))
