R"""
The package `rebyte` exports all `rebyte.units.Unit`s which are of type `rebyte.units.Entry`; this
marker implies that the unit exposes a shell command. The command line interface for each of these
units is the same text as would be available by executing the command with the `-h` or `--help`
option. For convenience, the `rebyte` module also exports the classes `rebyte.units.Unit` and
`rebyte.units.Arg`.

The most important part of the library is `rebyte.lib.hexdump`, which reconstructs binary data from
the output of the `od` and `hexdump` command line tools. It is available as the unit
`rebyte.units.formats.unhexdump.unhexdump`:

    >>> from rebyte import unhexdump
    >>> B'00000000  68 65 6c 6c 6f  |hello|' | unhexdump('hex-bytes') | bytes
    b'hello'

It is recommended to also read the module documentation of `rebyte.lib.argformats` for the syntax
of binary arguments, and of `rebyte.units` for how units can be combined in Python code.
"""
from __future__ import annotations

__version__ = '0.3.1'
__distribution__ = 'rebyte'

import importlib

from threading import RLock

from rebyte.units import Arg, Unit


class __unit_loader__:
    """
    Every unit can be imported from the base module. The import is performed on demand to reduce
    import times; the map below assigns each unit name to the module that defines it.
    """
    units = {
        'b64'       : 'rebyte.units.encoding.b64',        # noqa
        'esc'       : 'rebyte.units.encoding.esc',        # noqa
        'jsesc'     : 'rebyte.units.encoding.jsesc',      # noqa
        'unhexdump' : 'rebyte.units.formats.unhexdump',   # noqa
        'xor'       : 'rebyte.units.blockwise.xor',       # noqa
        'zl'        : 'rebyte.units.compression.zl',      # noqa
    }
    cache: dict[str, type[Unit]] = {}
    _lock = RLock()

    @classmethod
    def resolve(cls, name: str) -> type[Unit]:
        with cls._lock:
            try:
                return cls.cache[name]
            except KeyError:
                pass
            try:
                path = cls.units[name]
            except KeyError:
                raise AttributeError(name)
            unit = getattr(importlib.import_module(path), name)
            cls.cache[name] = unit
            return unit


__all__ = sorted(__unit_loader__.units, key=lambda x: x.lower()) + [
    Unit.__name__,
    Arg.__name__,
    '__distribution__',
    '__version__',
]


def __getattr__(name):
    return __unit_loader__.resolve(name)


def __dir__():
    return __all__
