"""
Type aliases used throughout rebyte. The alias `Param` is used to annotate unit parameters with
both a type and a `rebyte.units.Arg`; at runtime, only the `rebyte.units.Arg` is retained.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import Annotated, Union

    Param = Annotated
    buf = Union[bytes, bytearray, memoryview]

else:
    class __P:
        def __getitem__(self, annotation):
            return annotation[1]

    Param = __P()
    buf = Any


__all__ = [
    'Param',
    'buf',
]
