#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
## Multibin Syntax

Units that receive binary data as an argument accept it in **multibin** format. An argument can
be prefixed with a handler that determines how the remaining string is converted to bytes:

- `s:string` interprets `string` as an UTF8 encoded string
- `u:string` same, but as an UTF16-LE encoded string
- `h:string` assumes that `string` is a hexadecimal string and returns the decoded byte sequence.

Without a handler, an integer literal like `0x41` or `65` is converted to the shortest little
endian byte string that represents it, and any other string is returned in UTF8 encoding.
"""
from __future__ import annotations

import re

from argparse import ArgumentTypeError
from typing import Union


def number(expression: Union[int, str]) -> int:
    """
    Parses an integer literal in Python syntax, i.e. `0x` and `0o` as well as `0b` prefixes are
    understood and underscores are allowed as separators.
    """
    if isinstance(expression, int):
        return expression
    try:
        return int(expression.strip(), 0)
    except ValueError:
        raise ArgumentTypeError(F'not a valid number: {expression!r}')


class _number_bounded:
    def __init__(self, min: int | None, max: int | None):
        self.min = min
        self.max = max
        self.__name__ = 'number'

    def __call__(self, expression: Union[int, str]) -> int:
        value = number(expression)
        if self.min is not None and value < self.min or self.max is not None and value > self.max:
            a = '-∞' if self.min is None else self.min
            b = '∞' if self.max is None else self.max
            raise ArgumentTypeError(F'value {value} is out of bounds [{a}, {b}]')
        return value


def bounded_number(min: int | None = None, max: int | None = None):
    """
    Returns an argument parser type for integers which checks that the value lies within the
    given closed interval.
    """
    return _number_bounded(min, max)


def multibin(expression: Union[str, bytes, bytearray]) -> bytes:
    """
    This is the argument parser type for binary arguments; see the module documentation for the
    supported handlers.
    """
    if isinstance(expression, int):
        expression = str(expression)
    elif not isinstance(expression, str):
        return bytes(expression)
    handler, colon, argument = expression.partition(':')
    if colon:
        if handler == 's':
            return argument.encode('utf8')
        if handler == 'u':
            return argument.encode('utf-16le')
        if handler == 'h':
            hexstr = re.sub('\\s+', '', argument)
            try:
                return bytes.fromhex(hexstr)
            except ValueError:
                raise ArgumentTypeError(F'not a valid hex string: {argument!r}')
    try:
        value = int(expression, 0)
    except ValueError:
        return expression.encode('utf8')
    if value < 0:
        raise ArgumentTypeError(F'negative numbers can not be converted to bytes: {expression}')
    size = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(size, 'little')
