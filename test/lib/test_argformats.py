#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from argparse import ArgumentTypeError

from rebyte.lib import argformats

from .. import TestBase


class TestArgumentFormats(TestBase):

    def test_hex_number_arg(self):
        self.assertEqual(argformats.number('0x45FAD'), 0x45FAD)
        self.assertEqual(argformats.number('0o17'), 15)
        self.assertEqual(argformats.number(' 1_000 '), 1000)
        self.assertEqual(argformats.number(7), 7)

    def test_invalid_number(self):
        with self.assertRaises(ArgumentTypeError):
            argformats.number('45FADH')

    def test_bounded_number(self):
        bounded = argformats.bounded_number(1, 9)
        self.assertEqual(bounded('9'), 9)
        with self.assertRaises(ArgumentTypeError):
            bounded('0')
        with self.assertRaises(ArgumentTypeError):
            argformats.bounded_number(min=1)('-5')
        self.assertEqual(argformats.bounded_number(max=4)('-5'), -5)

    def test_multibin_handlers(self):
        self.assertEqual(argformats.multibin('s:h:41'), B'h:41')
        self.assertEqual(argformats.multibin('u:AB'), B'A\0B\0')
        self.assertEqual(argformats.multibin('h:41 42 43'), B'ABC')

    def test_multibin_invalid_hex(self):
        with self.assertRaises(ArgumentTypeError):
            argformats.multibin('h:XY')

    def test_multibin_numbers(self):
        self.assertEqual(argformats.multibin('0x4142'), B'BA')
        self.assertEqual(argformats.multibin('0'), B'\0')
        self.assertEqual(argformats.multibin(0x100), B'\0\x01')
        with self.assertRaises(ArgumentTypeError):
            argformats.multibin('-1')

    def test_multibin_plain(self):
        self.assertEqual(argformats.multibin('rebyte'), B'rebyte')
        self.assertEqual(argformats.multibin('x:y'), B'x:y')
        self.assertEqual(argformats.multibin(bytearray(B'raw')), B'raw')
