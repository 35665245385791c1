#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from rebyte.units.encoding.esc import esc
from .. import TestUnitBase


class TestEscaping(TestUnitBase):

    def test_hex_escapes(self):
        unit = esc()
        self.assertEqual(unit.process(RB'r\x65\x62\x79\x74e'), B'rebyte')

    def test_hex_escape_everything(self):
        self.assertEqual(esc().reverse(B'hello'), BR'\x68\x65\x6c\x6c\x6f')
        self.assertEqual(esc(upper=True).reverse(B'\xFF\x0A'), BR'\xFF\x0A')

    def test_c_escapes(self):
        self.assertEqual(BR'a\tb\n\\\"\e' | self.load() | bytes, B'a\tb\n\\"\x1B')

    def test_octal_escapes(self):
        self.assertEqual(BR'\101\7\0' | self.load() | bytes, B'A\x07\x00')

    def test_incomplete_hex_escape(self):
        self.assertEqual(BR'\xZZ' | self.load() | bytes, BR'\xZZ')
        self.assertEqual(BR'\xZZ' | self.load(greedy=True) | bytes, B'xZZ')

    def test_inversion_simple(self):
        unit = self.load()
        data = self.generate_random_buffer(24)
        self.assertEqual(data, unit.process(unit.reverse(data)))

    def test_reverse(self):
        unit = self.load(reverse=True)
        self.assertEqual(B'\x01A' | unit | bytes, BR'\x01\x41')
