#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import base64

from .. import TestUnitBase


class TestBase64(TestUnitBase):

    def test_normal_encoding(self):
        self.assertEqual(B'hello' | -self.load() | bytes, B'aGVsbG8=\n')

    def test_normal_encoding_wraps_lines(self):
        data = self.generate_random_buffer(100)
        encoded = data | -self.load() | bytes
        lines = encoded.splitlines()
        self.assertEqual([len(line) for line in lines], [60, 60, 16])
        self.assertTrue(encoded.endswith(B'\n'))
        self.assertEqual(B''.join(lines), base64.b64encode(data))

    def test_normal_decoding_is_lenient(self):
        self.assertEqual(B'aGVs\nbG8=\n' | self.load() | bytes, B'hello')
        self.assertEqual(B'aGVs bG8' | self.load() | bytes, B'hello')

    def test_strict(self):
        self.assertEqual(B'hello' | self.load(mode='strict', reverse=True) | bytes, B'aGVsbG8=')
        self.assertEqual(B'aGVsbG8=' | self.load(mode='strict') | bytes, B'hello')
        with self.assertRaises(ValueError):
            B'aGVs\nbG8=' | self.load(mode='strict') | bytes

    def test_urlsafe(self):
        self.assertEqual(B'\xFB\xFF' | self.load('-R', '-m', 'url') | bytes, B'-_8=')
        self.assertEqual(B'-_8' | self.load(mode='urlsafe') | bytes, B'\xFB\xFF')

    def test_forward_empty(self):
        self.assertEqual(bytes(B'' | self.load()), B'')

    def test_round_trip(self):
        data = self.generate_random_buffer(400)
        for mode in ('normal', 'strict', 'url'):
            encoded = data | self.load(mode=mode, reverse=True) | bytes
            self.assertEqual(encoded | self.load(mode=mode) | bytes, data, msg=mode)
