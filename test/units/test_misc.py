#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import io

from . import TestUnitBase

from rebyte.lib.argformats import multibin
from rebyte.units import Arg, Entry, LogLevel, Unit
from rebyte.units.blockwise.xor import xor
from rebyte.units.encoding.esc import esc
from rebyte.units.formats.unhexdump import unhexdump


class TestPipelines(TestUnitBase):

    def test_pipeline_sinks(self):
        self.assertEqual(B'rebyte' | esc | esc() | bytes, B'rebyte')
        self.assertEqual(B'rebyte' | xor(0) | str, 'rebyte')
        self.assertEqual(B'rebyte' | xor(0) | ..., bytearray(B'rebyte'))
        self.assertIsNone(B'rebyte' | xor(0) | None)
        self.assertEqual(B'rebyte' | xor(0) | len, 6)
        sink = bytearray(B'>')
        self.assertIs(B'rebyte' | xor(0) | sink, sink)
        self.assertEqual(sink, B'>rebyte')

    def test_stream_source_and_sink(self):
        source = io.BytesIO(B'\\x41\\x42')
        target = io.BytesIO()
        _ = source | esc | target
        self.assertEqual(target.getvalue(), B'AB')

    def test_string_source(self):
        self.assertEqual('00000000  41 42' | unhexdump('hex_bytes') | bytes, B'AB')

    def test_negation(self):
        self.assertEqual(B'AB' | -esc | bytes, BR'\x41\x42')
        unit = esc()
        self.assertFalse(unit.args.reverse)
        self.assertTrue((-unit).args.reverse)
        self.assertFalse(unit.args.reverse)

    def test_non_reversible_unit(self):
        with self.assertRaises(NotImplementedError):
            B'00' | -unhexdump() | bytes

    def test_multiple_units(self):
        data = self.generate_random_buffer(64)
        self.assertEqual(data | -esc | xor(0x20) | xor(0x20) | esc | bytes, data)


class TestUnitInterface(TestUnitBase):

    def test_units_are_entries(self):
        for unit in (esc, unhexdump, xor):
            self.assertTrue(issubclass(unit, Entry))
        self.assertFalse(issubclass(Unit, Entry))

    def test_lazy_top_level_imports(self):
        import rebyte
        self.assertIs(rebyte.xor, xor)
        self.assertIs(rebyte.unhexdump, unhexdump)
        self.assertIn('zl', dir(rebyte))
        with self.assertRaises(AttributeError):
            rebyte.nonexistent_unit

    def test_argument_inference(self):
        spec = xor._arguments['key']
        self.assertTrue(spec.positional)
        self.assertIs(spec.kwargs['type'], multibin)
        spec = unhexdump._arguments['encoding']
        self.assertIn('--encoding', spec.args)
        self.assertIn('hex-bytes', spec.kwargs['choices'])
        self.assertEqual(spec.kwargs['default'], 'hex')

    def test_help_text(self):
        text = unhexdump.argparser().format_help()
        self.assertIn('--encoding', text)
        self.assertIn('--quiet', text)
        self.assertNotIn('--reverse', text)
        self.assertIn('--reverse', esc.argparser().format_help())

    def test_as_option(self):
        from rebyte.lib.hexdump import Encoding
        self.assertIs(Arg.AsOption('hex-bytes', Encoding), Encoding.hex_bytes)
        self.assertIs(Arg.AsOption(Encoding.hex, Encoding), Encoding.hex)
        self.assertIsNone(Arg.AsOption(None, Encoding))
        with self.assertRaises(ValueError):
            Arg.AsOption('nonsense', Encoding)

    def test_units_in_code_are_detached(self):
        self.assertEqual(xor(1).log_level, LogLevel.DETACHED)

    def test_verbosity(self):
        self.assertEqual(xor.assemble('0', '-v').log_level, LogLevel.INFO)
        self.assertEqual(xor.assemble('0', '-vv').log_level, LogLevel.DEBUG)
        self.assertEqual(xor.assemble('0', '-Q').log_level, LogLevel.NONE)

    def test_attached_unit_logs_instead_of_raising(self):
        unit = unhexdump.assemble('-e', 'hex-bytes')
        self.assertEqual(unit.log_level, LogLevel.WARNING)
        self.assertEqual(B'00000000  zz' | unit | bytes, B'')

    def test_missing_positional_argument(self):
        with self.assertRaises(ValueError):
            xor.assemble()

    def test_conflicting_keyword(self):
        with self.assertRaises(ValueError):
            xor.assemble('h:41', key=B'B')

    def test_option_listed_once_in_help(self):
        text = unhexdump.argparser().format_help()
        self.assertIn('-e, --encoding Encoding', text)
        self.assertIn('-l, --segment N', text)

    def test_keyword_replaces_positional_argument(self):
        unit = xor.assemble(key=B'\x01')
        self.assertEqual(unit.args.key, B'\x01')
        self.assertEqual(B'AB' | unit | bytes, B'@C')

    def test_generic_options_as_keywords(self):
        unit = esc.assemble(reverse=True, quiet=True)
        self.assertTrue(unit.args.reverse)
        self.assertEqual(unit.log_level, LogLevel.NONE)
        self.assertEqual(B'\n' | unit | bytes, BR'\x0a')
        with self.assertRaises(ValueError):
            esc.assemble('-R', reverse=True)

    def test_keywords_are_converted(self):
        unit = unhexdump.assemble(segment='0x08')
        self.assertEqual(unit.args.segment, 8)
        self.assertEqual(unit.config.segment_length, 8)

    def test_generated_init(self):
        self.assertEqual(xor(B'k').args.key, B'k')
        self.assertEqual(xor(key='s:k').args.key, B'k')
        with self.assertRaises(TypeError):
            xor(B'k', B'x')

    def test_invalid_option_is_argument_error(self):
        with self.assertRaises(ValueError):
            unhexdump.assemble('-e', 'hex-nibbles')
