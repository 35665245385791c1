from .. import TestUnitBase


class TestJavaScriptEscape(TestUnitBase):

    def test_escape_special_characters(self):
        self.assertEqual(B'hello\nworld\n' | -self.load() | str, 'hello\\nworld\\n')
        self.assertEqual(B'say "hi"\\' | -self.load() | str, 'say \\"hi\\"\\\\')

    def test_escape_non_ascii(self):
        self.assertEqual('é&\uD556'.encode('utf8') | -self.load() | str, '\\xE9&\\uD556')
        self.assertEqual(B'\x01' | -self.load() | str, '\\x01')

    def test_escape_astral_plane(self):
        self.assertEqual('\U0001F600'.encode('utf8') | -self.load() | str, '\\uD83D\\uDE00')

    def test_unescape_unicode(self):
        data = B'\\u0068\\u0065\\u006C\\u006C\\u006F world'
        self.assertEqual(data | self.load() | bytes, B'hello world')

    def test_unescape_mixed_forms(self):
        self.assertEqual(B'%41%u0042\\x43\\t\\"' | self.load() | bytes, B'ABC\t"')

    def test_unescape_surrogate_pair(self):
        self.assertEqual(B'\\uD83D\\uDE00' | self.load() | str, '\U0001F600')

    def test_inversion(self):
        data = 'refinement of bytes: パイプライン\n\t"quoted"'.encode('utf8')
        unit = self.load()
        self.assertEqual(unit.process(unit.reverse(data)), data)

    def test_unescape_unpaired_surrogate(self):
        self.assertEqual(B'\\uD800' | self.load() | bytes, '\uD800'.encode('utf8', 'surrogatepass'))
        self.assertEqual(B'x\\uDE00y' | self.load() | bytes, B'x\xED\xB8\x80y')

    def test_escape_invalid_utf8(self):
        self.assertEqual(B'\xff\x00' | -self.load() | str, '\\xFF\\x00')
        self.assertEqual(B'a\xc3' | -self.load() | str, 'a\\xC3')

    def test_unescape_short_forms(self):
        self.assertEqual(B'\\u41%u42\\x9\\41%4' | self.load() | bytes, B'AB\tA\x04')
        self.assertEqual(B'\\b\\f\\0' | self.load() | bytes, B'\b\f\0')
        self.assertEqual(B'\\q\\x' | self.load() | bytes, B'qx')

    def test_percent_sign_survives_inversion(self):
        data = B'100%41 \\u0041'
        unit = self.load()
        self.assertEqual(unit.reverse(data), B'100\\x2541 \\\\u0041')
        self.assertEqual(unit.process(unit.reverse(data)), data)
