import zlib

from .. import TestUnitBase


class TestZL(TestUnitBase):

    def test_inflate(self):
        self.assertEqual(B'x\x9C\xCBH\xCD\xC9\xC9\a\x00\x06,\x02\x15' | self.load() | bytes, B'hello')

    def test_deflate_is_compatible(self):
        self.assertEqual(B'hello' | -self.load() | bytes, zlib.compress(B'hello'))

    def test_round_trip(self):
        data = self.generate_random_text(2000)
        for options in (dict(), dict(raw=True), dict(gzip_header=True), dict(level=1, window=9)):
            unit = self.load(**options)
            compressed = data | -unit | bytes
            self.assertEqual(compressed | unit | bytes, data, msg=repr(options))

    def test_gzip_header(self):
        import gzip
        data = self.generate_random_buffer(300)
        self.assertEqual(gzip.compress(data) | self.load() | bytes, data)

    def test_invalid_data(self):
        with self.assertRaises(zlib.error):
            B'not compressed at all' | self.load() | bytes

    def test_conflicting_headers(self):
        with self.assertRaises(ValueError):
            self.load(raw=True, gzip_header=True)
