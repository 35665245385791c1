import logging
import random
import string
import unittest

import rebyte

__all__ = ['rebyte', 'TestBase']


class TestBase(unittest.TestCase):
    """
    Common base of all tests. Random data is drawn from a generator with a fixed seed so that
    every run of a test sees the same input.
    """

    def setUp(self):
        self.random = random.Random(0x5EED)
        logging.disable(logging.CRITICAL)

    def tearDown(self):
        logging.disable(logging.NOTSET)

    def generate_random_buffer(self, size: int) -> bytes:
        return bytes(self.random.getrandbits(8) for _ in range(size))

    def generate_random_text(self, size: int) -> bytes:
        return ''.join(self.random.choices(string.printable, k=size)).encode('ascii')
