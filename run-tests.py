#!/usr/bin/env python3
"""
Run the rebyte test suite. An optional argument restricts the run to test modules whose file name
contains it, i.e. `run-tests.py hexdump` runs `test/lib/test_hexdump.py`.
"""
import argparse
import os
import pathlib
import sys
import unittest


def main():
    argp = argparse.ArgumentParser(description=__doc__)
    argp.add_argument('filter', nargs='?', default='', help='substring of the test module names to run')
    argp.add_argument('-q', '--quiet', action='store_true', help='only report failures')
    args = argp.parse_args()

    root = pathlib.Path(__file__).resolve().parent
    os.chdir(root)
    os.environ['REBYTE_VERBOSITY'] = 'DETACHED'

    pattern = F'test_*{args.filter.strip("*")}*.py'
    suite = unittest.defaultTestLoader.discover('test', pattern=pattern, top_level_dir=str(root))
    runner = unittest.TextTestRunner(verbosity=1 if args.quiet else 2)
    return 0 if runner.run(suite).wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(main())
