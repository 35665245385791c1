#!/usr/bin/env python3
"""
Installs the rebyte package. Every unit is installed as a console script of the same name; set
the environment variable `REBYTE_PREFIX` to prepend a prefix to all script names, or set it to
`!` to install no scripts at all.
"""
from __future__ import annotations

import os
import pathlib
import re

import setuptools
import toml

HERE = pathlib.Path(__file__).parent.absolute()

CLASSIFIERS = [
    'Development Status :: 3 - Alpha',
    'Operating System :: OS Independent',
    'Programming Language :: Python :: 3 :: Only',
    'Topic :: Security',
    'Topic :: System :: Archiving :: Compression',
    'Topic :: Text Processing :: Filters',
    'Topic :: Utilities',
]


def read_metadata() -> dict[str, str]:
    """
    Read version and distribution name from the package without importing it, so that the
    runtime requirements do not have to be installed.
    """
    source = (HERE / 'rebyte' / '__init__.py').read_text('utf8')
    return dict(re.findall(r"^__(version|distribution)__\s*=\s*'([^']+)'", source, re.MULTILINE))


def read_units() -> list[str]:
    source = (HERE / 'rebyte' / '__init__.py').read_text('utf8')
    return re.findall(r"^\s+'(\w+)'\s*:\s*'rebyte\.units\.[\w.]+',", source, re.MULTILINE)


def read_requirements() -> list[str]:
    """
    The runtime requirements are the build requirements from pyproject.toml, except for the
    packaging tools.
    """
    config = toml.load(HERE / 'pyproject.toml')
    build_tools = {'setuptools', 'wheel', 'toml'}
    return [
        spec for spec in config['build-system']['requires']
        if re.split(r'[<>=!~;\s]', spec, 1)[0].lower() not in build_tools
    ]


def console_scripts(units: list[str]) -> list[str]:
    prefix = os.getenv('REBYTE_PREFIX', '')
    if prefix == '!':
        return []
    return [F'{prefix}{unit}=rebyte:{unit}.run' for unit in units]


def main():
    metadata = read_metadata()
    setuptools.setup(
        name=metadata['distribution'],
        version=metadata['version'],
        description='Reconstruct binary data from od and hexdump output, and other small byte codecs.',
        long_description=(HERE / 'README.md').read_text('utf8'),
        long_description_content_type='text/markdown',
        python_requires='>=3.9',
        classifiers=CLASSIFIERS,
        packages=setuptools.find_packages(include=('rebyte', 'rebyte.*')),
        install_requires=read_requirements(),
        extras_require={'test': ['pytest']},
        entry_points={'console_scripts': console_scripts(read_units())},
    )


if __name__ == '__main__':
    main()
