#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from setuptools import setup
from pathlib import Path
this_dir = Path(__file__).absolute().parent

if __name__ == "__main__":
    setup(
        name='ebnf2bnf',
        description='W3C EBNF grammar reader and EBNF to BNF transformer',
        license='MIT',
        python_requires='>=3.8',
        packages=['ebnf2bnf'],
        install_requires=['click'],
        extras_require={
            'test': ['pytest'],
        },
        entry_points={
            'console_scripts': [
                'ebnf2bnf = ebnf2bnf.cli:ebnf',
            ],
        },
        use_scm_version={
            "write_to": "ebnf2bnf/version.py",
            "write_to_template": '__version__ = "{version}"\n',
            "fallback_version": "0.1.0",
        },
        setup_requires=['setuptools_scm'],
    )
