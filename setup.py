#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : setup.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

from setuptools import setup, find_packages

__version__ = "0.1.0"

setup(
    name="nlparsers",
    version=__version__,
    author="Jiayuan Mao",
    author_email="maojiayuan@gmail.com",
    description="Chart and proof-search parsers for CCG, Minimalist Grammars and Type-Logical Grammars",
    long_description="",
    packages=find_packages(include=["nlparsers", "nlparsers.*"]),
    install_requires=[
        "jacinle",
        "lark",
    ],
    extras_require={
        "nltk": ["nltk"],
        "test": ["pytest"],
    },
    zip_safe=False,
    python_requires=">=3.10",
)
