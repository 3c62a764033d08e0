#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : __init__.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Combinatory Categorial Grammar: combinatory rules, composition systems and the chart parser."""

from .rules import CONJ_CATEGORY_NAME, is_conj
from .composition import CCGCompositionType, CCGCompositionResult, CCGCompositionSystem, compose_semantics
from .parser import CCGDerivationForest, CCGChartParser

__all__ = [
    'CONJ_CATEGORY_NAME', 'is_conj',
    'CCGCompositionType', 'CCGCompositionResult', 'CCGCompositionSystem', 'compose_semantics',
    'CCGDerivationForest', 'CCGChartParser'
]
