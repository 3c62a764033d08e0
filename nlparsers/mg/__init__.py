#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : __init__.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Minimalist Grammars: features, lexical items, chain-based expressions and the chart parser."""

from .feature import MGFeatureType, MGFeature, MGFeatureParser, parse_mg_features
from .lexical_item import MGLexicalItem, parse_mg_item, MGLexicon
from .expression import MGChain, MGExpression, merge, move, adjoin, category_of
from .parser import MGChartParser

__all__ = [
    'MGFeatureType', 'MGFeature', 'MGFeatureParser', 'parse_mg_features',
    'MGLexicalItem', 'parse_mg_item', 'MGLexicon',
    'MGChain', 'MGExpression', 'merge', 'move', 'adjoin', 'category_of',
    'MGChartParser'
]
