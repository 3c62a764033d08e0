#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : __init__.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Chart and proof-search parsers for three grammar formalisms over a shared category algebra.

Here's a quick summary of the sub-modules:

- :mod:`nlparsers.common` contains categories, feature structures, unification, lambda terms and lexicons.
- :mod:`nlparsers.chart` contains the chart, the agenda, derivation forests and parse failures.
- :mod:`nlparsers.ccg` contains the parser for Combinatory Categorial Grammars.
- :mod:`nlparsers.mg` contains the parser for Minimalist Grammars.
- :mod:`nlparsers.tlg` contains the prover and the parser for Type-Logical Grammars (the Lambek calculus).

The entry point is :func:`nlparsers.parse`, which dispatches on :attr:`ParserConfig.formalism`.
"""

from . import capabilities
from .capabilities import CapabilityDisabledError, FormalismDisabledError, is_enabled, require, override_capabilities
from .config import Formalism, MGLocalityDomain, ParserConfig, get_parser_config
from .common import (
    CompositionError, UnificationFailure, OccursCheckFailure, DirectionalMismatch, LocalityViolation, CategoryParsingError,
    Category, AtomicCategory, FunctorCategory, ProductCategory, CategoryVariable, DiamondCategory, BoxCategory, FeatureStructure,
    parse_category, parse_term, unify, LexicalEntry, Lexicon, LocalizedLexicon, MultilingualLexicon
)
from .chart import DerivationTree, DerivationForest, ParseFailureKind, ParseFailure, ParsingError, NoDerivationError, UnknownTokenError, SearchBoundExceededError
from .ccg import CCGCompositionSystem, CCGChartParser
from .mg import MGLexicon, MGChartParser
from .tlg import TLGParser
from .parser import make_parser, parse

__all__ = [
    'capabilities', 'CapabilityDisabledError', 'FormalismDisabledError', 'is_enabled', 'require', 'override_capabilities',
    'Formalism', 'MGLocalityDomain', 'ParserConfig', 'get_parser_config',
    'CompositionError', 'UnificationFailure', 'OccursCheckFailure', 'DirectionalMismatch', 'LocalityViolation', 'CategoryParsingError',
    'Category', 'AtomicCategory', 'FunctorCategory', 'ProductCategory', 'CategoryVariable', 'DiamondCategory', 'BoxCategory', 'FeatureStructure',
    'parse_category', 'parse_term', 'unify', 'LexicalEntry', 'Lexicon', 'LocalizedLexicon', 'MultilingualLexicon',
    'DerivationTree', 'DerivationForest', 'ParseFailureKind', 'ParseFailure', 'ParsingError', 'NoDerivationError',
    'UnknownTokenError', 'SearchBoundExceededError',
    'CCGCompositionSystem', 'CCGChartParser', 'MGLexicon', 'MGChartParser', 'TLGParser',
    'make_parser', 'parse'
]
