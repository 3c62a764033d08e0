#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : __init__.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The category algebra shared by all formalisms: categories, feature structures, unification, lambda terms and lexicons."""

from .errors import CompositionError, UnificationFailure, OccursCheckFailure, DirectionalMismatch, LocalityViolation, CategoryParsingError, CompositionContext, get_composition_context
from .features import FeatureValue, AtomicValue, SetValue, ComplexValue, FeatureVariable, FeatureStructure
from .category import SlashDirection, Category, AtomicCategory, FunctorCategory, ProductCategory, CategoryVariable, ModalCategory, DiamondCategory, BoxCategory
from .unification import Substitution, VariableCounter, unify, unify_features, substitute, occurs_in, freshen, canonicalize, signature, is_unifiable, is_instance
from .parsing import CategoryParser, parse_category, parse_features, CategorySystem
from .terms import Term, TermVariable, TermConstant, Abstraction, Application, Pair, Projection, parse_term, beta_normalize, apply_terms, fresh_variables, make_abstraction
from .lexicon import LexicalEntry, Lexicon, LocalizedLexicon, MultilingualLexicon

__all__ = [
    'CompositionError', 'UnificationFailure', 'OccursCheckFailure', 'DirectionalMismatch', 'LocalityViolation',
    'CategoryParsingError', 'CompositionContext', 'get_composition_context',
    'FeatureValue', 'AtomicValue', 'SetValue', 'ComplexValue', 'FeatureVariable', 'FeatureStructure',
    'SlashDirection', 'Category', 'AtomicCategory', 'FunctorCategory', 'ProductCategory', 'CategoryVariable',
    'ModalCategory', 'DiamondCategory', 'BoxCategory',
    'Substitution', 'VariableCounter', 'unify', 'unify_features', 'substitute', 'occurs_in',
    'freshen', 'canonicalize', 'signature', 'is_unifiable', 'is_instance',
    'CategoryParser', 'parse_category', 'parse_features', 'CategorySystem',
    'Term', 'TermVariable', 'TermConstant', 'Abstraction', 'Application', 'Pair', 'Projection', 'parse_term', 'beta_normalize',
    'apply_terms', 'fresh_variables', 'make_abstraction',
    'LexicalEntry', 'Lexicon', 'LocalizedLexicon', 'MultilingualLexicon',
]
