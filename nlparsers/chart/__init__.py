#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : __init__.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The formalism-agnostic chart, agenda, derivation forest and parse results."""

from .chart import Span, as_tokens, EdgeHistory, UnaryStep, Edge, Chart, Agenda, SearchBudget, SearchBudgetExhausted
from .forest import DerivationTree, DerivationForest
from .result import ParseFailureKind, ParseFailure, ParsingError, NoDerivationError, UnknownTokenError, SearchBoundExceededError

__all__ = [
    'Span', 'as_tokens', 'EdgeHistory', 'UnaryStep', 'Edge', 'Chart', 'Agenda', 'SearchBudget', 'SearchBudgetExhausted',
    'DerivationTree', 'DerivationForest',
    'ParseFailureKind', 'ParseFailure', 'ParsingError', 'NoDerivationError', 'UnknownTokenError', 'SearchBoundExceededError'
]
