#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : feature.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Syntactic features of Minimalist Grammars.

A feature sequence is written as a whitespace-separated list, e.g. ``=V +wh C``. Each feature may carry an agreement
feature structure, e.g. ``=D[num=?n] +case T[num=?n]``.

A head-movement selector ``=>V`` selects a complement like ``=V``, and additionally moves the head of the complement to
the left of the selecting head (e.g., ``-s :: =>V =D T`` turns ``eat`` into ``eat -s``).
"""

import lark
from dataclasses import dataclass
from typing import Any, Optional, Iterator, Mapping, Tuple
from jacinle.utils.enum import JacEnum
from jacinle.utils.meta import repr_from_str

from nlparsers.common.errors import CategoryParsingError
from nlparsers.common.features import FeatureStructure
from nlparsers.common.parsing import FEATURE_GRAMMAR, FeatureStructureTransformerMixin

__all__ = ['MGFeatureType', 'MGFeature', 'MGFeatureParser', 'parse_mg_features']


class MGFeatureType(JacEnum):
    """The types of MG features."""

    CATEGORIAL = 'categorial'
    SELECTOR = 'selector'
    HEAD_SELECTOR = 'head_selector'
    LICENSOR = 'licensor'
    LICENSEE = 'licensee'
    ADJUNCT_SELECTOR = 'adjunct_selector'

    @property
    def prefix(self) -> str:
        return _FEATURE_PREFIXES[self]


_FEATURE_PREFIXES = {
    MGFeatureType.CATEGORIAL: '',
    MGFeatureType.SELECTOR: '=',
    MGFeatureType.HEAD_SELECTOR: '=>',
    MGFeatureType.LICENSOR: '+',
    MGFeatureType.LICENSEE: '-',
    MGFeatureType.ADJUNCT_SELECTOR: '~',
}


@dataclass(frozen=True, repr=False)
class MGFeature(object):
    """A syntactic feature (e.g., ``=D``, ``+wh``)."""

    type: MGFeatureType
    """The type of the feature."""

    name: str
    """The name of the feature (e.g., ``D`` for ``=D``)."""

    agreement: FeatureStructure = FeatureStructure()
    """The agreement features, checked by unification when the feature is checked."""

    @property
    def is_categorial(self) -> bool:
        return self.type is MGFeatureType.CATEGORIAL

    @property
    def is_selector(self) -> bool:
        return self.type is MGFeatureType.SELECTOR

    @property
    def is_head_selector(self) -> bool:
        return self.type is MGFeatureType.HEAD_SELECTOR

    @property
    def is_licensor(self) -> bool:
        return self.type is MGFeatureType.LICENSOR

    @property
    def is_licensee(self) -> bool:
        return self.type is MGFeatureType.LICENSEE

    @property
    def is_adjunct_selector(self) -> bool:
        return self.type is MGFeatureType.ADJUNCT_SELECTOR

    def matches_merge(self, other: 'MGFeature') -> bool:
        """Whether this (selector or head selector) feature selects the other (categorial) feature."""
        return (self.is_selector or self.is_head_selector) and other.is_categorial and self.name == other.name

    def matches_move(self, other: 'MGFeature') -> bool:
        """Whether this (licensor) feature attracts the other (licensee) feature."""
        return self.is_licensor and other.is_licensee and self.name == other.name

    def matches_adjoin(self, other: 'MGFeature') -> bool:
        """Whether this (adjunct selector) feature adjoins to the other (categorial) feature."""
        return self.is_adjunct_selector and other.is_categorial and self.name == other.name

    def iter_variables(self) -> Iterator[Any]:
        return self.agreement.iter_variables()

    def substitute(self, bindings) -> 'MGFeature':
        if not self.agreement:
            return self
        return MGFeature(self.type, self.name, self.agreement.substitute(bindings))

    def rename(self, mapping: Mapping[Any, Any]) -> 'MGFeature':
        if not self.agreement:
            return self
        return MGFeature(self.type, self.name, self.agreement.rename(mapping))

    def strip_features(self) -> 'MGFeature':
        if not self.agreement:
            return self
        return MGFeature(self.type, self.name)

    def __str__(self) -> str:
        fmt = self.type.prefix + self.name
        if self.agreement:
            fmt += str(self.agreement)
        return fmt

    __repr__ = repr_from_str


class _MGFeatureTransformer(FeatureStructureTransformerMixin, lark.Transformer):
    def start(self, args):
        return tuple(args)

    def _make(self, feature_type, args):
        agreement = args[1] if len(args) > 1 else FeatureStructure()
        return MGFeature(feature_type, args[0].value, agreement)

    def categorial(self, args):
        return self._make(MGFeatureType.CATEGORIAL, args)

    def selector(self, args):
        return self._make(MGFeatureType.SELECTOR, args)

    def head_selector(self, args):
        return self._make(MGFeatureType.HEAD_SELECTOR, args)

    def licensor(self, args):
        return self._make(MGFeatureType.LICENSOR, args)

    def licensee(self, args):
        return self._make(MGFeatureType.LICENSEE, args)

    def adjunct_selector(self, args):
        return self._make(MGFeatureType.ADJUNCT_SELECTOR, args)


class MGFeatureParser(object):
    """The parser for MG feature sequences.

        >>> from nlparsers.mg.feature import MGFeatureParser
        >>> MGFeatureParser().parse_features('=D +case T[num=?n]')
        >>> MGFeatureParser().parse_features('=>V =D T')
    """

    GRAMMAR = r"""
start: mg_feature*
mg_feature: "=>" NAME features? -> head_selector
    | "=" NAME features? -> selector
    | "+" NAME features? -> licensor
    | "-" NAME features? -> licensee
    | "~" NAME features? -> adjunct_selector
    | NAME features? -> categorial
""" + FEATURE_GRAMMAR

    def __init__(self):
        self.parser = lark.Lark(self.GRAMMAR, parser='lalr', start='start')
        self.transformer = _MGFeatureTransformer()

    def parse_features(self, string: str) -> Tuple[MGFeature, ...]:
        """Parse a feature sequence.

        Raises:
            CategoryParsingError: if the string is not a valid feature sequence.
        """
        try:
            return self.transformer.transform(self.parser.parse(string))
        except lark.exceptions.VisitError as e:
            raise CategoryParsingError(f'Invalid MG feature string: {string!r}. {e.orig_exc}') from e.orig_exc
        except lark.exceptions.LarkError as e:
            raise CategoryParsingError(f'Invalid MG feature string: {string!r}.\n{e}') from e


_default_feature_parser: Optional[MGFeatureParser] = None


def parse_mg_features(string: str) -> Tuple[MGFeature, ...]:
    """Parse a whitespace-separated MG feature sequence, e.g. ``=V +wh C``."""
    global _default_feature_parser
    if _default_feature_parser is None:
        _default_feature_parser = MGFeatureParser()
    return _default_feature_parser.parse_features(string)
