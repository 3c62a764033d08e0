#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : lexical_item.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Lexical items and lexicons for Minimalist Grammars.

A lexical item is written as ``word :: features``, e.g. ``likes :: =D =D V``. Empty (phonologically null) items use
``''`` or ``ε`` as the word: ``ε :: =V +wh C``.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union, Iterable, Iterator, Mapping, Tuple

from nlparsers.common.errors import CategoryParsingError
from nlparsers.common.terms import Term, parse_term
from nlparsers.common.lexicon import LexicalEntry, Lexicon
from nlparsers.mg.feature import MGFeature, parse_mg_features

__all__ = ['MGLexicalItem', 'parse_mg_item', 'MGLexicon']

_EMPTY_WORDS = ('', "''", 'ε', '""')


@dataclass(frozen=True, repr=False)
class MGLexicalItem(object):
    """A lexical item: a word and its feature sequence."""

    word: str
    features: Tuple[MGFeature, ...]

    @property
    def is_empty(self) -> bool:
        return self.word == ''

    def iter_variables(self) -> Iterator[Any]:
        for f in self.features:
            yield from f.iter_variables()

    def substitute(self, bindings) -> 'MGLexicalItem':
        return MGLexicalItem(self.word, tuple(f.substitute(bindings) for f in self.features))

    def rename(self, mapping: Mapping[Any, Any]) -> 'MGLexicalItem':
        return MGLexicalItem(self.word, tuple(f.rename(mapping) for f in self.features))

    def strip_features(self) -> 'MGLexicalItem':
        return MGLexicalItem(self.word, tuple(f.strip_features() for f in self.features))

    def __str__(self) -> str:
        word = self.word if self.word else 'ε'
        return word + ' :: ' + ' '.join(str(f) for f in self.features)

    def __repr__(self) -> str:
        return f'MGLexicalItem({self})'


def parse_mg_item(string: str) -> MGLexicalItem:
    """Parse a lexical item such as ``likes :: =D =D V``.

    Raises:
        CategoryParsingError: if the string is not a valid lexical item.
    """
    word, separator, features = string.partition('::')
    if separator == '':
        raise CategoryParsingError(f'Invalid MG lexical item: {string!r}. Expect "word :: features".')
    word = word.strip()
    if word in _EMPTY_WORDS:
        word = ''
    features = parse_mg_features(features)
    if len(features) == 0:
        raise CategoryParsingError(f'Invalid MG lexical item: {string!r}. The feature sequence is empty.')
    return MGLexicalItem(word, features)


class MGLexicon(Lexicon):
    """A lexicon of MG lexical items. The category of each entry is an :class:`MGLexicalItem`.

    Example:
        >>> lexicon = MGLexicon.from_items(['Kim :: D -case', 'left :: =D V', 'ε :: =V +case T'])
        >>> lexicon.add('the', '=N D -case')
    """

    def __init__(self, name: str = 'mg_lexicon'):
        super().__init__(category_parser=parse_mg_features, name=name)

    @classmethod
    def from_items(cls, items: Iterable[Union[str, MGLexicalItem]], **kwargs) -> 'MGLexicon':
        lexicon = cls(**kwargs)
        for item in items:
            lexicon.add_item(item)
        return lexicon

    def add(self, word: str, category: Any, semantics: Union[None, str, Term] = None, weight: float = 0.0) -> LexicalEntry:
        """Add a lexical item.

        Args:
            word: the word. Use the empty string for empty items.
            category: the feature sequence, as a string (``=D V``), a sequence of features, or an :class:`MGLexicalItem`.
            semantics: the meaning of the entry.
            weight: the weight of the entry.

        Returns:
            the new entry.
        """
        if word in _EMPTY_WORDS:
            word = ''
        if isinstance(category, str):
            features = parse_mg_features(category)
        elif isinstance(category, MGLexicalItem):
            features = category.features
        else:
            features = tuple(category)
        entry = LexicalEntry(word, MGLexicalItem(word, tuple(features)), float(weight), parse_term(semantics))
        self.add_entry(entry)
        return entry

    def add_item(self, item: Union[str, MGLexicalItem], semantics: Optional[Union[str, Term]] = None, weight: float = 0.0) -> LexicalEntry:
        """Add a lexical item written as ``word :: features``."""
        if isinstance(item, str):
            item = parse_mg_item(item)
        return self.add(item.word, item, semantics=semantics, weight=weight)
