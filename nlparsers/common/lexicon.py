#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : lexicon.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Data structures for lexical entries and lexicons.

The parsers only read a lexicon through :meth:`Lexicon.lookup`. A token without entries is an ordinary parse failure
(see :class:`nlparsers.chart.result.ParseFailure`), not an error of the lexicon.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Optional, Union, Iterable, Tuple, List, Dict, Callable
from jacinle.utils.printing import indent_text

from nlparsers.capabilities import require
from nlparsers.common.terms import Term, parse_term
from nlparsers.common.parsing import parse_category

__all__ = ['LexicalEntry', 'Lexicon', 'LocalizedLexicon', 'MultilingualLexicon']


@dataclass(frozen=True)
class LexicalEntry(object):
    """A lexical entry. Entries are immutable; parsers instantiate a fresh copy of the category for each use."""

    word: str
    """The surface token. Empty MG items use the empty string."""

    category: Any
    """The category of the entry. A :class:`~nlparsers.common.category.Category` for CCG and TLG, and a
    :class:`~nlparsers.mg.lexical_item.MGLexicalItem` for MG."""

    weight: float = 0.0
    """The weight (log-score) of the entry."""

    semantics: Optional[Term] = None
    """The meaning of the entry."""

    def __str__(self) -> str:
        fmt = type(self).__name__ + '['
        fmt += 'word=' + repr(self.word) + ', '
        fmt += 'category=' + str(self.category) + ', '
        if self.semantics is not None:
            fmt += 'semantics=' + str(self.semantics) + ', '
        fmt += 'weight=' + str(self.weight)
        fmt += ']'
        return fmt

    def __repr__(self):
        return str(self)


EntrySpec = Union[LexicalEntry, str, Any, Tuple]


class Lexicon(object):
    """A mapping from surface tokens to lexical entries."""

    def __init__(self, category_parser: Optional[Callable[[str], Any]] = None, name: str = 'lexicon'):
        """Initialize the lexicon.

        Args:
            category_parser: the function that converts category strings into categories. Defaults to
                :func:`~nlparsers.common.parsing.parse_category`.
            name: the name of the lexicon.
        """
        self.category_parser = category_parser if category_parser is not None else parse_category
        self.name = name
        self.entries: Dict[str, List[LexicalEntry]] = defaultdict(list)

    entries: Dict[str, List[LexicalEntry]]
    """The lexical entries, indexed by the normalized token."""

    @classmethod
    def from_dict(cls, entries_dict: Dict[str, Union[EntrySpec, Iterable[EntrySpec]]], **kwargs) -> 'Lexicon':
        """Make a lexicon from a dictionary. See :meth:`update_entries` for the accepted values.

        Example:
            >>> lexicon = Lexicon.from_dict({'Kim': 'NP', 'left': ['S\\NP', ('S\\NP', 'leave')]})
        """
        lexicon = cls(**kwargs)
        lexicon.update_entries(entries_dict)
        return lexicon

    def normalize_token(self, token: str) -> str:
        """Normalize a token before it is stored or looked up."""
        return token

    def add(self, word: str, category: Any, semantics: Union[None, str, Term] = None, weight: float = 0.0) -> LexicalEntry:
        """Add a lexical entry.

        Args:
            word: the word.
            category: the category. Strings are parsed with the category parser of the lexicon.
            semantics: the meaning of the entry. Strings are parsed with :func:`~nlparsers.common.terms.parse_term`.
            weight: the weight of the entry.

        Returns:
            the new entry.
        """
        if isinstance(category, str):
            category = self.category_parser(category)
        entry = LexicalEntry(word, category, float(weight), parse_term(semantics))
        self.add_entry(entry)
        return entry

    def add_entry(self, entry: LexicalEntry):
        """Add a lexical entry object."""
        self.entries[self.normalize_token(entry.word)].append(entry)

    def update_entries(self, entries_dict: Dict[str, Union[EntrySpec, Iterable[EntrySpec]]]):
        """Update the lexicon entries.

        Args:
            entries_dict: a dictionary from words to entries. Each value is an entry or a list of entries, where an entry
                is a :class:`LexicalEntry`, a category (or category string), or a tuple ``(category, semantics)`` or
                ``(category, semantics, weight)``.
        """
        for word, specs in entries_dict.items():
            if isinstance(specs, (str, tuple, LexicalEntry)) or not isinstance(specs, Iterable):
                specs = [specs]
            for spec in specs:
                if isinstance(spec, LexicalEntry):
                    self.add_entry(spec)
                elif isinstance(spec, tuple):
                    self.add(word, *spec)
                else:
                    self.add(word, spec)

    def clear_entries(self, word: str):
        """Clear all lexical entries for a word."""
        self.entries.pop(self.normalize_token(word), None)

    def lookup(self, token: str) -> List[LexicalEntry]:
        """Return the lexical entries of a token. Returns an empty list for unknown tokens."""
        return list(self.entries.get(self.normalize_token(token), ()))

    def empty_entries(self) -> List[LexicalEntry]:
        """Return the entries with an empty surface form (used by Minimalist Grammars)."""
        return self.lookup('')

    def words(self) -> List[str]:
        """Return all known (normalized) words, excluding the empty word."""
        return [w for w, entries in self.entries.items() if w != '' and len(entries) > 0]

    def __contains__(self, token: str) -> bool:
        return len(self.entries.get(self.normalize_token(token), ())) > 0

    def __len__(self) -> int:
        return sum(len(v) for v in self.entries.values())

    def __iter__(self):
        for entries in self.entries.values():
            yield from entries

    def __str__(self) -> str:
        return f'{type(self).__name__}({self.name}, nr_entries={len(self)})'

    __repr__ = __str__

    def _format_lexicon_entries(self) -> str:
        fmt = 'Lexicon Entries:\n'
        for word, entries in self.entries.items():
            for entry in entries:
                this_fmt = f'{word!r}: ' + str(entry.category)
                if entry.semantics is not None:
                    this_fmt += ' := ' + str(entry.semantics)
                if entry.weight != 0:
                    this_fmt += f' (weight={entry.weight})'
                fmt += indent_text(this_fmt) + '\n'
        return fmt

    def format_summary(self) -> str:
        """Format the summary of the lexicon."""
        return str(self) + '\n' + indent_text(self._format_lexicon_entries().rstrip())

    def print_summary(self):
        """Print the summary of the lexicon."""
        print(self.format_summary())


_DOTTED_I_LANGUAGES = ('tr', 'az')


class LocalizedLexicon(Lexicon):
    """A lexicon for a single language. Tokens are case-folded with the conventions of the language."""

    def __init__(self, language: str, category_parser: Optional[Callable[[str], Any]] = None, casefold: bool = True):
        super().__init__(category_parser, name=language)
        self.language = language
        self.casefold = casefold

    def normalize_token(self, token: str) -> str:
        if not self.casefold:
            return token
        if self.language.split('-')[0].lower() in _DOTTED_I_LANGUAGES:
            token = token.replace('I', 'ı').replace('İ', 'i')
            return token.lower()
        return token.casefold()


class MultilingualLexicon(object):
    """A collection of :class:`LocalizedLexicon`, one per language. Requires the ``multilingual`` capability."""

    def __init__(self, category_parser: Optional[Callable[[str], Any]] = None):
        require('multilingual')
        self.category_parser = category_parser
        self.lexicons: Dict[str, LocalizedLexicon] = dict()

    def add_language(self, language: str, casefold: bool = True) -> LocalizedLexicon:
        """Create (or return) the lexicon of a language.

        Args:
            language: the language code (e.g., ``en``, ``tr``, ``pt-BR``).
            casefold: whether tokens are case-folded.
        """
        if language not in self.lexicons:
            self.lexicons[language] = LocalizedLexicon(language, self.category_parser, casefold=casefold)
        return self.lexicons[language]

    def for_language(self, language: str) -> LocalizedLexicon:
        """Return the lexicon of a language.

        Raises:
            KeyError: if the language has not been added.
        """
        if language not in self.lexicons:
            raise KeyError(f'Unknown language: {language}. Known languages: {sorted(self.lexicons)}.')
        return self.lexicons[language]

    __getitem__ = for_language

    def languages(self) -> List[str]:
        return list(self.lexicons.keys())

    def __str__(self) -> str:
        return 'MultilingualLexicon(' + ', '.join(self.lexicons.keys()) + ')'

    __repr__ = __str__
