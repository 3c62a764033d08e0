#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : test_lexicon.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Tests for lexicons and capability flags."""

import pytest

from nlparsers import capabilities
from nlparsers.capabilities import CapabilityDisabledError, FormalismDisabledError, override_capabilities
from nlparsers.common import LexicalEntry, Lexicon, LocalizedLexicon, MultilingualLexicon, parse_category, parse_term


class TestLexicon:
    def test_from_dict(self):
        lexicon = Lexicon.from_dict({
            'Kim': ('NP', 'kim'),
            'left': ['S\\NP', ('S\\NP', '\\x.leave(x)', 0.5)],
        })
        assert len(lexicon) == 3
        entries = lexicon.lookup('left')
        assert [e.category for e in entries] == [parse_category('S\\NP')] * 2
        assert entries[0].semantics is None
        assert entries[1].semantics == parse_term('\\x.leave(x)')
        assert entries[1].weight == 0.5

    def test_unknown_token(self):
        lexicon = Lexicon.from_dict({'Kim': 'NP'})
        assert lexicon.lookup('Sandy') == []
        assert 'Kim' in lexicon
        assert 'Sandy' not in lexicon

    def test_entry_objects(self):
        lexicon = Lexicon()
        lexicon.add_entry(LexicalEntry('Kim', parse_category('NP')))
        assert lexicon.lookup('Kim')[0].category == parse_category('NP')

    def test_empty_entries(self):
        lexicon = Lexicon.from_dict({'': 'NP', 'Kim': 'NP'})
        assert len(lexicon.empty_entries()) == 1
        assert lexicon.words() == ['Kim']

    def test_clear_entries(self):
        lexicon = Lexicon.from_dict({'Kim': 'NP'})
        lexicon.clear_entries('Kim')
        assert len(lexicon) == 0

    def test_format_summary(self):
        lexicon = Lexicon.from_dict({'Kim': ('NP', 'kim')}, name='toy')
        summary = lexicon.format_summary()
        assert summary.startswith('Lexicon(toy, nr_entries=1)')
        assert "'Kim': NP := kim" in summary


class TestLocalizedLexicon:
    def test_casefold(self):
        lexicon = LocalizedLexicon('en')
        lexicon.add('Kim', 'NP')
        assert len(lexicon.lookup('KIM')) == 1

    def test_dotted_i(self):
        lexicon = LocalizedLexicon('tr')
        assert lexicon.normalize_token('I') == 'ı'
        assert lexicon.normalize_token('İstanbul') == 'istanbul'

    def test_no_casefold(self):
        lexicon = LocalizedLexicon('en', casefold=False)
        lexicon.add('Kim', 'NP')
        assert lexicon.lookup('kim') == []


class TestCapabilities:
    def test_defaults(self):
        for name in ['ccg', 'mg', 'tlg', 'morphosyntax']:
            assert capabilities.is_enabled(name)
        assert not capabilities.is_enabled('multilingual')

    def test_multilingual_is_gated(self):
        with pytest.raises(CapabilityDisabledError):
            MultilingualLexicon()

    def test_multilingual(self):
        with override_capabilities(['ccg', 'multilingual']):
            lexicon = MultilingualLexicon()
            lexicon.add_language('en').add('Kim', 'NP')
            lexicon.add_language('tr').add('kız', 'N')
            assert lexicon.languages() == ['en', 'tr']
            assert len(lexicon['en'].lookup('kim')) == 1
            with pytest.raises(KeyError):
                lexicon.for_language('de')

    def test_override_is_restored(self):
        with override_capabilities(['ccg']):
            assert not capabilities.is_enabled('mg')
            with pytest.raises(FormalismDisabledError):
                capabilities.require('mg')
        assert capabilities.is_enabled('mg')

    def test_unknown_names_are_ignored(self):
        with override_capabilities(['ccg', 'telepathy']):
            assert capabilities.enabled_capabilities() == frozenset(['ccg'])
