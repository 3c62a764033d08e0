#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : test_parse.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Tests for the formalism-independent entry point and the parser configuration."""

import pytest

import nlparsers
from nlparsers import (
    Formalism, MGLocalityDomain, ParserConfig, get_parser_config, override_capabilities,
    FormalismDisabledError, Lexicon, MGLexicon, CCGChartParser, MGChartParser, TLGParser,
    ParseFailureKind, NoDerivationError, make_parser, parse
)


@pytest.fixture
def lexicon():
    return Lexicon.from_dict({'Kim': ('NP', 'kim'), 'left': ('S\\NP', '\\x.leave(x)')})


@pytest.fixture
def mg_lexicon():
    return MGLexicon.from_items(['Kim :: D', 'left :: V', 'ε :: =V =D C'])


class TestParserConfig:
    def test_defaults(self):
        config = get_parser_config()
        assert config.get_formalism() is Formalism.CCG
        assert config.get_mg_locality() is MGLocalityDomain.PROBE
        assert config.max_composition_degree == 2
        assert config.normal_form
        assert config.beam is None
        assert config.use_morphosyntax
        assert config.enable_modalities
        assert tuple(config.phase_heads) == ('C', 'v', 'D')
        assert ParserConfig(mg_locality='phase').get_mg_locality() is MGLocalityDomain.PHASE

    def test_as_default(self):
        with ParserConfig(formalism='mg').as_default():
            assert get_parser_config().formalism == 'mg'
        assert get_parser_config().formalism == 'ccg'

    def test_morphosyntax_capability(self):
        with override_capabilities(['ccg']):
            assert not ParserConfig().use_morphosyntax


class TestMakeParser:
    @pytest.mark.parametrize('formalism, parser_type', [('ccg', CCGChartParser), ('mg', MGChartParser), ('tlg', TLGParser)])
    def test_dispatch(self, lexicon, formalism, parser_type):
        assert isinstance(make_parser(lexicon, ParserConfig(formalism=formalism)), parser_type)

    def test_default_config(self, lexicon):
        with ParserConfig(formalism='tlg').as_default():
            assert isinstance(make_parser(lexicon), TLGParser)

    def test_unknown_formalism(self, lexicon):
        with pytest.raises((ValueError, KeyError)):
            make_parser(lexicon, ParserConfig(formalism='hpsg'))


class TestParse:
    def test_ccg(self, lexicon):
        forest = parse(lexicon, 'Kim left', 'S')
        assert forest.formalism == 'ccg'
        assert str(forest.best_tree().semantics) == 'leave(kim)'

    def test_tlg(self, lexicon):
        forest = parse(lexicon, 'Kim left', 'S', config=ParserConfig(formalism='tlg'))
        assert forest.formalism == 'tlg'
        assert forest.count_derivations() == 1
        assert str(forest.best_tree().semantics) == 'leave(kim)'

    def test_mg(self, mg_lexicon):
        forest = parse(mg_lexicon, 'Kim left', 'C', config=ParserConfig(formalism='mg'))
        assert forest.formalism == 'mg'
        assert forest.count_derivations() == 1

    def test_failure_unwrap(self, lexicon):
        result = parse(lexicon, 'left Kim', 'S')
        assert result.kind is ParseFailureKind.NO_DERIVATION
        with pytest.raises(NoDerivationError):
            result.unwrap()

    def test_success_unwrap(self, lexicon):
        forest = parse(lexicon, 'Kim left', 'S')
        assert forest.unwrap() is forest

    @pytest.mark.parametrize('formalism', ['mg', 'tlg'])
    def test_disabled_formalism(self, lexicon, formalism):
        with override_capabilities(['ccg']):
            with pytest.raises(FormalismDisabledError):
                parse(lexicon, 'Kim left', 'S', config=ParserConfig(formalism=formalism))
            assert parse(lexicon, 'Kim left', 'S').ok

    def test_disabled_parser_class(self, lexicon):
        with override_capabilities(['ccg']):
            with pytest.raises(FormalismDisabledError):
                TLGParser(lexicon).parse('Kim left', 'S')

    def test_public_api(self):
        for name in nlparsers.__all__:
            assert hasattr(nlparsers, name)
