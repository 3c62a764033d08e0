#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : test_ccg.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Tests for the CCG rules, composition systems and the chart parser."""

import pytest

from nlparsers.config import ParserConfig
from nlparsers.common import CompositionError, DirectionalMismatch, Lexicon, parse_category, parse_term, is_instance
from nlparsers.chart import ParseFailureKind
from nlparsers.ccg import rules
from nlparsers.ccg.composition import CCGCompositionType, CCGCompositionSystem, COORDINATION_TAG
from nlparsers.ccg.parser import CCGChartParser


def C(string):
    return parse_category(string)


def make_lexicon(**extra):
    entries = {
        'Kim': ('NP', 'kim'),
        'Sandy': ('NP', 'sandy'),
        'left': ('S\\NP', '\\x.leave(x)'),
        'likes': ('(S\\NP)/NP', '\\y x.like(x, y)'),
        'and': ('conj', '\\l r.and(l, r)'),
    }
    entries.update(extra)
    return Lexicon.from_dict(entries)


def semantics_of(forest):
    return sorted(str(t.semantics) for t in forest.iter_trees())


class TestRules:
    def test_application(self):
        assert rules.forward_application(C('S/NP'), C('NP')) == C('S')
        assert rules.backward_application(C('NP'), C('S\\NP')) == C('S')

    def test_application_direction(self):
        with pytest.raises(DirectionalMismatch):
            rules.forward_application(C('S\\NP'), C('NP'))
        with pytest.raises(DirectionalMismatch):
            rules.backward_application(C('NP'), C('S/NP'))

    def test_application_with_features(self):
        category = rules.backward_application(C('NP[num=sg]'), C('S[num=?n]\\NP[num=?n]'))
        assert category == C('S[num=sg]')
        with pytest.raises(CompositionError):
            rules.backward_application(C('NP[num=pl]'), C('S\\NP[num=sg]'))

    def test_composition(self):
        assert rules.forward_composition(C('S/(S\\NP)'), C('(S\\NP)/NP')) == C('S/NP')
        assert rules.backward_composition(C('S\\NP'), C('S\\S')) == C('S\\NP')
        assert rules.forward_composition(C('S/S'), C('(S/NP)/PP'), degree=2) == C('(S/NP)/PP')

    def test_crossed_composition(self):
        assert rules.forward_composition(C('S/S'), C('S\\NP'), crossed=True) == C('S\\NP')
        assert rules.backward_composition(C('S/NP'), C('S\\S'), crossed=True) == C('S/NP')

    def test_substitution(self):
        assert rules.forward_substitution(C('(S/VP)/NP'), C('VP/NP')) == C('S/NP')
        assert rules.backward_substitution(C('VP\\NP'), C('(S\\VP)\\NP')) == C('S\\NP')

    def test_type_raising_composition(self):
        raised, category = rules.forward_type_raising_composition(C('NP'), C('(S\\NP)/NP'))
        assert raised == C('S/(S\\NP)')
        assert category == C('S/NP')

    def test_type_raising_targets(self):
        with pytest.raises(CompositionError):
            rules.forward_type_raising_composition(C('NP'), C('(S\\NP)/NP'), targets=['VP'])

    def test_coordination(self):
        assert rules.coordination(C('conj'), C('NP')) == C('NP\\NP')
        with pytest.raises(CompositionError):
            rules.coordination(C('NP'), C('conj'))

    def test_peel_arguments(self):
        inner, arguments = rules.peel_arguments(C('(S\\NP)/NP/PP'), 2, rules.FORWARD)
        assert inner == C('S\\NP')
        assert rules.attach_arguments(inner, arguments) == C('(S\\NP)/NP/PP')

    def test_semantics(self):
        kim, leave = parse_term('kim'), parse_term('\\x.leave(x)')
        assert str(rules.application_semantics(leave, kim)) == 'leave(kim)'
        raised = rules.type_raising_semantics(kim)
        assert str(rules.application_semantics(raised, leave)) == 'leave(kim)'
        assert rules.application_semantics(None, kim) is None


class TestCompositionSystem:
    def rules_of(self, results):
        return [r.rule for r in results]

    def test_forward_composition(self):
        results = CCGCompositionSystem.make_default().try_compose(C('S/(S\\NP)'), C('(S\\NP)/NP'))
        assert '>B' in self.rules_of(results)
        assert [r.category for r in results if r.rule == '>B'] == [C('S/NP')]

    def test_generalized_composition(self):
        results = CCGCompositionSystem.make_default().try_compose(C('S/S'), C('(S/NP)/PP'))
        assert [(r.rule, r.category) for r in results] == [('>B2', C('(S/NP)/PP'))]
        results = CCGCompositionSystem.make_default(max_composition_degree=1).try_compose(C('S/S'), C('(S/NP)/PP'))
        assert results == []

    def test_crossed_composition_is_opt_in(self):
        assert CCGCompositionSystem.make_default().try_compose(C('S/S'), C('S\\NP')) == []
        system = CCGCompositionSystem.from_config(ParserConfig(enable_crossed_composition=True))
        results = system.try_compose(C('S/S'), C('S\\NP'))
        assert [(r.rule, r.category) for r in results] == [('>Bx', C('S\\NP'))]

    def test_substitution(self):
        results = CCGCompositionSystem.make_default().try_compose(C('(S/VP)/NP'), C('VP/NP'))
        assert [(r.rule, r.category) for r in results] == [('>S', C('S/NP'))]

    def test_type_raising_only_when_application_fails(self):
        system = CCGCompositionSystem.make_default()
        results = system.try_compose(C('NP'), C('(S\\NP)/NP'))
        assert self.rules_of(results) == ['>B']
        assert results[0].unary[0].rule == '>T'
        assert results[0].unary[0].category == C('S/(S\\NP)')
        results = system.try_compose(C('NP'), C('S\\NP'))
        assert self.rules_of(results) == ['<']

    def test_normal_form(self):
        system = CCGCompositionSystem.make_default()
        assert system.try_compose(C('S/NP'), C('NP'), lhs_tag='fc') == []
        system = CCGCompositionSystem.make_default(normal_form=False)
        assert self.rules_of(system.try_compose(C('S/NP'), C('NP'), lhs_tag='fc')) == ['>']

    def test_coordination(self):
        system = CCGCompositionSystem.make_default()
        results = system.try_compose(C('conj'), C('NP'))
        assert [(r.rule, r.category, r.tag) for r in results] == [('conj', C('NP\\NP'), COORDINATION_TAG)]
        results = system.try_compose(C('NP'), C('NP\\NP'), rhs_tag=COORDINATION_TAG)
        assert [(r.rule, r.category) for r in results] == [('<Φ', C('NP'))]
        assert system.try_compose(C('NP\\NP'), C('S\\NP'), lhs_tag=COORDINATION_TAG) == []

    def test_function_application(self):
        system = CCGCompositionSystem.make_function_application()
        assert set(system.allowed_composition_types) == {CCGCompositionType.FORWARD_APPLICATION, CCGCompositionType.BACKWARD_APPLICATION}
        assert system.try_compose(C('S/(S\\NP)'), C('(S\\NP)/NP')) == []

    def test_from_config(self):
        system = CCGCompositionSystem.from_config(ParserConfig(enable_type_raising=False, enable_coordination=False))
        assert not system.is_allowed(CCGCompositionType.FORWARD_TYPE_RAISING)
        assert not system.is_allowed(CCGCompositionType.COORDINATION)
        assert system.is_allowed(CCGCompositionType.FORWARD_COMPOSITION)
        assert 'Max composition degree: 2' in system.format_summary()


class TestCCGChartParser:
    def test_intransitive(self):
        forest = CCGChartParser(make_lexicon()).parse('Kim left', 'S')
        assert forest.ok
        assert forest.count_derivations() == 1
        tree = forest.best_tree()
        assert str(tree.semantics) == 'leave(kim)'
        assert tree.words() == ['Kim', 'left']
        assert tree.as_nltk_str() == '(S (NP Kim) (S\\NP left))'

    def test_word_order(self):
        result = CCGChartParser(make_lexicon()).parse('left Kim', 'S')
        assert not result.ok
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def test_transitive_normal_form(self):
        forest = CCGChartParser(make_lexicon()).parse('Kim likes Sandy', 'S')
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['like(kim, sandy)']

    def test_spurious_ambiguity_without_normal_form(self):
        parser = CCGChartParser(make_lexicon(), config=ParserConfig(normal_form=False))
        forest = parser.parse('Kim likes Sandy', 'S')
        assert forest.count_derivations() == 2
        assert semantics_of(forest) == ['like(kim, sandy)', 'like(kim, sandy)']
        assert sorted(t.rule for t in forest.iter_trees()) == ['<', '>']

    def test_without_type_raising(self):
        parser = CCGChartParser(make_lexicon(), config=ParserConfig(normal_form=False, enable_type_raising=False))
        assert parser.parse('Kim likes Sandy', 'S').count_derivations() == 1

    def test_type_raising_semantics(self):
        forest = CCGChartParser(make_lexicon()).parse('Kim likes', 'S/NP')
        assert forest.count_derivations() == 1
        tree = forest.best_tree()
        assert tree.rules() == ['>B', '>T', 'lex', 'lex']
        assert str(tree.semantics) == '\\z1.like(kim, z1)'

    def test_type_raising_targets(self):
        parser = CCGChartParser(make_lexicon(), config=ParserConfig(type_raising_targets=['VP']))
        result = parser.parse('Kim likes', 'S/NP')
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def test_coordination(self):
        forest = CCGChartParser(make_lexicon()).parse('Kim and Sandy left', 'S')
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['leave(and(kim, sandy))']

    def test_agreement(self):
        lexicon = Lexicon.from_dict({
            'Kim': 'NP[num=sg]', 'they': 'NP[num=pl]',
            'sleeps': 'S\\NP[num=sg]', 'sleep': 'S\\NP[num=pl]'
        })
        parser = CCGChartParser(lexicon)
        assert parser.parse('Kim sleeps').ok
        assert parser.parse('they sleep').ok
        assert not parser.parse('Kim sleep').ok
        assert CCGChartParser(lexicon, config=ParserConfig(morphosyntax_enabled=False)).parse('Kim sleep').ok

    def test_unknown_token(self):
        result = CCGChartParser(make_lexicon()).parse(['Kim', 'ran'], 'S')
        assert result.kind is ParseFailureKind.UNKNOWN_TOKEN
        assert result.token == 'ran'
        assert result.position == 1

    def test_empty_input(self):
        result = CCGChartParser(make_lexicon()).parse('', 'S')
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def test_step_budget(self):
        parser = CCGChartParser(make_lexicon(), config=ParserConfig(step_budget=0))
        result = parser.parse('Kim left', 'S')
        assert result.kind is ParseFailureKind.SEARCH_BOUND_EXCEEDED
        assert result.steps == 1

    def test_beam(self):
        lexicon = make_lexicon(left=['S\\NP', ('NP', None, 1.0)])
        forest = CCGChartParser(lexicon).parse('Kim left', 'S')
        assert forest.ok and forest.exhaustive
        result = CCGChartParser(lexicon, config=ParserConfig(beam=1)).parse('Kim left', 'S')
        assert result.kind is ParseFailureKind.SEARCH_BOUND_EXCEEDED

    def test_unresolved_variable_is_not_a_root(self):
        lexicon = Lexicon.from_dict({'it': '?X', 'Kim': 'NP', 'foo': '?X/NP'})
        parser = CCGChartParser(lexicon)
        assert parser.parse('it', 'S').kind is ParseFailureKind.NO_DERIVATION
        assert parser.parse('foo Kim', 'S').kind is ParseFailureKind.NO_DERIVATION

    def test_root_with_feature_variable(self):
        lexicon = Lexicon.from_dict({'Kim': 'NP', 'left': 'S[tense=?t]\\NP'})
        forest = CCGChartParser(lexicon).parse('Kim left', 'S')
        assert forest.count_derivations() == 1


def enumerate_derivations(system, lexicon, tokens, goal):
    """Enumerate all derivations by brute force over the bracketings, without packing."""
    memo = dict()

    def derive(i, j):
        if (i, j) in memo:
            return memo[i, j]
        if j - i == 1:
            output = [(e.category, None) for e in lexicon.lookup(tokens[i])]
        else:
            output = list()
            for k in range(i + 1, j):
                for lhs, lhs_tag in derive(i, k):
                    for rhs, rhs_tag in derive(k, j):
                        output.extend((r.category, r.tag) for r in system.try_compose(lhs, rhs, lhs_tag, rhs_tag))
        memo[i, j] = output
        return output

    return len([c for c, tag in derive(0, len(tokens)) if tag != COORDINATION_TAG and is_instance(c, goal)])


class TestChartCompleteness:
    lexicon = Lexicon.from_dict({
        'Kim': 'NP', 'the': 'NP/N', 'dog': 'N', 'cat': 'N',
        'saw': '(S\\NP)/NP', 'and': 'conj'
    })

    @pytest.mark.parametrize('normal_form', [True, False])
    @pytest.mark.parametrize('sentence', ['Kim saw the dog', 'Kim saw the dog and the cat', 'the dog and the cat saw Kim'])
    def test_packed_count_matches_enumeration(self, sentence, normal_form):
        config = ParserConfig(normal_form=normal_form)
        parser = CCGChartParser(self.lexicon, config=config)
        tokens = sentence.split()
        forest = parser.parse(tokens, 'S')
        expected = enumerate_derivations(parser.composition_system, self.lexicon, tokens, C('S'))
        assert expected > 0
        assert forest.count_derivations() == expected
        assert len(forest.trees()) == expected

    def test_raising_only_adds_derivations(self):
        for sentence in ['Kim saw the dog', 'Kim saw the dog and the cat']:
            with_raising = CCGChartParser(self.lexicon, config=ParserConfig(normal_form=False)).parse(sentence)
            without_raising = CCGChartParser(self.lexicon, config=ParserConfig(normal_form=False, enable_type_raising=False)).parse(sentence)
            assert with_raising.count_derivations() >= without_raising.count_derivations()

    def test_applications_are_sound(self):
        forest = CCGChartParser(self.lexicon, config=ParserConfig(normal_form=False)).parse('Kim saw the dog and the cat')
        for tree in forest.iter_trees():
            for node in tree.iter_nodes():
                if node.rule == '>':
                    left, right = node.children
                    assert rules.forward_application(left.category, right.category) == node.category
                elif node.rule == '<':
                    left, right = node.children
                    assert rules.backward_application(left.category, right.category) == node.category
