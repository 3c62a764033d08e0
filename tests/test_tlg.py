#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : test_tlg.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Tests for the Lambek prover and the type-logical parser."""

import pytest

from nlparsers.config import ParserConfig
from nlparsers.common import CategoryVariable, Lexicon, parse_category
from nlparsers.chart import ParseFailureKind, SearchBudget, SearchBudgetExhausted
from nlparsers.tlg import Bracket, Sequent, TLGRule, FocusedProver, TLGParser


def C(string):
    return parse_category(string)


def prove(antecedent, succedent, **kwargs):
    return FocusedProver(**kwargs).prove([C(a) for a in antecedent], C(succedent))


class TestSequent:
    def test_str(self):
        sequent = Sequent((C('NP'), C('S\\NP')), C('S'), focus=1)
        assert str(sequent) == 'NP, [S\\NP] => S'
        assert sequent.is_focused
        assert str(sequent.unfocused()) == 'NP, S\\NP => S'

    def test_rules(self):
        assert TLGRule('/L') is TLGRule.SLASH_LEFT
        assert TLGRule.BACKSLASH_RIGHT.value == '\\R'

    def test_brackets(self):
        sequent = Sequent((C('NP'), Bracket((C('□NP'), C('S\\NP')))), C('S'), focus=(1, 0))
        assert str(sequent) == 'NP, <[□NP], S\\NP> => S'
        assert sequent.focused_formula == C('□NP')
        assert Sequent((C('NP'), ), C('NP'), focus=0).focus == (0, )


class TestFocusedProver:
    def test_application(self):
        results = prove(['NP', 'S\\NP'], 'S')
        assert len(results) == 1
        node, _ = results[0]
        assert [h.rule for h in node.histories] == ['focus']

    def test_lifting(self):
        assert len(prove(['NP'], 'S/(S\\NP)')) == 1
        assert len(prove(['NP'], 'S\\(S/NP)')) == 1
        assert prove(['NP'], '(S/NP)\\S') == []

    def test_composition(self):
        assert len(prove(['A/B', 'B/C'], 'A/C')) == 1
        assert len(prove(['B\\A', 'C\\B'], 'C\\A')) == 1

    def test_unprovable(self):
        assert prove(['NP'], 'S') == []
        assert prove(['S\\NP', 'NP'], 'S') == []
        assert prove(['S/(S\\NP)'], 'NP') == []

    def test_product(self):
        assert len(prove(['NP', 'NP'], 'NP*NP')) == 1
        assert prove(['NP', 'NP'], 'NP*NP', enable_product=False) == []
        assert len(prove(['NP*NP', '(S\\NP)\\NP'], 'S')) == 1

    def test_memo(self):
        prover = FocusedProver()
        first = prover.prove([C('NP'), C('S\\NP')], C('S'))
        assert len(prover.memo) > 0
        assert prover.prove([C('NP'), C('S\\NP')], C('S')) is first

    def test_variables(self):
        results = prove(['NP', '(?X\\?X)/?X', 'NP'], 'NP')
        assert len(results) == 1
        _, bindings = results[0]
        assert bindings.apply(CategoryVariable('X')) == C('NP')

    def test_variable_instantiated_from_context(self):
        results = prove(['NP', '?X', 'NP'], 'S')
        assert len(results) == 1
        _, bindings = results[0]
        assert bindings.apply(CategoryVariable('X')) == C('(S\\NP)/NP')

    def test_variable_succedent(self):
        results = prove(['S\\NP'], '?Y')
        assert len(results) == 1
        _, bindings = results[0]
        assert bindings.apply(CategoryVariable('Y')) == C('S\\NP')

    def test_variable_coordination_of_functors(self):
        results = prove(['S\\NP', '(?X\\?X)/?X', 'S\\NP'], 'S\\NP')
        assert len(results) == 1
        _, bindings = results[0]
        assert bindings.apply(CategoryVariable('X')) == C('S\\NP')

    def test_modal_theorems(self):
        assert len(prove(['◇□NP'], 'NP')) == 1
        assert len(prove(['NP'], '□◇NP')) == 1
        assert len(prove(['◇NP'], '◇NP')) == 1
        assert len(prove(['□NP'], '□NP')) == 1
        assert prove(['NP'], '◇□NP') == []
        assert prove(['□NP'], 'NP') == []
        assert prove(['NP'], '◇NP') == []

    def test_modalities_disabled(self):
        assert prove(['◇□NP'], 'NP', enable_modalities=False) == []
        assert prove(['NP'], '□◇NP', enable_modalities=False) == []

    def test_box_inside_bracket(self):
        results = prove(['NP', '(S\\NP)/NP', '◇□NP'], 'S')
        assert len(results) == 1
        node, _ = results[0]
        assert [h.rule for h in node.histories] == ['◇L']

    def test_budget(self):
        with pytest.raises(SearchBudgetExhausted):
            prove(['NP', 'S\\NP'], 'S', budget=SearchBudget(0))


def make_lexicon(**extra):
    entries = {
        'Kim': ('NP', 'kim'),
        'Sandy': ('NP', 'sandy'),
        'left': ('S\\NP', '\\x.leave(x)'),
        'likes': ('(S\\NP)/NP', '\\y x.like(x, y)'),
        'and': ('(?X\\?X)/?X', '\\r l.and(l, r)'),
        'everyone': ('S/(S\\NP)', '\\p.every(p)'),
        'quickly': ('(S\\NP)\\(S\\NP)', '\\p x.quick(p(x))'),
        'both': ('NP*NP', '<kim, sandy>'),
        'met': ('(S\\NP)\\NP', '\\y x.meet(x, y)'),
        'slept': ('S\\NP', '\\x.sleep(x)'),
        'hates': ('(S\\NP)/NP', '\\y x.hate(x, y)'),
        'Bill': ('NP', 'bill'),
        'book': ('N', 'book'),
        'that': ('(N\\N)/(S/◇□NP)', '\\p n.that(n, p)'),
    }
    entries.update(extra)
    return Lexicon.from_dict(entries)


def semantics_of(forest):
    return sorted(str(t.semantics) for t in forest.iter_trees())


class TestTLGParser:
    def test_intransitive(self):
        forest = TLGParser(make_lexicon()).parse('Kim left', 'S')
        assert forest.ok
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['leave(kim)']

    def test_word_order(self):
        result = TLGParser(make_lexicon()).parse('left Kim', 'S')
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def test_hypothetical_reasoning(self):
        forest = TLGParser(make_lexicon()).parse('Kim likes', 'S/NP')
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['\\x1.like(kim, x1)']

    def test_product(self):
        forest = TLGParser(make_lexicon()).parse('Kim Sandy', 'NP*NP')
        assert semantics_of(forest) == ['<kim, sandy>']
        result = TLGParser(make_lexicon(), config=ParserConfig(enable_product=False)).parse('Kim Sandy', 'NP*NP')
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def test_product_left(self):
        forest = TLGParser(make_lexicon()).parse('both met', 'S')
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['meet(kim, sandy)']

    def test_quantifier_and_modifier(self):
        forest = TLGParser(make_lexicon()).parse('everyone left quickly', 'S')
        assert forest.exhaustive
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['every(\\x1.quick(leave(x1)))']

    def test_polymorphic_coordination(self):
        forest = TLGParser(make_lexicon()).parse('Kim and Sandy left', 'S')
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['leave(and(kim, sandy))']

    def test_verb_phrase_coordination(self):
        forest = TLGParser(make_lexicon()).parse('Kim left and slept', 'S')
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['and(\\x1.leave(x1), \\x1.sleep(x1), kim)']

    def test_non_constituent_coordination(self):
        forest = TLGParser(make_lexicon()).parse('Kim likes and Sandy hates Bill', 'S')
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['and(\\x1.like(kim, x1), \\x1.hate(sandy, x1), bill)']

    def test_coordination_of_mismatched_conjuncts(self):
        result = TLGParser(make_lexicon()).parse('Kim and left', 'S')
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def test_relative_clause_with_modalities(self):
        forest = TLGParser(make_lexicon()).parse('book that Kim likes', 'N')
        assert forest.count_derivations() == 1
        assert semantics_of(forest) == ['that(book, \\x1.like(kim, x1))']
        result = TLGParser(make_lexicon(), config=ParserConfig(enable_modalities=False)).parse('book that Kim likes', 'N')
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def test_lexical_ambiguity(self):
        lexicon = make_lexicon(left=[('S\\NP', '\\x.leave(x)'), ('(S\\NP)/NP', '\\y x.depart(x, y)')])
        forest = TLGParser(lexicon).parse('Kim left Sandy', 'S')
        assert semantics_of(forest) == ['depart(kim, sandy)']
        root, = forest.roots
        assert [e.word for e in root.histories[0].extra['entries']] == ['Kim', 'left', 'Sandy']

    def test_missing_semantics(self):
        lexicon = Lexicon.from_dict({'Kim': 'NP', 'left': 'S\\NP'})
        forest = TLGParser(lexicon).parse('Kim left', 'S')
        assert semantics_of(forest) == ['left(Kim)']

    def test_unknown_token(self):
        result = TLGParser(make_lexicon()).parse('Kim ran', 'S')
        assert result.kind is ParseFailureKind.UNKNOWN_TOKEN
        assert result.position == 1

    def test_empty_input(self):
        assert TLGParser(make_lexicon()).parse([], 'S').kind is ParseFailureKind.NO_DERIVATION

    def test_step_budget(self):
        result = TLGParser(make_lexicon(), config=ParserConfig(step_budget=0)).parse('Kim left', 'S')
        assert result.kind is ParseFailureKind.SEARCH_BOUND_EXCEEDED
