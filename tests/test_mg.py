#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : test_mg.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Tests for Minimalist Grammar features, operations and the chart parser."""

import pytest

from nlparsers.config import ParserConfig
from nlparsers.common import CompositionError, DirectionalMismatch, LocalityViolation, CategoryParsingError, UnificationFailure, FeatureStructure
from nlparsers.chart import ParseFailureKind
from nlparsers.mg import (
    MGFeatureType, MGFeature, parse_mg_features, parse_mg_item, MGLexicon,
    MGChain, MGExpression, merge, move, adjoin, MGChartParser
)


def lexical(item, position):
    return MGExpression.from_lexical_item(parse_mg_item(item), position)


class TestFeatures:
    def test_parse(self):
        features = parse_mg_features('=D +wh -case ~V C')
        assert [f.type for f in features] == [
            MGFeatureType.SELECTOR, MGFeatureType.LICENSOR, MGFeatureType.LICENSEE,
            MGFeatureType.ADJUNCT_SELECTOR, MGFeatureType.CATEGORIAL
        ]
        assert [f.name for f in features] == ['D', 'wh', 'case', 'V', 'C']
        assert ' '.join(str(f) for f in features) == '=D +wh -case ~V C'

    def test_agreement(self):
        feature, = parse_mg_features('=D[num=?n]')
        assert feature.is_selector
        assert str(feature) == '=D[num=?n]'
        assert feature.strip_features() == MGFeature(MGFeatureType.SELECTOR, 'D')

    def test_matching(self):
        selector, licensor, licensee, category = parse_mg_features('=D +f -f D')
        assert selector.matches_merge(category)
        assert not selector.matches_merge(licensee)
        assert licensor.matches_move(licensee)
        assert not licensor.matches_move(category)

    def test_invalid(self):
        with pytest.raises(CategoryParsingError):
            parse_mg_features('=')

    def test_head_selector(self):
        features = parse_mg_features('=>V =D T')
        assert [f.type for f in features] == [MGFeatureType.HEAD_SELECTOR, MGFeatureType.SELECTOR, MGFeatureType.CATEGORIAL]
        assert ' '.join(str(f) for f in features) == '=>V =D T'
        assert features[0].is_head_selector
        assert features[0].matches_merge(parse_mg_features('V')[0])


class TestLexicalItems:
    def test_parse(self):
        item = parse_mg_item('likes :: =D =D V')
        assert item.word == 'likes'
        assert len(item.features) == 3
        assert str(item) == 'likes :: =D =D V'

    @pytest.mark.parametrize('word', ["''", 'ε', '""'])
    def test_empty_words(self, word):
        item = parse_mg_item(word + ' :: =V C')
        assert item.is_empty
        assert str(item) == 'ε :: =V C'

    @pytest.mark.parametrize('string', ['likes =D V', 'likes ::'])
    def test_invalid(self, string):
        with pytest.raises(CategoryParsingError):
            parse_mg_item(string)

    def test_lexicon(self):
        lexicon = MGLexicon.from_items(['Kim :: D', 'ε :: =V =D C'])
        lexicon.add('left', 'V', '\\x.leave(x)')
        assert len(lexicon) == 3
        assert len(lexicon.empty_entries()) == 1
        assert lexicon.lookup('left')[0].category == parse_mg_item('left :: V')


class TestOperations:
    def test_merge1(self):
        rule, expression, extra = merge(lexical('sees :: =D V', 0), lexical('Kim :: D', 1))
        assert rule == 'merge1'
        assert expression.span == (0, 2)
        assert [str(f) for f in expression.features] == ['V']
        assert not expression.lexical
        assert expression.movers == tuple()
        assert extra['checked'] == ('=D', 'D')

    def test_merge1_requires_adjacency(self):
        with pytest.raises(DirectionalMismatch):
            merge(lexical('sees :: =D V', 0), lexical('Kim :: D', 2))

    def test_merge2(self):
        _, vp, _ = merge(lexical('likes :: =D =D V', 1), lexical('Sandy :: D', 2))
        rule, expression, _ = merge(vp, lexical('Kim :: D', 0))
        assert rule == 'merge2'
        assert expression.span == (0, 3)
        assert [str(f) for f in expression.features] == ['V']

    def test_merge3(self):
        rule, expression, _ = merge(lexical("'' :: =D V", 1), lexical('w :: D -f', 0))
        assert rule == 'merge3'
        assert expression.span == (1, 1)
        assert expression.movers == (MGChain((0, 1), parse_mg_features('-f'), 1), )

    def test_merge_feature_mismatch(self):
        with pytest.raises(CompositionError):
            merge(lexical('sees :: =D V', 0), lexical('left :: V', 1))

    def test_merge_overlap(self):
        _, vp, _ = merge(lexical('likes :: =D =D V', 0), lexical('Kim :: D', 1))
        with pytest.raises(CompositionError):
            merge(vp, lexical('Kim :: D', 1))

    def test_features_are_consumed(self):
        selector = lexical('likes :: =D =D V', 1)
        _, vp, _ = merge(selector, lexical('Sandy :: D', 2))
        assert len(vp.features) == len(selector.features) - 1
        _, clause, _ = merge(vp, lexical('Kim :: D', 0))
        assert len(clause.features) == len(vp.features) - 1

    def test_move1(self):
        _, vp, _ = merge(lexical("'' :: =D V", 2), lexical('w :: D -f', 0))
        _, cp, _ = merge(lexical('c :: =V +f C', 1), vp)
        assert cp.movers[0].depth == 2
        rule, expression, extra = move(cp)
        assert rule == 'move1'
        assert expression.span == (0, 2)
        assert [str(f) for f in expression.features] == ['C']
        assert expression.movers == tuple()
        assert extra['depth'] == 2
        assert extra['licensee'] == 'f'

    def test_move2(self):
        head = MGChain((1, 2), parse_mg_features('+f C'))
        expression = MGExpression(head, (MGChain((0, 1), parse_mg_features('-f -g'), 3), ))
        rule, result, _ = move(expression)
        assert rule == 'move2'
        assert result.span == (1, 2)
        assert result.movers == (MGChain((0, 1), parse_mg_features('-g'), 1), )

    def test_move_without_licensor(self):
        with pytest.raises(CompositionError):
            move(lexical('Kim :: D -f', 0))

    def test_shortest_move(self):
        head = MGChain((2, 3), parse_mg_features('+f C'))
        movers = (MGChain((0, 1), parse_mg_features('-f'), 1), MGChain((1, 2), parse_mg_features('-f'), 1))
        with pytest.raises(LocalityViolation):
            move(MGExpression(head, movers))

    def test_closest_mover_wins(self):
        head = MGChain((2, 3), parse_mg_features('+f C'))
        movers = (MGChain((0, 1), parse_mg_features('-f'), 3), MGChain((1, 2), parse_mg_features('-f'), 1))
        _, result, extra = move(MGExpression(head, movers))
        assert extra['depth'] == 1
        assert result.span == (1, 3)
        assert result.movers == (MGChain((0, 1), parse_mg_features('-f'), 4), )

    def test_adjoin(self):
        _, vp, _ = merge(lexical('sees :: =D V', 0), lexical('Kim :: D', 1))
        rule, expression, _ = adjoin(vp, lexical('quickly :: ~V', 2))
        assert rule == 'adjoin'
        assert expression.span == (0, 3)
        assert [str(f) for f in expression.features] == ['V']
        with pytest.raises(CompositionError):
            adjoin(vp, lexical('quickly :: ~D', 2))

    def test_agreement(self):
        rule, _, _ = merge(lexical('sees :: =D[num=sg] V', 0), lexical('Kim :: D[num=sg]', 1))
        assert rule == 'merge1'
        with pytest.raises(UnificationFailure):
            merge(lexical('sees :: =D[num=sg] V', 0), lexical('them :: D[num=pl]', 1))

    def test_movers_are_sorted(self):
        head = MGChain((2, 3), parse_mg_features('+f +g C'))
        a = MGChain((0, 1), parse_mg_features('-f'), 1)
        b = MGChain((1, 2), parse_mg_features('-g'), 1)
        assert MGExpression(head, (b, a)) == MGExpression(head, (a, b))

    def test_head_movement(self):
        _, vp, _ = merge(lexical('eat :: =D V', 1), lexical('apples :: D', 3), head_targets=frozenset({'V'}))
        assert vp.head.pieces == (None, (1, 2), (3, 4))
        assert vp.span == (1, 4)
        assert vp.head.contiguous_span is None
        rule, expression, extra = merge(lexical('-s :: =>V =D T', 2), vp, head_targets=frozenset({'V'}))
        assert rule == 'merge1'
        assert extra['head_movement']
        assert expression.span == (1, 4)
        assert expression.head.pieces is None
        assert [str(f) for f in expression.features] == ['=D', 'T']

    def test_head_movement_requires_adjacent_heads(self):
        _, vp, _ = merge(lexical('eat :: =D V', 1), lexical('apples :: D', 3), head_targets=frozenset({'V'}))
        with pytest.raises(DirectionalMismatch):
            merge(lexical('-s :: =>V =D T', 0), vp, head_targets=frozenset({'V'}))

    def test_discontinuous_complement_without_head_movement(self):
        _, vp, _ = merge(lexical('eat :: =D V', 1), lexical('apples :: D', 3), head_targets=frozenset({'V'}))
        with pytest.raises(DirectionalMismatch):
            merge(lexical('will :: =V T', 2), vp, head_targets=frozenset({'V'}))
        with pytest.raises(DirectionalMismatch):
            merge(lexical('eat :: =D V', 1), lexical('apples :: D', 3))

    def test_phase_impenetrability(self):
        phases = ('C', 'v', 'D')
        _, vp, _ = merge(lexical('ate :: =D V', 1), lexical('what :: D -wh', 0), phase_heads=phases)
        assert vp.movers[0].edge
        _, small_v, _ = merge(lexical("'' :: =V v", 1), vp, phase_heads=phases)
        assert not small_v.movers[0].edge
        with pytest.raises(LocalityViolation):
            merge(lexical("'' :: =v +wh C", 1), small_v, phase_heads=phases)
        rule, _, _ = merge(lexical("'' :: =v +wh C", 1), small_v)
        assert rule == 'merge1'

    def test_moving_chain_reaches_the_phase_edge(self):
        phases = ('C', 'v', 'D')
        _, vp, _ = merge(lexical('ate :: =D V', 1), lexical('what :: D -edge -wh', 0), phase_heads=phases)
        _, small_v, _ = merge(lexical("'' :: =V +edge v", 1), vp, phase_heads=phases)
        rule, small_v, _ = move(small_v, phase_heads=phases)
        assert rule == 'move2'
        assert small_v.movers[0].edge
        rule, cp, _ = merge(lexical("'' :: =v +wh C", 1), small_v, phase_heads=phases)
        assert rule == 'merge1'
        assert [str(f) for f in cp.features] == ['+wh', 'C']


class TestMGChartParser:
    def test_intransitive(self):
        lexicon = MGLexicon.from_items(['Kim :: D', 'left :: V', 'ε :: =V =D C'])
        forest = MGChartParser(lexicon).parse('Kim left', 'C')
        assert forest.ok
        assert forest.count_derivations() == 1
        tree = forest.best_tree()
        assert tree.rules() == ['merge2', 'merge1', 'lex', 'lex', 'lex']
        assert tree.extra['checked'] == ('=D', 'D')

    def test_word_order(self):
        lexicon = MGLexicon.from_items(['Kim :: D', 'left :: V', 'ε :: =V =D C'])
        result = MGChartParser(lexicon).parse('left Kim', 'C')
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def make_locality_lexicon(self, with_short_path=True):
        items = ['c :: =V +f C', "'' :: =P V", "'' :: =D P", 'w :: D -f']
        if with_short_path:
            items.append("'' :: =D V")
        return MGLexicon.from_items(items)

    def test_probe_locality(self):
        forest = MGChartParser(self.make_locality_lexicon()).parse('w c', 'C')
        assert forest.count_derivations() == 1
        root, = forest.roots
        history, = root.histories
        assert history.rule == 'move1'
        assert history.extra['depth'] == 2

    def test_derivation_locality(self):
        config = ParserConfig(mg_locality='derivation')
        forest = MGChartParser(self.make_locality_lexicon(), config=config).parse('w c', 'C')
        assert forest.count_derivations() == 2
        assert sorted(t.extra['depth'] for t in forest.iter_trees()) == [2, 3]

    def test_probe_locality_keeps_the_only_candidate(self):
        forest = MGChartParser(self.make_locality_lexicon(with_short_path=False)).parse('w c', 'C')
        assert forest.count_derivations() == 1
        assert forest.best_tree().extra['depth'] == 3

    def test_agreement(self):
        lexicon = MGLexicon.from_items(['sees :: =D[num=sg] V', 'Kim :: D[num=sg]', 'them :: D[num=pl]', 'ε :: =V C'])
        parser = MGChartParser(lexicon)
        assert parser.parse('sees Kim', 'C').count_derivations() == 1
        assert parser.parse('sees them', 'C').kind is ParseFailureKind.NO_DERIVATION
        parser = MGChartParser(lexicon, config=ParserConfig(morphosyntax_enabled=False))
        assert parser.parse('sees them', 'C').ok

    def test_unknown_token(self):
        lexicon = MGLexicon.from_items(['Kim :: D', 'left :: V', 'ε :: =V =D C'])
        result = MGChartParser(lexicon).parse('Kim ran', 'C')
        assert result.kind is ParseFailureKind.UNKNOWN_TOKEN
        assert result.token == 'ran'

    def test_depth_bound(self):
        lexicon = MGLexicon.from_items(['Kim :: D', 'left :: V', 'ε :: =V =D C'])
        result = MGChartParser(lexicon, config=ParserConfig(max_derivation_depth=2)).parse('Kim left', 'C')
        assert result.kind is ParseFailureKind.SEARCH_BOUND_EXCEEDED

    def test_step_budget(self):
        lexicon = MGLexicon.from_items(['Kim :: D', 'left :: V', 'ε :: =V =D C'])
        result = MGChartParser(lexicon, config=ParserConfig(step_budget=0)).parse('Kim left', 'C')
        assert result.kind is ParseFailureKind.SEARCH_BOUND_EXCEEDED

    @pytest.mark.parametrize('goal', ['=V', 'C D'])
    def test_invalid_goal(self, goal):
        lexicon = MGLexicon.from_items(['Kim :: D'])
        with pytest.raises(ValueError):
            MGChartParser(lexicon).parse('Kim', goal)

    def test_goal_with_agreement(self):
        lexicon = MGLexicon.from_items(['Kim :: D[num=sg]'])
        parser = MGChartParser(lexicon)
        assert parser.parse('Kim', MGFeature(MGFeatureType.CATEGORIAL, 'D', FeatureStructure({'num': 'sg'}))).ok
        assert not parser.parse('Kim', 'D[num=pl]').ok

    def test_deeper_derivations_are_packed_before_pruning(self):
        config = ParserConfig(mg_locality='derivation', max_derivation_depth=4)
        forest = MGChartParser(self.make_locality_lexicon(), config=config).parse('w c', 'C')
        assert forest.exhaustive
        root, = forest.roots
        assert len(root.histories) == 2
        assert forest.count_derivations() == 1
        assert forest.count_derivations(max_depth=5) == 2

    def make_head_movement_lexicon(self, head_selector=True):
        tense = '-s :: =>V =D T' if head_selector else '-s :: =V =D T'
        return MGLexicon.from_items(['Kim :: D', 'eat :: =D V', 'apples :: D', tense])

    def test_head_movement(self):
        forest = MGChartParser(self.make_head_movement_lexicon()).parse('Kim eat -s apples', 'T')
        assert forest.count_derivations() == 1
        tree = forest.best_tree()
        assert sorted(tree.rules()) == ['lex', 'lex', 'lex', 'lex', 'merge1', 'merge1', 'merge2']
        assert any(c.extra.get('head_movement', False) for c in tree.children)

    def test_head_movement_requires_head_selector(self):
        result = MGChartParser(self.make_head_movement_lexicon(head_selector=False)).parse('Kim eat -s apples', 'T')
        assert result.kind is ParseFailureKind.NO_DERIVATION

    def make_phase_lexicon(self, with_edge_feature):
        if with_edge_feature:
            return MGLexicon.from_items(['what :: D -edge -wh', 'ate :: =D V', 'ε :: =V +edge v', 'ε :: =v +wh C'])
        return MGLexicon.from_items(['what :: D -wh', 'ate :: =D V', 'ε :: =V v', 'ε :: =v +wh C'])

    def test_phase_locality(self):
        lexicon = self.make_phase_lexicon(with_edge_feature=False)
        assert MGChartParser(lexicon).parse('what ate', 'C').count_derivations() == 1
        config = ParserConfig(mg_locality='phase')
        result = MGChartParser(lexicon, config=config).parse('what ate', 'C')
        assert result.kind is ParseFailureKind.NO_DERIVATION
        forest = MGChartParser(self.make_phase_lexicon(with_edge_feature=True), config=config).parse('what ate', 'C')
        assert forest.count_derivations() == 1

    def test_distant_specifiers_need_movement(self):
        lexicon = MGLexicon.from_items(['Kim :: D', 'left :: V', 'ε :: =V =D C', 'very :: A'])
        result = MGChartParser(lexicon).parse('Kim very left', 'C')
        assert result.kind is ParseFailureKind.NO_DERIVATION
