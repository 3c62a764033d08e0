#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : parser.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The agenda-driven chart parser for CCG.

The agenda holds pairs of adjacent edges, prioritized by the length of the span they would cover. Pairs are pushed
when an edge is created, so all edges of span length L are complete before any pair covering L + 1 tokens is popped.
This is where the optional beam prunes a cell: at the boundary between two wavefronts.

    >>> from nlparsers.common import Lexicon
    >>> from nlparsers.ccg import CCGChartParser
    >>> lexicon = Lexicon.from_dict({'Kim': ('NP', 'kim'), 'left': ('S\\NP', '\\x.leave(x)')})
    >>> forest = CCGChartParser(lexicon).parse('Kim left', 'S')
    >>> forest.best_tree().semantics
    leave(kim)
"""

from typing import Optional, Union, Sequence, Tuple
from jacinle.logging import get_logger

from nlparsers.capabilities import require
from nlparsers.config import ParserConfig, get_parser_config
from nlparsers.common.errors import CompositionContext
from nlparsers.common.category import Category
from nlparsers.common.unification import VariableCounter, freshen, signature, is_instance
from nlparsers.common.lexicon import Lexicon
from nlparsers.chart.chart import as_tokens, EdgeHistory, Edge, Chart, Agenda, SearchBudget, SearchBudgetExhausted
from nlparsers.chart.forest import DerivationTree, DerivationForest
from nlparsers.chart.result import ParseFailure
from nlparsers.ccg.composition import CCGCompositionType, CCGCompositionSystem, COORDINATION_TAG, compose_semantics
from nlparsers.ccg.rules import type_raising_semantics

logger = get_logger(__file__)

__all__ = ['CCGDerivationForest', 'CCGChartParser']


class CCGDerivationForest(DerivationForest):
    """A CCG derivation forest. The meaning of each unpacked tree is composed bottom-up from the lexical meanings."""

    def _finalize_tree(self, tree: DerivationTree) -> DerivationTree:
        self._compose(tree)
        return tree

    def _compose(self, node: DerivationTree):
        for c in node.children:
            self._compose(c)
        if node.rule == 'lex':
            return
        if node.rule in ('>T', '<T'):
            node.semantics = type_raising_semantics(node.children[0].semantics)
            return
        composition_type = node.extra['composition_type']
        node.semantics = compose_semantics(composition_type, node.extra['degree'], node.children[0].semantics, node.children[1].semantics)


class CCGChartParser(object):
    """The chart parser for CCG."""

    def __init__(self, lexicon: Lexicon, composition_system: Optional[CCGCompositionSystem] = None, config: Optional[ParserConfig] = None):
        """Initialize the parser.

        Args:
            lexicon: the lexicon.
            composition_system: the composition system. Defaults to the one described by the configuration.
            config: the parser configuration. Defaults to the current default configuration.
        """
        self.lexicon = lexicon
        self.config = config if config is not None else get_parser_config()
        self.composition_system = composition_system if composition_system is not None else CCGCompositionSystem.from_config(self.config)

    def make_goal(self, goal: Union[str, Category]) -> Category:
        if isinstance(goal, str):
            goal = self.lexicon.category_parser(goal)
        if not isinstance(goal, Category):
            raise TypeError(f'The goal of a CCG parse must be a category or a category string, got {goal!r}.')
        if not self.config.use_morphosyntax:
            goal = goal.strip_features()
        return goal

    def parse(self, tokens: Union[str, Sequence[str]], goal: Union[str, Category] = 'S') -> Union[DerivationForest, ParseFailure]:
        """Parse a sentence.

        Args:
            tokens: the tokens, or a string to be split on whitespace.
            goal: the goal category.

        Returns:
            a :class:`~nlparsers.ccg.parser.CCGDerivationForest` with all derivations of the tokens at the goal
            category, or a :class:`~nlparsers.chart.result.ParseFailure`.
        """
        require('ccg')
        tokens = as_tokens(tokens)
        goal = self.make_goal(goal)
        with CompositionContext(exc_verbose=self.config.exc_verbose).as_default():
            return self._parse(tokens, goal)

    def _parse(self, tokens: Tuple[str, ...], goal: Category) -> Union[DerivationForest, ParseFailure]:
        nr_tokens = len(tokens)
        if nr_tokens == 0:
            return ParseFailure.no_derivation(tokens, goal)

        system = self.composition_system
        chart = Chart(nr_tokens)
        agenda = Agenda(priority=lambda pair: pair[1].end - pair[0].start)
        budget = SearchBudget(self.config.step_budget)
        counter = VariableCounter()
        use_morphosyntax = self.config.use_morphosyntax
        lexicon_weight = system.get_weight(CCGCompositionType.LEXICON)

        for i, token in enumerate(tokens):
            entries = self.lexicon.lookup(token)
            if len(entries) == 0:
                logger.debug(f'Unknown token {token!r} at position {i}.')
                return ParseFailure.unknown_token(tokens, i, goal)
            for entry in entries:
                category = entry.category if use_morphosyntax else entry.category.strip_features()
                category = freshen(category, counter)
                history = EdgeHistory('lex', weight=entry.weight + lexicon_weight, semantics=entry.semantics, entry=entry)
                edge, is_new = chart.add((i, i + 1), category, signature(category), history)
                if is_new:
                    self._schedule(chart, agenda, edge)

        beam = self.config.beam
        nr_pruned = 0
        completed_length = 0
        exhaustive = True
        try:
            while agenda:
                if beam is not None:
                    while completed_length < agenda.peek_priority() - 1:
                        completed_length += 1
                        nr_pruned += self._prune_wavefront(chart, completed_length, beam)
                lhs, rhs = agenda.pop()
                budget.tick()
                if lhs.pruned or rhs.pruned:
                    continue
                self._combine(chart, agenda, lhs, rhs)
        except SearchBudgetExhausted as e:
            logger.debug(str(e))
            exhaustive = False
        if beam is not None and exhaustive:
            while completed_length < nr_tokens:
                completed_length += 1
                nr_pruned += self._prune_wavefront(chart, completed_length, beam)
        if nr_pruned > 0:
            logger.debug(f'Beam pruning removed {nr_pruned} edges.')
            exhaustive = False

        roots = [e for e in chart.cell(0, nr_tokens) if e.tag != COORDINATION_TAG and is_instance(e.category, goal)]
        logger.debug(f'CCG chart: {len(chart)} edges, {budget.steps} steps, {len(roots)} roots.')

        if len(roots) > 0:
            return CCGDerivationForest(tokens, goal, roots, formalism='ccg', exhaustive=exhaustive, steps=budget.steps)
        if not exhaustive:
            reason = 'step budget exhausted' if budget.exhausted else 'edges pruned by the beam'
            return ParseFailure.search_bound_exceeded(tokens, goal, reason, budget.steps)
        return ParseFailure.no_derivation(tokens, goal, budget.steps)

    def _combine(self, chart: Chart, agenda: Agenda, lhs: Edge, rhs: Edge):
        for result in self.composition_system.try_compose(lhs.category, rhs.category, lhs.tag, rhs.tag):
            history = EdgeHistory(
                result.rule, (lhs, rhs), lhs.weight + rhs.weight + result.weight, unary=result.unary,
                extra={'composition_type': result.composition_type, 'degree': result.degree}
            )
            edge, is_new = chart.add(
                (lhs.start, rhs.end), result.category, signature(result.category), history,
                tag=result.tag, height=max(lhs.height, rhs.height) + 1
            )
            if is_new:
                self._schedule(chart, agenda, edge)

    @staticmethod
    def _schedule(chart: Chart, agenda: Agenda, edge: Edge):
        for other in chart.edges_ending_at(edge.start):
            agenda.push((other, edge))
        for other in chart.edges_starting_at(edge.end):
            agenda.push((edge, other))

    @staticmethod
    def _prune_wavefront(chart: Chart, length: int, beam: int) -> int:
        nr_pruned = 0
        for start in range(0, chart.nr_tokens - length + 1):
            nr_pruned += chart.prune_cell((start, start + length), beam)
        return nr_pruned
