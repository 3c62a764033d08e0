#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : parser.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The agenda-driven chart parser for Minimalist Grammars.

The parser seeds the chart with one expression per lexical item and token, plus one expression per empty item and
position. Expressions are then processed in the order of their heights: each popped expression is moved (if it can be),
and merged or adjoined with the expressions processed before it that are adjacent to it. Expressions that may combine
with non-adjacent partners (future moving chains, head-movement selectors and phrases whose head may still move) are
tried against all processed expressions. Since heights are final when an expression is popped, a derivation deeper
than the depth bound is only discarded when it would create a new item.

Shortest move is enforced inside each expression by :func:`~nlparsers.mg.expression.move`. In the ``probe`` locality
domain, the parser additionally compares move steps across derivations: steps that share the same probe (the same head
span and features) and the same licensee compete, and only the steps that move the closest chain survive. The ``phase``
domain additionally applies the phase impenetrability check of :func:`~nlparsers.mg.expression.merge`.

    >>> from nlparsers.mg import MGLexicon, MGChartParser
    >>> lexicon = MGLexicon.from_items(['Kim :: D', 'left :: V', 'ε :: =V =D C'])
    >>> forest = MGChartParser(lexicon).parse('Kim left', 'C')
"""

import itertools
from collections import defaultdict
from typing import Optional, Union, Sequence, Tuple, List, Dict, FrozenSet
from jacinle.logging import get_logger

from nlparsers.capabilities import require
from nlparsers.config import ParserConfig, MGLocalityDomain, get_parser_config
from nlparsers.common.errors import CompositionError, CompositionContext
from nlparsers.common.unification import VariableCounter, freshen, signature, unify_features
from nlparsers.common.lexicon import Lexicon, LexicalEntry
from nlparsers.chart.chart import as_tokens, EdgeHistory, Edge, Chart, Agenda, SearchBudget, SearchBudgetExhausted
from nlparsers.chart.forest import DerivationForest
from nlparsers.chart.result import ParseFailure
from nlparsers.mg.feature import MGFeature, parse_mg_features
from nlparsers.mg.lexical_item import MGLexicalItem
from nlparsers.mg.expression import MGExpression, merge, move, adjoin, category_of

logger = get_logger(__file__)

__all__ = ['MGChartParser']


class MGChartParser(object):
    """The chart parser for Minimalist Grammars."""

    def __init__(self, lexicon: Lexicon, config: Optional[ParserConfig] = None):
        """Initialize the parser.

        Args:
            lexicon: the lexicon, whose entries have :class:`~nlparsers.mg.lexical_item.MGLexicalItem` categories
                (see :class:`~nlparsers.mg.lexical_item.MGLexicon`).
            config: the parser configuration. Defaults to the current default configuration.
        """
        self.lexicon = lexicon
        self.config = config if config is not None else get_parser_config()

    def make_goal(self, goal: Union[str, MGFeature]) -> MGFeature:
        if isinstance(goal, str):
            features = parse_mg_features(goal)
            if len(features) != 1:
                raise ValueError(f'The goal of an MG parse must be a single categorial feature, got {goal!r}.')
            goal = features[0]
        if not isinstance(goal, MGFeature):
            raise TypeError(f'The goal of an MG parse must be a categorial feature or its name, got {goal!r}.')
        if not goal.is_categorial:
            raise ValueError(f'The goal of an MG parse must be a categorial feature, got {goal}.')
        if not self.config.use_morphosyntax:
            goal = goal.strip_features()
        return goal

    def parse(self, tokens: Union[str, Sequence[str]], goal: Union[str, MGFeature] = 'C') -> Union[DerivationForest, ParseFailure]:
        """Parse a sentence.

        Args:
            tokens: the tokens, or a string to be split on whitespace.
            goal: the categorial feature of complete sentences (e.g., ``C``).

        Returns:
            a :class:`~nlparsers.chart.forest.DerivationForest` whose trees are the derivations of the tokens, or a
            :class:`~nlparsers.chart.result.ParseFailure`.
        """
        require('mg')
        tokens = as_tokens(tokens)
        goal = self.make_goal(goal)
        with CompositionContext(exc_verbose=self.config.exc_verbose).as_default():
            return self._parse(tokens, goal)

    def _instantiate(self, entry: LexicalEntry, counter: VariableCounter) -> MGLexicalItem:
        item = entry.category
        if not isinstance(item, MGLexicalItem):
            raise TypeError(f'The MG parser requires MG lexical items, got {item!r} for {entry.word!r}.')
        if not self.config.use_morphosyntax:
            item = item.strip_features()
        return freshen(item, counter)

    def _parse(self, tokens: Tuple[str, ...], goal: MGFeature) -> Union[DerivationForest, ParseFailure]:
        nr_tokens = len(tokens)
        chart = Chart(nr_tokens)
        agenda = Agenda(priority=lambda e: e.height)
        budget = SearchBudget(self.config.step_budget)
        counter = VariableCounter()
        max_depth = self.config.max_derivation_depth
        locality = self.config.get_mg_locality()
        options = {
            'phase_heads': tuple(self.config.phase_heads) if locality is MGLocalityDomain.PHASE else tuple(),
            'head_targets': self._head_targets()
        }

        for i, token in enumerate(tokens):
            entries = self.lexicon.lookup(token)
            if len(entries) == 0:
                logger.debug(f'Unknown token {token!r} at position {i}.')
                return ParseFailure.unknown_token(tokens, i, goal)
            for entry in entries:
                self._add(chart, agenda, MGExpression.from_lexical_item(self._instantiate(entry, counter), i), EdgeHistory('lex', weight=entry.weight, entry=entry), 1)
        for i in range(nr_tokens + 1):
            for entry in self.lexicon.empty_entries():
                self._add(chart, agenda, MGExpression.from_lexical_item(self._instantiate(entry, counter), i), EdgeHistory('lex', weight=entry.weight, entry=entry), 1)

        processed = _ProcessedIndex(options['head_targets'])
        nr_pruned = 0
        exhaustive = True
        try:
            while agenda:
                edge = agenda.pop()
                budget.tick()
                candidates = [(move, (edge, ))]
                for other in processed.partners(edge):
                    candidates.extend([
                        (merge, (edge, other)), (merge, (other, edge)),
                        (adjoin, (edge, other)), (adjoin, (other, edge))
                    ])
                processed.add(edge)
                for operation, children in candidates:
                    try:
                        rule, expression, extra = operation(*(c.category for c in children), **options)
                    except CompositionError:
                        continue
                    height = max(c.height for c in children) + 1
                    history = EdgeHistory(rule, children, sum(c.weight for c in children), extra=extra)
                    expression_signature = signature(expression)
                    if height > max_depth and chart.get(expression.span, expression_signature) is None:
                        nr_pruned += 1
                        continue
                    self._add(chart, agenda, expression, history, height, expression_signature)
        except SearchBudgetExhausted as e:
            logger.debug(str(e))
            exhaustive = False
        if nr_pruned > 0:
            logger.debug(f'The derivation depth bound pruned {nr_pruned} items.')
            exhaustive = False

        roots = [e for e in chart.cell(0, nr_tokens) if self._is_goal(e.category, goal)]
        if locality in (MGLocalityDomain.PROBE, MGLocalityDomain.PHASE):
            roots = _filter_probe_locality(chart, roots)
        logger.debug(f'MG chart: {len(chart)} items, {budget.steps} steps, {len(roots)} roots.')

        if len(roots) > 0:
            return DerivationForest(tokens, goal, roots, formalism='mg', exhaustive=exhaustive, steps=budget.steps, default_max_depth=max_depth)
        if not exhaustive:
            reason = 'step budget exhausted' if budget.exhausted else f'derivations deeper than {max_depth} pruned'
            return ParseFailure.search_bound_exceeded(tokens, goal, reason, budget.steps)
        return ParseFailure.no_derivation(tokens, goal, budget.steps)

    def _head_targets(self) -> FrozenSet[str]:
        """The categories selected by head selectors (``=>x``) anywhere in the lexicon."""
        targets = set()
        for entry in self.lexicon:
            if isinstance(entry.category, MGLexicalItem):
                targets.update(f.name for f in entry.category.features if f.is_head_selector)
        return frozenset(targets)

    @staticmethod
    def _add(chart: Chart, agenda: Agenda, expression: MGExpression, history: EdgeHistory, height: int, expression_signature: Optional[str] = None):
        if expression_signature is None:
            expression_signature = signature(expression)
        edge, is_new = chart.add(expression.span, expression, expression_signature, history, height=height)
        if is_new:
            agenda.push(edge)

    def _is_goal(self, expression: MGExpression, goal: MGFeature) -> bool:
        if len(expression.movers) > 0 or len(expression.features) != 1 or expression.head.contiguous_span is None:
            return False
        feature = expression.features[0]
        if not feature.is_categorial or feature.name != goal.name:
            return False
        try:
            unify_features(feature.agreement, goal.agreement)
        except CompositionError:
            return False
        return True


def _filter_probe_locality(chart: Chart, roots: List[Edge]) -> List[Edge]:
    """Remove the move steps that are not the closest for their probe, and everything that only they derive.

    Returns:
        the roots that still have a derivation.
    """
    groups = defaultdict(list)
    for edge in chart.iter_edges():
        for history in edge.histories:
            if history.rule in ('move1', 'move2'):
                probe_span, probe_features = history.extra['probe']
                key = (probe_span, tuple(f.type.prefix + f.name for f in probe_features), history.extra['licensee'])
                groups[key].append(history)

    removed = set()
    for histories in groups.values():
        closest = min(h.extra['depth'] for h in histories)
        for h in histories:
            if h.extra['depth'] > closest:
                removed.add(id(h))
    if len(removed) == 0:
        return roots
    logger.debug(f'Probe locality removed {len(removed)} move steps.')

    live = set()
    changed = True
    while changed:
        changed = False
        for edge in chart.iter_edges():
            if id(edge) in live:
                continue
            if any(id(h) not in removed and all(id(c) in live for c in h.children) for h in edge.histories):
                live.add(id(edge))
                changed = True

    for edge in chart.iter_edges():
        edge.histories = [h for h in edge.histories if id(h) not in removed and all(id(c) in live for c in h.children)]
    return [e for e in roots if id(e) in live]


def _is_floating(expression: MGExpression, head_targets: FrozenSet[str]) -> bool:
    """Whether an expression can combine with partners that are not adjacent to its span: a future moving chain, a
    lexical head-movement selector, or a head that may still move (with the complement it selects)."""
    head = expression.head
    if head.pieces is not None:
        return True
    if expression.lexical and category_of(head.features) in head_targets:
        return True
    if head.first is None:
        return False
    if head.first.is_categorial and len(head.features) > 1:
        return True
    return expression.lexical and head.first.is_head_selector


class _ProcessedIndex(object):
    """The expressions popped from the agenda, indexed by their start and end positions."""

    def __init__(self, head_targets: FrozenSet[str] = frozenset()):
        self.head_targets = head_targets
        self.order: Dict[int, int] = dict()
        self.edges: List[Edge] = list()
        self.by_start: Dict[int, List[Edge]] = defaultdict(list)
        self.by_end: Dict[int, List[Edge]] = defaultdict(list)
        self.floating: List[Edge] = list()

    def add(self, edge: Edge):
        self.order[id(edge)] = len(self.edges)
        self.edges.append(edge)
        if _is_floating(edge.category, self.head_targets):
            self.floating.append(edge)
        else:
            self.by_start[edge.start].append(edge)
            self.by_end[edge.end].append(edge)

    def partners(self, edge: Edge) -> List[Edge]:
        """The processed expressions that may combine with `edge`, in processing order."""
        if _is_floating(edge.category, self.head_targets):
            return list(self.edges)
        partners = {id(e): e for e in itertools.chain(self.by_end.get(edge.start, ()), self.by_start.get(edge.end, ()), self.floating)}
        return sorted(partners.values(), key=lambda e: self.order[id(e)])
