#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : parser.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The parser for Type-Logical Grammar.

A sentence is grammatical at goal ``C`` iff, for some assignment of lexical categories ``A1 ... An`` to its tokens, the
sequent ``A1, ..., An => C`` is provable. The parser runs the focused prover once per assignment. All assignments share
the memo table of a single prover, which plays the role of the chart.

    >>> from nlparsers.common import Lexicon
    >>> from nlparsers.tlg import TLGParser
    >>> lexicon = Lexicon.from_dict({'Kim': ('np', 'kim'), 'left': ('s\\np', '\\x.leave(x)')})
    >>> forest = TLGParser(lexicon).parse('Kim left', 's')
    >>> forest.best_tree().semantics
    leave(kim)
"""

import itertools
from typing import Optional, Union, Sequence, Tuple, List, Dict
from jacinle.logging import get_logger

from nlparsers.capabilities import require
from nlparsers.config import ParserConfig, get_parser_config
from nlparsers.common.errors import CompositionContext
from nlparsers.common.category import Category
from nlparsers.common.terms import TermConstant, beta_normalize
from nlparsers.common.unification import VariableCounter, freshen
from nlparsers.common.lexicon import Lexicon, LexicalEntry
from nlparsers.chart.chart import as_tokens, EdgeHistory, Edge, SearchBudget, SearchBudgetExhausted
from nlparsers.chart.forest import DerivationTree, DerivationForest
from nlparsers.chart.result import ParseFailure
from nlparsers.tlg.sequent import proof_term
from nlparsers.tlg.prover import FocusedProver

logger = get_logger(__file__)

__all__ = ['ProofForest', 'TLGParser']


class ProofForest(DerivationForest):
    """The forest of TLG proofs. The meaning of each unpacked proof is its (beta-normal) Curry-Howard term.

    Each root history corresponds to one lexical assignment and one packed proof. The lexical entries are recorded in
    ``extra['entries']``; entries without a meaning contribute the constant named after their word.
    """

    def _finalize_tree(self, tree: DerivationTree) -> DerivationTree:
        hypotheses = [e.semantics if e.semantics is not None else TermConstant(e.word) for e in tree.extra['entries']]
        tree.semantics = beta_normalize(proof_term(tree.children[0], hypotheses))
        return tree


class TLGParser(object):
    """The parser for Type-Logical Grammar (the Lambek calculus)."""

    def __init__(self, lexicon: Lexicon, config: Optional[ParserConfig] = None):
        """Initialize the parser.

        Args:
            lexicon: the lexicon. Its categories are read as Lambek formulas: ``A/B`` and ``A\\B`` (with the result on the
                left, as in CCG) are the two implications, ``A*B`` is the product, and ``◇A`` and ``□A`` are the modalities.
            config: the parser configuration. Defaults to the current default configuration.
        """
        self.lexicon = lexicon
        self.config = config if config is not None else get_parser_config()

    def make_goal(self, goal: Union[str, Category]) -> Category:
        if isinstance(goal, str):
            goal = self.lexicon.category_parser(goal)
        if not isinstance(goal, Category):
            raise TypeError(f'The goal of a TLG parse must be a category or a category string, got {goal!r}.')
        if not self.config.use_morphosyntax:
            goal = goal.strip_features()
        return goal

    def parse(self, tokens: Union[str, Sequence[str]], goal: Union[str, Category] = 'S') -> Union[DerivationForest, ParseFailure]:
        """Parse a sentence.

        Args:
            tokens: the tokens, or a string to be split on whitespace.
            goal: the succedent of the sequents to prove.

        Returns:
            a :class:`ProofForest` with all (normal-form) proofs, or a :class:`~nlparsers.chart.result.ParseFailure`.
        """
        require('tlg')
        tokens = as_tokens(tokens)
        goal = self.make_goal(goal)
        with CompositionContext(exc_verbose=self.config.exc_verbose).as_default():
            return self._parse(tokens, goal)

    def _parse(self, tokens: Tuple[str, ...], goal: Category) -> Union[DerivationForest, ParseFailure]:
        nr_tokens = len(tokens)
        if nr_tokens == 0:
            return ParseFailure.no_derivation(tokens, goal)

        all_entries: List[List[LexicalEntry]] = list()
        for i, token in enumerate(tokens):
            entries = self.lexicon.lookup(token)
            if len(entries) == 0:
                logger.debug(f'Unknown token {token!r} at position {i}.')
                return ParseFailure.unknown_token(tokens, i, goal)
            all_entries.append(entries)

        counter = VariableCounter()
        goal = freshen(goal, counter)
        instances: Dict[Tuple[int, int], Category] = dict()

        def instantiate(position: int, index: int) -> Category:
            if (position, index) not in instances:
                category = all_entries[position][index].category
                if not self.config.use_morphosyntax:
                    category = category.strip_features()
                instances[position, index] = freshen(category, counter)
            return instances[position, index]

        budget = SearchBudget(self.config.step_budget)
        prover = FocusedProver(enable_product=self.config.enable_product, enable_modalities=self.config.enable_modalities, budget=budget)
        root = Edge((0, nr_tokens), goal, key=('tlg', goal))
        exhaustive = True
        try:
            for assignment in itertools.product(*[range(len(entries)) for entries in all_entries]):
                antecedent = [instantiate(i, j) for i, j in enumerate(assignment)]
                entries = tuple(all_entries[i][j] for i, j in enumerate(assignment))
                weight = sum(e.weight for e in entries)
                for node, bindings in prover.prove(antecedent, goal):
                    root.add_history(EdgeHistory('proof', (node, ), weight, extra={'entries': entries, 'bindings': bindings}))
        except SearchBudgetExhausted as e:
            logger.debug(str(e))
            exhaustive = False
        logger.debug(f'TLG prover: {len(prover.memo)} sequents, {budget.steps} steps, {len(root.histories)} proofs.')

        if len(root.histories) > 0:
            return ProofForest(tokens, goal, [root], formalism='tlg', exhaustive=exhaustive, steps=budget.steps)
        if not exhaustive:
            return ParseFailure.search_bound_exceeded(tokens, goal, 'step budget exhausted', budget.steps)
        return ParseFailure.no_derivation(tokens, goal, budget.steps)
