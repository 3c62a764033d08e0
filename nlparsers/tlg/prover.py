#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : prover.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""A focused, memoized, cut-free prover for the Lambek calculus L, with an optional product and optional unary modalities
(the diamond ``◇`` and its residual box ``□``).

The search alternates two phases:

- the asynchronous phase applies the invertible rules eagerly: ``/R``, ``\\R`` and ``□R`` while the succedent allows it,
  then ``*L`` or ``◇L`` on the first product or diamond of the antecedent;
- the synchronous phase either splits the antecedent for ``*R``, removes a bracket for ``◇R``, or focuses on one
  antecedent formula and decomposes it with ``/L``, ``\\L`` and ``□L`` until an atom remains. Atoms are closed by the
  axiom when they are the whole context; a product or a diamond in focus is released back to the asynchronous phase.

Category variables (e.g., the ``?X`` of a polymorphic conjunction ``(?X\\?X)/?X``) are resolved by unification. When the
argument of a functor in focus is a bare variable, the remaining sequent is proved first, so that the variable is bound
before the argument sequent is searched. A bare variable in focus whose context consists of atoms is instantiated to the
functor that consumes its context (``NP, [?X], NP => S`` instantiates ``?X`` to ``(S\\NP)/NP``). A bare variable in the
succedent is closed against a single compound formula by unification.

Each proof step removes at least one connective (or switches phase without changing the sequent), so the search
terminates. Results are memoized on the resolved sequent. Each result is a packed proof node (an
:class:`~nlparsers.chart.chart.Edge` whose category is the :class:`~nlparsers.tlg.sequent.Sequent`) together with the
substitution it requires on the variables of the sequent. Proofs that require the same substitution share a node.
"""

from typing import Any, Optional, Sequence, Tuple, List, Dict
from jacinle.logging import get_logger

from nlparsers.common.category import Category, AtomicCategory, FunctorCategory, ProductCategory, CategoryVariable, DiamondCategory, BoxCategory, SlashDirection
from nlparsers.common.errors import UnificationFailure
from nlparsers.common.unification import Substitution, unify
from nlparsers.chart.chart import EdgeHistory, Edge, SearchBudget
from nlparsers.tlg.sequent import Bracket, Path, Sequent, TLGRule, get_item, get_siblings, replace_siblings, iter_formula_paths

logger = get_logger(__file__)

__all__ = ['ProofResult', 'FocusedProver']

ProofResult = Tuple[Edge, Substitution]
_RawResult = Tuple[TLGRule, Tuple[Edge, ...], Substitution, Dict[str, Any]]


class FocusedProver(object):
    """The focused prover. One prover (and its memo table) is owned by a single parse call."""

    def __init__(self, enable_product: bool = True, enable_modalities: bool = True, budget: Optional[SearchBudget] = None):
        """Initialize the prover.

        Args:
            enable_product: whether the product connective (``*L`` and ``*R``) is available.
            enable_modalities: whether the modalities (``◇L``, ``◇R``, ``□L`` and ``□R``) are available.
            budget: the step budget. Each sequent that is not in the memo table costs one step.
        """
        self.enable_product = enable_product
        self.enable_modalities = enable_modalities
        self.budget = budget if budget is not None else SearchBudget()
        self.memo: Dict[Sequent, List[ProofResult]] = dict()
        self._in_progress = set()

    def prove(self, antecedent: Sequence[Category], succedent: Category) -> List[ProofResult]:
        """Search for the proofs of ``antecedent => succedent``.

        Returns:
            a list of (proof node, substitution) pairs. Each node packs all proofs that require the substitution.

        Raises:
            SearchBudgetExhausted: if the step budget is exhausted.
        """
        return self._search(Sequent(tuple(antecedent), succedent))

    def _search(self, sequent: Sequent) -> List[ProofResult]:
        if sequent in self.memo:
            return self.memo[sequent]
        if sequent in self._in_progress:
            return []
        self.budget.tick()

        self._in_progress.add(sequent)
        try:
            if sequent.is_focused:
                raw_results = self._prove_focused(sequent)
            else:
                raw_results = self._prove_unfocused(sequent)
        finally:
            self._in_progress.discard(sequent)

        results = self._pack(sequent, raw_results)
        self.memo[sequent] = results
        return results

    def _pack(self, sequent: Sequent, raw_results: List[_RawResult]) -> List[ProofResult]:
        variables = list(dict.fromkeys(sequent.iter_variables()))
        nodes: Dict[Substitution, Edge] = dict()
        for rule, children, bindings, extra in raw_results:
            bindings = bindings.restrict(variables)
            if bindings not in nodes:
                height = 1 + max((c.height for c in children), default=0)
                nodes[bindings] = Edge(None, sequent.substitute(bindings), key=(sequent, bindings), height=height)
            nodes[bindings].add_history(EdgeHistory(rule.value, children, extra=extra))
        return list((node, bindings) for bindings, node in nodes.items())

    def _prove_pair(self, first: Sequent, second: Sequent, first_is_argument: bool = True) -> List[Tuple[Edge, Edge, Substitution]]:
        """Prove two sequents that share variables. The substitution found for `first` is applied to `second`. Returns
        the (argument node, rest node, substitution) triples, where the argument is `first` iff `first_is_argument`."""
        results = list()
        for first_node, first_bindings in self._search(first):
            for second_node, second_bindings in self._search(second.substitute(first_bindings)):
                bindings = first_bindings.merge(second_bindings)
                if first_is_argument:
                    results.append((first_node, second_node, bindings))
                else:
                    results.append((second_node, first_node, bindings))
        return results

    def _prove_unfocused(self, sequent: Sequent) -> List[_RawResult]:
        antecedent, succedent = sequent.antecedent, sequent.succedent
        if len(antecedent) == 0:
            return []

        results = list()
        if isinstance(succedent, FunctorCategory):
            if succedent.direction in (SlashDirection.FORWARD, SlashDirection.UNDIRECTED):
                for node, bindings in self._search(Sequent(antecedent + (succedent.argument, ), succedent.result)):
                    results.append((TLGRule.SLASH_RIGHT, (node, ), bindings, {}))
            if succedent.direction in (SlashDirection.BACKWARD, SlashDirection.UNDIRECTED):
                for node, bindings in self._search(Sequent((succedent.argument, ) + antecedent, succedent.result)):
                    results.append((TLGRule.BACKSLASH_RIGHT, (node, ), bindings, {}))
            return results
        if isinstance(succedent, BoxCategory):
            if not self.enable_modalities:
                return []
            return [(TLGRule.BOX_RIGHT, (node, ), bindings, {}) for node, bindings in self._search(Sequent((Bracket(antecedent), ), succedent.body))]

        if isinstance(succedent, CategoryVariable) and len(antecedent) == 1:
            formula = antecedent[0]
            if isinstance(formula, Category) and not isinstance(formula, (AtomicCategory, CategoryVariable)):
                try:
                    _, bindings = unify(formula, succedent)
                    results.append((TLGRule.AXIOM, tuple(), bindings, {}))
                except UnificationFailure:
                    pass

        for path in iter_formula_paths(antecedent):
            formula = get_item(antecedent, path)
            prefix, i = path[:-1], path[-1]
            if isinstance(formula, ProductCategory) and self.enable_product:
                premise = Sequent(replace_siblings(antecedent, prefix, i, i + 1, (formula.left, formula.right)), succedent)
                return results + [(TLGRule.PRODUCT_LEFT, (node, ), bindings, {'path': path}) for node, bindings in self._search(premise)]
            if isinstance(formula, DiamondCategory) and self.enable_modalities:
                premise = Sequent(replace_siblings(antecedent, prefix, i, i + 1, (Bracket((formula.body, )), )), succedent)
                return results + [(TLGRule.DIAMOND_LEFT, (node, ), bindings, {'path': path}) for node, bindings in self._search(premise)]

        if isinstance(succedent, ProductCategory) and self.enable_product:
            for k in range(1, len(antecedent)):
                for left_node, right_node, bindings in self._prove_pair(Sequent(antecedent[:k], succedent.left), Sequent(antecedent[k:], succedent.right)):
                    results.append((TLGRule.PRODUCT_RIGHT, (left_node, right_node), bindings, {'split': k}))
        if isinstance(succedent, DiamondCategory) and self.enable_modalities:
            if len(antecedent) == 1 and isinstance(antecedent[0], Bracket):
                for node, bindings in self._search(Sequent(antecedent[0].contents, succedent.body)):
                    results.append((TLGRule.DIAMOND_RIGHT, (node, ), bindings, {}))

        for path in iter_formula_paths(antecedent):
            for node, bindings in self._search(Sequent(antecedent, succedent, focus=path)):
                results.append((TLGRule.FOCUS, (node, ), bindings, {'focus': path}))
        return results

    def _prove_focused(self, sequent: Sequent) -> List[_RawResult]:
        antecedent, succedent, path = sequent.antecedent, sequent.succedent, sequent.focus
        formula = get_item(antecedent, path)
        prefix, i = path[:-1], path[-1]

        if isinstance(formula, CategoryVariable) and len(path) == 1 and len(antecedent) > 1:
            return self._instantiate_variable(sequent)

        if isinstance(formula, (AtomicCategory, CategoryVariable)):
            if len(path) != 1 or len(antecedent) != 1:
                return []
            try:
                _, bindings = unify(formula, succedent)
            except UnificationFailure:
                return []
            return [(TLGRule.AXIOM, tuple(), bindings, {})]

        if isinstance(formula, ProductCategory):
            if not self.enable_product:
                return []
            return [(TLGRule.UNFOCUS, (node, ), bindings, {}) for node, bindings in self._search(sequent.unfocused())]
        if isinstance(formula, DiamondCategory):
            if not self.enable_modalities:
                return []
            return [(TLGRule.UNFOCUS, (node, ), bindings, {}) for node, bindings in self._search(sequent.unfocused())]
        if isinstance(formula, BoxCategory):
            # Gamma[<B>] => C  from  Gamma[B] => C, when the bracket holds exactly the boxed formula.
            if not self.enable_modalities or len(prefix) == 0 or len(get_siblings(antecedent, prefix)) != 1:
                return []
            premise = Sequent(replace_siblings(antecedent, prefix[:-1], prefix[-1], prefix[-1] + 1, (formula.body, )), succedent, focus=prefix)
            return [(TLGRule.BOX_LEFT, (node, ), bindings, {'path': path}) for node, bindings in self._search(premise)]

        results = list()
        siblings = get_siblings(antecedent, prefix)
        argument_first = not isinstance(formula.argument, CategoryVariable)
        if formula.direction in (SlashDirection.FORWARD, SlashDirection.UNDIRECTED):
            # Gamma1, [A/B], Delta, Gamma2 => C  from  Delta => B  and  Gamma1, [A], Gamma2 => C.
            for k in range(1, len(siblings) - i):
                argument = Sequent(siblings[i + 1:i + 1 + k], formula.argument)
                rest = Sequent(replace_siblings(antecedent, prefix, i, i + 1 + k, (formula.result, )), succedent, focus=path)
                for arg_node, rest_node, bindings in self._prove_sides(argument, rest, argument_first):
                    results.append((TLGRule.SLASH_LEFT, (arg_node, rest_node), bindings, {'path': path, 'length': k}))
        if formula.direction in (SlashDirection.BACKWARD, SlashDirection.UNDIRECTED):
            # Gamma1, Delta, [B\A], Gamma2 => C  from  Delta => B  and  Gamma1, [A], Gamma2 => C.
            for k in range(1, i + 1):
                argument = Sequent(siblings[i - k:i], formula.argument)
                rest = Sequent(replace_siblings(antecedent, prefix, i - k, i + 1, (formula.result, )), succedent, focus=prefix + (i - k, ))
                for arg_node, rest_node, bindings in self._prove_sides(argument, rest, argument_first):
                    results.append((TLGRule.BACKSLASH_LEFT, (arg_node, rest_node), bindings, {'path': path, 'length': k}))
        return results

    def _prove_sides(self, argument: Sequent, rest: Sequent, argument_first: bool) -> List[Tuple[Edge, Edge, Substitution]]:
        if argument_first:
            return self._prove_pair(argument, rest)
        return self._prove_pair(rest, argument, first_is_argument=False)

    def _instantiate_variable(self, sequent: Sequent) -> List[_RawResult]:
        """Gamma1, [?X], Gamma2 => C, where Gamma1 and Gamma2 are atoms: bind ?X to the functor that takes Gamma1 on the
        left and Gamma2 on the right and yields C."""
        antecedent, succedent, path = sequent.antecedent, sequent.succedent, sequent.focus
        i = path[0]
        if not all(isinstance(a, AtomicCategory) for j, a in enumerate(antecedent) if j != i):
            return []

        functor = succedent
        for a in antecedent[:i]:
            functor = FunctorCategory(functor, a, SlashDirection.BACKWARD)
        for a in reversed(antecedent[i + 1:]):
            functor = FunctorCategory(functor, a, SlashDirection.FORWARD)
        try:
            _, bindings = unify(antecedent[i], functor)
        except UnificationFailure:
            return []

        results = list()
        for node, node_bindings in self._search(sequent.substitute(bindings)):
            results.append((TLGRule.INSTANTIATE, (node, ), bindings.merge(node_bindings), {}))
        return results
