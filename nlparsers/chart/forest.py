#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : forest.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Derivation trees and packed derivation forests."""

import itertools
from typing import Any, Optional, Iterator, Sequence, Tuple, List, Dict
from jacinle.utils.printing import indent_text, print_to_string

from nlparsers.chart.chart import Edge, EdgeHistory

__all__ = ['DerivationTree', 'DerivationForest']


class DerivationTree(object):
    """A node in an (unpacked) derivation tree."""

    def __init__(
        self, category: Any, rule: str, children: Sequence['DerivationTree'] = tuple(),
        span: Optional[Tuple[int, int]] = None, word: Optional[str] = None,
        semantics: Optional[Any] = None, weight: float = 0.0, extra: Optional[Dict[str, Any]] = None
    ):
        """Construct a derivation tree node.

        Args:
            category: the category of the node.
            rule: the name of the rule applied at the node (``lex`` for leaves).
            children: the children.
            span: the span of the node.
            word: the word (for lexical leaves).
            semantics: the meaning of the node.
            weight: the weight of the sub-derivation.
            extra: formalism-specific information.
        """
        self.category = category
        self.rule = rule
        self.children = tuple(children)
        self.span = span
        self.word = word
        self.semantics = semantics
        self.weight = weight
        self.extra = extra if extra is not None else dict()

    @property
    def is_leaf(self) -> bool:
        return len(self.children) == 0

    @property
    def height(self) -> int:
        if self.is_leaf:
            return 1
        return 1 + max(c.height for c in self.children)

    def iter_nodes(self) -> Iterator['DerivationTree']:
        """Iterate over all nodes in pre-order."""
        yield self
        for c in self.children:
            yield from c.iter_nodes()

    def leaves(self) -> List['DerivationTree']:
        return [n for n in self.iter_nodes() if n.is_leaf]

    def words(self) -> List[str]:
        """The words of the lexical leaves, from left to right."""
        leaves = [n for n in self.leaves() if n.word is not None]
        return [n.word for n in sorted(leaves, key=lambda n: (n.span[0], n.span[1]) if n.span is not None else (0, 0))]

    def rules(self) -> List[str]:
        """The rules applied in the tree, in pre-order."""
        return [n.rule for n in self.iter_nodes()]

    def format(self) -> str:
        """Format the tree as an indented list of nodes."""
        if self.word is not None:
            fmt = f'{self.category}  [{self.rule}] {self.word!r}'
        else:
            fmt = f'{self.category}  [{self.rule}]'
        if self.semantics is not None:
            fmt += f'  := {self.semantics}'
        for c in self.children:
            fmt += '\n' + indent_text(c.format())
        return fmt

    def print_tree(self):
        print(self.format())

    def as_nltk_str(self) -> str:
        """Convert the tree to a string in nltk format."""
        label = str(self.category).replace('(', '{').replace(')', '}').replace(' ', '')
        if self.is_leaf:
            word = self.word if self.word else 'ε'
            return f'({label} {word})'
        return f'({label} ' + ' '.join(c.as_nltk_str() for c in self.children) + ')'

    def format_nltk_tree(self) -> str:
        """Format the tree as a nltk tree."""
        with print_to_string() as fmt:
            self.print_nltk_tree()
        return fmt.get()

    def print_nltk_tree(self):
        """Print the tree as a nltk tree."""
        from nltk.tree import Tree
        parsing_nltk = Tree.fromstring(self.as_nltk_str())
        parsing_nltk.pretty_print()

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f'DerivationTree({self.category}, rule={self.rule}, nr_children={len(self.children)})'


class DerivationForest(object):
    """The packed forest of all derivations of a token sequence at the goal category.

    The forest is built fresh for every parse call and shares the edges of the chart. Use :meth:`count_derivations` to
    count the derivations without unpacking them, and :meth:`iter_trees` to unpack them.
    """

    def __init__(
        self, tokens: Sequence[str], goal: Any, roots: Sequence[Edge], formalism: Optional[str] = None,
        exhaustive: bool = True, steps: int = 0, default_max_depth: Optional[int] = None
    ):
        """Initialize the forest.

        Args:
            tokens: the input tokens.
            goal: the goal category.
            roots: the root edges (all covering the full input at the goal category).
            formalism: the name of the formalism.
            exhaustive: whether the search space has been fully explored. A forest built after the step budget has been
                exhausted (or after beam pruning) contains a subset of the derivations.
            steps: the number of search steps.
            default_max_depth: the default depth bound for unpacking. Required for forests that may contain cycles.
        """
        self.tokens = tuple(tokens)
        self.goal = goal
        self.roots = sorted(roots, key=lambda e: e.weight, reverse=True)
        self.formalism = formalism
        self.exhaustive = exhaustive
        self.steps = steps
        self.default_max_depth = default_max_depth

    @property
    def ok(self) -> bool:
        """Always True. :class:`~nlparsers.chart.result.ParseFailure` has the same property set to False."""
        return True

    def unwrap(self) -> 'DerivationForest':
        """Return the forest itself. :meth:`ParseFailure.unwrap` raises the corresponding error instead."""
        return self

    @property
    def nr_roots(self) -> int:
        return len(self.roots)

    def categories(self) -> List[Any]:
        """The categories of the root edges."""
        return [e.category for e in self.roots]

    def count_derivations(self, max_depth: Optional[int] = None) -> int:
        """Count the derivation trees packed in the forest.

        Args:
            max_depth: only count trees of height at most `max_depth`. Defaults to the forest default.

        Returns:
            the number of derivations.
        """
        if max_depth is None:
            max_depth = self.default_max_depth

        memo = dict()
        visiting = set()

        def count(edge: Edge, depth: Optional[int]) -> int:
            if depth is not None and depth <= 0:
                return 0
            key = (id(edge), depth)
            if key in memo:
                return memo[key]
            if depth is None:
                if id(edge) in visiting:
                    raise ValueError(f'The forest contains a cycle at {edge}; pass max_depth to count the derivations.')
                visiting.add(id(edge))
            next_depth = depth - 1 if depth is not None else None
            total = 0
            for h in edge.histories:
                product = 1
                for c in h.children:
                    product *= count(c, next_depth)
                    if product == 0:
                        break
                total += product
            if depth is None:
                visiting.discard(id(edge))
            memo[key] = total
            return total

        return sum(count(e, max_depth) for e in self.roots)

    def __len__(self) -> int:
        return self.count_derivations()

    def __bool__(self) -> bool:
        return len(self.roots) > 0

    def iter_trees(self, limit: Optional[int] = None, max_depth: Optional[int] = None) -> Iterator[DerivationTree]:
        """Unpack the forest into derivation trees.

        Args:
            limit: the maximum number of trees.
            max_depth: the maximum height of the trees. Defaults to the forest default.

        Yields:
            the derivation trees, root edges with higher weights first.
        """
        if max_depth is None:
            max_depth = self.default_max_depth
        iterator = itertools.chain.from_iterable(self._iter_edge(e, max_depth, frozenset()) for e in self.roots)
        for tree in itertools.islice(iterator, limit):
            yield self._finalize_tree(tree)

    def __iter__(self) -> Iterator[DerivationTree]:
        return self.iter_trees()

    def trees(self, limit: Optional[int] = None, max_depth: Optional[int] = None) -> List[DerivationTree]:
        return list(self.iter_trees(limit=limit, max_depth=max_depth))

    def best_tree(self) -> DerivationTree:
        """Return a derivation with the highest weight."""
        return max(self.iter_trees(), key=lambda t: t.weight)

    def _iter_edge(self, edge: Edge, depth: Optional[int], ancestors: frozenset) -> Iterator[DerivationTree]:
        if depth is not None and depth <= 0:
            return
        if depth is None:
            if id(edge) in ancestors:
                raise ValueError(f'The forest contains a cycle at {edge}; pass max_depth to unpack the derivations.')
            ancestors = ancestors | {id(edge)}
        next_depth = depth - 1 if depth is not None else None
        for h in edge.histories:
            for children in self._iter_children(h.children, next_depth, ancestors):
                yield self._make_tree(edge, h, children)

    def _iter_children(self, children: Sequence[Edge], depth: Optional[int], ancestors: frozenset) -> Iterator[Tuple[DerivationTree, ...]]:
        if len(children) == 0:
            yield tuple()
            return
        for first in self._iter_edge(children[0], depth, ancestors):
            for rest in self._iter_children(children[1:], depth, ancestors):
                yield (first, ) + rest

    def _make_tree(self, edge: Edge, history: EdgeHistory, children: Tuple[DerivationTree, ...]) -> DerivationTree:
        children = list(children)
        for step in history.unary:
            child = children[step.index]
            children[step.index] = DerivationTree(step.category, step.rule, (child, ), span=child.span, semantics=step.semantics, weight=child.weight)
        return DerivationTree(
            edge.category, history.rule, children, span=edge.span,
            word=history.entry.word if history.entry is not None else None,
            semantics=history.semantics, weight=history.weight, extra=history.extra
        )

    def _finalize_tree(self, tree: DerivationTree) -> DerivationTree:
        return tree

    def format_summary(self) -> str:
        """Format the summary of the forest."""
        fmt = f'DerivationForest(formalism={self.formalism}, goal={self.goal}, exhaustive={self.exhaustive}, steps={self.steps})\n'
        fmt += '  tokens: ' + ' '.join(self.tokens) + '\n'
        for e in self.roots:
            fmt += indent_text(str(e)) + '\n'
        return fmt.rstrip()

    def print_summary(self):
        """Print the summary of the forest."""
        print(self.format_summary())

    def __str__(self) -> str:
        return f'DerivationForest(formalism={self.formalism}, goal={self.goal}, nr_roots={len(self.roots)})'

    __repr__ = __str__
