#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : chart.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The formalism-agnostic chart and agenda.

A chart is a table of packed :class:`Edge` objects. Two edges with the same span and the same signature (the canonical
form of their category) are packed into one edge, which keeps the list of alternative :class:`EdgeHistory` objects that
derive it. The agenda is a priority worklist; the CCG parser uses the span length as the priority, so that all spans
of length L are complete before any span of length L + 1 is built.
"""

import heapq
import itertools
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Optional, Union, Iterator, Sequence, Tuple, List, Dict, Callable, Hashable

__all__ = ['Span', 'as_tokens', 'EdgeHistory', 'UnaryStep', 'Edge', 'Chart', 'Agenda', 'SearchBudget', 'SearchBudgetExhausted']

Span = Tuple[int, int]


def as_tokens(tokens: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    """Convert the input of a parse call into a tuple of tokens. Strings are split on whitespace."""
    if isinstance(tokens, str):
        return tuple(tokens.split())
    return tuple(tokens)


@dataclass(frozen=True)
class UnaryStep(object):
    """A unary rule applied to one child of a history before the binary rule (e.g., CCG type-raising)."""

    index: int
    """The index of the child."""

    category: Any
    """The category after the unary rule."""

    rule: str
    """The name of the unary rule."""

    semantics: Optional[Any] = None
    """The meaning after the unary rule."""


@dataclass
class EdgeHistory(object):
    """One way of deriving an edge."""

    rule: str
    """The name of the rule (e.g., ``>``, ``merge1``, ``/L``). Lexical histories use ``lex``."""

    children: Tuple['Edge', ...] = ()
    """The child edges, in surface order."""

    weight: float = 0.0
    """The weight of this derivation (children weights plus the rule weight)."""

    semantics: Optional[Any] = None
    """The meaning built by this derivation."""

    entry: Optional[Any] = None
    """The lexical entry, for lexical histories."""

    unary: Tuple[UnaryStep, ...] = ()
    """Unary steps applied to the children before the rule."""

    extra: Dict[str, Any] = field(default_factory=dict)
    """Formalism-specific information (e.g., the checked features of an MG operation)."""

    @property
    def is_lexical(self) -> bool:
        return self.entry is not None


class Edge(object):
    """A packed chart entry: a span, a category, and the list of alternative histories that derive it."""

    def __init__(self, span: Optional[Span], category: Any, key: Hashable, tag: Optional[str] = None, height: int = 1):
        """Initialize the edge.

        Args:
            span: the span ``[start, end)`` covered by the edge.
            category: the category of the edge.
            key: the packing key of the edge.
            tag: an optional tag that distinguishes edges with the same category (e.g., the normal-form tag in CCG).
            height: the minimal height of a derivation of the edge.
        """
        self.span = span
        self.category = category
        self.key = key
        self.tag = tag
        self.height = height
        self.histories: List[EdgeHistory] = list()
        self.pruned = False

    span: Optional[Span]
    """The span ``[start, end)`` covered by the edge."""

    category: Any
    """The category of the edge."""

    histories: List[EdgeHistory]
    """The alternative derivation histories."""

    pruned: bool
    """Whether the edge has been pruned (by a beam)."""

    @property
    def start(self) -> int:
        return self.span[0]

    @property
    def end(self) -> int:
        return self.span[1]

    @property
    def length(self) -> int:
        return self.span[1] - self.span[0]

    @property
    def weight(self) -> float:
        """The weight of the best history."""
        if len(self.histories) == 0:
            return float('-inf')
        return max(h.weight for h in self.histories)

    @property
    def is_lexical(self) -> bool:
        return any(h.is_lexical for h in self.histories)

    def add_history(self, history: EdgeHistory):
        self.histories.append(history)

    def __str__(self) -> str:
        span = f'[{self.span[0]}, {self.span[1]})' if self.span is not None else '[]'
        tag = f' <{self.tag}>' if self.tag is not None else ''
        return f'Edge{span}: {self.category}{tag} (nr_histories={len(self.histories)})'

    __repr__ = __str__


class Chart(object):
    """A table of packed edges indexed by span, start and end positions."""

    def __init__(self, nr_tokens: int):
        self.nr_tokens = nr_tokens
        self.edges: Dict[Hashable, Edge] = dict()
        self.cells: Dict[Span, List[Edge]] = defaultdict(list)
        self.by_start: Dict[int, List[Edge]] = defaultdict(list)
        self.by_end: Dict[int, List[Edge]] = defaultdict(list)

    def add(self, span: Span, category: Any, signature: Hashable, history: EdgeHistory, tag: Optional[str] = None, height: int = 1) -> Tuple[Edge, bool]:
        """Add a derivation to the chart. When an edge with the same span, signature and tag exists, the history is packed
        into that edge.

        Args:
            span: the span of the derivation.
            category: the derived category.
            signature: the signature of the category.
            history: the derivation history.
            tag: the tag of the edge.
            height: the height of the derivation.

        Returns:
            the edge, and whether it is new.
        """
        key = (span, signature, tag)
        edge = self.edges.get(key)
        is_new = edge is None
        if is_new:
            edge = Edge(span, category, key, tag=tag, height=height)
            self.edges[key] = edge
            self.cells[span].append(edge)
            self.by_start[span[0]].append(edge)
            self.by_end[span[1]].append(edge)
        else:
            edge.height = min(edge.height, height)
        edge.add_history(history)
        return edge, is_new

    def get(self, span: Span, signature: Hashable, tag: Optional[str] = None) -> Optional[Edge]:
        return self.edges.get((span, signature, tag))

    def cell(self, start: int, end: int) -> List[Edge]:
        """Return the (unpruned) edges covering ``[start, end)``."""
        return [e for e in self.cells.get((start, end), ()) if not e.pruned]

    def edges_starting_at(self, start: int) -> List[Edge]:
        return [e for e in self.by_start.get(start, ()) if not e.pruned]

    def edges_ending_at(self, end: int) -> List[Edge]:
        return [e for e in self.by_end.get(end, ()) if not e.pruned]

    def prune_cell(self, span: Span, beam: int) -> int:
        """Keep the `beam` best edges of a cell.

        Returns:
            the number of pruned edges.
        """
        edges = self.cell(*span)
        if len(edges) <= beam:
            return 0
        edges = sorted(edges, key=lambda e: e.weight, reverse=True)
        for e in edges[beam:]:
            e.pruned = True
        return len(edges) - beam

    def iter_edges(self) -> Iterator[Edge]:
        return iter(self.edges.values())

    def __len__(self) -> int:
        return len(self.edges)

    def __str__(self) -> str:
        return f'Chart(nr_tokens={self.nr_tokens}, nr_edges={len(self.edges)})'

    __repr__ = __str__


class Agenda(object):
    """A priority worklist. Items with the same priority are popped in insertion order."""

    def __init__(self, priority: Optional[Callable[[Any], Any]] = None):
        """Initialize the agenda.

        Args:
            priority: a function computing the priority of an item (smaller first). If None, the agenda is a FIFO queue.
        """
        self.priority = priority
        self.queue = list()
        self.counter = itertools.count()

    def push(self, item: Any):
        priority = self.priority(item) if self.priority is not None else 0
        heapq.heappush(self.queue, (priority, next(self.counter), item))

    def pop(self) -> Any:
        return heapq.heappop(self.queue)[2]

    def peek_priority(self) -> Any:
        return self.queue[0][0]

    def __len__(self) -> int:
        return len(self.queue)

    def __bool__(self) -> bool:
        return len(self.queue) > 0


class SearchBudgetExhausted(Exception):
    """Raised (and caught inside the parsers) when the step budget of a parse call is exhausted."""


class SearchBudget(object):
    """Counts the steps of a parse call against an optional bound."""

    def __init__(self, step_budget: Optional[int] = None):
        self.step_budget = step_budget
        self.steps = 0
        self.exhausted = False

    def tick(self, n: int = 1):
        """Count `n` steps.

        Raises:
            SearchBudgetExhausted: if the number of steps exceeds the budget.
        """
        self.steps += n
        if self.step_budget is not None and self.steps > self.step_budget:
            self.exhausted = True
            raise SearchBudgetExhausted(f'Step budget exhausted ({self.step_budget} steps).')
