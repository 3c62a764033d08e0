#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : expression.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Chain-based MG expressions and the structure-building operations.

An expression is a head chain plus a list of moving chains. Each chain is a span of the input together with the
features it has not checked yet. Moving chains also carry a depth: the number of operations applied since the chain
started moving. Shortest move compares these depths.

Two extensions are controlled by keyword arguments of the operations:

- Head movement. Expressions whose category is selected by some head selector ``=>x`` (the ``head_targets``) keep their
  specifier, head and complement as separate pieces, because the head may still move out of the phrase. Merging such
  an expression with a lexical ``=>x`` selector joins the head of the complement to the left of the selecting head.
  All other expressions are contiguous.
- Phases. When ``phase_heads`` is non-empty, moving chains record whether they sit at the edge of the current phrase.
  Selecting a complete phase (an expression whose category is a phase head) fails if one of its moving chains is not
  at the edge.

All operations are pure functions. They return the name of the operation, the derived expression and the information
recorded in the derivation history, or raise a :class:`~nlparsers.common.errors.CompositionError` when they do not apply.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Iterator, Iterable, Mapping, Sequence, Tuple, Dict, FrozenSet

from nlparsers.common.errors import CompositionError, DirectionalMismatch, LocalityViolation, get_composition_context
from nlparsers.common.unification import Substitution, unify_features
from nlparsers.chart.chart import Span
from nlparsers.mg.feature import MGFeature
from nlparsers.mg.lexical_item import MGLexicalItem

__all__ = ['MGChain', 'MGExpression', 'merge', 'move', 'adjoin', 'category_of']

OperationResult = Tuple[str, 'MGExpression', Dict[str, Any]]
Pieces = Tuple[Optional[Span], Span, Optional[Span]]


def _format_span(span: Optional[Span]) -> str:
    if span is None:
        return '-'
    return f'[{span[0]},{span[1]})'


def _concat(spans: Iterable[Optional[Span]]) -> Optional[Span]:
    """Concatenate adjacent spans, ignoring None. Returns None if the spans are not adjacent (or if there is no span)."""
    spans = [s for s in spans if s is not None]
    if len(spans) == 0:
        return None
    for a, b in zip(spans, spans[1:]):
        if a[1] != b[0]:
            return None
    return spans[0][0], spans[-1][1]


@dataclass(frozen=True, repr=False)
class MGChain(object):
    """A chain: a span and the unchecked features of the constituent pronounced there."""

    span: Span
    features: Tuple[MGFeature, ...]
    depth: int = 0
    """The number of operations since the chain started moving. Always 0 for head chains."""

    edge: bool = False
    """Whether the (moving) chain is at the edge of the current phrase. Only tracked when phases are enabled."""

    pieces: Optional[Pieces] = None
    """The (specifier, head, complement) spans of a head chain whose head may still move. None for contiguous chains,
    whose span is the whole constituent."""

    @property
    def first(self) -> Optional[MGFeature]:
        return self.features[0] if len(self.features) > 0 else None

    @property
    def contiguous_span(self) -> Optional[Span]:
        """The span of the chain if the constituent is contiguous, otherwise None."""
        if self.pieces is None:
            return self.span
        return _concat(self.pieces)

    def get_pieces(self) -> Pieces:
        if self.pieces is None:
            return None, self.span, None
        return self.pieces

    def advance(self) -> 'MGChain':
        return MGChain(self.span, self.features, self.depth + 1, self.edge, self.pieces)

    def with_edge(self, edge: bool) -> 'MGChain':
        if edge == self.edge:
            return self
        return MGChain(self.span, self.features, self.depth, edge, self.pieces)

    def iter_variables(self) -> Iterator[Any]:
        for f in self.features:
            yield from f.iter_variables()

    def substitute(self, bindings) -> 'MGChain':
        return MGChain(self.span, tuple(f.substitute(bindings) for f in self.features), self.depth, self.edge, self.pieces)

    def rename(self, mapping: Mapping[Any, Any]) -> 'MGChain':
        return MGChain(self.span, tuple(f.rename(mapping) for f in self.features), self.depth, self.edge, self.pieces)

    def __str__(self) -> str:
        if self.pieces is not None:
            fmt = '(' + ' '.join(_format_span(s) for s in self.pieces) + ') '
        else:
            fmt = _format_span(self.span) + ' '
        fmt += ' '.join(str(f) for f in self.features)
        if self.depth > 0:
            fmt += f' @{self.depth}'
        if self.edge:
            fmt += ' ^'
        return fmt

    def __repr__(self) -> str:
        return f'MGChain({self})'


def _chain_sort_key(chain: MGChain):
    return chain.span, ' '.join(f.type.prefix + f.name for f in chain.features), chain.depth, chain.edge


def category_of(features: Sequence[MGFeature]) -> Optional[str]:
    """The name of the categorial feature of a feature sequence, or None if there is none."""
    for f in features:
        if f.is_categorial:
            return f.name
    return None


@dataclass(frozen=True, repr=False)
class MGExpression(object):
    """An MG expression: a head chain and the moving chains."""

    head: MGChain
    movers: Tuple[MGChain, ...] = tuple()
    lexical: bool = False
    """Whether the expression is a lexical item (``::``) rather than a derived expression (``:``)."""

    coverage: int = field(default=0, compare=False)
    """The bitmask of the token positions covered by the expression."""

    def __post_init__(self):
        object.__setattr__(self, 'movers', tuple(sorted(self.movers, key=_chain_sort_key)))

    @classmethod
    def from_lexical_item(cls, item: MGLexicalItem, position: int) -> 'MGExpression':
        """Instantiate a lexical item at a position. Empty items cover the empty span ``[position, position)``."""
        if item.is_empty:
            return cls(MGChain((position, position), item.features), lexical=True, coverage=0)
        return cls(MGChain((position, position + 1), item.features), lexical=True, coverage=1 << position)

    @property
    def span(self) -> Span:
        return self.head.span

    @property
    def features(self) -> Tuple[MGFeature, ...]:
        return self.head.features

    def iter_variables(self) -> Iterator[Any]:
        yield from self.head.iter_variables()
        for m in self.movers:
            yield from m.iter_variables()

    def substitute(self, bindings) -> 'MGExpression':
        if not bindings:
            return self
        return MGExpression(self.head.substitute(bindings), tuple(m.substitute(bindings) for m in self.movers), self.lexical, self.coverage)

    def rename(self, mapping: Mapping[Any, Any]) -> 'MGExpression':
        return MGExpression(self.head.rename(mapping), tuple(m.rename(mapping) for m in self.movers), self.lexical, self.coverage)

    def __str__(self) -> str:
        fmt = str(self.head)
        if self.lexical:
            fmt = '::' + fmt
        for m in self.movers:
            fmt += ', ' + str(m)
        return '<' + fmt + '>'

    def __repr__(self) -> str:
        return f'MGExpression{self}'


def _fail(exc_type: type, message: str):
    with get_composition_context().exc(exc_type):
        raise exc_type(message)


def _check(probe: MGFeature, goal: MGFeature) -> Substitution:
    _, bindings = unify_features(probe.agreement, goal.agreement)
    return bindings


def _advance(movers: Tuple[MGChain, ...]) -> Tuple[MGChain, ...]:
    return tuple(m.advance() for m in movers)


def _contiguous(chain: MGChain, message: str) -> Span:
    span = chain.contiguous_span
    if span is None:
        _fail(DirectionalMismatch, message)
    return span


def _join(left: Optional[Span], right: Optional[Span], message: str) -> Optional[Span]:
    if left is None or right is None:
        return left if right is None else right
    span = _concat((left, right))
    if span is None:
        _fail(DirectionalMismatch, message)
    return span


def _make_head(pieces: Pieces, features: Tuple[MGFeature, ...], head_targets: FrozenSet[str], message: str) -> MGChain:
    """Build a head chain from its pieces. The pieces are kept apart only if the head may still move."""
    spec, head, comp = pieces
    if spec is None and comp is None:
        return MGChain(head, features)
    if category_of(features) in head_targets:
        if (spec is not None and spec[1] > head[0]) or (comp is not None and head[1] > comp[0]):
            _fail(DirectionalMismatch, message)
        spans = [s for s in pieces if s is not None]
        return MGChain((min(s[0] for s in spans), max(s[1] for s in spans)), features, pieces=pieces)
    span = _concat(pieces)
    if span is None:
        _fail(DirectionalMismatch, message)
    return MGChain(span, features)


def _reset_edges(movers: Tuple[MGChain, ...], phase_heads: Sequence[str]) -> Tuple[MGChain, ...]:
    if not phase_heads:
        return movers
    return tuple(m.with_edge(False) for m in movers)


def merge(selector: MGExpression, selectee: MGExpression, phase_heads: Sequence[str] = (), head_targets: FrozenSet[str] = frozenset()) -> OperationResult:
    """Merge two expressions. The first feature of the selector head must select the first feature of the selectee.

    - merge1: a lexical selector takes a complement (with no other features) on its right. With a head selector ``=>x``,
      the head of the complement additionally moves to the left of the selecting head;
    - merge2: a derived selector takes a specifier (with no other features) on its left;
    - merge3: the selectee has more features to check, so it becomes a moving chain (of depth 1).

    The depth of every other moving chain increases by one.

    Args:
        selector: the selecting expression.
        selectee: the selected expression.
        phase_heads: the categories that close a phase. Empty disables the phase impenetrability check.
        head_targets: the categories selected by head selectors.

    Raises:
        CompositionError: if the features do not match or the expressions overlap.
        DirectionalMismatch: if the word order is violated.
        LocalityViolation: if the selectee is a phase and one of its moving chains is not at its edge.
    """
    head, target = selector.head, selectee.head
    if head.first is None or target.first is None or not head.first.matches_merge(target.first):
        _fail(CompositionError, f'Can not merge {selector} and {selectee}: feature mismatch.')
    if selector.coverage & selectee.coverage:
        _fail(CompositionError, f'Can not merge {selector} and {selectee}: overlapping spans.')
    if phase_heads and target.first.name in phase_heads:
        for m in selectee.movers:
            if not m.edge:
                _fail(LocalityViolation, f'Can not merge {selector} and {selectee}: the chain {m} is not at the edge of the phase {target.first.name}.')

    bindings = _check(head.first, target.first)
    movers = _advance(selector.movers + _reset_edges(selectee.movers, phase_heads))
    features = head.features[1:]
    extra = {'checked': (str(head.first), str(target.first))}
    if len(target.features) > 1:
        rule = 'merge3'
        new_head = _make_head(head.get_pieces(), features, head_targets, f'Can not merge {selector} and {selectee}: the head is not contiguous.')
        mover = _contiguous(target, f'Can not merge {selector} and {selectee}: the moving chain is not contiguous.')
        movers = movers + (MGChain(mover, target.features[1:], 1, edge=bool(phase_heads)), )
    elif selector.lexical and head.first.is_head_selector:
        rule = 'merge1'
        spec, moved, comp = target.get_pieces()
        if moved[1] != head.span[0]:
            _fail(DirectionalMismatch, f'Can not merge {selector} and {selectee}: the head of the complement does not precede the selecting head.')
        remnant = _join(spec, comp, f'Can not merge {selector} and {selectee}: the remnant of the complement is not contiguous.')
        message = f'Can not merge {selector} and {selectee}: the complement does not follow the head.'
        new_head = _make_head((None, (moved[0], head.span[1]), remnant), features, head_targets, message)
        extra['head_movement'] = True
    elif selector.lexical:
        rule = 'merge1'
        complement = _contiguous(target, f'Can not merge {selector} and {selectee}: the complement is not contiguous.')
        message = f'Can not merge {selector} and {selectee}: the complement does not follow the head.'
        new_head = _make_head((None, head.span, complement), features, head_targets, message)
    else:
        rule = 'merge2'
        specifier = _contiguous(target, f'Can not merge {selector} and {selectee}: the specifier is not contiguous.')
        message = f'Can not merge {selector} and {selectee}: the specifier does not precede the head.'
        spec, h, comp = head.get_pieces()
        new_head = _make_head((_join(specifier, spec, message), h, comp), features, head_targets, message)

    expression = MGExpression(new_head, movers, False, selector.coverage | selectee.coverage).substitute(bindings)
    return rule, expression, extra


def move(expression: MGExpression, phase_heads: Sequence[str] = (), head_targets: FrozenSet[str] = frozenset()) -> OperationResult:
    """Move the closest moving chain whose first feature is attracted by the first feature of the head.

    - move1: the chain has no other features and lands to the left of the head;
    - move2: the chain has more features to check and keeps moving (its depth is reset to 1, and it is at the edge).

    Raises:
        LocalityViolation: if two candidate chains are equally close.
    """
    head = expression.head
    if head.first is None or not head.first.is_licensor:
        _fail(CompositionError, f'Can not move in {expression}: the head has no licensor feature.')

    candidates = [i for i, m in enumerate(expression.movers) if head.first.matches_move(m.first)]
    if len(candidates) == 0:
        _fail(CompositionError, f'Can not move in {expression}: no chain with a matching licensee.')
    depth = min(expression.movers[i].depth for i in candidates)
    closest = [i for i in candidates if expression.movers[i].depth == depth]
    if len(closest) > 1:
        _fail(LocalityViolation, f'Can not move in {expression}: {len(closest)} chains with licensee -{head.first.name} are equally close.')

    index = closest[0]
    mover = expression.movers[index]
    bindings = _check(head.first, mover.first)
    others = _advance(expression.movers[:index] + expression.movers[index + 1:])
    features = head.features[1:]
    if len(mover.features) == 1:
        rule = 'move1'
        message = f'Can not move in {expression}: the chain {mover} does not precede the head.'
        spec, h, comp = head.get_pieces()
        new_head = _make_head((_join(mover.span, spec, message), h, comp), features, head_targets, message)
        movers = others
    else:
        rule = 'move2'
        new_head = _make_head(head.get_pieces(), features, head_targets, f'Can not move in {expression}: the head is not contiguous.')
        movers = others + (MGChain(mover.span, mover.features[1:], 1, edge=bool(phase_heads)), )

    result = MGExpression(new_head, movers, False, expression.coverage).substitute(bindings)
    return rule, result, {
        'checked': (str(head.first), str(mover.first)),
        'probe': (head.span, head.features),
        'licensee': head.first.name,
        'depth': depth
    }


def adjoin(target: MGExpression, adjunct: MGExpression, phase_heads: Sequence[str] = (), head_targets: FrozenSet[str] = frozenset()) -> OperationResult:
    """Adjoin an adjunct (whose only feature is ``~x``) to the right of an expression whose first feature is ``x``.
    The target keeps its features."""
    head, adjunct_head = target.head, adjunct.head
    if len(adjunct_head.features) != 1 or head.first is None or not adjunct_head.first.matches_adjoin(head.first):
        _fail(CompositionError, f'Can not adjoin {adjunct} to {target}: feature mismatch.')
    if target.coverage & adjunct.coverage:
        _fail(CompositionError, f'Can not adjoin {adjunct} to {target}: overlapping spans.')

    message = f'Can not adjoin {adjunct} to {target}: the adjunct does not follow the target.'
    adjunct_span = _contiguous(adjunct_head, message)
    spec, h, comp = head.get_pieces()
    if comp is None:
        pieces = (spec, h, adjunct_span)
    else:
        pieces = (spec, h, _join(comp, adjunct_span, message))

    bindings = _check(adjunct_head.first, head.first)
    movers = _advance(target.movers + _reset_edges(adjunct.movers, phase_heads))
    new_head = _make_head(pieces, head.features, head_targets, message)
    expression = MGExpression(new_head, movers, False, target.coverage | adjunct.coverage).substitute(bindings)
    return 'adjoin', expression, {'checked': (str(adjunct_head.first), str(head.first))}
