#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : sequent.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Sequents of the Lambek calculus, proof rules, and the Curry-Howard terms of proofs.

The antecedent of a sequent is a structure: a sequence whose items are formulas or brackets ``<Γ>``. Brackets are the
structural counterpart of the diamond and are introduced by ``◇L`` and ``□R``. A position in a structure is a path, i.e.,
a tuple of indices: ``(i, )`` is the i-th top-level item and ``(i, j)`` is the j-th item inside the bracket at ``(i, )``.
"""

from dataclasses import dataclass
from typing import Any, Optional, Iterator, Sequence, Tuple, Union
from jacinle.utils.enum import JacEnum

from nlparsers.common.category import Category
from nlparsers.common.terms import Term, Application, Pair, Projection, fresh_variables, make_abstraction
from nlparsers.chart.forest import DerivationTree

__all__ = [
    'Bracket', 'Path', 'get_item', 'get_siblings', 'replace_siblings', 'iter_formula_paths', 'iter_leaves',
    'Sequent', 'TLGRule', 'proof_term'
]

Path = Tuple[int, ...]


@dataclass(frozen=True)
class Bracket(object):
    """A bracketed sub-structure ``<Γ>``. The items are formulas in sequents, and terms when computing the meaning of a
    proof."""

    contents: Tuple[Any, ...]

    def iter_variables(self) -> Iterator[Any]:
        for item in self.contents:
            yield from item.iter_variables()

    def substitute(self, bindings) -> 'Bracket':
        return Bracket(tuple(item.substitute(bindings) for item in self.contents))

    def __str__(self) -> str:
        return '<' + ', '.join(str(item) for item in self.contents) + '>'

    def __repr__(self) -> str:
        return f'Bracket({self})'


def get_siblings(structure: Tuple[Any, ...], prefix: Path) -> Tuple[Any, ...]:
    """Return the sequence of items at `prefix` (the top-level sequence when `prefix` is empty)."""
    for i in prefix:
        structure = structure[i].contents
    return structure


def get_item(structure: Tuple[Any, ...], path: Path) -> Any:
    return get_siblings(structure, path[:-1])[path[-1]]


def replace_siblings(structure: Tuple[Any, ...], prefix: Path, start: int, end: int, items: Tuple[Any, ...]) -> Tuple[Any, ...]:
    """Replace the items ``[start, end)`` of the sequence at `prefix` with `items`. Returns the new structure."""
    if len(prefix) == 0:
        return structure[:start] + tuple(items) + structure[end:]
    i = prefix[0]
    inner = replace_siblings(structure[i].contents, prefix[1:], start, end, items)
    return structure[:i] + (Bracket(inner), ) + structure[i + 1:]


def iter_formula_paths(structure: Tuple[Any, ...], prefix: Path = tuple()) -> Iterator[Path]:
    """Iterate over the paths of all formulas (not brackets) in a structure, in pre-order."""
    for i, item in enumerate(structure):
        if isinstance(item, Bracket):
            yield from iter_formula_paths(item.contents, prefix + (i, ))
        else:
            yield prefix + (i, )


def iter_leaves(structure: Tuple[Any, ...]) -> Iterator[Any]:
    for item in structure:
        if isinstance(item, Bracket):
            yield from iter_leaves(item.contents)
        else:
            yield item


def _format_structure(structure: Tuple[Any, ...], focus: Optional[Path], prefix: Path = tuple()) -> str:
    items = list()
    for i, item in enumerate(structure):
        if isinstance(item, Bracket):
            items.append('<' + _format_structure(item.contents, focus, prefix + (i, )) + '>')
        elif focus == prefix + (i, ):
            items.append(f'[{item}]')
        else:
            items.append(str(item))
    return ', '.join(items)


@dataclass(frozen=True)
class Sequent(object):
    """A sequent ``Γ => C``. A focused sequent additionally marks one formula of the antecedent as the focus. The focus
    can be given as an index into the top-level sequence, or as a path."""

    antecedent: Tuple[Union[Category, Bracket], ...]
    succedent: Category
    focus: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.focus, int):
            object.__setattr__(self, 'focus', (self.focus, ))

    @property
    def is_focused(self) -> bool:
        return self.focus is not None

    @property
    def focused_formula(self) -> Category:
        return get_item(self.antecedent, self.focus)

    def unfocused(self) -> 'Sequent':
        return Sequent(self.antecedent, self.succedent)

    def iter_variables(self) -> Iterator[Any]:
        for a in self.antecedent:
            yield from a.iter_variables()
        yield from self.succedent.iter_variables()

    def substitute(self, bindings) -> 'Sequent':
        if not bindings:
            return self
        return Sequent(tuple(a.substitute(bindings) for a in self.antecedent), self.succedent.substitute(bindings), self.focus)

    def __str__(self) -> str:
        return _format_structure(self.antecedent, self.focus) + ' => ' + str(self.succedent)

    def __repr__(self) -> str:
        return f'Sequent({self})'


class TLGRule(JacEnum):
    """The rules of the focused sequent calculus."""

    AXIOM = 'ax'
    SLASH_RIGHT = '/R'
    BACKSLASH_RIGHT = '\\R'
    SLASH_LEFT = '/L'
    BACKSLASH_LEFT = '\\L'
    PRODUCT_LEFT = '*L'
    PRODUCT_RIGHT = '*R'
    DIAMOND_LEFT = '◇L'
    DIAMOND_RIGHT = '◇R'
    BOX_LEFT = '□L'
    BOX_RIGHT = '□R'
    INSTANTIATE = 'inst'
    FOCUS = 'focus'
    UNFOCUS = 'unfocus'


def proof_term(node: DerivationTree, hypotheses: Sequence[Any]) -> Term:
    """Compute the Curry-Howard term of a proof. The modalities are semantically transparent.

    Args:
        node: the root of the (unpacked) proof.
        hypotheses: the terms of the antecedent formulas, arranged in the same structure as the antecedent (terms for
            bracketed formulas are wrapped in :class:`Bracket`).

    Returns:
        the (not normalized) term of the succedent.
    """
    hypotheses = tuple(hypotheses)
    rule = TLGRule(node.rule)
    extra = node.extra

    if rule is TLGRule.AXIOM:
        return hypotheses[0]
    elif rule in (TLGRule.FOCUS, TLGRule.UNFOCUS, TLGRule.INSTANTIATE):
        return proof_term(node.children[0], hypotheses)
    elif rule in (TLGRule.SLASH_RIGHT, TLGRule.BACKSLASH_RIGHT):
        x, = fresh_variables(1, *iter_leaves(hypotheses), base='x')
        hypotheses = hypotheses + (x, ) if rule is TLGRule.SLASH_RIGHT else (x, ) + hypotheses
        return make_abstraction([x], proof_term(node.children[0], hypotheses))
    elif rule is TLGRule.BOX_RIGHT:
        return proof_term(node.children[0], (Bracket(hypotheses), ))
    elif rule is TLGRule.DIAMOND_RIGHT:
        return proof_term(node.children[0], hypotheses[0].contents)
    elif rule is TLGRule.PRODUCT_RIGHT:
        k = extra['split']
        return Pair(proof_term(node.children[0], hypotheses[:k]), proof_term(node.children[1], hypotheses[k:]))

    path = extra['path']
    prefix, i = path[:-1], path[-1]
    siblings = get_siblings(hypotheses, prefix)
    if rule is TLGRule.PRODUCT_LEFT:
        h = siblings[i]
        return proof_term(node.children[0], replace_siblings(hypotheses, prefix, i, i + 1, (Projection(h, 1), Projection(h, 2))))
    elif rule is TLGRule.DIAMOND_LEFT:
        return proof_term(node.children[0], replace_siblings(hypotheses, prefix, i, i + 1, (Bracket((siblings[i], )), )))
    elif rule is TLGRule.BOX_LEFT:
        # The bracket at `prefix` contains exactly the boxed formula.
        h, = siblings
        return proof_term(node.children[0], replace_siblings(hypotheses, prefix[:-1], prefix[-1], prefix[-1] + 1, (h, )))
    elif rule is TLGRule.SLASH_LEFT:
        k = extra['length']
        argument = proof_term(node.children[0], siblings[i + 1:i + 1 + k])
        return proof_term(node.children[1], replace_siblings(hypotheses, prefix, i, i + 1 + k, (Application(siblings[i], argument), )))
    elif rule is TLGRule.BACKSLASH_LEFT:
        k = extra['length']
        argument = proof_term(node.children[0], siblings[i - k:i])
        return proof_term(node.children[1], replace_siblings(hypotheses, prefix, i - k, i + 1, (Application(siblings[i], argument), )))
    raise ValueError(f'Unknown proof rule: {node.rule}.')
