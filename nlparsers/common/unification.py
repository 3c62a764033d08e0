#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : unification.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Unification and substitution over categories and feature structures.

All functions in this module are pure. A :class:`Substitution` is an immutable binding table: binding a variable returns
a new table, so a failed unification never leaves a partial binding behind. Variable chains (``?a -> ?b -> NP``) are
resolved on lookup by :meth:`Substitution.walk`.

The only state threaded through a parse is the :class:`VariableCounter`, which is used to give every lexical category
fresh variable names. Each parse call creates its own counter.
"""

import itertools
from typing import Any, Optional, Union, Iterable, Tuple, Dict

from nlparsers.common.errors import UnificationFailure, OccursCheckFailure, get_composition_context
from nlparsers.common.features import FeatureValue, AtomicValue, SetValue, ComplexValue, FeatureVariable, FeatureStructure
from nlparsers.common.category import Category, AtomicCategory, FunctorCategory, ProductCategory, CategoryVariable, ModalCategory, SlashDirection

__all__ = [
    'Substitution', 'VariableCounter',
    'unify', 'unify_features', 'unify_feature_values', 'substitute', 'occurs_in',
    'freshen', 'canonicalize', 'signature', 'is_unifiable', 'is_instance'
]

Variable = Union[CategoryVariable, FeatureVariable]
Term = Union[Category, FeatureValue, FeatureStructure]


class Substitution(object):
    """An immutable mapping from variables (:class:`CategoryVariable` or :class:`FeatureVariable`) to terms."""

    def __init__(self, bindings: Optional[Dict[Variable, Any]] = None):
        self._bindings = dict(bindings) if bindings is not None else dict()

    def __contains__(self, variable: Variable) -> bool:
        return variable in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __bool__(self) -> bool:
        return len(self._bindings) > 0

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Substitution) and self._bindings == other._bindings

    def __hash__(self) -> int:
        return hash(frozenset(self._bindings.items()))

    def items(self):
        return self._bindings.items()

    def bind(self, variable: Variable, value: Any) -> 'Substitution':
        """Return a new substitution with `variable` bound to `value`."""
        bindings = self._bindings.copy()
        bindings[variable] = value
        return Substitution(bindings)

    def merge(self, other: 'Substitution') -> 'Substitution':
        """Return the union of two substitutions. The variables bound by the two substitutions must be disjoint."""
        if not other:
            return self
        if not self:
            return other
        bindings = self._bindings.copy()
        bindings.update(other._bindings)
        return Substitution(bindings)

    def walk(self, term: Any) -> Any:
        """Follow the chain of bindings starting from `term`. Returns the first term that is not a bound variable."""
        while getattr(term, 'is_variable', False) and term in self._bindings:
            term = self._bindings[term]
        return term

    def apply(self, term: Term) -> Term:
        """Apply the substitution to a term."""
        return substitute(term, self)

    def restrict(self, variables: Iterable[Variable]) -> 'Substitution':
        """Return the substitution restricted to the given variables, with values fully resolved."""
        return Substitution({v: substitute(self._bindings[v], self) for v in variables if v in self._bindings})

    def __str__(self) -> str:
        return '{' + ', '.join(f'{k} -> {v}' for k, v in sorted(self._bindings.items(), key=lambda x: str(x[0]))) + '}'

    def __repr__(self) -> str:
        return 'Substitution' + str(self)


class VariableCounter(object):
    """A monotonically increasing counter used to generate fresh variable names. Scoped to a single parse call."""

    def __init__(self):
        self.count = 0

    def fresh_name(self, base: str) -> str:
        self.count += 1
        base = base.split('_')[0]
        return f'{base}_{self.count}'


def substitute(term: Term, bindings: Substitution) -> Term:
    """Apply a substitution to a category, a feature structure or a feature value.

    Args:
        term: the term.
        bindings: the substitution.

    Returns:
        the term with every bound variable replaced by its (fully resolved) value.
    """
    if not bindings:
        return term
    return term.substitute(bindings)


def occurs_in(variable: Variable, term: Term, bindings: Substitution) -> bool:
    """Check whether `variable` occurs in `term` (under `bindings`)."""
    term = bindings.walk(term)
    if term == variable:
        return True
    for v in term.iter_variables():
        if v == variable:
            return True
        if v in bindings and occurs_in(variable, bindings.walk(v), bindings):
            return True
    return False


def _bind(variable: Variable, value: Any, bindings: Substitution) -> Substitution:
    if occurs_in(variable, value, bindings):
        with get_composition_context().exc(OccursCheckFailure):
            raise OccursCheckFailure(f'Variable {variable} occurs in {substitute(value, bindings)}.')
    return bindings.bind(variable, value)


def _unify_variables(a: Variable, b: Any, bindings: Substitution) -> Tuple[Any, Substitution]:
    """Unify a (free) variable with a term. When both are variables, the variable with the larger name is bound to the
    other one, so that the result does not depend on the order of the arguments."""
    if b.is_variable:
        if a == b:
            return a, bindings
        if type(a) is not type(b):
            with get_composition_context().exc(UnificationFailure):
                raise UnificationFailure(f'Can not unify {a} and {b}: different variable kinds.')
        first, second = (a, b) if a.name <= b.name else (b, a)
        return first, bindings.bind(second, first)
    return b, _bind(a, b, bindings)


def unify_feature_values(a: FeatureValue, b: FeatureValue, bindings: Substitution) -> Tuple[FeatureValue, Substitution]:
    """Unify two feature values.

    - Atomic values unify when they are equal.
    - An atomic value unifies with a set value containing it.
    - Two set values unify to their (non-empty) intersection. A singleton intersection becomes an atomic value.
    - Complex values unify recursively.

    Raises:
        UnificationFailure: if the values are incompatible.
    """
    a, b = bindings.walk(a), bindings.walk(b)
    if a.is_variable:
        return _unify_variables(a, b, bindings)
    if b.is_variable:
        return _unify_variables(b, a, bindings)

    if isinstance(a, AtomicValue) and isinstance(b, AtomicValue):
        if a.name == b.name:
            return a, bindings
    elif isinstance(a, SetValue) or isinstance(b, SetValue):
        if isinstance(a, (AtomicValue, SetValue)) and isinstance(b, (AtomicValue, SetValue)):
            values_a = a.values if isinstance(a, SetValue) else frozenset([a.name])
            values_b = b.values if isinstance(b, SetValue) else frozenset([b.name])
            values = values_a & values_b
            if len(values) == 1:
                return AtomicValue(next(iter(values))), bindings
            elif len(values) > 1:
                return SetValue(values), bindings
    elif isinstance(a, ComplexValue) and isinstance(b, ComplexValue):
        structure, bindings = unify_features(a.structure, b.structure, bindings)
        return ComplexValue(structure), bindings

    with get_composition_context().exc(UnificationFailure):
        raise UnificationFailure(f'Can not unify feature values {a} and {b}.')


def unify_features(a: FeatureStructure, b: FeatureStructure, bindings: Optional[Substitution] = None) -> Tuple[FeatureStructure, Substitution]:
    """Unify two feature structures. A feature present in only one of the structures is copied to the result.

    Args:
        a: the first feature structure.
        b: the second feature structure.
        bindings: the current substitution.

    Returns:
        the unified structure (not yet substituted) and the extended substitution.

    Raises:
        UnificationFailure: if a shared feature has incompatible values.
    """
    if bindings is None:
        bindings = Substitution()
    if not b:
        return a, bindings
    if not a:
        return b, bindings

    table = dict(a.items())
    for name, value in b.items():
        if name in table:
            table[name], bindings = unify_feature_values(table[name], value, bindings)
        else:
            table[name] = value
    return FeatureStructure(table), bindings


def _unify(a: Category, b: Category, bindings: Substitution) -> Tuple[Category, Substitution]:
    a, b = bindings.walk(a), bindings.walk(b)
    if a.is_variable:
        return _unify_variables(a, b, bindings)
    if b.is_variable:
        return _unify_variables(b, a, bindings)

    if isinstance(a, AtomicCategory) and isinstance(b, AtomicCategory):
        if a.name == b.name:
            features, bindings = unify_features(a.features, b.features, bindings)
            return AtomicCategory(a.name, features), bindings
        with get_composition_context().exc(UnificationFailure):
            raise UnificationFailure(f'Can not unify atomic categories {a} and {b}.')
    elif isinstance(a, FunctorCategory) and isinstance(b, FunctorCategory):
        if not a.direction.accepts(b.direction):
            with get_composition_context().exc(UnificationFailure):
                raise UnificationFailure(f'Can not unify {a} and {b}: different slash directions.')
        direction = b.direction if a.direction is SlashDirection.UNDIRECTED else a.direction
        result, bindings = _unify(a.result, b.result, bindings)
        argument, bindings = _unify(a.argument, b.argument, bindings)
        return FunctorCategory(result, argument, direction), bindings
    elif isinstance(a, ProductCategory) and isinstance(b, ProductCategory):
        left, bindings = _unify(a.left, b.left, bindings)
        right, bindings = _unify(a.right, b.right, bindings)
        return ProductCategory(left, right), bindings
    elif isinstance(a, ModalCategory) and type(a) is type(b):
        body, bindings = _unify(a.body, b.body, bindings)
        return type(a)(body), bindings

    with get_composition_context().exc(UnificationFailure):
        raise UnificationFailure(f'Can not unify {a} and {b}.')


def unify(a: Category, b: Category, bindings: Optional[Substitution] = None) -> Tuple[Category, Substitution]:
    """Unify two categories.

    The result is the most general category consistent with both inputs. It is commutative (``unify(a, b)`` and
    ``unify(b, a)`` return the same category) and idempotent.

    Args:
        a: the first category.
        b: the second category.
        bindings: the substitution of the current derivation context. It is not modified.

    Returns:
        the unified category (with the substitution applied) and the extended substitution.

    Raises:
        UnificationFailure: if the categories can not be unified.
        OccursCheckFailure: if a variable would be bound to a term containing itself.
    """
    if bindings is None:
        bindings = Substitution()
    result, bindings = _unify(a, b, bindings)
    return substitute(result, bindings), bindings


def is_unifiable(a: Category, b: Category, bindings: Optional[Substitution] = None) -> bool:
    """Return whether two categories can be unified."""
    try:
        unify(a, b, bindings)
        return True
    except UnificationFailure:
        return False


def is_instance(category: Category, pattern: Category, bindings: Optional[Substitution] = None) -> bool:
    """Return whether `category` unifies with `pattern` without instantiating any of its own category variables.

    Feature variables of `category` may still be bound. For example, ``S[num=?n]`` is an instance of ``S``, while a bare
    ``?X`` is not an instance of ``S``.
    """
    try:
        _, bindings = unify(category, pattern, bindings)
    except UnificationFailure:
        return False
    for v in category.iter_variables():
        if isinstance(v, CategoryVariable) and not bindings.walk(v).is_variable:
            return False
    return True


def _unique_variables(term: Term):
    seen = dict()
    for v in term.iter_variables():
        if v not in seen:
            seen[v] = None
    return list(seen)


def freshen(term: Term, counter: VariableCounter) -> Term:
    """Rename all variables in a term to fresh names. Used to instantiate a lexical category for a single occurrence.

    Args:
        term: the term.
        counter: the variable counter of the current parse.

    Returns:
        the renamed term.
    """
    variables = _unique_variables(term)
    if len(variables) == 0:
        return term
    mapping = {v: type(v)(counter.fresh_name(v.name)) for v in variables}
    return term.rename(mapping)


def canonicalize(term: Term) -> Term:
    """Rename the variables of a term to ``_1``, ``_2``, ... in the order of their first occurrence. Two terms are
    equal up to variable renaming iff their canonical forms are equal."""
    variables = _unique_variables(term)
    if len(variables) == 0:
        return term
    counter = itertools.count(1)
    mapping = {v: type(v)(f'_{next(counter)}') for v in variables}
    return term.rename(mapping)


def signature(term: Term) -> str:
    """The string of the canonical form of a term. Used as the packing key in charts."""
    return str(canonicalize(term))
