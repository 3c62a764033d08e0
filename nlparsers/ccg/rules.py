#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : rules.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The CCG combinatory rules, as pure functions over categories and lambda terms.

Each syntactic rule takes the two adjacent categories and returns the derived category, or raises a
:class:`~nlparsers.common.errors.CompositionError` when the rule does not apply. The rules never mutate their inputs:
unification works on a fresh substitution for every attempt.

The semantic counterparts take the meanings of the two children (the function first) and return the beta-normal
meaning of the result. A missing meaning (None) propagates.
"""

from typing import Optional, Sequence, Tuple, List

from nlparsers.common.errors import CompositionError, DirectionalMismatch, get_composition_context
from nlparsers.common.category import Category, AtomicCategory, FunctorCategory, SlashDirection
from nlparsers.common.unification import unify, substitute
from nlparsers.common.terms import Term, Application, apply_terms, beta_normalize, fresh_variables, make_abstraction

__all__ = [
    'CONJ_CATEGORY_NAME', 'is_conj', 'peel_arguments', 'attach_arguments',
    'forward_application', 'backward_application',
    'forward_composition', 'backward_composition',
    'forward_substitution', 'backward_substitution',
    'forward_type_raising_composition', 'backward_type_raising_composition',
    'coordination',
    'application_semantics', 'composition_semantics', 'substitution_semantics',
    'type_raising_semantics', 'coordination_semantics'
]

FORWARD = SlashDirection.FORWARD
BACKWARD = SlashDirection.BACKWARD

CONJ_CATEGORY_NAME = 'conj'
"""The name of the atomic category of coordinators."""

ArgumentList = List[Tuple[Category, SlashDirection]]


def is_conj(category: Category) -> bool:
    return isinstance(category, AtomicCategory) and category.name == CONJ_CATEGORY_NAME


def _expect_functor(category: Category, direction: SlashDirection, role: str) -> FunctorCategory:
    if not isinstance(category, FunctorCategory) or not category.direction.accepts(direction):
        with get_composition_context().exc(DirectionalMismatch):
            raise DirectionalMismatch(f'Expect the {role} to be a functor seeking its argument {direction.value}, got {category}.')
    return category


def peel_arguments(category: Category, degree: int, direction: SlashDirection) -> Tuple[Category, ArgumentList]:
    """Split the `degree` outermost arguments off a functor category. All of them must have the given direction.

    Args:
        category: the category, e.g. ``(S\\NP)/NP/PP``.
        degree: the number of arguments.
        direction: the required direction of the slashes.

    Returns:
        the remaining category and the list of peeled ``(argument, direction)`` pairs, innermost first.
        For example, ``peel_arguments((S\\NP)/NP/PP, 2, FORWARD)`` returns ``(S\\NP, [(NP, FORWARD), (PP, FORWARD)])``.
    """
    arguments = list()
    for _ in range(degree):
        functor = _expect_functor(category, direction, 'secondary functor')
        arguments.append((functor.argument, functor.direction))
        category = functor.result
    return category, arguments[::-1]


def attach_arguments(category: Category, arguments: ArgumentList) -> Category:
    """The inverse of :func:`peel_arguments`."""
    for argument, direction in arguments:
        category = FunctorCategory(category, argument, direction)
    return category


def forward_application(left: Category, right: Category) -> Category:
    """``X/Y  Y  =>  X``."""
    functor = _expect_functor(left, FORWARD, 'left category')
    _, bindings = unify(functor.argument, right)
    return substitute(functor.result, bindings)


def backward_application(left: Category, right: Category) -> Category:
    """``Y  X\\Y  =>  X``."""
    functor = _expect_functor(right, BACKWARD, 'right category')
    _, bindings = unify(functor.argument, left)
    return substitute(functor.result, bindings)


def forward_composition(left: Category, right: Category, degree: int = 1, crossed: bool = False) -> Category:
    """Generalized forward composition.

    - harmonic: ``X/Y  Y/Z1.../Zn  =>  X/Z1.../Zn``;
    - crossed: ``X/Y  Y\\Z1...\\Zn  =>  X\\Z1...\\Zn``.
    """
    functor = _expect_functor(left, FORWARD, 'left category')
    inner, arguments = peel_arguments(right, degree, BACKWARD if crossed else FORWARD)
    _, bindings = unify(functor.argument, inner)
    return substitute(attach_arguments(functor.result, arguments), bindings)


def backward_composition(left: Category, right: Category, degree: int = 1, crossed: bool = False) -> Category:
    """Generalized backward composition.

    - harmonic: ``Y\\Z1...\\Zn  X\\Y  =>  X\\Z1...\\Zn``;
    - crossed: ``Y/Z1.../Zn  X\\Y  =>  X/Z1.../Zn``.
    """
    functor = _expect_functor(right, BACKWARD, 'right category')
    inner, arguments = peel_arguments(left, degree, FORWARD if crossed else BACKWARD)
    _, bindings = unify(functor.argument, inner)
    return substitute(attach_arguments(functor.result, arguments), bindings)


def forward_substitution(left: Category, right: Category, crossed: bool = False) -> Category:
    """``(X/Y)/Z  Y/Z  =>  X/Z``, or ``(X/Y)\\Z  Y\\Z  =>  X\\Z`` when crossed."""
    direction = BACKWARD if crossed else FORWARD
    outer = _expect_functor(left, direction, 'left category')
    functor = _expect_functor(outer.result, FORWARD, 'left result category')
    argument = _expect_functor(right, direction, 'right category')
    _, bindings = unify(functor.argument, argument.result)
    _, bindings = unify(outer.argument, argument.argument, bindings)
    return substitute(FunctorCategory(functor.result, outer.argument, outer.direction), bindings)


def backward_substitution(left: Category, right: Category, crossed: bool = False) -> Category:
    """``Y\\Z  (X\\Y)\\Z  =>  X\\Z``, or ``Y/Z  (X\\Y)/Z  =>  X/Z`` when crossed."""
    direction = FORWARD if crossed else BACKWARD
    argument = _expect_functor(left, direction, 'left category')
    outer = _expect_functor(right, direction, 'right category')
    functor = _expect_functor(outer.result, BACKWARD, 'right result category')
    _, bindings = unify(functor.argument, argument.result)
    _, bindings = unify(outer.argument, argument.argument, bindings)
    return substitute(FunctorCategory(functor.result, outer.argument, outer.direction), bindings)


def _check_raising_target(target: Category, targets: Optional[Sequence[str]]):
    if targets is None:
        return
    if not isinstance(target, AtomicCategory) or target.name not in targets:
        with get_composition_context().exc(CompositionError):
            raise CompositionError(f'Type-raising target {target} is not allowed; allowed targets are {list(targets)}.')


def forward_type_raising_composition(left: Category, right: Category, degree: int = 1, targets: Optional[Sequence[str]] = None) -> Tuple[Category, Category]:
    """Raise the left category and compose it with the right one: ``A  (T\\A)/Z1.../Zn  =>  T/(T\\A)  ...  =>  T/Z1.../Zn``.

    The raising target ``T`` is read off the right category, so raising only happens when it enables a composition.

    Returns:
        the raised left category and the derived category.
    """
    inner, arguments = peel_arguments(right, degree, FORWARD)
    functor = _expect_functor(inner, BACKWARD, 'raising context')
    target = functor.result
    _check_raising_target(target, targets)
    _, bindings = unify(functor.argument, left)
    raised = FunctorCategory(target, FunctorCategory(target, left, BACKWARD), FORWARD)
    return substitute(raised, bindings), substitute(attach_arguments(target, arguments), bindings)


def backward_type_raising_composition(left: Category, right: Category, degree: int = 1, targets: Optional[Sequence[str]] = None) -> Tuple[Category, Category]:
    """Raise the right category and compose the left one into it: ``(T/A)\\Z1...\\Zn  A  =>  ...  T\\(T/A)  =>  T\\Z1...\\Zn``.

    Returns:
        the raised right category and the derived category.
    """
    inner, arguments = peel_arguments(left, degree, BACKWARD)
    functor = _expect_functor(inner, FORWARD, 'raising context')
    target = functor.result
    _check_raising_target(target, targets)
    _, bindings = unify(functor.argument, right)
    raised = FunctorCategory(target, FunctorCategory(target, right, FORWARD), BACKWARD)
    return substitute(raised, bindings), substitute(attach_arguments(target, arguments), bindings)


def coordination(left: Category, right: Category) -> Category:
    """``conj  X  =>  X\\X``. The derived category may only be consumed by a backward application."""
    if not is_conj(left) or is_conj(right):
        with get_composition_context().exc(CompositionError):
            raise CompositionError(f'Invalid coordination: lhs={left}, rhs={right}.')
    return FunctorCategory(right, right, BACKWARD)


def application_semantics(function: Optional[Term], argument: Optional[Term]) -> Optional[Term]:
    """``f(a)``."""
    return beta_normalize(apply_terms(function, argument))


def composition_semantics(function: Optional[Term], argument: Optional[Term], degree: int = 1) -> Optional[Term]:
    """``\\z_n ... z_1.f(g(z_n)...(z_1))``. The variables are ordered the way the derived category consumes its arguments."""
    if function is None or argument is None:
        return None
    variables = fresh_variables(degree, function, argument)
    body = Application(function, apply_terms(argument, *variables))
    return beta_normalize(make_abstraction(variables, body))


def substitution_semantics(function: Optional[Term], argument: Optional[Term]) -> Optional[Term]:
    """``\\z.f(z)(g(z))``."""
    if function is None or argument is None:
        return None
    z, = fresh_variables(1, function, argument)
    return beta_normalize(make_abstraction([z], apply_terms(function, z, Application(argument, z))))


def type_raising_semantics(argument: Optional[Term]) -> Optional[Term]:
    """``\\f.f(a)``."""
    if argument is None:
        return None
    f, = fresh_variables(1, argument, base='f')
    return make_abstraction([f], Application(f, argument))


def coordination_semantics(conj: Optional[Term], right: Optional[Term]) -> Optional[Term]:
    """``\\l.c(l)(r)``: the meaning of ``conj X``, waiting for the left conjunct."""
    if conj is None or right is None:
        return None
    l, = fresh_variables(1, conj, right, base='l')
    return beta_normalize(make_abstraction([l], apply_terms(conj, l, right)))
