#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : composition.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Composition systems for CCG.

A :class:`CCGCompositionSystem` keeps track of the combinatory rules that can be used, their weights, and the
restrictions on them (composition degree, raising targets, normal form). Its :meth:`CCGCompositionSystem.try_compose`
returns every way two adjacent categories can combine.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, List, Dict, Callable
from jacinle.utils.cache import cached_property
from jacinle.utils.enum import JacEnum
from jacinle.utils.printing import indent_text

from nlparsers.common.errors import CompositionError
from nlparsers.common.category import Category
from nlparsers.common.terms import Term
from nlparsers.chart.chart import UnaryStep
from nlparsers.ccg import rules

__all__ = [
    'CCGCompositionType', 'CCGCompositionResult', 'CCGCompositionSystem',
    'FORWARD_COMPOSITION_TAG', 'BACKWARD_COMPOSITION_TAG', 'COORDINATION_TAG',
    'compose_semantics'
]


class CCGCompositionType(JacEnum):
    """Composition types (e.g., application and coordination)."""

    LEXICON = 'lexicon'
    FORWARD_APPLICATION = 'forward_application'
    BACKWARD_APPLICATION = 'backward_application'
    FORWARD_COMPOSITION = 'forward_composition'
    BACKWARD_COMPOSITION = 'backward_composition'
    FORWARD_CROSSED_COMPOSITION = 'forward_crossed_composition'
    BACKWARD_CROSSED_COMPOSITION = 'backward_crossed_composition'
    FORWARD_SUBSTITUTION = 'forward_substitution'
    BACKWARD_SUBSTITUTION = 'backward_substitution'
    FORWARD_CROSSED_SUBSTITUTION = 'forward_crossed_substitution'
    BACKWARD_CROSSED_SUBSTITUTION = 'backward_crossed_substitution'
    FORWARD_TYPE_RAISING = 'forward_type_raising'
    BACKWARD_TYPE_RAISING = 'backward_type_raising'
    COORDINATION = 'coordination'


FORWARD_COMPOSITION_TAG = 'fc'
"""The normal-form tag of the output of forward composition."""

BACKWARD_COMPOSITION_TAG = 'bc'
"""The normal-form tag of the output of backward composition."""

COORDINATION_TAG = 'coord'
"""The tag of ``conj X`` constituents, which can only be consumed by backward application."""


@dataclass
class CCGCompositionResult(object):
    """The result of a CCG composition."""

    composition_type: CCGCompositionType
    """The composition type applied at the current node."""

    rule: str
    """The name of the rule (e.g., ``>``, ``<B2``, ``>Sx``)."""

    category: Category
    """The derived category."""

    tag: Optional[str] = None
    """The tag of the derived edge (see :data:`FORWARD_COMPOSITION_TAG`)."""

    degree: int = 0
    """The degree of composition."""

    weight: float = 0.0
    """The weight of the rule (including the weight of type-raising)."""

    unary: Tuple[UnaryStep, ...] = tuple()
    """The type-raising step applied to one of the children."""


def _composition_rule_name(prefix: str, degree: int) -> str:
    return prefix if degree == 1 else f'{prefix}{degree}'


class CCGCompositionSystem(object):
    """The CCG composition system. It keeps track of the rules that can be used for composition."""

    def __init__(
        self, name: str, weights: Dict[CCGCompositionType, float], max_composition_degree: int = 2,
        type_raising_targets: Optional[Sequence[str]] = None, normal_form: bool = True
    ):
        """Initialize the CCG composition system.

        Args:
            name: the name of the composition system.
            weights: the weights of the composition types, which should be a dictionary mapping from :class:`CCGCompositionType` to float.
                Composition types that are not in the dictionary are disabled.
            max_composition_degree: the maximal degree of generalized composition.
            type_raising_targets: the names of the atomic categories allowed as type-raising targets. None allows any target.
            normal_form: whether to apply the Eisner normal-form constraints.
        """
        self.name = name
        self.weights = weights
        self.max_composition_degree = max_composition_degree
        self.type_raising_targets = tuple(type_raising_targets) if type_raising_targets is not None else None
        self.normal_form = normal_form

    @cached_property
    def allowed_composition_types(self) -> List[CCGCompositionType]:
        """Get the list of allowed composition types.

        Returns:
            the list of allowed composition types.
        """
        return [c for c in CCGCompositionType.choice_objs() if c in self.weights and c is not CCGCompositionType.LEXICON]

    def is_allowed(self, composition_type: CCGCompositionType) -> bool:
        return composition_type in self.weights and composition_type is not CCGCompositionType.LEXICON

    def get_weight(self, composition_type: CCGCompositionType) -> float:
        return self.weights.get(composition_type, 0.0)

    def try_compose(self, lhs: Category, rhs: Category, lhs_tag: Optional[str] = None, rhs_tag: Optional[str] = None) -> List[CCGCompositionResult]:
        """Try to compose two adjacent categories with all allowed composition types.

        Args:
            lhs: the left-hand side category.
            rhs: the right-hand side category.
            lhs_tag: the tag of the left-hand side edge.
            rhs_tag: the tag of the right-hand side edge.

        Returns:
            the list of composition results. An empty list if the categories do not combine.
        """
        T = CCGCompositionType
        results = list()

        if lhs_tag == COORDINATION_TAG:
            return results
        if rhs_tag == COORDINATION_TAG:
            category = self._attempt(rules.backward_application, lhs, rhs)
            if category is not None:
                results.append(CCGCompositionResult(T.BACKWARD_APPLICATION, '<Φ', category, weight=self.get_weight(T.BACKWARD_APPLICATION)))
            return results
        if rules.is_conj(lhs) or rules.is_conj(rhs):
            if self.is_allowed(T.COORDINATION):
                category = self._attempt(rules.coordination, lhs, rhs)
                if category is not None:
                    results.append(CCGCompositionResult(T.COORDINATION, 'conj', category, tag=COORDINATION_TAG, weight=self.get_weight(T.COORDINATION)))
            return results

        forward_blocked = self.normal_form and lhs_tag == FORWARD_COMPOSITION_TAG
        backward_blocked = self.normal_form and rhs_tag == BACKWARD_COMPOSITION_TAG

        applicable = False
        if self.is_allowed(T.FORWARD_APPLICATION):
            category = self._attempt(rules.forward_application, lhs, rhs)
            if category is not None:
                applicable = True
                if not forward_blocked:
                    results.append(CCGCompositionResult(T.FORWARD_APPLICATION, '>', category, weight=self.get_weight(T.FORWARD_APPLICATION)))
        if self.is_allowed(T.BACKWARD_APPLICATION):
            category = self._attempt(rules.backward_application, lhs, rhs)
            if category is not None:
                applicable = True
                if not backward_blocked:
                    results.append(CCGCompositionResult(T.BACKWARD_APPLICATION, '<', category, weight=self.get_weight(T.BACKWARD_APPLICATION)))

        for degree in range(1, self.max_composition_degree + 1):
            for composition_type, crossed, prefix in [
                (T.FORWARD_COMPOSITION, False, '>B'), (T.FORWARD_CROSSED_COMPOSITION, True, '>Bx')
            ]:
                if not forward_blocked and self.is_allowed(composition_type):
                    category = self._attempt(rules.forward_composition, lhs, rhs, degree, crossed)
                    if category is not None:
                        results.append(CCGCompositionResult(
                            composition_type, _composition_rule_name(prefix, degree), category,
                            tag=FORWARD_COMPOSITION_TAG, degree=degree, weight=self.get_weight(composition_type)
                        ))
            for composition_type, crossed, prefix in [
                (T.BACKWARD_COMPOSITION, False, '<B'), (T.BACKWARD_CROSSED_COMPOSITION, True, '<Bx')
            ]:
                if not backward_blocked and self.is_allowed(composition_type):
                    category = self._attempt(rules.backward_composition, lhs, rhs, degree, crossed)
                    if category is not None:
                        results.append(CCGCompositionResult(
                            composition_type, _composition_rule_name(prefix, degree), category,
                            tag=BACKWARD_COMPOSITION_TAG, degree=degree, weight=self.get_weight(composition_type)
                        ))

        for composition_type, function, crossed, name in [
            (T.FORWARD_SUBSTITUTION, rules.forward_substitution, False, '>S'),
            (T.BACKWARD_SUBSTITUTION, rules.backward_substitution, False, '<S'),
            (T.FORWARD_CROSSED_SUBSTITUTION, rules.forward_substitution, True, '>Sx'),
            (T.BACKWARD_CROSSED_SUBSTITUTION, rules.backward_substitution, True, '<Sx'),
        ]:
            if self.is_allowed(composition_type):
                category = self._attempt(function, lhs, rhs, crossed)
                if category is not None:
                    results.append(CCGCompositionResult(composition_type, name, category, degree=1, weight=self.get_weight(composition_type)))

        if not applicable:
            results.extend(self._try_type_raising(lhs, rhs))
        return results

    def _try_type_raising(self, lhs: Category, rhs: Category) -> List[CCGCompositionResult]:
        T = CCGCompositionType
        results = list()
        for degree in range(1, self.max_composition_degree + 1):
            if self.is_allowed(T.FORWARD_TYPE_RAISING) and self.is_allowed(T.FORWARD_COMPOSITION):
                output = self._attempt(rules.forward_type_raising_composition, lhs, rhs, degree, self.type_raising_targets)
                if output is not None:
                    raised, category = output
                    results.append(CCGCompositionResult(
                        T.FORWARD_COMPOSITION, _composition_rule_name('>B', degree), category,
                        tag=FORWARD_COMPOSITION_TAG, degree=degree,
                        weight=self.get_weight(T.FORWARD_TYPE_RAISING) + self.get_weight(T.FORWARD_COMPOSITION),
                        unary=(UnaryStep(0, raised, '>T'), )
                    ))
            if self.is_allowed(T.BACKWARD_TYPE_RAISING) and self.is_allowed(T.BACKWARD_COMPOSITION):
                output = self._attempt(rules.backward_type_raising_composition, lhs, rhs, degree, self.type_raising_targets)
                if output is not None:
                    raised, category = output
                    results.append(CCGCompositionResult(
                        T.BACKWARD_COMPOSITION, _composition_rule_name('<B', degree), category,
                        tag=BACKWARD_COMPOSITION_TAG, degree=degree,
                        weight=self.get_weight(T.BACKWARD_TYPE_RAISING) + self.get_weight(T.BACKWARD_COMPOSITION),
                        unary=(UnaryStep(1, raised, '<T'), )
                    ))
        return results

    @staticmethod
    def _attempt(function: Callable, *args):
        try:
            return function(*args)
        except CompositionError:
            return None

    def __str__(self) -> str:
        return f'CCGCompositionSystem({self.name})'

    __repr__ = __str__

    def format_summary(self) -> str:
        """Format the summary of the composition system."""
        fmt = 'Allowed composition types:\n'
        for type, weight in self.weights.items():
            fmt += '  CCGCompositionType.' + type.name + ': ' + str(weight) + '\n'
        fmt += f'Max composition degree: {self.max_composition_degree}\n'
        fmt += f'Type-raising targets: {"any" if self.type_raising_targets is None else ", ".join(self.type_raising_targets)}\n'
        fmt += f'Normal form: {self.normal_form}\n'
        fmt = 'CCGCompositionSystem: {}\n'.format(self.name) + indent_text(fmt.rstrip())
        return fmt

    def print_summary(self):
        """Print the summary of the composition system."""
        print(self.format_summary())

    @classmethod
    def make_default(cls, **kwargs) -> 'CCGCompositionSystem':
        """Make the default CCG composition system: application, harmonic composition, substitution, type-raising and coordination."""
        T = CCGCompositionType
        return cls('ccg', {
            T.LEXICON: 0,
            T.FORWARD_APPLICATION: 0,
            T.BACKWARD_APPLICATION: 0,
            T.FORWARD_COMPOSITION: 0,
            T.BACKWARD_COMPOSITION: 0,
            T.FORWARD_SUBSTITUTION: 0,
            T.BACKWARD_SUBSTITUTION: 0,
            T.FORWARD_TYPE_RAISING: 0,
            T.BACKWARD_TYPE_RAISING: 0,
            T.COORDINATION: 0
        }, **kwargs)

    @classmethod
    def make_function_application(cls, **kwargs) -> 'CCGCompositionSystem':
        """Make the CCG composition system that only allows function application (i.e., AB grammar)."""
        return cls('function_application', {
            CCGCompositionType.LEXICON: 0,
            CCGCompositionType.FORWARD_APPLICATION: 0,
            CCGCompositionType.BACKWARD_APPLICATION: 0,
        }, **kwargs)

    @classmethod
    def make_categorial_grammar(cls, **kwargs) -> 'CCGCompositionSystem':
        """Make the CCG composition system that allows function application and coordination (i.e., categorial grammar)."""
        return cls('categorial_grammar', {
            CCGCompositionType.LEXICON: 0,
            CCGCompositionType.FORWARD_APPLICATION: 0,
            CCGCompositionType.BACKWARD_APPLICATION: 0,
            CCGCompositionType.COORDINATION: 0,
        }, **kwargs)

    @classmethod
    def from_config(cls, config) -> 'CCGCompositionSystem':
        """Make the composition system described by a :class:`~nlparsers.config.ParserConfig`."""
        T = CCGCompositionType
        system = cls.make_default(
            max_composition_degree=config.max_composition_degree,
            type_raising_targets=config.type_raising_targets,
            normal_form=config.normal_form
        )
        weights = dict(system.weights)
        if config.enable_crossed_composition:
            weights[T.FORWARD_CROSSED_COMPOSITION] = 0
            weights[T.BACKWARD_CROSSED_COMPOSITION] = 0
            if config.enable_substitution:
                weights[T.FORWARD_CROSSED_SUBSTITUTION] = 0
                weights[T.BACKWARD_CROSSED_SUBSTITUTION] = 0
        disabled = set()
        if config.max_composition_degree <= 0:
            disabled |= {
                T.FORWARD_COMPOSITION, T.BACKWARD_COMPOSITION, T.FORWARD_CROSSED_COMPOSITION, T.BACKWARD_CROSSED_COMPOSITION,
                T.FORWARD_TYPE_RAISING, T.BACKWARD_TYPE_RAISING
            }
        if not config.enable_type_raising:
            disabled |= {T.FORWARD_TYPE_RAISING, T.BACKWARD_TYPE_RAISING}
        if not config.enable_substitution:
            disabled |= {T.FORWARD_SUBSTITUTION, T.BACKWARD_SUBSTITUTION, T.FORWARD_CROSSED_SUBSTITUTION, T.BACKWARD_CROSSED_SUBSTITUTION}
        if not config.enable_coordination:
            disabled |= {T.COORDINATION}
        system.weights = {k: v for k, v in weights.items() if k not in disabled}
        return system


def compose_semantics(composition_type: CCGCompositionType, degree: int, lhs: Optional[Term], rhs: Optional[Term]) -> Optional[Term]:
    """Compose the meanings of two children according to the composition type.

    Args:
        composition_type: the composition type.
        degree: the degree of composition.
        lhs: the meaning of the left child (after type-raising, if any).
        rhs: the meaning of the right child (after type-raising, if any).

    Returns:
        the meaning of the derived constituent.
    """
    T = CCGCompositionType
    if composition_type is T.FORWARD_APPLICATION:
        return rules.application_semantics(lhs, rhs)
    elif composition_type is T.BACKWARD_APPLICATION:
        return rules.application_semantics(rhs, lhs)
    elif composition_type in (T.FORWARD_COMPOSITION, T.FORWARD_CROSSED_COMPOSITION):
        return rules.composition_semantics(lhs, rhs, degree)
    elif composition_type in (T.BACKWARD_COMPOSITION, T.BACKWARD_CROSSED_COMPOSITION):
        return rules.composition_semantics(rhs, lhs, degree)
    elif composition_type in (T.FORWARD_SUBSTITUTION, T.FORWARD_CROSSED_SUBSTITUTION):
        return rules.substitution_semantics(lhs, rhs)
    elif composition_type in (T.BACKWARD_SUBSTITUTION, T.BACKWARD_CROSSED_SUBSTITUTION):
        return rules.substitution_semantics(rhs, lhs)
    elif composition_type is T.COORDINATION:
        return rules.coordination_semantics(lhs, rhs)
    raise ValueError(f'Unknown composition type for semantics: {composition_type}.')
