#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : config.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Parser configuration.

:class:`ParserConfig` is an option context: it can be passed to a parser explicitly, or installed as the default with
``with ParserConfig(...).as_default():``.

    >>> from nlparsers import ParserConfig, parse
    >>> with ParserConfig(formalism='ccg', enable_type_raising=False).as_default():
    >>>     result = parse(lexicon, 'Kim left', 'S')
"""

from typing import Optional, Sequence, Callable
from jacinle.utils.defaults import option_context
from jacinle.utils.enum import JacEnum

from nlparsers import capabilities

__all__ = ['Formalism', 'MGLocalityDomain', 'ParserConfig', 'get_parser_config']


class Formalism(JacEnum):
    """The supported grammar formalisms."""

    CCG = 'ccg'
    MG = 'mg'
    TLG = 'tlg'


class MGLocalityDomain(JacEnum):
    """The domain in which MG move candidates compete under shortest-move."""

    DERIVATION = 'derivation'
    """Candidates compete inside a single expression: only the closest mover with a matching licensee may move."""

    PROBE = 'probe'
    """In addition, move steps of different derivations that share the same probe (the same head, over the same span)
    compete with each other, and only the steps with the closest mover are kept."""

    PHASE = 'phase'
    """In addition to the probe domain, the heads in :attr:`ParserConfig.phase_heads` close phases: a mover that is still
    inside the complement of a phase head when the head is selected can no longer be reached (the Phase Impenetrability
    Condition). Only the movers that have been merged or moved into an edge position escape the phase."""


class ParserConfig(option_context(
    '_ParserConfig',
    formalism='ccg',
    max_composition_degree=2,
    enable_type_raising=True,
    type_raising_targets=None,
    enable_crossed_composition=False,
    enable_substitution=True,
    enable_coordination=True,
    normal_form=True,
    beam=None,
    max_derivation_depth=20,
    mg_locality='probe',
    phase_heads=('C', 'v', 'D'),
    enable_product=True,
    enable_modalities=True,
    morphosyntax_enabled=True,
    step_budget=None,
    exc_verbose=False
)):
    """The configuration of the parsers."""

    formalism: str
    """The formalism: ``ccg``, ``mg`` or ``tlg``."""

    max_composition_degree: int
    """CCG: the maximal degree of generalized composition. 0 disables composition (and type-raising)."""

    enable_type_raising: bool
    """CCG: whether type-raising is allowed. Raising is only applied when it enables an otherwise blocked composition."""

    type_raising_targets: Optional[Sequence[str]]
    """CCG: the names of the atomic categories allowed as raising targets (e.g., ``['S']``). None allows any target."""

    enable_crossed_composition: bool
    """CCG: whether crossed composition (and crossed substitution) is allowed."""

    enable_substitution: bool
    """CCG: whether substitution is allowed."""

    enable_coordination: bool
    """CCG: whether the coordination rule for the ``conj`` category is allowed."""

    normal_form: bool
    """CCG: whether to apply the Eisner normal-form constraints on composition."""

    beam: Optional[int]
    """CCG: the number of edges kept in each chart cell. None keeps all edges."""

    max_derivation_depth: int
    """MG: the maximal height of a derivation."""

    mg_locality: str
    """MG: the locality domain of shortest-move, ``probe``, ``derivation`` or ``phase`` (see :class:`MGLocalityDomain`)."""

    phase_heads: Sequence[str]
    """MG: the categories whose heads close a phase. Only used when :attr:`mg_locality` is ``phase``."""

    enable_product: bool
    """TLG: whether the product connective is allowed."""

    enable_modalities: bool
    """TLG: whether the unary modalities ``◇`` and ``□`` are allowed."""

    morphosyntax_enabled: bool
    """Whether feature structures are unified. Also requires the ``morphosyntax`` capability."""

    step_budget: Optional[int]
    """The maximal number of search steps. None means unbounded."""

    exc_verbose: bool
    """Whether rule failures inside the parsers carry formatted messages. Only useful for debugging."""

    @property
    def use_morphosyntax(self) -> bool:
        """Whether feature structures are unified, taking the capability flag into account."""
        return bool(self.morphosyntax_enabled) and capabilities.is_enabled('morphosyntax')

    def get_formalism(self) -> Formalism:
        return Formalism.from_string(self.formalism)

    def get_mg_locality(self) -> MGLocalityDomain:
        return MGLocalityDomain.from_string(self.mg_locality)

    def __str__(self) -> str:
        options = ', '.join(f'{k}={v!r}' for k, v in sorted(vars(self).items()) if not k.startswith('_'))
        return f'ParserConfig({options})'

    __repr__ = __str__


get_parser_config: Callable[[], ParserConfig] = ParserConfig.get_default
