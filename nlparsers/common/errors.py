#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : errors.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Rule-level errors shared by all derivation engines.

Every subclass of :class:`CompositionError` signals that a rule is not applicable to its inputs. These errors are
caught inside the engines and are the mechanism by which the search prunes branches: they never reach the caller
of :func:`nlparsers.parse`. Caller-visible outcomes are described in :mod:`nlparsers.chart.result`.
"""

import contextlib
from typing import Optional, Callable
from jacinle.utils.defaults import option_context

__all__ = [
    'CompositionError', 'UnificationFailure', 'OccursCheckFailure', 'DirectionalMismatch', 'LocalityViolation',
    'CategoryParsingError',
    'CompositionContext', 'get_composition_context'
]


class CompositionError(Exception):
    """The base class of all errors raised when a rule can not be applied."""

    def __init__(self, message: Optional[str] = None):
        if message is None:
            super().__init__()
        else:
            super().__init__(message)


class UnificationFailure(CompositionError):
    """Raised when two categories (or feature structures) can not be made consistent."""


class OccursCheckFailure(UnificationFailure):
    """Raised when a variable would be bound to a term that contains the variable itself."""


class DirectionalMismatch(CompositionError):
    """Raised when a functor and its argument are not adjacent in the order required by the slash."""


class LocalityViolation(CompositionError):
    """Raised when a move candidate is not the closest candidate for its trigger (shortest-move)."""


class CategoryParsingError(Exception):
    """Raised when a category (or a feature sequence, or a term) string can not be parsed."""


class CompositionContext(option_context(
    '_CompositionContext',
    exc_verbose=True
)):
    """An option context for rule applications."""

    exc_verbose: bool
    """Whether to raise verbose exceptions. Parsers turn this off because rule failures are frequent and the formatted
    messages are never shown to the caller."""

    @contextlib.contextmanager
    def exc(self, exc_type: Optional[type] = None, from_: Optional[Exception] = None):
        """Context manager for raising composition errors. If `exc_verbose` is True, the error raised inside the block
        will be propagated as it is. Otherwise, a bare exception of type `exc_type` is raised without formatting the message.

        Example:
            >>> with get_composition_context().exc(UnificationFailure):
            >>>     raise UnificationFailure(f'Can not unify {lhs} and {rhs}.')

        Args:
            exc_type: the exception type to raise. If None, :class:`CompositionError` will be raised.
            from_: the original exception.
        """
        if self.exc_verbose:
            yield
        else:
            if exc_type is None:
                exc_type = CompositionError
            if from_ is not None:
                raise exc_type() from from_
            raise exc_type()


get_composition_context: Callable[[], CompositionContext] = CompositionContext.get_default
