#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : result.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Caller-visible parse failures.

A parse call returns either a non-empty :class:`~nlparsers.chart.forest.DerivationForest` or a :class:`ParseFailure`.
Failures are ordinary values: ungrammatical input is an expected outcome. Use :meth:`ParseFailure.raise_error` (or
``result.unwrap()``, which works on both kinds of results) to turn a failure into an exception.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple
from jacinle.utils.enum import JacEnum

__all__ = [
    'ParseFailureKind', 'ParseFailure',
    'ParsingError', 'NoDerivationError', 'UnknownTokenError', 'SearchBoundExceededError'
]


class ParseFailureKind(JacEnum):
    """The kinds of parse failures."""

    NO_DERIVATION = 'no_derivation'
    """The search space has been fully explored and no derivation covers the input at the goal category."""

    UNKNOWN_TOKEN = 'unknown_token'
    """A token has no lexical entries."""

    SEARCH_BOUND_EXCEEDED = 'search_bound_exceeded'
    """The search was abandoned (step budget, depth bound or beam pruning) before finding any derivation. The result
    is inconclusive: a derivation may exist."""


class ParsingError(Exception):
    """The base class of the exceptions raised by :meth:`ParseFailure.raise_error`."""

    def __init__(self, failure: 'ParseFailure'):
        super().__init__(failure.message)
        self.failure = failure


class NoDerivationError(ParsingError):
    pass


class UnknownTokenError(ParsingError):
    pass


class SearchBoundExceededError(ParsingError):
    pass


_ERROR_TYPES = {
    ParseFailureKind.NO_DERIVATION: NoDerivationError,
    ParseFailureKind.UNKNOWN_TOKEN: UnknownTokenError,
    ParseFailureKind.SEARCH_BOUND_EXCEEDED: SearchBoundExceededError,
}


@dataclass
class ParseFailure(object):
    """A tagged parse failure."""

    kind: ParseFailureKind
    """The kind of the failure."""

    message: str
    """A human-readable description."""

    tokens: Tuple[str, ...] = ()
    """The input tokens."""

    token: Optional[str] = None
    """The offending token (for unknown tokens)."""

    position: Optional[int] = None
    """The position of the offending token (for unknown tokens)."""

    span: Optional[Tuple[int, int]] = None
    """The span that could not be derived."""

    category: Optional[Any] = None
    """The goal category."""

    steps: int = 0
    """The number of search steps performed."""

    @property
    def ok(self) -> bool:
        return False

    def raise_error(self):
        """Raise the :class:`ParsingError` corresponding to the failure."""
        raise _ERROR_TYPES[self.kind](self)

    def unwrap(self):
        """Raise the :class:`ParsingError` corresponding to the failure. Successful results return themselves instead."""
        self.raise_error()

    @classmethod
    def no_derivation(cls, tokens, goal, steps: int = 0) -> 'ParseFailure':
        return cls(
            ParseFailureKind.NO_DERIVATION, f'No derivation of {" ".join(tokens)!r} at category {goal}.',
            tokens=tuple(tokens), span=(0, len(tokens)), category=goal, steps=steps
        )

    @classmethod
    def unknown_token(cls, tokens, position: int, goal=None) -> 'ParseFailure':
        return cls(
            ParseFailureKind.UNKNOWN_TOKEN, f'Unknown token {tokens[position]!r} at position {position}.',
            tokens=tuple(tokens), token=tokens[position], position=position, span=(position, position + 1), category=goal
        )

    @classmethod
    def search_bound_exceeded(cls, tokens, goal, reason: str, steps: int = 0) -> 'ParseFailure':
        return cls(
            ParseFailureKind.SEARCH_BOUND_EXCEEDED, f'Search abandoned before finding a derivation of {" ".join(tokens)!r} at category {goal}: {reason}.',
            tokens=tuple(tokens), span=(0, len(tokens)), category=goal, steps=steps
        )

    def __str__(self) -> str:
        return f'ParseFailure[{self.kind.name}]: {self.message}'
