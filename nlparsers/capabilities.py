#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : capabilities.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Capability flags. They select which engines and category extensions are available:

    - ``ccg``, ``mg``, ``tlg``: the three derivation engines.
    - ``morphosyntax``: feature-structure unification on categories. When disabled, feature structures are removed from
      lexical categories before parsing.
    - ``multilingual``: locale-specific lexicons (:class:`nlparsers.common.lexicon.MultilingualLexicon`).

The flags are read once, at import time, from the environment variable ``NLPARSERS_FEATURES`` (a comma-separated list).
When the variable is not set, everything except ``multilingual`` is enabled. The flags never change the algorithms
themselves.
"""

import os
import contextlib
from typing import Iterable, FrozenSet
from jacinle.logging import get_logger

logger = get_logger(__file__)

__all__ = [
    'KNOWN_CAPABILITIES', 'DEFAULT_CAPABILITIES',
    'CapabilityDisabledError', 'FormalismDisabledError',
    'enabled_capabilities', 'is_enabled', 'require', 'override_capabilities'
]

KNOWN_CAPABILITIES = ('ccg', 'mg', 'tlg', 'morphosyntax', 'multilingual')
DEFAULT_CAPABILITIES = ('ccg', 'mg', 'tlg', 'morphosyntax')


class CapabilityDisabledError(Exception):
    """Raised when a disabled capability is used."""


class FormalismDisabledError(CapabilityDisabledError):
    """Raised when parsing with a formalism whose engine is disabled."""


def _load_capabilities(value: str) -> FrozenSet[str]:
    names = set()
    for name in value.split(','):
        name = name.strip().lower()
        if name == '':
            continue
        if name not in KNOWN_CAPABILITIES:
            logger.warning(f'Unknown capability "{name}" in NLPARSERS_FEATURES; ignored.')
            continue
        names.add(name)
    return frozenset(names)


_capabilities = _load_capabilities(os.environ.get('NLPARSERS_FEATURES', ','.join(DEFAULT_CAPABILITIES)))


def enabled_capabilities() -> FrozenSet[str]:
    """Return the set of enabled capabilities."""
    return _capabilities


def is_enabled(name: str) -> bool:
    """Return whether the capability `name` is enabled."""
    return name in _capabilities


def require(name: str):
    """Raise an error if the capability `name` is disabled.

    Raises:
        FormalismDisabledError: if `name` is one of the formalisms (``ccg``, ``mg``, ``tlg``) and is disabled.
        CapabilityDisabledError: if `name` is any other disabled capability.
    """
    if name in _capabilities:
        return
    exc_type = FormalismDisabledError if name in ('ccg', 'mg', 'tlg') else CapabilityDisabledError
    raise exc_type(f'Capability "{name}" is disabled. Enabled capabilities: {sorted(_capabilities)}. Set NLPARSERS_FEATURES to enable it.')


@contextlib.contextmanager
def override_capabilities(names: Iterable[str]):
    """Temporarily replace the set of enabled capabilities. Used in tests.

    Example:
        >>> with override_capabilities(['ccg']):
        >>>     ...
    """
    global _capabilities
    backup = _capabilities
    _capabilities = _load_capabilities(','.join(names))
    try:
        yield
    finally:
        _capabilities = backup
