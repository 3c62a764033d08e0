#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : features.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Feature values and feature structures (morphosyntax).

A feature structure is an immutable mapping from feature names to feature values. There are four kinds of values:

    - Atomic values: ``sg``, ``3``, ``nom``.
    - Set values (disjunctions of atomic values): ``{sg,pl}``.
    - Complex values (nested feature structures): ``[num=sg,per=3]``.
    - Variables: ``?n``. Variables are bound by unification (see :mod:`nlparsers.common.unification`).

A feature that is absent from a structure is unspecified, and is compatible with any value.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union, Iterable, Iterator, Tuple, FrozenSet, Mapping, Dict
from jacinle.utils.meta import repr_from_str

__all__ = [
    'FeatureValue', 'AtomicValue', 'SetValue', 'ComplexValue', 'FeatureVariable',
    'FeatureStructure', 'as_feature_value'
]


class FeatureValue(object):
    """The base class for feature values."""

    @property
    def is_variable(self) -> bool:
        """Whether the value is a variable."""
        return False

    def iter_variables(self) -> Iterator['FeatureVariable']:
        """Iterate over all variables in the value, in the order of their first occurrence."""
        return iter(())

    def substitute(self, bindings) -> 'FeatureValue':
        """Apply a :class:`~nlparsers.common.unification.Substitution` to the value."""
        return self

    def rename(self, mapping: Mapping[Any, Any]) -> 'FeatureValue':
        """Rename variables according to a mapping from old variables to new variables."""
        return self

    __repr__ = repr_from_str


@dataclass(frozen=True, repr=False)
class AtomicValue(FeatureValue):
    """An atomic feature value, such as ``sg``."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, repr=False)
class SetValue(FeatureValue):
    """A disjunction of atomic values, such as ``{sg,pl}``."""

    values: FrozenSet[str]

    def __post_init__(self):
        object.__setattr__(self, 'values', frozenset(self.values))

    def __str__(self) -> str:
        return '{' + ','.join(sorted(self.values)) + '}'


@dataclass(frozen=True, repr=False)
class ComplexValue(FeatureValue):
    """A nested feature structure used as a value, such as ``agr=[num=sg,per=3]``."""

    structure: 'FeatureStructure'

    def iter_variables(self) -> Iterator['FeatureVariable']:
        return self.structure.iter_variables()

    def substitute(self, bindings) -> 'ComplexValue':
        return ComplexValue(self.structure.substitute(bindings))

    def rename(self, mapping: Mapping[Any, Any]) -> 'ComplexValue':
        return ComplexValue(self.structure.rename(mapping))

    def __str__(self) -> str:
        return str(self.structure)


@dataclass(frozen=True, repr=False)
class FeatureVariable(FeatureValue):
    """A feature variable, written as ``?name``."""

    name: str

    @property
    def is_variable(self) -> bool:
        return True

    def iter_variables(self) -> Iterator['FeatureVariable']:
        yield self

    def substitute(self, bindings) -> FeatureValue:
        value = bindings.walk(self)
        if value is self or value.is_variable:
            return value
        return value.substitute(bindings)

    def rename(self, mapping: Mapping[Any, Any]) -> FeatureValue:
        return mapping.get(self, self)

    def __str__(self) -> str:
        return '?' + self.name


def as_feature_value(value: Union[FeatureValue, str, Iterable[str], Mapping[str, Any]]) -> FeatureValue:
    """Convert a Python value into a :class:`FeatureValue`.

    - A string starting with ``?`` becomes a variable. Any other string becomes an atomic value.
    - A set (or frozenset, list, tuple) of strings becomes a set value, unless it has a single element.
    - A mapping becomes a complex value.
    """
    if isinstance(value, FeatureValue):
        return value
    if isinstance(value, str):
        if value.startswith('?'):
            return FeatureVariable(value[1:])
        return AtomicValue(value)
    if isinstance(value, (Mapping, FeatureStructure)):
        return ComplexValue(FeatureStructure(value))
    values = frozenset(value)
    if len(values) == 1:
        return AtomicValue(next(iter(values)))
    return SetValue(values)


class FeatureStructure(object):
    """An immutable mapping from feature names to :class:`FeatureValue` objects. The items are kept sorted by name so that
    two structures with the same content are equal, hash equally and print identically."""

    def __init__(self, features: Optional[Union['FeatureStructure', Mapping[str, Any], Iterable[Tuple[str, Any]]]] = None):
        """Initialize the feature structure.

        Args:
            features: a mapping (or an iterable of pairs) from feature names to values. Values are converted with
                :func:`as_feature_value`.
        """
        if features is None:
            items = ()
        elif isinstance(features, FeatureStructure):
            items = features.items()
        elif isinstance(features, Mapping):
            items = features.items()
        else:
            items = features

        table: Dict[str, FeatureValue] = dict()
        for k, v in items:
            if k in table:
                raise ValueError(f'Duplicate feature name: {k}.')
            table[k] = as_feature_value(v)
        self._items = tuple(sorted(table.items(), key=lambda x: x[0]))

    def items(self) -> Tuple[Tuple[str, FeatureValue], ...]:
        return self._items

    def keys(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self._items)

    def get(self, name: str, default: Optional[FeatureValue] = None) -> Optional[FeatureValue]:
        for k, v in self._items:
            if k == name:
                return v
        return default

    def __getitem__(self, name: str) -> FeatureValue:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return len(self._items) > 0

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, FeatureStructure) and self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def with_feature(self, name: str, value: Any) -> 'FeatureStructure':
        """Return a new structure with the feature `name` set to `value`."""
        table = dict(self._items)
        table[name] = as_feature_value(value)
        return FeatureStructure(table)

    def iter_variables(self) -> Iterator[FeatureVariable]:
        for _, v in self._items:
            yield from v.iter_variables()

    def substitute(self, bindings) -> 'FeatureStructure':
        if not self._items:
            return self
        return FeatureStructure((k, v.substitute(bindings)) for k, v in self._items)

    def rename(self, mapping: Mapping[Any, Any]) -> 'FeatureStructure':
        if not self._items:
            return self
        return FeatureStructure((k, v.rename(mapping)) for k, v in self._items)

    def __str__(self) -> str:
        return '[' + ','.join(f'{k}={v}' for k, v in self._items) + ']'

    __repr__ = repr_from_str
