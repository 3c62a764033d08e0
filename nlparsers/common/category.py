#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : category.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Data structures for categories, shared by the CCG and the TLG engines.

There are five types of categories:

    - Atomic categories: ``S``, ``NP``, ``NP[num=sg]``. Atomic categories may carry a feature structure.
    - Functor categories: ``S\\NP``, ``(S\\NP)/NP``, ``N|N``. The result is always written first.
    - Product categories (used by TLG only): ``NP*NP``.
    - Category variables: ``?X``. They are used in polymorphic lexical categories such as ``(?X\\?X)/?X``.
    - Modal categories (used by TLG only): ``◇NP``, ``□(S\\NP)``.

All categories are immutable and hashable; equality is structural.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Mapping, List, Tuple
from jacinle.utils.enum import JacEnum
from jacinle.utils.meta import repr_from_str

from nlparsers.common.features import FeatureStructure

__all__ = [
    'SlashDirection',
    'Category', 'AtomicCategory', 'FunctorCategory', 'ProductCategory', 'CategoryVariable',
    'ModalCategory', 'DiamondCategory', 'BoxCategory'
]


class SlashDirection(JacEnum):
    """Slash directions. A forward functor seeks its argument on the right, a backward functor on the left."""

    FORWARD = 'forward'
    BACKWARD = 'backward'
    UNDIRECTED = 'undirected'

    @property
    def symbol(self) -> str:
        return _DIRECTION_SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> 'SlashDirection':
        for k, v in _DIRECTION_SYMBOLS.items():
            if v == symbol:
                return k
        raise ValueError(f'Unknown slash symbol: {symbol}.')

    def accepts(self, other: 'SlashDirection') -> bool:
        """Whether a slash of this direction is compatible with a slash of the other direction."""
        return self is other or self is SlashDirection.UNDIRECTED or other is SlashDirection.UNDIRECTED


_DIRECTION_SYMBOLS = {
    SlashDirection.FORWARD: '/',
    SlashDirection.BACKWARD: '\\',
    SlashDirection.UNDIRECTED: '|',
}


class Category(object):
    """The base class for categories."""

    @property
    def is_atomic(self) -> bool:
        return False

    @property
    def is_functor(self) -> bool:
        return False

    @property
    def is_product(self) -> bool:
        return False

    @property
    def is_variable(self) -> bool:
        return False

    @property
    def is_modal(self) -> bool:
        return False

    @property
    def arity(self) -> int:
        """The number of arguments the category needs to combine with before it becomes a non-functor category."""
        return 0

    @property
    def size(self) -> int:
        """The number of connectives (slashes and products) in the category."""
        return 0

    def iter_variables(self) -> Iterator[Any]:
        """Iterate over all category and feature variables, in the order of their first occurrence (with repetitions)."""
        return iter(())

    def substitute(self, bindings) -> 'Category':
        """Apply a :class:`~nlparsers.common.unification.Substitution` to the category."""
        raise NotImplementedError()

    def rename(self, mapping: Mapping[Any, Any]) -> 'Category':
        """Rename variables according to a mapping from old variables to new variables."""
        raise NotImplementedError()

    def strip_features(self) -> 'Category':
        """Return the category with all feature structures removed."""
        raise NotImplementedError()

    def iter_atoms(self) -> Iterator['AtomicCategory']:
        """Iterate over the atomic sub-categories."""
        return iter(())

    @property
    def parenthesis_str(self) -> str:
        """Return the string representation, with parentheses when the category is not atomic."""
        return str(self)

    __repr__ = repr_from_str

    def __truediv__(self, other: 'Category') -> 'FunctorCategory':
        """Construct a ``A/B`` category."""
        return FunctorCategory(self, other, SlashDirection.FORWARD)

    def __floordiv__(self, other: 'Category') -> 'FunctorCategory':
        """Construct a ``A\\B`` category."""
        return FunctorCategory(self, other, SlashDirection.BACKWARD)

    def __or__(self, other: 'Category') -> 'FunctorCategory':
        """Construct a ``A|B`` category."""
        return FunctorCategory(self, other, SlashDirection.UNDIRECTED)

    def __mul__(self, other: 'Category') -> 'ProductCategory':
        """Construct a ``A*B`` category."""
        return ProductCategory(self, other)


@dataclass(frozen=True, repr=False)
class AtomicCategory(Category):
    """An atomic category (e.g., ``NP[num=sg]``)."""

    name: str
    """The name of the category."""

    features: FeatureStructure = FeatureStructure()
    """The feature structure attached to the category."""

    @property
    def is_atomic(self) -> bool:
        return True

    def iter_variables(self) -> Iterator[Any]:
        return self.features.iter_variables()

    def substitute(self, bindings) -> 'AtomicCategory':
        if not self.features:
            return self
        return AtomicCategory(self.name, self.features.substitute(bindings))

    def rename(self, mapping: Mapping[Any, Any]) -> 'AtomicCategory':
        if not self.features:
            return self
        return AtomicCategory(self.name, self.features.rename(mapping))

    def strip_features(self) -> 'AtomicCategory':
        if not self.features:
            return self
        return AtomicCategory(self.name)

    def iter_atoms(self) -> Iterator['AtomicCategory']:
        yield self

    def __str__(self) -> str:
        if self.features:
            return self.name + str(self.features)
        return self.name


@dataclass(frozen=True, repr=False)
class FunctorCategory(Category):
    """A functor category (e.g., ``S\\NP``)."""

    result: Category
    """The result category (e.g., S)."""

    argument: Category
    """The argument category (e.g., NP)."""

    direction: SlashDirection
    """The slash direction."""

    def __post_init__(self):
        if not isinstance(self.direction, SlashDirection):
            object.__setattr__(self, 'direction', SlashDirection.from_string(self.direction))

    @property
    def is_functor(self) -> bool:
        return True

    @property
    def arity(self) -> int:
        return self.result.arity + 1

    @property
    def size(self) -> int:
        return self.result.size + self.argument.size + 1

    def iter_variables(self) -> Iterator[Any]:
        yield from self.result.iter_variables()
        yield from self.argument.iter_variables()

    def substitute(self, bindings) -> 'FunctorCategory':
        return FunctorCategory(self.result.substitute(bindings), self.argument.substitute(bindings), self.direction)

    def rename(self, mapping: Mapping[Any, Any]) -> 'FunctorCategory':
        return FunctorCategory(self.result.rename(mapping), self.argument.rename(mapping), self.direction)

    def strip_features(self) -> 'FunctorCategory':
        return FunctorCategory(self.result.strip_features(), self.argument.strip_features(), self.direction)

    def iter_atoms(self) -> Iterator[AtomicCategory]:
        yield from self.result.iter_atoms()
        yield from self.argument.iter_atoms()

    def flatten(self) -> Tuple[Category, List[Tuple[Category, SlashDirection]]]:
        """Flatten the functor into its final result and the list of arguments, innermost first. For example,
        ``(S\\NP)/NP`` is flattened into ``(S, [(NP, BACKWARD), (NP, FORWARD)])``.
        """
        arguments = list()
        current = self
        while isinstance(current, FunctorCategory):
            arguments.append((current.argument, current.direction))
            current = current.result
        return current, arguments[::-1]

    @property
    def parenthesis_str(self) -> str:
        return '(' + str(self) + ')'

    def __str__(self) -> str:
        return self.result.parenthesis_str + self.direction.symbol + self.argument.parenthesis_str


@dataclass(frozen=True, repr=False)
class ProductCategory(Category):
    """A product category (e.g., ``NP*NP``), used by the Lambek calculus."""

    left: Category
    right: Category

    @property
    def is_product(self) -> bool:
        return True

    @property
    def size(self) -> int:
        return self.left.size + self.right.size + 1

    def iter_variables(self) -> Iterator[Any]:
        yield from self.left.iter_variables()
        yield from self.right.iter_variables()

    def substitute(self, bindings) -> 'ProductCategory':
        return ProductCategory(self.left.substitute(bindings), self.right.substitute(bindings))

    def rename(self, mapping: Mapping[Any, Any]) -> 'ProductCategory':
        return ProductCategory(self.left.rename(mapping), self.right.rename(mapping))

    def strip_features(self) -> 'ProductCategory':
        return ProductCategory(self.left.strip_features(), self.right.strip_features())

    def iter_atoms(self) -> Iterator[AtomicCategory]:
        yield from self.left.iter_atoms()
        yield from self.right.iter_atoms()

    @property
    def parenthesis_str(self) -> str:
        return '(' + str(self) + ')'

    def __str__(self) -> str:
        return self.left.parenthesis_str + '*' + self.right.parenthesis_str


@dataclass(frozen=True, repr=False)
class CategoryVariable(Category):
    """A category variable (e.g., ``?X``)."""

    name: str

    @property
    def is_variable(self) -> bool:
        return True

    def iter_variables(self) -> Iterator[Any]:
        yield self

    def substitute(self, bindings) -> Category:
        value = bindings.walk(self)
        if value is self or value.is_variable:
            return value
        return value.substitute(bindings)

    def rename(self, mapping: Mapping[Any, Any]) -> Category:
        return mapping.get(self, self)

    def strip_features(self) -> 'CategoryVariable':
        return self

    def __str__(self) -> str:
        return '?' + self.name


@dataclass(frozen=True, repr=False)
class ModalCategory(Category):
    """The base class of the unary modal categories ``◇A`` and ``□A``, used by the Lambek calculus."""

    body: Category

    symbol = ''

    @property
    def is_modal(self) -> bool:
        return True

    @property
    def size(self) -> int:
        return self.body.size + 1

    def iter_variables(self) -> Iterator[Any]:
        return self.body.iter_variables()

    def substitute(self, bindings) -> 'ModalCategory':
        return type(self)(self.body.substitute(bindings))

    def rename(self, mapping: Mapping[Any, Any]) -> 'ModalCategory':
        return type(self)(self.body.rename(mapping))

    def strip_features(self) -> 'ModalCategory':
        return type(self)(self.body.strip_features())

    def iter_atoms(self) -> Iterator[AtomicCategory]:
        return self.body.iter_atoms()

    def __str__(self) -> str:
        return self.symbol + self.body.parenthesis_str


class DiamondCategory(ModalCategory):
    """The diamond ``◇A``. Its structural counterpart is the bracket ``<Γ>``."""

    symbol = '◇'


class BoxCategory(ModalCategory):
    """The box ``□A``, the residual of the diamond: ``◇□A => A`` and ``A => □◇A`` are theorems."""

    symbol = '□'
