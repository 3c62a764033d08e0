#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : parsing.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The parser for category strings, and the category system that registers atomic categories and feature dimensions.

The category syntax is::

    category := category SLASH factor | factor       (slashes are left-associative)
    factor   := factor "*" primary | primary         (products bind tighter than slashes)
    primary  := NAME features? | VARIABLE | "(" category ")" | MODAL primary
    MODAL    := "◇" | "<>" | "□" | "[]"              (the diamond and the box)
    features := "[" name=value ("," name=value)* "]"
    value    := NAME | VARIABLE | "{" NAME ("," NAME)* "}" | features

For example: ``(S\\NP[num=?n])/NP``, ``(?X\\?X)/?X``, ``NP[agr=[num=sg,per=3]]``, ``S/(NP*NP)``, ``S/◇□NP``.
"""

import lark
from typing import Optional, Union, Iterable, Dict, FrozenSet
from jacinle.utils.printing import indent_text

from nlparsers.common.errors import CategoryParsingError
from nlparsers.common.features import FeatureValue, AtomicValue, SetValue, ComplexValue, FeatureVariable, FeatureStructure
from nlparsers.common.category import SlashDirection, Category, AtomicCategory, FunctorCategory, ProductCategory, CategoryVariable, DiamondCategory, BoxCategory

__all__ = [
    'FEATURE_GRAMMAR', 'FeatureStructureTransformerMixin',
    'CategoryTransformer', 'CategoryParser', 'parse_category', 'parse_features',
    'CategorySystem'
]

# lark.v_args
inline_args = lark.v_args(inline=True)

FEATURE_GRAMMAR = r"""
features: "[" (feature ("," feature)*)? "]"
feature: NAME "=" value
?value: NAME -> atomic_value
    | VARIABLE -> variable_value
    | "{" NAME ("," NAME)* "}" -> set_value
    | features -> complex_value

NAME: /[A-Za-z0-9_][A-Za-z0-9_']*/
VARIABLE: /\?[A-Za-z0-9_]+/

%import common.WS
%ignore WS
"""


class FeatureStructureTransformerMixin(object):
    """Transformer rules for the feature structure sub-language. Shared by the category parser and the MG feature parser."""

    def features(self, args):
        names = [k for k, _ in args]
        if len(names) != len(set(names)):
            raise CategoryParsingError(f'Duplicate feature names in {names}.')
        return FeatureStructure(args)

    @inline_args
    def feature(self, name, value):
        return name.value, value

    @inline_args
    def atomic_value(self, token) -> FeatureValue:
        return AtomicValue(token.value)

    @inline_args
    def variable_value(self, token) -> FeatureValue:
        return FeatureVariable(token.value[1:])

    def set_value(self, args) -> FeatureValue:
        values = frozenset(token.value for token in args)
        if len(values) == 1:
            return AtomicValue(next(iter(values)))
        return SetValue(values)

    @inline_args
    def complex_value(self, structure) -> FeatureValue:
        return ComplexValue(structure)


class CategoryTransformer(FeatureStructureTransformerMixin, lark.Transformer):
    """The lark transformer for category strings."""

    def start(self, args):
        return args[0]

    @inline_args
    def functor(self, result, slash, argument):
        return FunctorCategory(result, argument, SlashDirection.from_symbol(slash.value))

    @inline_args
    def product(self, left, right):
        return ProductCategory(left, right)

    @inline_args
    def variable(self, token):
        return CategoryVariable(token.value[1:])

    @inline_args
    def diamond(self, body):
        return DiamondCategory(body)

    @inline_args
    def box(self, body):
        return BoxCategory(body)

    def atom(self, args):
        if len(args) == 1:
            return AtomicCategory(args[0].value)
        return AtomicCategory(args[0].value, args[1])


class CategoryParser(object):
    """The parser for category strings.

        >>> from nlparsers.common.parsing import CategoryParser
        >>> parser = CategoryParser()
        >>> parser.parse_category('(S\\NP)/NP')
    """

    GRAMMAR = r"""
start: category
?category: category SLASH factor -> functor
    | factor
?factor: factor "*" primary -> product
    | primary
?primary: atom
    | VARIABLE -> variable
    | "(" category ")"
    | _DIAMOND primary -> diamond
    | _BOX primary -> box
atom: NAME features?

_DIAMOND: "◇" | "<>"
_BOX: "□" | "[]"
SLASH: "/" | "\\" | "|"
""" + FEATURE_GRAMMAR

    def __init__(self):
        self.parser = lark.Lark(self.GRAMMAR, parser='lalr', start='start')
        self.transformer = CategoryTransformer()

    def parse_category(self, string: str) -> Category:
        """Parse a category from a string.

        Args:
            string: the string to parse.

        Returns:
            the parsed category.

        Raises:
            CategoryParsingError: if the string is not a valid category.
        """
        try:
            tree = self.parser.parse(string)
            return self.transformer.transform(tree)
        except lark.exceptions.VisitError as e:
            raise CategoryParsingError(f'Invalid category string: {string!r}. {e.orig_exc}') from e.orig_exc
        except lark.exceptions.LarkError as e:
            raise CategoryParsingError(f'Invalid category string: {string!r}.\n{e}') from e


_default_category_parser: Optional[CategoryParser] = None


def _get_default_category_parser() -> CategoryParser:
    global _default_category_parser
    if _default_category_parser is None:
        _default_category_parser = CategoryParser()
    return _default_category_parser


def parse_category(string: Union[str, Category]) -> Category:
    """Parse a string to a category. When the input is already a :class:`Category`, return it as it is.

    Args:
        string: the string to be parsed.

    Returns:
        the parsed category.
    """
    if isinstance(string, Category):
        return string
    return _get_default_category_parser().parse_category(string)


def parse_features(string: str) -> FeatureStructure:
    """Parse a feature structure string such as ``[num=sg,per=3]``."""
    category = parse_category('_' + string)
    if not isinstance(category, AtomicCategory):
        raise CategoryParsingError(f'Invalid feature structure string: {string!r}.')
    return category.features


class CategorySystem(object):
    """A data structure that keeps track of the atomic categories and the feature dimensions allowed in a grammar.
    Categories parsed through the system are validated against the registered names and values."""

    def __init__(self):
        self.types: Dict[str, AtomicCategory] = dict()
        self.features: Dict[str, Optional[FrozenSet[str]]] = dict()

    types: Dict[str, AtomicCategory]
    """The registered atomic categories, indexed by name."""

    features: Dict[str, Optional[FrozenSet[str]]]
    """The registered feature dimensions, mapping from the feature name to the set of allowed atomic values (None if
    any value is allowed)."""

    def define_primitive_type(self, name: Union[str, AtomicCategory]):
        """Define an atomic category.

        Args:
            name: the name of the category, or the category itself.
        """
        if isinstance(name, AtomicCategory):
            self.types[name.name] = name
        elif isinstance(name, str):
            self.types[name] = AtomicCategory(name)
        else:
            raise TypeError(f'Invalid type: {name}.')

    def define_feature(self, name: str, values: Optional[Iterable[str]] = None):
        """Define a feature dimension.

        Args:
            name: the name of the feature (e.g., ``num``).
            values: the allowed atomic values (e.g., ``['sg', 'pl']``). If None, any value is allowed.
        """
        self.features[name] = frozenset(values) if values is not None else None

    def __getitem__(self, item: Union[str, Category]) -> Category:
        """A syntax sugar for parsing and validating a category."""
        category = parse_category(item)
        self.validate(category)
        return category

    def validate(self, category: Category):
        """Validate a category against the registered atomic categories and feature dimensions.

        Raises:
            CategoryParsingError: if the category uses an unregistered name or value.
        """
        for atom in category.iter_atoms():
            if atom.name not in self.types:
                raise CategoryParsingError(f'Unknown atomic category {atom.name} in {category}.')
            self._validate_features(atom.features, category)

    def _validate_features(self, features: FeatureStructure, category: Category):
        for name, value in features.items():
            if name not in self.features:
                raise CategoryParsingError(f'Unknown feature {name} in {category}.')
            allowed = self.features[name]
            if isinstance(value, ComplexValue):
                self._validate_features(value.structure, category)
            elif allowed is not None:
                values = {value.name} if isinstance(value, AtomicValue) else (value.values if isinstance(value, SetValue) else set())
                for v in values:
                    if v not in allowed:
                        raise CategoryParsingError(f'Invalid value {v} for feature {name} in {category}.')

    def __str__(self) -> str:
        return 'CategorySystem(' + ', '.join(self.types.keys()) + ')'

    __repr__ = __str__

    def format_summary(self) -> str:
        fmt = 'Atomic categories:\n'
        for t in self.types.values():
            fmt += '  ' + str(t) + '\n'
        fmt += 'Features:\n'
        for name, values in self.features.items():
            fmt += '  ' + name + ': ' + ('*' if values is None else '{' + ','.join(sorted(values)) + '}') + '\n'
        return 'CategorySystem:\n' + indent_text(fmt.rstrip())

    def print_summary(self):
        print(self.format_summary())
