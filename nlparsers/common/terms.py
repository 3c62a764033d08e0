#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : terms.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Lambda terms used as meaning representations.

The CCG engine composes the terms of the lexical entries along each derivation, and the TLG engine builds the
Curry-Howard term of each proof. Terms are only built and normalized (beta-reduction); they are never evaluated.

The term syntax is::

    \\x.sleep(x)            abstraction (``λ`` can be used instead of the backslash)
    \\x y.love(y, x)        abstraction over several variables
    f(a, b)                 application, equivalent to f(a)(b)
    <a, b>                  pair
    fst(p), snd(p)          projections

Names bound by an enclosing abstraction are variables; all other names are constants.
"""

import lark
import itertools
from dataclasses import dataclass
from typing import Optional, Union, Set, List, FrozenSet
from jacinle.utils.meta import repr_from_str

from nlparsers.common.errors import CategoryParsingError

__all__ = [
    'Term', 'TermVariable', 'TermConstant', 'Abstraction', 'Application', 'Pair', 'Projection',
    'TermParser', 'parse_term', 'beta_normalize', 'apply_terms', 'fresh_variables', 'make_abstraction'
]

# lark.v_args
inline_args = lark.v_args(inline=True)


class Term(object):
    """The base class for lambda terms."""

    def free_variables(self) -> FrozenSet[str]:
        """The names of the free variables of the term."""
        return frozenset()

    def substitute(self, name: str, value: 'Term') -> 'Term':
        """Capture-avoiding substitution of the free variable `name` by `value`."""
        return self

    @property
    def is_atomic(self) -> bool:
        return False

    __repr__ = repr_from_str


@dataclass(frozen=True, repr=False)
class TermVariable(Term):
    name: str

    def free_variables(self) -> FrozenSet[str]:
        return frozenset([self.name])

    def substitute(self, name: str, value: Term) -> Term:
        return value if name == self.name else self

    @property
    def is_atomic(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, repr=False)
class TermConstant(Term):
    name: str

    @property
    def is_atomic(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, repr=False)
class Abstraction(Term):
    variable: str
    body: Term

    def free_variables(self) -> FrozenSet[str]:
        return self.body.free_variables() - {self.variable}

    def substitute(self, name: str, value: Term) -> Term:
        if name == self.variable or name not in self.free_variables():
            return self
        value_free = value.free_variables()
        if self.variable in value_free:
            new_name = _fresh_variable_name(self.variable, value_free | self.body.free_variables() | {name})
            body = self.body.substitute(self.variable, TermVariable(new_name))
            return Abstraction(new_name, body.substitute(name, value))
        return Abstraction(self.variable, self.body.substitute(name, value))

    def __str__(self) -> str:
        variables = [self.variable]
        body = self.body
        while isinstance(body, Abstraction):
            variables.append(body.variable)
            body = body.body
        return '\\' + ' '.join(variables) + '.' + str(body)


@dataclass(frozen=True, repr=False)
class Application(Term):
    function: Term
    argument: Term

    def free_variables(self) -> FrozenSet[str]:
        return self.function.free_variables() | self.argument.free_variables()

    def substitute(self, name: str, value: Term) -> Term:
        return Application(self.function.substitute(name, value), self.argument.substitute(name, value))

    def __str__(self) -> str:
        arguments = [self.argument]
        function = self.function
        while isinstance(function, Application):
            arguments.append(function.argument)
            function = function.function
        head = str(function) if function.is_atomic or isinstance(function, Projection) else '(' + str(function) + ')'
        return head + '(' + ', '.join(str(a) for a in reversed(arguments)) + ')'


@dataclass(frozen=True, repr=False)
class Pair(Term):
    first: Term
    second: Term

    def free_variables(self) -> FrozenSet[str]:
        return self.first.free_variables() | self.second.free_variables()

    def substitute(self, name: str, value: Term) -> Term:
        return Pair(self.first.substitute(name, value), self.second.substitute(name, value))

    def __str__(self) -> str:
        return f'<{self.first}, {self.second}>'


@dataclass(frozen=True, repr=False)
class Projection(Term):
    term: Term
    index: int
    """1 for the first component, 2 for the second one."""

    def free_variables(self) -> FrozenSet[str]:
        return self.term.free_variables()

    def substitute(self, name: str, value: Term) -> Term:
        return Projection(self.term.substitute(name, value), self.index)

    def __str__(self) -> str:
        return ('fst' if self.index == 1 else 'snd') + '(' + str(self.term) + ')'


def _fresh_variable_name(base: str, used: Set[str]) -> str:
    base = base.rstrip('0123456789') or 'x'
    for i in itertools.count(1):
        name = f'{base}{i}'
        if name not in used:
            return name


def fresh_variables(count: int, *terms: Term, base: str = 'z') -> List[TermVariable]:
    """Make `count` variables that do not occur free in any of the given terms."""
    used = set()
    for t in terms:
        if t is not None:
            used |= t.free_variables()
    variables = list()
    for _ in range(count):
        name = _fresh_variable_name(base, used)
        used.add(name)
        variables.append(TermVariable(name))
    return variables


def make_abstraction(variables: List[TermVariable], body: Term) -> Term:
    """Build ``\\x1 x2 ... xn.body``."""
    for v in reversed(variables):
        body = Abstraction(v.name, body)
    return body


def apply_terms(function: Optional[Term], *arguments: Optional[Term]) -> Optional[Term]:
    """Build the application ``function(arguments...)``. Returns None if any of the inputs is None."""
    if function is None or any(a is None for a in arguments):
        return None
    for a in arguments:
        function = Application(function, a)
    return function


def _reduce_step(term: Term) -> Optional[Term]:
    """One step of normal-order reduction. Returns None if the term is in normal form."""
    if isinstance(term, Application):
        if isinstance(term.function, Abstraction):
            return term.function.body.substitute(term.function.variable, term.argument)
        reduced = _reduce_step(term.function)
        if reduced is not None:
            return Application(reduced, term.argument)
        reduced = _reduce_step(term.argument)
        if reduced is not None:
            return Application(term.function, reduced)
        return None
    elif isinstance(term, Abstraction):
        reduced = _reduce_step(term.body)
        if reduced is not None:
            return Abstraction(term.variable, reduced)
        return None
    elif isinstance(term, Pair):
        reduced = _reduce_step(term.first)
        if reduced is not None:
            return Pair(reduced, term.second)
        reduced = _reduce_step(term.second)
        if reduced is not None:
            return Pair(term.first, reduced)
        return None
    elif isinstance(term, Projection):
        if isinstance(term.term, Pair):
            return term.term.first if term.index == 1 else term.term.second
        reduced = _reduce_step(term.term)
        if reduced is not None:
            return Projection(reduced, term.index)
        return None
    return None


def beta_normalize(term: Optional[Term], max_steps: int = 10000) -> Optional[Term]:
    """Normalize a term by normal-order beta-reduction (and pair projection).

    Args:
        term: the term. None is returned as it is.
        max_steps: the maximum number of reduction steps. Terms built from typed derivations always normalize, so this
            only guards against untyped lexical terms without a normal form.

    Returns:
        the normalized term.
    """
    if term is None:
        return None
    for _ in range(max_steps):
        reduced = _reduce_step(term)
        if reduced is None:
            return term
        term = reduced
    raise ValueError(f'Term does not normalize within {max_steps} steps: {term}.')


class _TermTransformer(lark.Transformer):
    def start(self, args):
        return args[0]

    def abstraction(self, args):
        body = args[-1]
        for token in reversed(args[1:-1]):
            body = Abstraction(token.value, body)
        return body

    def call(self, args):
        function, arguments = args[0], args[1:]
        if isinstance(function, TermVariable) and function.name in ('fst', 'snd') and len(arguments) == 1:
            return Projection(arguments[0], 1 if function.name == 'fst' else 2)
        for a in arguments:
            function = Application(function, a)
        return function

    @inline_args
    def name(self, token):
        return TermVariable(token.value)

    @inline_args
    def pair(self, first, second):
        return Pair(first, second)


def _bind_constants(term: Term, bound: FrozenSet[str]) -> Term:
    if isinstance(term, TermVariable):
        return term if term.name in bound else TermConstant(term.name)
    elif isinstance(term, Abstraction):
        return Abstraction(term.variable, _bind_constants(term.body, bound | {term.variable}))
    elif isinstance(term, Application):
        return Application(_bind_constants(term.function, bound), _bind_constants(term.argument, bound))
    elif isinstance(term, Pair):
        return Pair(_bind_constants(term.first, bound), _bind_constants(term.second, bound))
    elif isinstance(term, Projection):
        return Projection(_bind_constants(term.term, bound), term.index)
    return term


class TermParser(object):
    """The parser for lambda terms."""

    GRAMMAR = r"""
start: term
?term: LAMBDA NAME+ "." term -> abstraction
    | application
?application: application "(" term ("," term)* ")" -> call
    | primary
?primary: NAME -> name
    | "<" term "," term ">" -> pair
    | "(" term ")"

LAMBDA: "\\" | "λ"
NAME: /[A-Za-z_][A-Za-z0-9_']*/

%import common.WS
%ignore WS
"""

    def __init__(self):
        self.parser = lark.Lark(self.GRAMMAR, parser='lalr', start='start')
        self.transformer = _TermTransformer()

    def parse_term(self, string: str) -> Term:
        """Parse a term from a string.

        Raises:
            CategoryParsingError: if the string is not a valid term.
        """
        try:
            term = self.transformer.transform(self.parser.parse(string))
        except lark.exceptions.LarkError as e:
            raise CategoryParsingError(f'Invalid term string: {string!r}.\n{e}') from e
        return _bind_constants(term, frozenset())


_default_term_parser: Optional[TermParser] = None


def parse_term(string: Union[str, Term, None]) -> Optional[Term]:
    """Parse a string to a lambda term. Terms and None are returned as they are."""
    global _default_term_parser
    if string is None or isinstance(string, Term):
        return string
    if _default_term_parser is None:
        _default_term_parser = TermParser()
    return _default_term_parser.parse_term(string)
