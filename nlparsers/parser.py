#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : parser.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""The formalism-independent entry point.

    >>> from nlparsers import Lexicon, ParserConfig, parse
    >>> lexicon = Lexicon.from_dict({'Kim': ('NP', 'kim'), 'left': ('S\\NP', '\\x.leave(x)')})
    >>> parse(lexicon, 'Kim left', 'S').best_tree().semantics
    leave(kim)
    >>> parse(lexicon, 'Kim left', 'S', config=ParserConfig(formalism='tlg')).count_derivations()
    1
"""

from typing import Any, Optional, Union, Sequence
from jacinle.logging import get_logger

from nlparsers.capabilities import require
from nlparsers.config import Formalism, ParserConfig, get_parser_config
from nlparsers.common.lexicon import Lexicon
from nlparsers.chart.forest import DerivationForest
from nlparsers.chart.result import ParseFailure
from nlparsers.ccg.parser import CCGChartParser
from nlparsers.mg.parser import MGChartParser
from nlparsers.tlg.parser import TLGParser

logger = get_logger(__file__)

__all__ = ['make_parser', 'parse']

_PARSERS = {
    Formalism.CCG: CCGChartParser,
    Formalism.MG: MGChartParser,
    Formalism.TLG: TLGParser,
}


def make_parser(lexicon: Lexicon, config: Optional[ParserConfig] = None):
    """Make the parser of the formalism selected by the configuration.

    Args:
        lexicon: the lexicon.
        config: the parser configuration. Defaults to the current default configuration.

    Returns:
        a :class:`~nlparsers.ccg.parser.CCGChartParser`, a :class:`~nlparsers.mg.parser.MGChartParser` or a
        :class:`~nlparsers.tlg.parser.TLGParser`.

    Raises:
        FormalismDisabledError: if the engine of the formalism is disabled.
    """
    config = config if config is not None else get_parser_config()
    formalism = config.get_formalism()
    require(formalism.value)
    return _PARSERS[formalism](lexicon, config=config)


def parse(lexicon: Lexicon, tokens: Union[str, Sequence[str]], goal: Any, config: Optional[ParserConfig] = None) -> Union[DerivationForest, ParseFailure]:
    """Parse a sentence with the formalism selected by the configuration.

    Args:
        lexicon: the lexicon.
        tokens: the tokens, or a string to be split on whitespace.
        goal: the goal category (or category string). For Minimalist Grammars, the name of a categorial feature.
        config: the parser configuration. Defaults to the current default configuration.

    Returns:
        a :class:`~nlparsers.chart.forest.DerivationForest` on success, or a
        :class:`~nlparsers.chart.result.ParseFailure` describing why no derivation was found.

    Raises:
        FormalismDisabledError: if the engine of the formalism is disabled.
    """
    parser = make_parser(lexicon, config)
    logger.debug(f'Parsing {tokens!r} with {type(parser).__name__}.')
    return parser.parse(tokens, goal)
