#! /usr/bin/env python3
# -*- coding: utf-8 -*-
# File   : __init__.py
# Author : Jiayuan Mao
# Email  : maojiayuan@gmail.com
# Date   : 10/18/2026
#
# This file is part of Project NLParsers.
# Distributed under terms of the MIT license.

"""Type-Logical Grammar: Lambek sequents, the focused prover and the parser."""

from .sequent import Bracket, Sequent, TLGRule, proof_term
from .prover import ProofResult, FocusedProver
from .parser import ProofForest, TLGParser

__all__ = ['Bracket', 'Sequent', 'TLGRule', 'proof_term', 'ProofResult', 'FocusedProver', 'ProofForest', 'TLGParser']
