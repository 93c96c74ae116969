# -*- coding: utf-8 -*-
# flake8: NOQA
from ebnf2bnf.grammar import Grammar, Rule, RULE, TERMINAL, PASS, EMPTY
from ebnf2bnf.parser import ExpressionParser, parse_expression
from ebnf2bnf.segmenter import Segmenter, Span
from ebnf2bnf.bnf import BnfNormalizer, EquivalenceConsolidator, make_bnf, \
    normalize_all
from ebnf2bnf.expr import Sequence, Alternation, Difference, Optional, \
    ZeroOrMore, OneOrMore, Literal, CharRange, HexCharRef, SymbolRef
from ebnf2bnf.exceptions import EBNFError, ParseError, GrammarError
from ebnf2bnf.common import Location

from .version import __version__
