"""
Recursive-descent parser for the right-hand side of a single EBNF rule.

Productions, from the lowest to the highest binding:

    alternation: sequence ('|' sequence)*
    sequence:    difference*
    difference:  postfix ('-' primary)?
    postfix:     primary ('?' | '*' | '+')?
    primary:     terminal | '(' alternation ')'

Each production takes the unparsed rest of the input and returns a pair of
the parsed expression (or None if nothing could be parsed) and the new rest.
"""
import functools
import re

from ebnf2bnf.common import Location, make_debug_sink, no_debug
from ebnf2bnf.exceptions import ParseError
from ebnf2bnf.expr import (QUANTIFIERS, Alternation, CharRange, Difference,
                           HexCharRef, Literal, Sequence, SymbolRef)

# Token kinds
LITERAL = 'literal'
RANGE = 'range'
HEX = 'hex'
SYMBOL = 'symbol'
AT = 'at'
DIFF = '-'
OPT = '?'
ALT = '|'
PLUS = '+'
STAR = '*'
LPAREN = '('
RPAREN = ')'
END = 'end'

OPERATORS = (DIFF, OPT, ALT, PLUS, STAR, LPAREN, RPAREN)
QUOTES = ('"', "'")

SYMBOL_RE = re.compile(r'\w+')
HEX_RE = re.compile(r'#x[0-9a-fA-F]+')
AT_RE = re.compile(r'@#?\w+')


class Token:
    """
    A single lexical token of a rule right-hand side.

    Attributes:
    kind(str): One of the token kind constants of this module.
    value(str): Literal content, range content, hex reference or symbol name.
        None for operators and END.
    """
    __slots__ = ['kind', 'value']

    def __init__(self, kind, value=None):
        self.kind = kind
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Token) and self.kind == other.kind \
            and self.value == other.value

    def __repr__(self):
        if self.value is None:
            return f'<{self.kind}>'
        return f'<{self.kind}({self.value!r})>'


def next_token(s, location=None):
    """
    Recognizes one token at the start of `s` (leading whitespace is skipped)
    and returns the token and the rest of the input.

        >>> next_token("'abc' def")
        (<literal('abc')>, ' def')
        >>> next_token("[^<>'{}|^`]-[#x00-#x20]")
        (<range("^<>'{}|^`")>, '-[#x00-#x20]')
    """
    s = s.lstrip()
    if not s:
        return Token(END), s

    first = s[0]
    if first in QUOTES:
        end = s.find(first, 1)
        if end < 0:
            raise ParseError(location, 'unterminated string literal', text=s)
        rest = s[end + 1:]
        if rest.startswith(first):
            raise ParseError(location, f'unexpected embedded quote {first}',
                             text=s)
        return Token(LITERAL, s[1:end]), rest

    if first == '[':
        end = s.find(']', 1)
        if end < 0:
            raise ParseError(location, 'unterminated character class',
                             text=s)
        return Token(RANGE, s[1:end]), s[end + 1:]

    if first == '#':
        match = HEX_RE.match(s)
        if not match:
            raise ParseError(location, 'invalid hex character reference',
                             text=s)
        return Token(HEX, match.group()), s[match.end():]

    if first.isalpha() or first == '_':
        match = SYMBOL_RE.match(s)
        return Token(SYMBOL, match.group()), s[match.end():]

    if first == '@':
        match = AT_RE.match(s)
        if not match:
            raise ParseError(location, 'invalid at-reference', text=s)
        return Token(AT, match.group()[1:]), s[match.end():]

    if first in OPERATORS:
        return Token(first), s[1:]

    raise ParseError(location, 'unrecognized terminal', text=s)


def traced(production):
    """
    Reports production input and result to the parser debug sink, indented by
    the recursion depth.
    """
    @functools.wraps(production)
    def wrapper(self, s):
        if not self.tracing:
            return production(self, s)
        name = production.__name__
        self.trace(f'{name}({s!r})')
        self.depth += 1
        try:
            result = production(self, s)
        finally:
            self.depth -= 1
        self.trace(f'=> {name} returned {result!r}')
        return result
    return wrapper


class ExpressionParser:
    """
    Parses rule right-hand sides into expression trees.

    Args:
    location(Location): Location of the rule being parsed, used in errors
        and trace output.
    debug(bool or callable): Trace sink. See `make_debug_sink`.
    """
    def __init__(self, location=None, debug=None):
        self.location = location if location is not None else Location()
        self.debug = make_debug_sink(debug)
        self.tracing = self.debug is not no_debug
        self.depth = 0

    def trace(self, message):
        line = self.location.line if self.location.line is not None else '?'
        self.debug(f"[{line}]{' ' * self.depth}{message}")

    def parse(self, text):
        """
        Parses the whole right-hand side text. A single trailing closing
        paren is discarded; any other leftover input is an error.

        E.g. "a b? | c" gives
        Alternation([Sequence([SymbolRef(a), Optional(SymbolRef(b))]),
                     SymbolRef(c)]).
        """
        expr, rest = self.group(text)
        if rest.strip():
            raise ParseError(self.location, 'unexpected input', text=rest)
        return expr

    def terminal(self, s):
        return next_token(s, self.location)

    @traced
    def group(self, s):
        expr, s = self.alternation(s)
        token, rest = self.terminal(s)
        if token.kind == RPAREN:
            return expr, rest
        return expr, s

    @traced
    def alternation(self, s):
        args = []
        while True:
            expr, s = self.sequence(s)
            args.append(expr)
            token, rest = self.terminal(s)
            if token.kind != ALT:
                break
            s = rest
        if len(args) == 1:
            return args[0], s
        return Alternation(args), s

    @traced
    def sequence(self, s):
        args = []
        while True:
            expr, rest = self.difference(s)
            if expr is None:
                break
            args.append(expr)
            s = rest
        if not args:
            return Sequence([]), s
        if len(args) == 1:
            return args[0], s
        return Sequence(args), s

    @traced
    def difference(self, s):
        left, s = self.postfix(s)
        if left is None:
            return None, s
        token, rest = self.terminal(s)
        if token.kind == DIFF:
            right, rest = self.primary(rest)
            if right is None:
                raise ParseError(self.location,
                                 "expected operand after '-'", text=rest)
            return Difference(left, right), rest
        return left, s

    @traced
    def postfix(self, s):
        expr, s = self.primary(s)
        if expr is None:
            return None, s
        token, rest = self.terminal(s)
        if token.kind in QUANTIFIERS:
            return QUANTIFIERS[token.kind](expr), rest
        return expr, s

    @traced
    def primary(self, s):
        token, rest = self.terminal(s)
        if token.kind == LITERAL:
            return Literal(token.value), rest
        if token.kind == RANGE:
            return CharRange(token.value), rest
        if token.kind == HEX:
            return HexCharRef(token.value), rest
        if token.kind == SYMBOL:
            return SymbolRef(token.value), rest
        if token.kind == LPAREN:
            return self.group(rest)
        return None, s


def parse_expression(text, location=None, debug=None):
    "Parses the rule right-hand side `text` into an expression tree."
    return ExpressionParser(location, debug).parse(text)
