import copy
import re
from os import path

from ebnf2bnf.common import Location, make_debug_sink
from ebnf2bnf.exceptions import GrammarError, ParseError
from ebnf2bnf.expr import Sequence, SymbolRef, symbol_refs, to_struct
from ebnf2bnf.parser import ExpressionParser
from ebnf2bnf.segmenter import PASS_DIRECTIVE, Segmenter
from ebnf2bnf.termui import a_print, h_print, prints, s_emph, s_header

# Rule kinds
RULE = 'rule'
TERMINAL = 'terminal'
PASS = 'pass'

# The empty production, target of all optional rewrites.
EMPTY = 'empty'
EMPTY_ID = '0'

PASS_ID = '0.pass'

RULE_RE = re.compile(r'\[(?P<id>[\w.]+)\]\s*(?P<symbol>\w+)\s*::=(?P<rhs>.*)',
                     re.DOTALL)
ID_NUMBER_RE = re.compile(r'\d+')


def rule_kind(symbol, expr):
    """
    Symbols written in uppercase and rules whose right-hand side is a bare
    literal, character class or hex reference are terminals.
    """
    if symbol and symbol == symbol.upper():
        return TERMINAL
    if expr.terminal:
        return TERMINAL
    return RULE


def id_sort_key(rule_id):
    """
    Rule ids order by their leading number first and then by the whole id
    string, so "2" < "2.1" < "2.term1" < "10".
    """
    match = ID_NUMBER_RE.match(rule_id)
    return (int(match.group()) if match else 0, rule_id)


class Rule:
    """
    A single grammar production.

    Attributes:
    symbol(str): The name of the defined symbol. None for the pass-through
        rule.
    id(str): Rule number from the grammar, e.g. "12". Rules synthesized
        during BNF transformation get dotted ids derived from their origin,
        e.g. "12.1", "12.1.term1", "12*".
    expr(Node): Right-hand side expression tree.
    kind(str): One of RULE, TERMINAL or PASS. Derived from the symbol and the
        expression if not given.
    orig(str): Source text of the rule. None for synthesized rules.
    location(Location): Where the rule is defined.
    """
    def __init__(self, symbol, id, expr, kind=None, orig=None, location=None):
        self.symbol = symbol
        self.id = id
        self.expr = expr
        self.kind = kind if kind is not None else rule_kind(symbol, expr)
        self.orig = orig
        self.location = location

    def sort_key(self):
        return id_sort_key(self.id)

    def __lt__(self, other):
        return self.sort_key() < other.sort_key()

    def __eq__(self, other):
        "Two rules are equal if they have the same symbol, kind and expr."
        if not isinstance(other, Rule):
            return NotImplemented
        return self.symbol == other.symbol and self.kind == other.kind \
            and self.expr == other.expr

    __hash__ = None

    def equivalent(self, other):
        "Two rules are equivalent if they have the same expr."
        return self.expr == other.expr

    def rewrite(self, old_symbol, new_symbol):
        """
        Replaces references to `old_symbol` with references to `new_symbol`.

        BNF rules are flat so for them this is a first-level substitution.
        Terminal rules keep their EBNF structure and are rewritten at any
        depth.
        """
        if isinstance(self.expr, SymbolRef):
            if self.expr.name == old_symbol:
                self.expr = SymbolRef(new_symbol)
            return self
        nodes = [self.expr]
        while nodes:
            node = nodes.pop()
            for idx, operand in enumerate(node.operands()):
                if not isinstance(operand, SymbolRef):
                    nodes.append(operand)
                elif operand.name == old_symbol:
                    node.set_operand(idx, SymbolRef(new_symbol))
        return self

    def references(self):
        return symbol_refs(self.expr)

    def copy(self):
        "Returns a copy of this rule owning its own expression tree."
        return Rule(self.symbol, self.id, copy.deepcopy(self.expr),
                    kind=self.kind, orig=self.orig, location=self.location)

    def to_struct(self):
        return (self.symbol, self.id, self.kind, to_struct(self.expr))

    def __str__(self):
        return f'{self.symbol} [{self.id}] {self.kind} {self.expr}'

    def __repr__(self):
        return f'Rule({self.symbol!r}, {self.id!r}, {self.expr!r}, ' \
            f'kind={self.kind!r})'


class Grammar:
    """
    An ordered collection of rules.

    Attributes:
    rules(list of Rule): Rules in definition order or, for grammars produced
        by `make_bnf`, in id order.
    file_name(str): Path of the grammar file if loaded from file.
    """
    def __init__(self, rules=None, file_name=None):
        self.rules = list(rules) if rules else []
        self.file_name = file_name
        self._check_ids()

    def _check_ids(self):
        defined = {}
        for rule in self.rules:
            first = defined.get(rule.id)
            if first is not None:
                raise GrammarError(
                    location=rule.location
                    or Location(file_name=self.file_name),
                    message=f'Rule id "{rule.id}" already used by rule '
                    f'"{first.symbol}".')
            defined[rule.id] = rule

    def __iter__(self):
        return iter(self.rules)

    def __len__(self):
        return len(self.rules)

    def __getitem__(self, idx):
        return self.rules[idx]

    def __eq__(self, other):
        if not isinstance(other, Grammar):
            return NotImplemented
        return self.rules == other.rules

    __hash__ = None

    def get_rule(self, symbol):
        "Returns the first rule defining the given symbol."
        for rule in self.rules:
            if rule.symbol == symbol:
                return rule

    def get_rule_by_id(self, rule_id):
        for rule in self.rules:
            if rule.id == rule_id:
                return rule

    @property
    def symbols(self):
        return [rule.symbol for rule in self.rules if rule.symbol]

    def make_bnf(self, debug=None):
        """
        Returns a new grammar with every rule transformed to BNF and
        equivalent terminal rules merged. This grammar is not changed.
        """
        from ebnf2bnf.bnf import make_bnf
        return Grammar(make_bnf(self.rules, debug=debug),
                       file_name=self.file_name)

    def to_struct(self):
        return [rule.to_struct() for rule in self.rules]

    def to_sxp(self):
        from ebnf2bnf.export import grammar_sxp_export
        return grammar_sxp_export(self)

    def to_ttl(self, prefix, ns):
        from ebnf2bnf.export import grammar_ttl_export
        return grammar_ttl_export(self, prefix, ns)

    @staticmethod
    def from_string(grammar_str, file_name=None, debug=None):
        return Grammar(parse_rules(grammar_str, file_name, debug=debug),
                       file_name=file_name)

    @staticmethod
    def from_file(file_name, debug=None):
        file_name = path.realpath(file_name)
        with open(file_name, encoding='utf-8') as f:
            grammar_str = f.read()
        return Grammar.from_string(grammar_str, file_name=file_name,
                                   debug=debug)

    def print_debug(self):
        a_print("*** GRAMMAR ***", new_line=True)
        for kind, title in ((RULE, "Rules:"), (TERMINAL, "Terminals:"),
                            (PASS, "Pass:")):
            rules = [r for r in self.rules if r.kind == kind]
            if rules:
                h_print(title)
                for rule in rules:
                    prints(s_header(f"[{rule.id}]") + f" {rule.symbol} "
                           + s_emph("::=") + f" {to_struct(rule.expr)}")


def split_rule(text, location=None):
    """
    Splits rule text of the form `[id] symbol ::= expression` into its
    three parts.
    """
    match = RULE_RE.match(text)
    if not match:
        raise ParseError(location, "expected '[id] symbol ::= expression'",
                         text=text)
    return match.group('id'), match.group('symbol'), match.group('rhs')


def parse_rules(grammar_str, file_name=None, debug=None):
    """
    Parses grammar text into a list of rules in definition order.

    Rules following the `@terminals` directive are terminals regardless of
    their symbol case. The `@pass` directive defines the pass-through rule.
    """
    debug = make_debug_sink(debug)
    rules = []
    terminals = False
    pass_rule = None
    for span in Segmenter(file_name).spans(grammar_str):
        location = Location(file_name, span.line)
        debug(f"[{span.line}]rule string: {span.text!r}")

        if span.is_terminals():
            terminals = True
            continue

        parser = ExpressionParser(location, debug)
        if span.is_pass():
            if pass_rule is not None:
                raise GrammarError(
                    location, f'Multiple {PASS_DIRECTIVE} directives. '
                    f'First defined at {pass_rule.location}.')
            rhs = span.text[len(PASS_DIRECTIVE):].lstrip()
            if rhs.startswith('::='):
                rhs = rhs[3:]
            expr = parser.parse(rhs)
            pass_rule = Rule(None, PASS_ID, expr, kind=PASS, orig=span.text,
                             location=location)
            rules.append(pass_rule)
            continue

        rule_id, symbol, rhs = split_rule(span.text, location)
        rule = Rule(symbol, rule_id, parser.parse(rhs),
                    kind=TERMINAL if terminals else None,
                    orig=span.text, location=location)
        debug(f"[{span.line}]rule: {rule!r}")
        rules.append(rule)

    return rules
