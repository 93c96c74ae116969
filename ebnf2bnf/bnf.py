"""
Transformation of EBNF rules into pure BNF rules.

`BnfNormalizer` splits each rule until no rule contains a nested operator or
a quantifier:

    * (a [n] rule (op1 (op2))) becomes two rules:
      (a [n] rule (op1 _a_1)) and (_a_1 [n.1] rule (op2))
    * (a rule (opt b)) becomes (a rule (alt empty b))
    * (a rule (star b)) becomes (a rule (alt empty _a_star)) and
      (_a_star [n*] rule (seq b a))
    * (a rule (plus b)) becomes (a rule (seq b (star b)))
    * (a [n] rule (op "foo")) becomes two rules:
      (a [n] rule (op _a_term1)) and (_a_term1 [n.term1] terminal "foo")

`EquivalenceConsolidator` then merges terminal rules with equal expressions.
"""
import copy

from ebnf2bnf.common import make_debug_sink, no_debug
from ebnf2bnf.expr import (Alternation, OneOrMore, Optional, Sequence,
                           SymbolRef, ZeroOrMore)
from ebnf2bnf.grammar import EMPTY, EMPTY_ID, RULE, TERMINAL, Rule


def derive_symbol(symbol, suffix):
    """
    Returns the name of a rule synthesized from the rule `symbol`.

        >>> derive_symbol('foo', 1)
        '_foo_1'
        >>> derive_symbol('_foo_1', 'term1')
        '_foo_1_term1'
    """
    base = symbol if symbol.startswith('_') else f'_{symbol}'
    return f'{base}_{suffix}'


def empty_rule():
    return Rule(EMPTY, EMPTY_ID, Sequence([]), kind=RULE)


class BnfNormalizer:
    """
    Args:
    debug(bool or callable): Trace sink. See `make_debug_sink`.
    reserved_ids(iterable of str): Ids defined by the source grammar.
        Synthesized rules skip these so dotted source ids such as "1.1"
        never clash with extracted rules.
    """
    def __init__(self, debug=None, reserved_ids=()):
        self.debug = make_debug_sink(debug)
        self.reserved_ids = set(reserved_ids)

    def normalize(self, rule):
        """
        Transforms the rule into a list of BNF rules. The first rule of the
        result defines the symbol of the given rule. Pass-through and
        terminal rules are returned unchanged.
        """
        return self._normalize(rule, 1)

    def _normalize(self, rule, rule_seq):
        # `rule_seq` numbers rules extracted from this symbol. It carries
        # over rewrites under the same symbol, e.g. (plus (seq b c)) extracts
        # _a_1 and later (star _a_1) as _a_2.
        if rule.kind != RULE or not rule.expr.composite:
            return [rule]

        expr = rule.expr
        if any(operand.composite for operand in expr.operands()):
            parent, new_rules, rule_seq = self._extract(
                rule, rule_seq, lambda o: o.composite,
                lambda n: (n, f'{rule.id}.{n}'))
            return self._normalize(parent, rule_seq) \
                + [r for new_rule in new_rules
                   for r in self._normalize(new_rule, 1)]

        if isinstance(expr, Optional):
            return self._normalize(self._same_symbol(
                rule, Alternation([SymbolRef(EMPTY),
                                   copy.deepcopy(expr.child)])), rule_seq)

        if isinstance(expr, ZeroOrMore):
            star_symbol = derive_symbol(rule.symbol, 'star')
            star_rule = Rule(star_symbol, f'{rule.id}*',
                             Sequence([copy.deepcopy(expr.child),
                                       SymbolRef(rule.symbol)]),
                             location=rule.location)
            self._trace(star_rule)
            return self._normalize(self._same_symbol(
                rule, Alternation([SymbolRef(EMPTY),
                                   SymbolRef(star_symbol)])), rule_seq) \
                + self._normalize(star_rule, 1)

        if isinstance(expr, OneOrMore):
            return self._normalize(self._same_symbol(
                rule, Sequence([copy.deepcopy(expr.child),
                                ZeroOrMore(copy.deepcopy(expr.child))])),
                rule_seq)

        if any(operand.terminal for operand in expr.operands()):
            parent, new_rules, _ = self._extract(
                rule, 1, lambda o: o.terminal,
                lambda n: (f'term{n}', f'{rule.id}.term{n}'), kind=TERMINAL)
            return [parent] + new_rules

        return [rule]

    def _extract(self, rule, rule_seq, predicate, make_names, kind=None):
        """
        Moves each operand of the rule expression matching the predicate
        into a new rule and references the new rule in its place.

        Returns the rewritten rule, the new rules and the next free rule
        sequence number.
        """
        parent = rule.copy()
        new_rules = []
        for idx, operand in enumerate(parent.expr.operands()):
            if not predicate(operand):
                continue
            suffix, new_id = make_names(rule_seq)
            while new_id in self.reserved_ids:
                rule_seq += 1
                suffix, new_id = make_names(rule_seq)
            new_symbol = derive_symbol(rule.symbol, suffix)
            rule_seq += 1
            parent.expr.set_operand(idx, SymbolRef(new_symbol))
            new_rules.append(Rule(new_symbol, new_id, operand, kind=kind,
                                  location=rule.location))
        self._trace(parent, *new_rules)
        return parent, new_rules, rule_seq

    def _same_symbol(self, rule, expr):
        new_rule = Rule(rule.symbol, rule.id, expr, kind=rule.kind,
                        orig=rule.orig, location=rule.location)
        self._trace(new_rule)
        return new_rule

    def _trace(self, *rules):
        if self.debug is no_debug:
            return
        self.debug("to_bnf => " + ", ".join(
            f"{r.symbol} [{r.id}] {r.expr.to_struct()}" for r in rules))


class EquivalenceConsolidator:
    """
    Merges terminal rules with structurally equal expressions.

    The rule with the lowest id of each group of equivalent terminals is
    kept, references to the others are rewritten to it and the others are
    dropped.
    """
    def __init__(self, debug=None):
        self.debug = make_debug_sink(debug)

    def duplicates(self, rules):
        """
        Returns (canonical, duplicate) pairs of terminal rules.
        """
        terminals = [r for r in rules if r.kind == TERMINAL]
        pairs = []
        for dst_rule in terminals:
            src_rule = min((r for r in terminals if r.equivalent(dst_rule)),
                           key=Rule.sort_key)
            if src_rule is not dst_rule:
                self.debug(f"equivalent rules: {src_rule.symbol} "
                           f"[{src_rule.id}] and {dst_rule.symbol} "
                           f"[{dst_rule.id}]")
                pairs.append((src_rule, dst_rule))
        return pairs

    def consolidate(self, rules):
        """
        Rewrites the given rules in place and returns the rules left after
        merging, sorted by id.

        Terminals reference other terminals, so merging one group can make
        two other terminals equal. Merging repeats until no duplicates are
        left.
        """
        pairs = self.duplicates(rules)
        while pairs:
            for src_rule, dst_rule in pairs:
                for rule in rules:
                    rule.rewrite(dst_rule.symbol, src_rule.symbol)
            dropped = set(id(dst_rule) for _, dst_rule in pairs)
            rules = [r for r in rules if id(r) not in dropped]
            pairs = self.duplicates(rules)
        return sorted(rules, key=Rule.sort_key)


def normalize_all(rules, debug=None):
    """
    Returns BNF rules for the given rules, starting with the empty rule.
    Given rules are not changed.
    """
    normalizer = BnfNormalizer(debug, reserved_ids=[r.id for r in rules])
    new_rules = [empty_rule()]
    for rule in rules:
        normalizer.debug(f"to_bnf: expand from {rule!r}")
        new_rules.extend(normalizer.normalize(rule.copy()))
    return new_rules


def make_bnf(rules, debug=None):
    """
    Transforms EBNF rules to the final list of BNF rules sorted by id.
    """
    return EquivalenceConsolidator(debug).consolidate(
        normalize_all(rules, debug=debug))
