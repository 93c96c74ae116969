import os

import pytest  # noqa
from ebnf2bnf import (EMPTY, PASS, RULE, TERMINAL, Alternation, CharRange,
                      Grammar, GrammarError, HexCharRef, Literal, OneOrMore,
                      Optional, ParseError, Rule, Sequence, SymbolRef,
                      ZeroOrMore)
from ebnf2bnf.grammar import id_sort_key, rule_kind, split_rule

this_folder = os.path.dirname(__file__)


def test_split_rule():
    assert split_rule("[1] a ::= b c") == ('1', 'a', ' b c')
    assert split_rule("[2.1]a::=b\n | c") == ('2.1', 'a', 'b\n | c')

    with pytest.raises(ParseError):
        split_rule("a ::= b")


def test_rule_kind():
    assert rule_kind('foo', SymbolRef('bar')) == RULE
    assert rule_kind('foo', Sequence([Literal('a')])) == RULE
    assert rule_kind('foo', Literal('a')) == TERMINAL
    assert rule_kind('foo', CharRange('0-9')) == TERMINAL
    assert rule_kind('FOO_BAR', Sequence([SymbolRef('a')])) == TERMINAL


def test_rule_equality():
    r1 = Rule('a', '1', Sequence([SymbolRef('b')]))
    r2 = Rule('a', '5', Sequence([SymbolRef('b')]))
    r3 = Rule('c', '1', Sequence([SymbolRef('b')]))

    # Ids don't take part in equality.
    assert r1 == r2
    assert r1 != r3
    assert r1.equivalent(r3)
    assert r1 != Rule('a', '1', Sequence([SymbolRef('b')]), kind=TERMINAL)


def test_rule_rewrite():
    rule = Rule('a', '1', Sequence([SymbolRef('b'), SymbolRef('c'),
                                    SymbolRef('b')]))
    rule.rewrite('b', 'x')
    assert rule.to_struct() == ('a', '1', RULE, ('seq', 'x', 'c', 'x'))

    rule = Rule('a', '1', SymbolRef('b'))
    assert rule.rewrite('b', 'x').expr == SymbolRef('x')


def test_rule_rewrite_nested():
    rule = Rule('A', '1', Sequence([
        Literal('a'), ZeroOrMore(Alternation([SymbolRef('b'),
                                              SymbolRef('c')]))]))
    rule.rewrite('c', 'x')
    assert rule.to_struct()[3] == ('seq', ("'", 'a'),
                                   ('star', ('alt', 'b', 'x')))


def test_rule_copy_owns_expression():
    rule = Rule('a', '1', Sequence([SymbolRef('b')]))
    copy = rule.copy()
    copy.rewrite('b', 'x')
    assert rule.expr == Sequence([SymbolRef('b')])
    assert copy.expr == Sequence([SymbolRef('x')])


def test_id_order():
    ids = ["10", "2.term1", "2.1", "2*", "1.1.term1", "2"]
    assert sorted(ids, key=id_sort_key) == [
        "1.1.term1", "2", "2*", "2.1", "2.term1", "10"]


def test_grammar_from_string():
    grammar = Grammar.from_string("""
    [1] ebnf ::= (declaration | rule)*
    [2] declaration ::= '@terminals' | pass
    [3] pass ::= '@pass' expression
    [4] LHS ::= '[' SYMBOL ']' '::='
    """)
    assert [r.symbol for r in grammar] == ['ebnf', 'declaration', 'pass',
                                           'LHS']
    assert [r.kind for r in grammar] == [RULE, RULE, RULE, TERMINAL]
    assert grammar.get_rule('pass').expr == Sequence([
        Literal('@pass'), SymbolRef('expression')])
    assert grammar.get_rule_by_id('1').expr == ZeroOrMore(
        Alternation([SymbolRef('declaration'), SymbolRef('rule')]))
    assert grammar.get_rule_by_id('1').orig == \
        '[1] ebnf ::= (declaration | rule)*'
    assert grammar.get_rule_by_id('1').location.line == 2


def test_terminals_directive():
    grammar = Grammar.from_string("""
    [1] a ::= b
    @terminals
    [2] b ::= c d
    [3] c ::= 'c'
    """)
    assert [r.kind for r in grammar] == [RULE, TERMINAL, TERMINAL]


def test_pass_directive():
    grammar = Grammar.from_string("""
    [1] a ::= 'a'+
    @pass [ \t]+
    """)
    assert len(grammar) == 2
    pass_rule = grammar[1]
    assert pass_rule.kind == PASS
    assert pass_rule.symbol is None
    assert pass_rule.id == '0.pass'
    assert pass_rule.expr == OneOrMore(CharRange(' \t'))
    assert grammar.symbols == ['a']


def test_pass_directive_with_definition_operator():
    grammar = Grammar.from_string("@pass ::= [ ]+")
    assert grammar[0].expr == OneOrMore(CharRange(' '))


def test_multiple_pass_directives():
    with pytest.raises(GrammarError) as e:
        Grammar.from_string("@pass [ ]+\n@pass [\t]+")
    assert 'Multiple @pass directives' in e.value.message


def test_duplicate_rule_ids():
    with pytest.raises(GrammarError) as e:
        Grammar.from_string("[1] a ::= b\n[1] c ::= d", file_name='g.ebnf')
    assert 'Rule id "1" already used by rule "a"' in e.value.message
    assert str(e.value.location) == 'g.ebnf:2'


def test_rule_parse_error_location():
    with pytest.raises(ParseError) as e:
        Grammar.from_string("[1] a ::= b\n\n[2] c ::= 'd", file_name='g.ebnf')
    assert e.value.location.line == 3
    assert 'unterminated string literal' in e.value.message


def test_empty_grammar():
    grammar = Grammar.from_string("/* nothing here */")
    assert len(grammar) == 0
    assert grammar.to_struct() == []


def test_trace_output():
    messages = []
    Grammar.from_string("[1] a ::= b?", debug=messages.append)
    assert "[1]rule string: '[1] a ::= b?'" in messages
    assert any(m.startswith('[1]rule: Rule(') for m in messages)


def test_grammar_from_file():
    grammar = Grammar.from_file(os.path.join(this_folder, 'grammars',
                                             'turtle.ebnf'))
    assert len(grammar) == 26
    assert grammar.file_name.endswith('turtle.ebnf')
    assert grammar[0].to_struct() == ('turtleDoc', '1', RULE,
                                      ('star', 'statement'))
    assert grammar.get_rule('INTEGER').to_struct() == (
        'INTEGER', '19', TERMINAL,
        ('seq', ('opt', ('range', '+-')), ('plus', ('range', '0-9'))))
    assert grammar.get_rule('WS').expr == Alternation([
        HexCharRef('#x20'), HexCharRef('#x9'), HexCharRef('#xD'),
        HexCharRef('#xA')])
    assert grammar.get_rule('PNAME_NS').expr == Sequence([
        Optional(SymbolRef('PN_PREFIX')), Literal(':')])
    assert grammar[-1].kind == PASS
    assert grammar.get_rule('BlankNode').kind == RULE
    assert grammar.get_rule('iri').location.line == 18


def test_make_bnf_keeps_source_grammar():
    grammar = Grammar.from_string("[1] a ::= b?")
    bnf = grammar.make_bnf()
    assert grammar[0].expr == Optional(SymbolRef('b'))
    assert bnf[0].symbol == EMPTY
    assert bnf.get_rule('a').expr == Alternation([SymbolRef(EMPTY),
                                                  SymbolRef('b')])
