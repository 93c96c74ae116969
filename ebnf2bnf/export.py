"""
Textual renderings of grammars: S-expressions and Turtle.
"""
import re

from ebnf2bnf.expr import CharRange, HexCharRef, Literal, SymbolRef
from ebnf2bnf.grammar import EMPTY, RULE, TERMINAL

TTL_HEADER = '''\
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#>.
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#>.
@prefix {prefix}: <{ns}>.
@prefix : <{ns}>.
@prefix re: <http://www.w3.org/2000/10/swap/grammar/regex#>.
@prefix g: <http://www.w3.org/2000/10/swap/grammar/ebnf#>.

:language rdfs:isDefinedBy <>; g:start :{start}.
'''

HEX_RE = re.compile(r'#x([0-9a-fA-F]+)')


def str_escape(s):
    "Escapes a string for a double-quoted literal."
    return s.replace('\\', '\\\\').replace('"', '\\"')


def sxp_expr(expr):
    if isinstance(expr, SymbolRef):
        return expr.name
    if isinstance(expr, Literal):
        return f'({expr.tag} "{str_escape(expr.text)}")'
    if isinstance(expr, (CharRange, HexCharRef)):
        return f'({expr.tag} "{str_escape(expr.spec)}")'
    operands = [sxp_expr(op) for op in expr.operands()]
    return '({})'.format(' '.join([expr.tag] + operands))


def rule_sxp(rule):
    symbol = rule.symbol if rule.symbol is not None else 'nil'
    return f'({symbol} "{rule.id}" {rule.kind} {sxp_expr(rule.expr)})'


def grammar_sxp_export(grammar):
    """
    Returns the rules of the grammar as an S-expression, one rule per line:

        ((empty "0" rule (seq))
         (foo "1" rule (seq _foo_term1 _foo_1)))
    """
    if not len(grammar):
        return '()'
    return '(' + '\n '.join(rule_sxp(rule) for rule in grammar) + ')'


def cclass(txt):
    """
    Turns an XML BNF character class into a regular expression character
    class with `\\u`/`\\U` escapes for hex references.

        >>> cclass("#x0300-#x036F")
        '[\\\\u0300-\\\\u036F]'
        >>> cclass("^#x22#x5C#x0A#x0D")
        '[^\\\\u0022\\\\u005C\\\\u000A\\\\u000D]'
    """
    def repl(match):
        hx = match.group(1)
        if len(hx) <= 4:
            return '\\u' + hx.rjust(4, '0')
        if len(hx) <= 8:
            return '\\U' + hx.rjust(8, '0')
        return match.group()
    return '[' + HEX_RE.sub(repl, txt) + ']'


def ttl_comment(orig):
    """
    Escapes rule source text for a long (triple quoted) string. Quotes at
    the start and the end are escaped so they don't merge with the string
    delimiters.
    """
    comment = orig.strip().replace('\\', '\\\\').replace('"""', '\\"\\"\\"')
    if comment.startswith('"'):
        comment = '\\' + comment
    if comment.endswith('"'):
        body = comment[:-1]
        # An odd run of backslashes already escapes the quote.
        if (len(body) - len(body.rstrip('\\'))) % 2 == 0:
            comment = body + '\\"'
    return comment


def ttl_expr(expr, pfx, depth, is_obj=True):
    indent = '  ' * depth
    if is_obj:
        bra, ket = '[ ', ' ]'
    else:
        bra = ket = ''

    statements = []
    if expr.tag in ('seq', 'alt', 'diff'):
        statements.append(f'{indent}{bra}{pfx}:{expr.tag} (')
        for operand in expr.operands():
            statements.extend(ttl_expr(operand, pfx, depth + 1))
        statements.append(f'{indent} ){ket}')
    elif expr.tag in ('opt', 'plus', 'star'):
        statements.append(f'{indent}{bra}{pfx}:{expr.tag} ')
        statements.extend(ttl_expr(expr.child, pfx, depth + 1))
        if ket:
            statements.append(f'{indent} {ket}')
    elif isinstance(expr, Literal):
        statements.append(f'{indent}"{str_escape(expr.text)}"')
    elif isinstance(expr, (CharRange, HexCharRef)):
        regex = str_escape(cclass(expr.spec))
        statements.append(f'{indent}{bra} re:matches "{regex}" {ket}')
    else:
        name = 'g:empty' if expr.name == EMPTY else f':{expr.name}'
        if is_obj:
            statements.append(f'{indent}{name}')
        else:
            statements.append(f'{indent}g:seq ( {name} )')

    if not is_obj:
        statements[-1] += ' .'
    return statements


def rule_ttl(rule):
    statements = [
        f':{rule.id} rdfs:label "{rule.id}"; rdf:value "{rule.symbol}";',
    ]
    if rule.orig is not None:
        statements.append(f'  rdfs:comment """{ttl_comment(rule.orig)}""";')
    pfx = 're' if rule.kind == TERMINAL else 'g'
    statements.extend(ttl_expr(rule.expr, pfx, 1, is_obj=False))
    return '\n' + '\n'.join(statements)


def grammar_ttl_export(grammar, prefix, ns):
    """
    Returns the grammar in Turtle using the EBNF vocabulary of
    http://www.w3.org/2000/10/swap/grammar/ebnf. Pass-through rules are
    not exported.
    """
    if not len(grammar):
        return ''
    header = TTL_HEADER.format(prefix=prefix, ns=ns, start=grammar[0].id)
    return header + '\n'.join(rule_ttl(rule) for rule in grammar
                              if rule.kind in (RULE, TERMINAL))
