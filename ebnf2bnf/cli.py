#!/usr/bin/env python
import sys
import click
from ebnf2bnf import EBNFError, Grammar
from ebnf2bnf.termui import prints, a_print, h_print
import ebnf2bnf.termui as t

FORMATS = ['sxp', 'ttl']


@click.group()
@click.option('--debug', default=False, is_flag=True,
              help="Debug/trace output.")
@click.option('--no-colors', default=False, is_flag=True,
              help="Disable output coloring.")
@click.pass_context
def ebnf(ctx, debug, no_colors):
    """
    Command line interface for working with W3C EBNF grammars.
    """
    t.colors = not no_colors
    ctx.obj = {'debug': debug, 'colors': not no_colors}


@ebnf.command()
@click.argument('grammar_file', type=click.Path(exists=True))
@click.option('--bnf', default=False, is_flag=True,
              help="Transform the grammar to BNF.")
@click.pass_context
def check(ctx, grammar_file, bnf):
    """
    Load the grammar and report its rules.
    """
    grammar = load_grammar(grammar_file, ctx.obj['debug'], bnf)
    if ctx.obj['debug']:
        grammar.print_debug()
    kinds = {}
    for rule in grammar:
        kinds[rule.kind] = kinds.get(rule.kind, 0) + 1
    h_print('Rules:', ', '.join(f'{count} {kind}'
                                for kind, count in sorted(kinds.items())))
    h_print("Grammar OK.")


@ebnf.command()
@click.argument('grammar_file', type=click.Path(exists=True))
@click.option('--bnf', default=False, is_flag=True,
              help="Transform the grammar to BNF.")
@click.option('--format', '-f', 'output_format', default='sxp',
              type=click.Choice(FORMATS), help="Output format.")
@click.option('--prefix', '-p', default='ebnf',
              help="Namespace prefix for Turtle output.")
@click.option('--namespace', '-n', default='http://example.org/grammar#',
              help="Namespace URI for Turtle output.")
@click.option('--output', '-o', type=click.Path(),
              help="Output file. Standard output if not given.")
@click.pass_context
def dump(ctx, grammar_file, bnf, output_format, prefix, namespace, output):
    """
    Write the grammar as S-expressions or Turtle.
    """
    grammar = load_grammar(grammar_file, ctx.obj['debug'], bnf)
    if output_format == 'ttl':
        result = grammar.to_ttl(prefix, namespace)
    else:
        result = grammar.to_sxp()

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(result + '\n')
        prints(f"Created {output_format} file {output}")
    else:
        click.echo(result)


def load_grammar(grammar_file, debug, bnf):
    try:
        grammar = Grammar.from_file(grammar_file, debug=debug)
        if bnf:
            grammar = grammar.make_bnf(debug=debug)
    except EBNFError as e:
        a_print("Error in the grammar file.")
        prints(str(e))
        sys.exit(1)
    return grammar


if __name__ == '__main__':
    ebnf()
