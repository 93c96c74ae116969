"""
Splitting of the grammar text into rule and directive spans.
"""
import logging
import re

from ebnf2bnf.common import Location, text_context
from ebnf2bnf.exceptions import ParseError

logger = logging.getLogger(__name__)

TERMINALS_DIRECTIVE = '@terminals'
PASS_DIRECTIVE = '@pass'

SEGMENT_RE = re.compile(r'''
      (?P<ws>\s+)
    | (?P<comment>/\*.*?\*/)
    | (?P<open_comment>/\*)
    | (?P<literal>'[^'\n]*'|"[^"\n]*")
    | (?P<terminals>@terminals\b)
    | (?P<pass>@pass\b)
    | (?P<rule>\[[\w.]+\](?=\s*\w+\s*::=))
    | (?P<cclass>\[[^\]\n]*\])
    | (?P<text>[^\s/@\['"]+|.)
''', re.VERBOSE | re.DOTALL)


class Span:
    """
    Raw text of a single rule or directive.

    Attributes:
    text(str): Span text without comments and surrounding whitespace.
    line(int): 1-based line where the span starts.
    """
    __slots__ = ['text', 'line']

    def __init__(self, text, line):
        self.text = text
        self.line = line

    def is_terminals(self):
        return self.text == TERMINALS_DIRECTIVE

    def is_pass(self):
        return self.text.startswith(PASS_DIRECTIVE)

    def __eq__(self, other):
        return isinstance(other, Span) and self.text == other.text \
            and self.line == other.line

    def __repr__(self):
        return f'Span({self.text!r}, {self.line})'


class Segmenter:
    """
    Splits grammar text into spans.

    A new span starts at a rule number (`[12]`) followed by `symbol ::=`, and
    at the `@pass` directive. `@terminals` is a span by itself. Comments are
    removed wherever they appear. Quoted literals and character classes are
    taken as a whole, so their content never starts a span or a comment.
    """
    def __init__(self, file_name=None):
        self.file_name = file_name

    def spans(self, text):
        lineno = 1
        start_line = None
        parts = []
        # Text found outside of any rule, e.g. a heading before the first
        # rule or text following @terminals.
        stray = []
        stray_line = None
        for match in SEGMENT_RE.finditer(text):
            kind = match.lastgroup
            value = match.group()

            if kind == 'open_comment':
                raise ParseError(Location(self.file_name, lineno),
                                 'unterminated comment',
                                 text=text[match.start():])

            if kind in ('terminals', 'pass', 'rule'):
                self._report_stray(stray, stray_line)
                stray = []
                span = self._make_span(parts, start_line)
                if span:
                    yield span
                parts = [value]
                start_line = lineno
                if kind == 'terminals':
                    yield Span(value, lineno)
                    parts = []
                    start_line = None

            elif start_line is None:
                if kind in ('text', 'literal', 'cclass'):
                    if not stray:
                        stray_line = lineno
                    stray.append(value)
                elif stray:
                    stray.append(' ')

            elif kind == 'comment':
                parts.append(' ')

            else:
                parts.append(value)

            lineno += value.count('\n')

        self._report_stray(stray, stray_line)
        span = self._make_span(parts, start_line)
        if span:
            yield span

    def _report_stray(self, stray, line):
        if stray:
            logger.warning('%s: skipping text outside of a rule "%s"',
                           Location(self.file_name, line),
                           text_context(''.join(stray), 40))

    def _make_span(self, parts, start_line):
        text = ''.join(parts).strip()
        if text:
            return Span(text, start_line)
        return None


def segment(text, file_name=None):
    "Returns the list of spans of the given grammar text."
    return list(Segmenter(file_name).spans(text))
