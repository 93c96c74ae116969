from ebnf2bnf import termui
from ebnf2bnf.termui import s_attention as _a


class Location:
    """
    Represents a location of a rule in the grammar source.

    Locations are tracked per rule span, not per character, so the line is
    the line where the rule (or directive) starts.

    Attributes:
    file_name(str): The name (path) to the file this location refers to.
    line(int): 1-based line of the start of the rule span.
    """

    __slots__ = ['file_name', 'line']

    def __init__(self, file_name=None, line=None):
        self.file_name = file_name
        self.line = line

    def __str__(self):
        if self.line is not None:
            if self.file_name:
                return f"{self.file_name}:{self.line}"
            return f"line {self.line}"
        if self.file_name:
            return _a(self.file_name)
        return "<Unknown location>"

    def __repr__(self):
        return str(self)


def replace_newlines(in_str):
    return in_str.replace("\n", "\\n")


def text_context(text, length=20):
    """
    Returns the start of the given text, shortened for error messages.
    """
    text = text.strip()
    if len(text) > length:
        text = text[:length] + "..."
    return replace_newlines(text)


def no_debug(message):
    pass


def stderr_debug(message):
    termui.prints(message, err=True)


def make_debug_sink(debug):
    """
    Returns a callable accepting trace messages.

    `debug` may be a false value (trace is discarded), `True` (trace is
    printed to stderr) or any callable accepting a single string.
    """
    if not debug:
        return no_debug
    if callable(debug):
        return debug
    return stderr_debug
