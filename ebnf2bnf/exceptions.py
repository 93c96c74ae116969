from typing import Optional

from ebnf2bnf.common import Location, text_context
from ebnf2bnf.termui import s_attention as err
from ebnf2bnf.termui import s_header as _


class EBNFError(Exception):
    def __init__(self, location: Optional[Location],
                 message: str,
                 error_type: str = err("error"),
                 hint: Optional[str] = None):

        self.location = location if location is not None else Location()
        self.message = message
        self.error_type = error_type
        self.hint = hint

        hint = _(f"  hint: {hint}") if hint else None

        self.full_message = "\n".join(
            filter(None, [f"{error_type}: {message}", hint]))
        super().__init__(self.full_message)

    def __str__(self):
        return f"{self.location}: {self.full_message}"


class ParseError(EBNFError):
    """
    Raised when the grammar text can't be split into rules or when a rule
    right-hand side can't be parsed.

    Attributes:
    text(str): The offending part of the input, if known.
    """
    def __init__(self, location: Optional[Location], message: str,
                 text: Optional[str] = None, hint: Optional[str] = None):
        self.text = text
        if text is not None:
            message = f'{message} at "{text_context(text)}"'
        super().__init__(location, message, error_type=err("parse error"),
                         hint=hint)


class GrammarError(EBNFError):
    def __init__(self, location, message):
        super().__init__(location, message, error_type=err("grammar error"))
