"""
Token model for EmmyLua annotation comments.

Tokens do not copy text out of the comment. Each one records a ``start``/``end``
offset pair into the source string and slices it on demand through ``text``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class TokenKind(Enum):
    """Top-level token category."""

    TAG = "tag"
    PUNCT = "punct"
    ATOM = "atom"


class Tag(Enum):
    """Annotation tags recognised after an ``@`` marker."""

    CLASS = "class"
    TYPE = "type"
    ALIAS = "alias"
    PARAM = "param"
    RETURN = "return"
    FIELD = "field"
    GENERIC = "generic"
    VARARG = "vararg"
    LANG = "lang"
    SEE = "see"
    UNKNOWN = "unknown"


# Exact, case-sensitive lookup of the name following '@'
KNOWN_TAGS: Dict[str, Tag] = {
    tag.value: tag for tag in Tag if tag is not Tag.UNKNOWN
}


class Punct(Enum):
    """Punctuation understood by the type-expression grammar."""

    PIPE = "|"
    COMMA = ","
    COLON = ":"
    LESS = "<"
    GREATER = ">"
    CLOSE_PAREN = ")"
    ARRAY = "[]"


# Single characters that end an atom and are emitted as punctuation.
# '[' only becomes punctuation when followed by ']'.
PUNCT_CHARS: Dict[str, Punct] = {
    "|": Punct.PIPE,
    ",": Punct.COMMA,
    ":": Punct.COLON,
    "<": Punct.LESS,
    ">": Punct.GREATER,
    ")": Punct.CLOSE_PAREN,
}

ARRAY_OPEN = "["
ARRAY_CLOSE = "]"


class AtomKind(Enum):
    """Kinds of atom token."""

    WORD = "word"
    FUN_START = "fun_start"


FUN_KEYWORD = "fun"
FUN_START_TEXT = "fun("


@dataclass(frozen=True)
class Token:
    """A lexical token located by offsets into its comment text.

    Attributes:
        kind: Token category.
        start: Offset of the first character of the token.
        end: Offset one past the last character of the token.
        source: The comment text the offsets point into.
        tag: Resolved tag for ``TokenKind.TAG`` tokens.
        punct: Punctuation member for ``TokenKind.PUNCT`` tokens.
        atom: Atom kind for ``TokenKind.ATOM`` tokens.
    """

    kind: TokenKind
    start: int
    end: int
    source: str = field(repr=False, compare=False)
    tag: Optional[Tag] = None
    punct: Optional[Punct] = None
    atom: Optional[AtomKind] = None

    @property
    def text(self) -> str:
        """Slice of the source text covered by this token."""
        return self.source[self.start:self.end]

    def is_punct(self, punct: Punct) -> bool:
        return self.kind is TokenKind.PUNCT and self.punct is punct

    def is_word(self) -> bool:
        return self.kind is TokenKind.ATOM and self.atom is AtomKind.WORD

    def is_fun_start(self) -> bool:
        return self.kind is TokenKind.ATOM and self.atom is AtomKind.FUN_START


def is_punct(token: Optional[Token], punct: Punct) -> bool:
    """Check an optional lookahead token against a punctuation member."""
    return token is not None and token.is_punct(punct)
