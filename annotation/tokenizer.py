"""
Lazy tokenizer for EmmyLua annotation comments.

Turns the text of a single comment into a stream of tag, punctuation and
atom tokens. The tokenizer keeps a cursor into the original text so the
parser can recover untokenized trailing prose verbatim.
"""

from typing import Iterator, Optional

from annotation.tokens import (
    ARRAY_CLOSE,
    ARRAY_OPEN,
    FUN_KEYWORD,
    KNOWN_TAGS,
    PUNCT_CHARS,
    AtomKind,
    Punct,
    Tag,
    Token,
    TokenKind,
)


def is_known_punct(ch: str) -> bool:
    """Check whether a character terminates an atom as punctuation."""
    return ch in PUNCT_CHARS or ch == ARRAY_OPEN


class Tokenizer:
    """Single-pass token iterator over one comment's text.

    Example:
        >>> [t.text for t in Tokenizer("@param cb fun(x: string)")]
        ['@param', 'cb', 'fun(', 'x', ':', 'string', ')']
    """

    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def pos(self) -> int:
        """Offset of the next character the tokenizer has not consumed."""
        return self._pos

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def next_token(self) -> Optional[Token]:
        """Scan the next token, or return None at end of input."""
        self._skip_whitespace()
        ch = self._peek_char()
        if ch is None:
            return None
        if ch == "@":
            return self._tag()
        if ch.isalpha() or ch == "_":
            return self._atom(self._pos)
        if is_known_punct(ch):
            return self._punct()
        return self._atom(self._pos)

    def _tag(self) -> Token:
        start = self._pos
        self._advance()  # '@'
        while True:
            ch = self._peek_char()
            if ch is None or ch.isspace():
                break
            self._advance()
        tag = KNOWN_TAGS.get(self._text[start + 1:self._pos], Tag.UNKNOWN)
        return Token(TokenKind.TAG, start, self._pos, self._text, tag=tag)

    def _punct(self) -> Token:
        start = self._pos
        ch = self._peek_char()
        self._advance()
        if ch == ARRAY_OPEN:
            if self._peek_char() != ARRAY_CLOSE:
                # A lone '[' is ordinary text
                return self._atom(start)
            self._advance()
            return Token(TokenKind.PUNCT, start, self._pos, self._text, punct=Punct.ARRAY)
        return Token(TokenKind.PUNCT, start, self._pos, self._text, punct=PUNCT_CHARS[ch])

    def _atom(self, start: int) -> Token:
        while True:
            ch = self._peek_char()
            if ch is None or ch.isspace() or is_known_punct(ch):
                break
            if ch == "(" and self._text[start:self._pos] == FUN_KEYWORD:
                self._advance()
                return Token(
                    TokenKind.ATOM, start, self._pos, self._text, atom=AtomKind.FUN_START
                )
            self._advance()
        return Token(TokenKind.ATOM, start, self._pos, self._text, atom=AtomKind.WORD)

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def _peek_char(self) -> Optional[str]:
        if self._pos >= len(self._text):
            return None
        return self._text[self._pos]

    def _advance(self) -> None:
        if self._pos < len(self._text):
            self._pos += 1
