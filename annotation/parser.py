"""
Recursive-descent parser for EmmyLua annotation comments.

``DocCommentParser`` reads tokens from a ``Tokenizer`` with one token of
lookahead and builds one ``Attr`` per comment. The grammar is permissive:
missing or malformed type text becomes the ``any`` placeholder and unknown
tags become ``UnknownAttr``. Only the strict ``parse_type_string`` entry
point reports malformed input, by raising ``InvalidTypeExpressionError``.
"""

import logging
from typing import List, Optional, Tuple

from annotation.models import (
    ANY,
    AliasAttr,
    ArrayType,
    Attr,
    AttrPart,
    ClassAttr,
    FieldAttr,
    FunType,
    Generic,
    GenericAttr,
    LangAttr,
    MarkdownPart,
    ParamAttr,
    ParameterizedType,
    ReturnAttr,
    SeeAttr,
    SingleCommentPart,
    SingleType,
    Type,
    TypeAttr,
    UnionType,
    UnknownAttr,
    VarArgAttr,
    Visibility,
    union_of,
)
from annotation.tokenizer import Tokenizer
from annotation.tokens import FUN_START_TEXT, Punct, Tag, Token, TokenKind, is_punct

logger = logging.getLogger(__name__)

VISIBILITY_KEYWORDS = {vis.value: vis for vis in Visibility}


class InvalidTypeExpressionError(ValueError):
    """Raised by the strict type entry points for malformed type text."""


class DocCommentParser:
    """Parse one comment body into a classified comment part.

    Args:
        text: Comment text with the host-language comment markers removed.
        strict: When True, malformed type expressions raise
            ``InvalidTypeExpressionError`` instead of degrading to ``any``.

    Example:
        >>> DocCommentParser("@param name string the name").parse()
        AttrPart(attr=ParamAttr(name='name', ty=SingleType(name='string'), comment='the name'))
    """

    def __init__(self, text: str, strict: bool = False):
        self._tokenizer = Tokenizer(text)
        self._strict = strict
        self._last_end = 0
        self._peek: Optional[Token] = self._tokenizer.next_token()

    @property
    def peek(self) -> Optional[Token]:
        return self._peek

    def parse(self) -> Optional[SingleCommentPart]:
        """Classify the comment and parse its attribute, if it has one.

        Returns:
            ``AttrPart`` when the first token is a tag, ``MarkdownPart`` holding
            the whole original text otherwise, or None for blank text.
        """
        token = self.next_token()
        if token is None:
            return None
        if token.kind is not TokenKind.TAG:
            return MarkdownPart(self._tokenizer.text)
        return AttrPart(self._dispatch(token))

    def next_token(self) -> Optional[Token]:
        """Consume the lookahead token and buffer the next one."""
        current = self._peek
        if current is not None:
            self._last_end = current.end
        self._peek = self._tokenizer.next_token()
        return current

    def _dispatch(self, token: Token) -> Attr:
        handlers = {
            Tag.CLASS: self.class_,
            Tag.TYPE: self.type_,
            Tag.ALIAS: self.alias,
            Tag.PARAM: self.param,
            Tag.RETURN: self.return_,
            Tag.FIELD: self.field,
            Tag.GENERIC: self.generic,
            Tag.VARARG: self.var_arg,
            Tag.LANG: self.lang,
            Tag.SEE: self.see,
        }
        handler = handlers.get(token.tag)
        if handler is None:
            logger.debug("Unknown annotation tag %r", token.text)
            return UnknownAttr(token.text)
        return handler()

    # ------------------------------------------------------------------
    # Attribute handlers
    # ------------------------------------------------------------------

    def class_(self) -> ClassAttr:
        ty = self.parse_type()
        parent_ty = None
        if is_punct(self._peek, Punct.COLON):
            self.next_token()
            parent_ty = self.parse_type()
        return ClassAttr(ty=ty, parent_ty=parent_ty, comment=self.comment())

    def type_(self) -> TypeAttr:
        return TypeAttr(ty=self.parse_type(), comment=self.comment())

    def alias(self) -> AliasAttr:
        new_name = self.ident()
        return AliasAttr(new_name=new_name, old_name=self.parse_type())

    def param(self) -> ParamAttr:
        name = self.ident()
        ty = self.parse_type()
        return ParamAttr(name=name, ty=ty, comment=self.comment())

    def return_(self) -> ReturnAttr:
        return ReturnAttr(ty=self.parse_type(), comment=self.comment())

    def field(self) -> FieldAttr:
        vis = Visibility.PUBLIC
        if self._peek is not None and self._peek.is_word():
            keyword = VISIBILITY_KEYWORDS.get(self._peek.text)
            if keyword is not None:
                self.next_token()
                vis = keyword
        name = self.ident()
        ty = self.parse_type()
        return FieldAttr(vis=vis, name=name, ty=ty, comment=self.comment())

    def generic(self) -> GenericAttr:
        generics: List[Generic] = []
        while True:
            name = self.ident()
            ty = None
            if is_punct(self._peek, Punct.COLON):
                self.next_token()
                ty = self.parse_type()
            generics.append(Generic(name=name, ty=ty))
            if not is_punct(self._peek, Punct.COMMA):
                break
            self.next_token()
        return GenericAttr(tuple(generics))

    def var_arg(self) -> VarArgAttr:
        return VarArgAttr(self.parse_type())

    def lang(self) -> LangAttr:
        return LangAttr(name=self.comment())

    def see(self) -> SeeAttr:
        return SeeAttr(self.comment())

    # ------------------------------------------------------------------
    # Type expressions
    # ------------------------------------------------------------------

    def parse_type(self) -> Type:
        """Parse one type expression, folding ``|`` alternatives into a union."""
        ty = self._base_type()
        while is_punct(self._peek, Punct.PIPE):
            self.next_token()
            ty = union_of(ty, self._base_type())
        return ty

    def _base_type(self) -> Type:
        token = self.next_token()
        if token is None:
            return self._placeholder("end of input")
        if token.is_fun_start():
            return self._suffixes(self.fun_type())
        if token.is_word():
            return self._suffixes(self._parameterized(token))
        return self._placeholder(repr(token.text))

    def _parameterized(self, name_token: Token) -> Type:
        if not self._touching(Punct.LESS):
            return SingleType(name_token.text)
        self.next_token()
        args: List[Type] = []
        while self._peek is not None and not is_punct(self._peek, Punct.GREATER):
            args.append(self.parse_type())
            if is_punct(self._peek, Punct.COMMA):
                self.next_token()
        self._close(Punct.GREATER, "type argument list")
        return ParameterizedType(name_token.text, tuple(args))

    def _suffixes(self, ty: Type) -> Type:
        while self._touching(Punct.ARRAY):
            self.next_token()
            ty = ArrayType(ty)
        return ty

    def fun_type(self) -> FunType:
        """Parse the rest of a function type after its ``fun(`` token."""
        args: List[Tuple[str, Type]] = []
        while self._peek is not None and not is_punct(self._peek, Punct.CLOSE_PAREN):
            args.append(self.fun_arg())
            if is_punct(self._peek, Punct.COMMA):
                self.next_token()
        self._close(Punct.CLOSE_PAREN, "function type")
        ret: Type = ANY
        if is_punct(self._peek, Punct.COLON):
            self.next_token()
            ret = self.parse_type()
        return FunType(args=tuple(args), ret=ret)

    def fun_arg(self) -> Tuple[str, Type]:
        name = self.ident()
        ty: Type = ANY
        if is_punct(self._peek, Punct.COLON):
            self.next_token()
            ty = self.parse_type()
        return name, ty

    def ident(self) -> str:
        """Consume one token as a name; non-atoms yield an empty name."""
        token = self.next_token()
        if token is None or token.kind is not TokenKind.ATOM:
            if self._strict:
                raise InvalidTypeExpressionError(
                    f"Expected a name in {self._tokenizer.text!r}"
                )
            return ""
        if token.is_fun_start():
            return FUN_START_TEXT
        return token.text

    def comment(self) -> str:
        """Untokenized remainder of the text from the first unconsumed token."""
        start = self._peek.start if self._peek is not None else self._tokenizer.pos
        return self._tokenizer.text[start:].strip()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _close(self, punct: Punct, construct: str) -> None:
        if is_punct(self._peek, punct):
            self.next_token()
            return
        # End of input implicitly closes the construct
        if self._strict:
            raise InvalidTypeExpressionError(
                f"Unterminated {construct} in {self._tokenizer.text!r}"
            )
        logger.debug("Unterminated %s in %r", construct, self._tokenizer.text)

    def _touching(self, punct: Punct) -> bool:
        """Lookahead is ``punct`` with no whitespace before it."""
        return (
            self._peek is not None
            and self._peek.is_punct(punct)
            and self._peek.start == self._last_end
        )

    def _placeholder(self, what: str) -> Type:
        if self._strict:
            raise InvalidTypeExpressionError(
                f"Expected a type name, got {what} in {self._tokenizer.text!r}"
            )
        return ANY


def parse_comment(text: str) -> Optional[SingleCommentPart]:
    """Classify a single comment as an annotation or plain markdown.

    Args:
        text: Comment body without comment delimiters.

    Returns:
        ``AttrPart`` for tagged comments, ``MarkdownPart`` with the full
        original text for prose, or None when the text is blank.
    """
    return DocCommentParser(text).parse()


def parse_type_string(text: str) -> Type:
    """Parse a complete type expression, rejecting malformed input.

    Raises:
        InvalidTypeExpressionError: If the text is blank, does not start with a
            type name, leaves a function type or type argument list open, or
            has tokens left over after the type.

    Example:
        >>> parse_type_string("string|nil")
        UnionType(members=(SingleType(name='string'), SingleType(name='nil')))
    """
    if not text.strip():
        raise InvalidTypeExpressionError("Empty type expression")
    parser = DocCommentParser(text, strict=True)
    ty = parser.parse_type()
    if parser.peek is not None:
        raise InvalidTypeExpressionError(
            f"Unexpected {parser.peek.text!r} after type in {text!r}"
        )
    return ty


def _split_word(s: str, stops: str = "") -> Tuple[str, str]:
    """Split ``s`` at the first whitespace or ``stops`` character."""
    for idx, ch in enumerate(s):
        if ch.isspace() or ch in stops:
            return s[:idx], s[idx:]
    return s, ""


def try_type(text: str) -> Optional[TypeAttr]:
    """Line-oriented ``@type`` fallback working on raw substrings.

    Only unions accumulate here: ``string|nil rest`` yields a ``TypeAttr``
    but a lone ``string`` with no ``|`` yields None. Whether the lone form
    should also produce an attribute is an open question, so the behaviour
    is kept as is.

    Raises:
        InvalidTypeExpressionError: If one of the alternatives is malformed.
    """
    s = text.strip()
    pieces: List[str] = []
    while True:
        piece, s = _split_word(s, "|")
        pieces.append(piece)
        if not s.startswith("|"):
            break
        s = s[1:]
    if len(pieces) < 2:
        return None
    ty = UnionType(tuple(parse_type_string(piece) for piece in pieces))
    return TypeAttr(ty=ty, comment=s.strip())


def try_class(text: str) -> Optional[ClassAttr]:
    """Line-oriented ``@class`` fallback: ``Name[: Parent] comment``."""
    s = text.strip()
    if not s:
        return None
    name, rem = _split_word(s, ":")
    rem = rem.lstrip()
    parent_ty = None
    if rem.startswith(":"):
        parent, rem = _split_word(rem[1:].lstrip())
        if parent:
            parent_ty = SingleType(parent)
    return ClassAttr(ty=SingleType(name), parent_ty=parent_ty, comment=rem.strip())
