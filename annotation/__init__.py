"""
Layer 0: Annotation Grammar

Tokenizer and recursive-descent parser for EmmyLua-style doc comments
(``@class``, ``@param``, ``@return``, ``@field`` ...). Turns the text of one
comment into a typed ``Attr`` value or a plain markdown part.
"""

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
)
from annotation.parser import (
    DocCommentParser,
    InvalidTypeExpressionError,
    parse_comment,
    parse_type_string,
    try_class,
    try_type,
)
from annotation.tokenizer import Tokenizer
from annotation.tokens import AtomKind, Punct, Tag, Token, TokenKind

__all__ = [
    # Tokens
    "Tokenizer",
    "Token",
    "TokenKind",
    "Tag",
    "Punct",
    "AtomKind",
    # Types
    "ANY",
    "Type",
    "SingleType",
    "FunType",
    "UnionType",
    "ArrayType",
    "ParameterizedType",
    # Attributes
    "Attr",
    "ClassAttr",
    "TypeAttr",
    "AliasAttr",
    "ParamAttr",
    "ReturnAttr",
    "FieldAttr",
    "GenericAttr",
    "VarArgAttr",
    "LangAttr",
    "SeeAttr",
    "UnknownAttr",
    "Generic",
    "Visibility",
    # Classified comments
    "SingleCommentPart",
    "MarkdownPart",
    "AttrPart",
    # Parsing
    "DocCommentParser",
    "InvalidTypeExpressionError",
    "parse_comment",
    "parse_type_string",
    "try_type",
    "try_class",
]
