"""
Unit tests for attribute parsing and comment classification.
"""

import unittest

from annotation.models import (
    ANY,
    AliasAttr,
    AttrPart,
    ClassAttr,
    FieldAttr,
    FunType,
    Generic,
    GenericAttr,
    LangAttr,
    MarkdownPart,
    ParamAttr,
    ReturnAttr,
    SeeAttr,
    SingleType,
    TypeAttr,
    UnionType,
    UnknownAttr,
    VarArgAttr,
    Visibility,
)
from annotation.parser import (
    InvalidTypeExpressionError,
    parse_comment,
    try_class,
    try_type,
)

STRING = SingleType("string")
NUMBER = SingleType("number")
NIL = SingleType("nil")


def _attr(text):
    part = parse_comment(text)
    assert isinstance(part, AttrPart), part
    return part.attr


class TestClassification(unittest.TestCase):
    """Test prose vs. annotation decisions."""

    def test_prose_returns_whole_text(self):
        text = "  Creates a new car: fast | cheap  "
        self.assertEqual(parse_comment(text), MarkdownPart(text))

    def test_tag_after_prose_is_still_prose(self):
        text = "see @param below"
        self.assertEqual(parse_comment(text), MarkdownPart(text))

    def test_leading_punct_is_prose(self):
        self.assertEqual(parse_comment(": nope"), MarkdownPart(": nope"))

    def test_blank_returns_none(self):
        self.assertIsNone(parse_comment(""))
        self.assertIsNone(parse_comment("   "))

    def test_idempotent(self):
        text = "@param cb fun(err: string|nil, data: table): boolean called when done"
        self.assertEqual(parse_comment(text), parse_comment(text))


class TestAttributes(unittest.TestCase):
    """Test each tag handler."""

    def test_class_with_parent(self):
        self.assertEqual(
            _attr("@class Car: Vehicle a small car"),
            ClassAttr(ty=SingleType("Car"), parent_ty=SingleType("Vehicle"), comment="a small car"),
        )

    def test_class_without_parent(self):
        self.assertEqual(
            _attr("@class Car"),
            ClassAttr(ty=SingleType("Car"), parent_ty=None, comment=""),
        )

    def test_type(self):
        self.assertEqual(
            _attr("@type string|number|nil the value"),
            TypeAttr(ty=UnionType((STRING, NUMBER, NIL)), comment="the value"),
        )

    def test_alias(self):
        self.assertEqual(
            _attr("@alias Handler fun(ev: string)"),
            AliasAttr(new_name="Handler", old_name=FunType(args=(("ev", STRING),), ret=ANY)),
        )

    def test_param(self):
        self.assertEqual(
            _attr("@param name string the driver's name"),
            ParamAttr(name="name", ty=STRING, comment="the driver's name"),
        )

    def test_param_missing_type(self):
        self.assertEqual(_attr("@param name"), ParamAttr(name="name", ty=ANY, comment=""))

    def test_param_missing_everything(self):
        self.assertEqual(_attr("@param"), ParamAttr(name="", ty=ANY, comment=""))

    def test_param_comment_keeps_punctuation(self):
        attr = _attr("@param x number the x: must be > 0 | nil")
        self.assertEqual(attr.comment, "the x: must be > 0 | nil")

    def test_return(self):
        self.assertEqual(
            _attr("@return boolean|nil ok whether it worked"),
            ReturnAttr(ty=UnionType((SingleType("boolean"), NIL)), comment="ok whether it worked"),
        )

    def test_field_private(self):
        self.assertEqual(
            _attr("@field private x string a comment"),
            FieldAttr(vis=Visibility.PRIVATE, name="x", ty=STRING, comment="a comment"),
        )

    def test_field_protected(self):
        self.assertEqual(_attr("@field protected y number").vis, Visibility.PROTECTED)

    def test_field_explicit_public(self):
        attr = _attr("@field public z number")
        self.assertEqual(attr.vis, Visibility.PUBLIC)
        self.assertEqual(attr.name, "z")

    def test_field_default_public(self):
        self.assertEqual(
            _attr("@field x string"),
            FieldAttr(vis=Visibility.PUBLIC, name="x", ty=STRING, comment=""),
        )

    def test_field_visibility_is_lowercase_only(self):
        attr = _attr("@field Private string")
        self.assertEqual(attr.vis, Visibility.PUBLIC)
        self.assertEqual(attr.name, "Private")

    def test_generic(self):
        self.assertEqual(
            _attr("@generic T: number, U"),
            GenericAttr((Generic(name="T", ty=NUMBER), Generic(name="U", ty=None))),
        )

    def test_generic_stops_at_non_comma(self):
        attr = _attr("@generic K, V : table extra")
        self.assertEqual(
            attr.generics,
            (Generic("K"), Generic("V", SingleType("table"))),
        )

    def test_vararg(self):
        self.assertEqual(_attr("@vararg string|nil"), VarArgAttr(UnionType((STRING, NIL))))

    def test_lang(self):
        self.assertEqual(_attr("@lang  Lua 5.4 "), LangAttr(name="Lua 5.4"))

    def test_see_keeps_text_verbatim(self):
        self.assertEqual(
            _attr("@see some text with : colons | and pipes"),
            SeeAttr("some text with : colons | and pipes"),
        )

    def test_unknown_tag(self):
        self.assertEqual(_attr("@foo bar"), UnknownAttr("@foo"))

    def test_unknown_tag_serializes(self):
        self.assertEqual(parse_comment("@foo bar").to_dict(), {
            "kind": "attr",
            "attr": {"kind": "unknown", "raw": "@foo"},
        })

    def test_unterminated_function_param(self):
        attr = _attr("@param cb fun(a: string")
        self.assertEqual(attr.ty, FunType(args=(("a", STRING),), ret=ANY))
        self.assertEqual(attr.comment, "")


class TestLineOrientedFallbacks(unittest.TestCase):
    """Test ``try_type`` and ``try_class``."""

    def test_try_type_union(self):
        self.assertEqual(
            try_type("string|number|nil"),
            TypeAttr(ty=UnionType((STRING, NUMBER, NIL)), comment=""),
        )

    def test_try_type_union_with_comment(self):
        self.assertEqual(
            try_type("string|nil  maybe a name"),
            TypeAttr(ty=UnionType((STRING, NIL)), comment="maybe a name"),
        )

    def test_try_type_single_yields_nothing(self):
        """A lone type is dropped; only unions accumulate on this path."""
        self.assertIsNone(try_type("string"))
        self.assertIsNone(try_type("string with a comment"))
        self.assertIsNone(try_type(""))

    def test_try_type_malformed_alternative_raises(self):
        with self.assertRaises(InvalidTypeExpressionError):
            try_type("string||nil")

    def test_try_class(self):
        self.assertEqual(
            try_class("Car: Vehicle a small car"),
            ClassAttr(ty=SingleType("Car"), parent_ty=SingleType("Vehicle"), comment="a small car"),
        )
        self.assertEqual(
            try_class("Car : Vehicle"),
            ClassAttr(ty=SingleType("Car"), parent_ty=SingleType("Vehicle"), comment=""),
        )
        self.assertEqual(
            try_class("Car a car"),
            ClassAttr(ty=SingleType("Car"), parent_ty=None, comment="a car"),
        )
        self.assertIsNone(try_class("   "))


if __name__ == "__main__":
    unittest.main()
