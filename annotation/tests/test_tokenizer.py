"""
Unit tests for tokenizer.py

Tests tag resolution, punctuation, atom scanning and cursor tracking.
"""

import unittest

from annotation.tokenizer import Tokenizer
from annotation.tokens import AtomKind, Punct, Tag, TokenKind


def _texts(text):
    return [token.text for token in Tokenizer(text)]


class TestTags(unittest.TestCase):
    """Test ``@tag`` recognition."""

    def test_known_tags(self):
        """Each of the ten known tags resolves to its member."""
        cases = {
            "@class": Tag.CLASS,
            "@type": Tag.TYPE,
            "@alias": Tag.ALIAS,
            "@param": Tag.PARAM,
            "@return": Tag.RETURN,
            "@field": Tag.FIELD,
            "@generic": Tag.GENERIC,
            "@vararg": Tag.VARARG,
            "@lang": Tag.LANG,
            "@see": Tag.SEE,
        }
        for text, tag in cases.items():
            token = Tokenizer(text).next_token()
            self.assertEqual(token.kind, TokenKind.TAG)
            self.assertEqual(token.tag, tag, text)

    def test_unknown_tag_keeps_raw_text(self):
        token = Tokenizer("@foo bar").next_token()
        self.assertEqual(token.tag, Tag.UNKNOWN)
        self.assertEqual(token.text, "@foo")

    def test_tag_match_is_case_sensitive(self):
        token = Tokenizer("@Param x").next_token()
        self.assertEqual(token.tag, Tag.UNKNOWN)

    def test_tag_runs_to_whitespace(self):
        """Punctuation does not end a tag."""
        token = Tokenizer("@param:x y").next_token()
        self.assertEqual(token.tag, Tag.UNKNOWN)
        self.assertEqual(token.text, "@param:x")


class TestPunctuation(unittest.TestCase):
    """Test punctuation tokens."""

    def test_all_punct(self):
        tokens = list(Tokenizer("| , : < > ) []"))
        self.assertTrue(all(t.kind == TokenKind.PUNCT for t in tokens))
        self.assertEqual(
            [t.punct for t in tokens],
            [
                Punct.PIPE,
                Punct.COMMA,
                Punct.COLON,
                Punct.LESS,
                Punct.GREATER,
                Punct.CLOSE_PAREN,
                Punct.ARRAY,
            ],
        )

    def test_array_suffix_splits_from_name(self):
        self.assertEqual(_texts("string[]"), ["string", "[]"])

    def test_lone_bracket_is_text(self):
        """'[' without ']' folds into the following atom."""
        tokens = list(Tokenizer("[optional] x"))
        self.assertEqual(tokens[0].kind, TokenKind.ATOM)
        self.assertEqual(tokens[0].text, "[optional]")
        self.assertEqual(tokens[1].text, "x")

    def test_union_without_spaces(self):
        self.assertEqual(_texts("string|number|nil"), ["string", "|", "number", "|", "nil"])


class TestAtoms(unittest.TestCase):
    """Test atom scanning and the ``fun(`` marker."""

    def test_fun_start(self):
        tokens = list(Tokenizer("fun(a: string): boolean"))
        self.assertEqual(tokens[0].atom, AtomKind.FUN_START)
        self.assertEqual(tokens[0].text, "fun(")
        self.assertEqual(
            [t.text for t in tokens[1:]],
            ["a", ":", "string", ")", ":", "boolean"],
        )

    def test_fun_prefix_in_longer_word_is_plain_text(self):
        tokens = list(Tokenizer("funny(x)"))
        self.assertEqual(tokens[0].atom, AtomKind.WORD)
        self.assertEqual(tokens[0].text, "funny(x")
        self.assertEqual(tokens[1].punct, Punct.CLOSE_PAREN)

    def test_bare_fun_is_word(self):
        token = Tokenizer("fun x").next_token()
        self.assertEqual(token.atom, AtomKind.WORD)
        self.assertEqual(token.text, "fun")

    def test_non_alpha_start_becomes_atom(self):
        self.assertEqual(_texts("123 ... 'quoted'"), ["123", "...", "'quoted'"])

    def test_at_inside_word_is_kept(self):
        self.assertEqual(_texts("user@example.com"), ["user@example.com"])

    def test_unicode_word(self):
        self.assertEqual(_texts("  héllo wörld "), ["héllo", "wörld"])


class TestCursor(unittest.TestCase):
    """Test the cursor used for trailing-comment recovery."""

    def test_offsets_slice_source(self):
        text = "@param  name   string"
        for token in Tokenizer(text):
            self.assertEqual(text[token.start:token.end], token.text)

    def test_pos_tracks_consumption(self):
        tokenizer = Tokenizer("abc def")
        self.assertEqual(tokenizer.pos, 0)
        tokenizer.next_token()
        self.assertEqual(tokenizer.pos, 3)
        tokenizer.next_token()
        self.assertEqual(tokenizer.pos, 7)
        self.assertIsNone(tokenizer.next_token())

    def test_empty_and_whitespace(self):
        self.assertEqual(list(Tokenizer("")), [])
        self.assertEqual(list(Tokenizer(" \t\n ")), [])

    def test_always_terminates(self):
        """Every character is consumed by some token."""
        text = "@@ [[ ]] (( )) ,,:: <<>> fun( fun(( |"
        tokens = list(Tokenizer(text))
        self.assertGreater(len(tokens), 0)
        self.assertEqual(
            "".join(text.split()),
            "".join(t.text for t in tokens),
        )


if __name__ == "__main__":
    unittest.main()
