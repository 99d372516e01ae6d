"""
Tests for the tinywheel lexer.

Covers:
- Lossless reconstruction of the source from token texts
- Documentation block detection and splitting
- Token positions
- Tokenizer errors
"""

import unittest

from tinywheel.errors import LexError
from tinywheel.lexer import Token, TokenKind, lex


def kinds(tokens):
    return [t.kind for t in tokens]


def doc_tokens(tokens):
    return [t for t in tokens if t.kind is not TokenKind.OTHER]


class TestReconstruction(unittest.TestCase):
    """Token texts must concatenate back to the original source."""

    SOURCES = [
        "",
        "x = 1\n",
        "x = 1",
        "import os\n\n\ndef f(a,  b):\n\treturn a + b  # sum\n",
        "total = 1 + \\\n    2\n",
        '"""\nauthor: Jane\n---\n\n# Tool\n"""\n\nx = 1\n',
        '#!/usr/bin/env python3\n# -*- coding: utf-8 -*-\n"""Docs."""\n',
        "class A:\n    def m(self):\n        pass\n\n\nprint(A)\n",
        "values = [\n    1,\n    2,\n]\n   \n",
        's = r"""raw \\d+\n"""\n',
    ]

    def test_concatenation_reproduces_source(self):
        for source in self.SOURCES:
            with self.subTest(source=source):
                self.assertEqual("".join(t.text for t in lex(source)), source)

    def test_no_empty_tokens(self):
        for source in self.SOURCES:
            with self.subTest(source=source):
                self.assertTrue(all(t.text for t in lex(source)))


class TestDocumentationBlocks(unittest.TestCase):
    def test_module_docstring_is_split_per_line(self):
        tokens = doc_tokens(lex('"""\nauthor: Jane\n---\nReadme\n"""\nx = 1\n'))

        self.assertEqual(
            kinds(tokens),
            [
                TokenKind.DOC_BEGIN,
                TokenKind.DOC_CONTENT,
                TokenKind.DOC_CONTENT,
                TokenKind.DOC_CONTENT,
                TokenKind.DOC_CONTENT,
                TokenKind.DOC_END,
            ],
        )
        self.assertEqual(
            [t.text for t in tokens],
            ['"""', "\n", "author: Jane\n", "---\n", "Readme\n", '"""'],
        )

    def test_single_line_docstring(self):
        tokens = doc_tokens(lex("'''author: Jane'''\n"))
        self.assertEqual([t.text for t in tokens], ["'''", "author: Jane", "'''"])

    def test_empty_docstring_has_no_content(self):
        tokens = doc_tokens(lex('""""""\n'))
        self.assertEqual(kinds(tokens), [TokenKind.DOC_BEGIN, TokenKind.DOC_END])

    def test_raw_prefix_kept_in_begin_token(self):
        tokens = doc_tokens(lex('r"""\npattern: \\d+\n"""\n'))
        self.assertEqual(tokens[0], Token((1, 0), TokenKind.DOC_BEGIN, 'r"""'))

    def test_comments_before_docstring_allowed(self):
        tokens = lex('#!/usr/bin/env python3\n\n"""\nauthor: Jane\n"""\n')
        self.assertIn(TokenKind.DOC_BEGIN, kinds(tokens))

    def test_docstring_after_code_at_column_zero(self):
        tokens = lex('import os\n"""\nauthor: Jane\n"""\n')
        self.assertIn(TokenKind.DOC_BEGIN, kinds(tokens))

    def test_indented_docstring_is_not_a_block(self):
        tokens = lex('def f():\n    """Docs."""\n    return 1\n')
        self.assertEqual(set(kinds(tokens)), {TokenKind.OTHER})

    def test_assigned_string_is_not_a_block(self):
        tokens = lex('TEXT = """\nnot docs\n"""\n')
        self.assertEqual(set(kinds(tokens)), {TokenKind.OTHER})

    def test_string_expression_is_not_a_block(self):
        tokens = lex('"""a {}""".format(1)\n')
        self.assertEqual(set(kinds(tokens)), {TokenKind.OTHER})

    def test_single_quoted_string_is_not_a_block(self):
        tokens = lex('"just a string"\n')
        self.assertEqual(set(kinds(tokens)), {TokenKind.OTHER})

    def test_bytes_string_is_not_a_block(self):
        tokens = lex('b"""\ndata\n"""\n')
        self.assertEqual(set(kinds(tokens)), {TokenKind.OTHER})


class TestPositions(unittest.TestCase):
    def test_doc_token_positions(self):
        tokens = doc_tokens(lex('"""\nab\n"""\n'))
        self.assertEqual(
            [t.position for t in tokens],
            [(1, 0), (1, 3), (2, 0), (3, 0)],
        )

    def test_positions_increase(self):
        tokens = lex('# c\n"""\nmeta: 1\n---\nreadme\n"""\ndef f():\n    return 1\n')
        positions = [t.position for t in tokens]
        self.assertEqual(positions, sorted(positions))

    def test_gap_token_position(self):
        tokens = lex("x = 1\n")
        self.assertEqual(tokens[1], Token((1, 1), TokenKind.OTHER, " "))


class TestErrors(unittest.TestCase):
    def test_unterminated_docstring(self):
        with self.assertRaises(LexError):
            lex('"""\nauthor: Jane\n')

    def test_unclosed_bracket(self):
        with self.assertRaises(LexError):
            lex("x = (\n")

    def test_lex_error_is_a_syntax_error(self):
        with self.assertRaises(SyntaxError):
            lex('"""never closed\n')


if __name__ == "__main__":
    unittest.main()
