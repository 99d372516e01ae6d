"""
tinywheel.lexer - Source tokenizer with documentation-block classification

This module turns Python source text into a flat, ordered list of Tokens
that reproduces the source exactly when their texts are concatenated.

It is a thin layer over the standard library tokenize module:
- gaps tokenize does not report (spaces, line continuations) become OTHER tokens
- a documentation block (a column-0, triple-quoted string statement) is
  split into DOC_BEGIN, one DOC_CONTENT token per body line, and DOC_END

Everything else is reported as OTHER.
"""

import io
import re
import tokenize
from dataclasses import dataclass
from enum import Enum

from tinywheel.errors import LexError


class TokenKind(Enum):
    DOC_BEGIN = "doc_begin"
    DOC_CONTENT = "doc_content"
    DOC_END = "doc_end"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    """A token with its source position and exact source text."""

    position: tuple[int, int]  # (1-based line, 0-based column)
    kind: TokenKind
    text: str

    def __repr__(self):
        line, col = self.position
        return f"Token({self.kind.name}, {self.text!r}, {line}:{col})"


# Prefixes allowed on a documentation block; bytes and f-strings never count.
DOC_PREFIX = re.compile(r"\A[rRuU]?(\"\"\"|''')")

# Tokens that may sit between the end of one logical line and the next.
_TRIVIA = {tokenize.NL, tokenize.COMMENT}
_LINE_START = {
    tokenize.NEWLINE,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENCODING,
}
_LINE_END = {tokenize.NEWLINE, tokenize.ENDMARKER}

_BODY_LINES = re.compile(r"[^\n]*\n|[^\n]+")


def _line_offsets(text: str) -> list[int]:
    """Absolute offset of the start of each line, as tokenize numbers them."""
    offsets = [0]
    reader = io.StringIO(text)
    total = 0
    for line in iter(reader.readline, ""):
        total += len(line)
        offsets.append(total)
    return offsets


def _read_tokens(text: str) -> list[tokenize.TokenInfo]:
    try:
        return list(tokenize.generate_tokens(io.StringIO(text).readline))
    except tokenize.TokenError as e:
        message, (line, _col) = e.args
        raise LexError(f"Could not tokenize source: {message}", line) from e
    except SyntaxError as e:
        raise LexError(f"Could not tokenize source: {e.msg}", e.lineno or 0) from e


def _significant(tokens: list[tokenize.TokenInfo], index: int, step: int):
    """Find the nearest non-trivia token from index in direction step."""
    index += step
    while 0 <= index < len(tokens):
        if tokens[index].type not in _TRIVIA:
            return tokens[index]
        index += step
    return None


def is_doc_block(tokens: list[tokenize.TokenInfo], index: int) -> bool:
    """
    Check whether tokens[index] is a documentation block.

    A documentation block is a STRING token that is triple-quoted, starts at
    column 0 and makes up a whole logical line on its own.
    """
    tok = tokens[index]
    if tok.type != tokenize.STRING or tok.start[1] != 0:
        return False
    if not DOC_PREFIX.match(tok.string):
        return False

    before = _significant(tokens, index, -1)
    if before is not None and before.type not in _LINE_START:
        return False

    after = _significant(tokens, index, 1)
    return after is None or after.type in _LINE_END


def split_doc_block(text: str, line: int, col: int) -> list[Token]:
    """Split the source text of a documentation block into DOC_* tokens."""
    opening = DOC_PREFIX.match(text).group(0)
    body = text[len(opening) : -3]

    tokens = [Token((line, col), TokenKind.DOC_BEGIN, opening)]
    col += len(opening)

    for chunk in _BODY_LINES.findall(body):
        tokens.append(Token((line, col), TokenKind.DOC_CONTENT, chunk))
        if chunk.endswith("\n"):
            line += 1
            col = 0
        else:
            col += len(chunk)

    tokens.append(Token((line, col), TokenKind.DOC_END, text[-3:]))
    return tokens


def lex(text: str) -> list[Token]:
    """
    Tokenize Python source into Tokens, in source order.

    The texts of the returned tokens concatenate back to exactly `text`.

    Raises:
        LexError: If tokenize rejects the source.
    """
    raw_tokens = _read_tokens(text)
    offsets = _line_offsets(text)
    size = len(text)

    def absolute(pos: tuple[int, int]) -> int:
        row, col = pos
        if row - 1 >= len(offsets):
            return size
        return min(offsets[row - 1] + col, size)

    tokens: list[Token] = []
    cursor = 0

    for index, tok in enumerate(raw_tokens):
        if tok.type == tokenize.ENCODING:
            continue

        start = absolute(tok.start)
        end = max(absolute(tok.end), start)

        if start > cursor:
            gap_line, gap_col = _position_of(offsets, cursor)
            tokens.append(Token((gap_line, gap_col), TokenKind.OTHER, text[cursor:start]))
        elif start < cursor:
            # Zero-width tokens (DEDENT, ENDMARKER) can trail the cursor.
            start = cursor
            end = max(end, cursor)

        source_text = text[start:end]
        if source_text and is_doc_block(raw_tokens, index):
            tokens.extend(split_doc_block(source_text, *tok.start))
        elif source_text:
            tokens.append(Token(tok.start, TokenKind.OTHER, source_text))

        cursor = max(cursor, end)

    if cursor < size:
        line, col = _position_of(offsets, cursor)
        tokens.append(Token((line, col), TokenKind.OTHER, text[cursor:]))

    return tokens


def _position_of(offsets: list[int], offset: int) -> tuple[int, int]:
    """Convert an absolute offset back into a (line, col) pair."""
    line = 1
    while line < len(offsets) and offsets[line] <= offset:
        line += 1
    return line, offset - offsets[line - 1]
