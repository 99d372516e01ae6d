"""
tinywheel.chunker - Split a single source file into metadata, readme and library

The first documentation block in the file carries the package metadata (a
YAML mapping) and the README, separated by a line holding only `---`.
Everything lexically after the block is the library code, kept verbatim.

    \"\"\"
    author: Jane Doe
    ---

    # my-tool

    Version 1.0.0
    \"\"\"

    def main(): ...

Chunking is a single forward pass over the token stream with one state
variable (ChunkState). States only ever move forward.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Union

from tinywheel.lexer import Token, TokenKind, lex

# The YAML document separator is also what splits metadata from the README.
README_SEPARATOR = re.compile(r"\A\s*---\s*\Z")


class ChunkState(Enum):
    SEEKING_BRIEF = "seeking_brief"
    READ_METADATA = "read_metadata"
    READ_README = "read_readme"
    READ_LIBRARY = "read_library"


@dataclass(frozen=True)
class ChunkedSource:
    """The three regions of a chunked source file."""

    metadata: str
    readme: str
    library: str


Lexer = Callable[[str], list[Token]]


def chunk(source_text: str, lexer: Lexer = lex) -> ChunkedSource:
    """
    Chunk source text into metadata, readme and library regions.

    Args:
        source_text: The complete source file contents
        lexer: Callable producing ordered Tokens for the text (default: lex)

    Returns:
        ChunkedSource with the three regions. A source with no documentation
        block yields empty metadata and readme, and the whole source as the
        library.
    """
    metadata: list[str] = []
    readme: list[str] = []
    library: list[str] = []
    skipped: list[str] = []
    state = ChunkState.SEEKING_BRIEF

    for token in lexer(source_text):
        if state is ChunkState.SEEKING_BRIEF:
            # Start off looking for the first documentation block
            if token.kind is TokenKind.DOC_BEGIN:
                state = ChunkState.READ_METADATA
            else:
                skipped.append(token.text)

        elif state is ChunkState.READ_METADATA:
            if token.kind is TokenKind.DOC_END:
                # No separator, so the whole block was metadata
                state = ChunkState.READ_LIBRARY
            elif token.kind is TokenKind.DOC_CONTENT:
                if README_SEPARATOR.match(token.text):
                    state = ChunkState.READ_README
                else:
                    metadata.append(token.text)

        elif state is ChunkState.READ_README:
            if token.kind is TokenKind.DOC_END:
                state = ChunkState.READ_LIBRARY
            elif token.kind is TokenKind.DOC_CONTENT:
                readme.append(token.text)

        else:
            library.append(token.text)

    if state is ChunkState.SEEKING_BRIEF:
        library = skipped

    return ChunkedSource(
        metadata="".join(metadata),
        readme="".join(readme),
        library="".join(library),
    )


def chunk_file(path: Union[str, Path], lexer: Lexer = lex) -> ChunkedSource:
    """Read a source file as UTF-8 and chunk it."""
    with open(path, encoding="utf-8") as f:
        return chunk(f.read(), lexer=lexer)
