"""
tinywheel - Build a Python package from a single annotated file

This package contains:

- lexer.py: Tokenizer that marks documentation blocks
- chunker.py: Splits a source file into metadata, README and library
- metadata.py: Resolves a PackageDescriptor from explicit, default and inferred values
- identity.py: Author/email lookup from the global git config
- pyproject.py: Serializes a PackageDescriptor as pyproject.toml
- build.py: Stages the package and builds it with the `build` frontend
- cli.py: The `tinywheel` command

Usage:
    from tinywheel import chunk, resolve

    chunked = chunk(source_text)
    descriptor = resolve(chunked.metadata, {"name": "tool"}, chunked.readme)

    # Or do everything at once
    from tinywheel import package
    result = package("tool.py")
"""

__version__ = "0.1.0"

from tinywheel.build import (
    BuildOptions,
    PackageResult,
    SourceParts,
    build_package,
    check_source,
    package,
    read_source_parts,
    write_package_dir,
)
from tinywheel.chunker import (
    ChunkedSource,
    ChunkState,
    chunk,
    chunk_file,
)
from tinywheel.errors import (
    BuildError,
    InvalidMetadataSyntax,
    LexError,
    MissingFieldError,
    SourceError,
    TinywheelError,
)
from tinywheel.identity import git_global_config
from tinywheel.lexer import Token, TokenKind, lex
from tinywheel.metadata import (
    SPEC_KEYS,
    MetadataExtractor,
    PackageDescriptor,
    parse_metadata,
    resolve,
    scrub_description,
)
from tinywheel.pyproject import generate_pyproject, write_pyproject

__all__ = [
    # Lexer
    "lex",
    "Token",
    "TokenKind",
    # Chunker
    "chunk",
    "chunk_file",
    "ChunkedSource",
    "ChunkState",
    # Metadata
    "resolve",
    "parse_metadata",
    "scrub_description",
    "MetadataExtractor",
    "PackageDescriptor",
    "SPEC_KEYS",
    "git_global_config",
    # Serializer
    "generate_pyproject",
    "write_pyproject",
    # Build
    "package",
    "check_source",
    "read_source_parts",
    "write_package_dir",
    "build_package",
    "BuildOptions",
    "PackageResult",
    "SourceParts",
    # Errors
    "TinywheelError",
    "LexError",
    "InvalidMetadataSyntax",
    "MissingFieldError",
    "SourceError",
    "BuildError",
]
