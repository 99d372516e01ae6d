"""
tinywheel.errors - Exception hierarchy

Every error tinywheel raises on purpose derives from TinywheelError, so the
CLI can report them uniformly. Core errors carry the offending input
(raw metadata text, field name) so they can be surfaced verbatim.
"""


class TinywheelError(Exception):
    """Base class for all tinywheel errors."""


class LexError(TinywheelError, SyntaxError):
    """Raised when the source text cannot be tokenized."""

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.msg = message
        self.lineno = line

    def __str__(self):
        if self.lineno:
            return f"{self.msg} (line {self.lineno})"
        return self.msg


class InvalidMetadataSyntax(TinywheelError, SyntaxError):
    """The metadata block is not a valid YAML mapping."""

    def __init__(self, raw_text: str, reason: str = ""):
        self.raw_text = raw_text
        self.reason = reason
        message = "Bad metadata - are you sure it's valid YAML?"
        if reason:
            message = f"{message} ({reason})"
        message = f"{message}\n{raw_text}"
        super().__init__(message)
        self.msg = message

    def __str__(self):
        return self.msg


class MissingFieldError(TinywheelError):
    """A required descriptor field has no explicit, default or inferred value."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"No default value for: {field}")


class SourceError(TinywheelError):
    """The source file is unreadable or not valid Python."""


class BuildError(TinywheelError):
    """The build frontend failed to produce a distribution."""
