"""MJML domain errors"""

from typing import Optional


class MjmlError(Exception):
    """Base class for every error raised by the MJML core"""


class SchemaViolation(MjmlError):
    """A programmatic edit asked for a parent/child pairing the schema forbids"""

    def __init__(self, message: str, parent_type: Optional[str] = None, child_type: Optional[str] = None):
        super().__init__(message)
        self.parent_type = parent_type
        self.child_type = child_type


class MjmlParseError(MjmlError):
    """
    Markup could not be split into a token stream.

    Carries the earliest failure position (1-based line and column, 0-based
    offset into the source) so the editor can point at it.
    """

    def __init__(self, message: str, line: int = 1, column: int = 1, offset: int = 0):
        super().__init__(f"{message} (line {line}, column {column})")
        self.message = message
        self.line = line
        self.column = column
        self.offset = offset


class MjmlCompileError(MjmlError):
    """The mjml engine failed to produce HTML"""
