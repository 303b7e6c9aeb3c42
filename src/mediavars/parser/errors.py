"""Errors raised while reading CSS source."""

from __future__ import annotations


class ParseError(Exception):
    """The source is not CSS the parser understands.

    ``line`` and ``column`` are 1-based and point at the offending token
    when it is known.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        source_path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.source_path = source_path

    def __str__(self) -> str:
        location = self.source_path or "<css>"
        if self.line is not None:
            location = f"{location}:{self.line}:{self.column}"
        return f"{location}: {self.message}"
