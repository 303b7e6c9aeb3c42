"""Balanced function-call scanner for at-rule parameter text.

Finds every ``calc(...)`` and ``var(...)`` call in a string, following nested
parentheses to the matching close.  Apart from parenthesis balance nothing
about the text is validated.

Known limitation: any text that merely *ends* with a prefix, such as
``somevar(``, is taken for a real call.  ``strict=True`` only accepts a
prefix that is not preceded by an identifier character.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "FUNCTION_PREFIXES",
    "ScanError",
    "Span",
    "UnterminatedFunctionError",
    "scan",
]

FUNCTION_PREFIXES: tuple[str, ...] = ("calc(", "var(")


class ScanError(Exception):
    """Raised when a string cannot be scanned."""


class UnterminatedFunctionError(ScanError):
    """A function call was opened but never closed before the end of the text."""

    def __init__(self, missing: int, start: int) -> None:
        self.missing = missing
        self.start = start
        noun = "parenthesis" if missing == 1 else "parentheses"
        super().__init__(f"Missing {missing} closing {noun}")


@dataclass(frozen=True)
class Span:
    """One complete function call: ``text[start:start + length]``."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def text(self, source: str) -> str:
        return source[self.start:self.end]


def _is_ident_char(char: str) -> bool:
    return char.isalnum() or char in "-_" or ord(char) > 0x7F


def _find_first(
    text: str, pos: int, prefixes: tuple[str, ...], strict: bool
) -> tuple[int, str] | None:
    """Return (index, prefix) of the earliest prefix at or after *pos*.

    On equal indices the prefix listed first wins.
    """
    best: tuple[int, str] | None = None
    for prefix in prefixes:
        idx = text.find(prefix, pos)
        while strict and idx > 0 and _is_ident_char(text[idx - 1]):
            idx = text.find(prefix, idx + 1)
        if idx == -1:
            continue
        if best is None or idx < best[0]:
            best = (idx, prefix)
    return best


def _match_close(text: str, pos: int, call_start: int) -> int:
    """Return the index just past the ``)`` closing a call opened before *pos*."""
    depth = 1
    while depth > 0:
        open_idx = text.find("(", pos)
        close_idx = text.find(")", pos)
        if close_idx == -1:
            raise UnterminatedFunctionError(depth, call_start)
        if open_idx != -1 and open_idx < close_idx:
            depth += 1
            pos = open_idx + 1
        else:
            depth -= 1
            pos = close_idx + 1
    return pos


def _unclosed(text: str, start: int) -> int:
    """Count the ``(`` in ``text[start:]`` that are never closed."""
    depth = 0
    for char in text[start:]:
        if char == "(":
            depth += 1
        elif char == ")" and depth > 0:
            depth -= 1
    return depth


def scan(
    text: str,
    start: int = 0,
    prefixes: tuple[str, ...] = FUNCTION_PREFIXES,
    strict: bool = False,
) -> list[Span]:
    """Locate every balanced function call in *text* from *start* onwards.

    Returns the spans in ascending, non-overlapping order.  A nested call is
    part of its enclosing span, not a span of its own.

    Raises:
        UnterminatedFunctionError: an opening parenthesis has no matching
            ``)``; the error carries how many closing parentheses are missing.
        ScanError: *text* is not a string or *start* is out of range.
    """
    if not isinstance(text, str):
        raise ScanError(f"Cannot scan a {type(text).__name__} value")
    if start < 0 or start > len(text):
        raise ScanError(f"Start offset {start} is outside the text (length {len(text)})")
    found = _find_first(text, start, prefixes, strict)
    if found is None:
        return []
    missing = _unclosed(text, start)
    if missing:
        raise UnterminatedFunctionError(missing, text.find("(", start))

    spans: list[Span] = []
    while found is not None:
        call_start, prefix = found
        pos = _match_close(text, call_start + len(prefix), call_start)
        spans.append(Span(start=call_start, length=pos - call_start))
        found = _find_first(text, pos, prefixes, strict)
    return spans
