"""Base protocol for pipeline plugins."""

from __future__ import annotations

from typing import Protocol

from mediavars.model.result import Result
from mediavars.model.tree import Root


class Plugin(Protocol):
    """A step that mutates the document tree in place and reports to *result*."""

    name: str

    def __call__(self, root: Root, result: Result) -> None: ...
