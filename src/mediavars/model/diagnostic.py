"""Warnings and errors reported by plugins while a document is processed."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from mediavars.model.tree import Node


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """One message attached to a document, and optionally to one of its nodes.

    ``line`` and ``column`` are copied from the node's source position when
    the diagnostic is created, so they survive later changes to the tree.
    """

    plugin: str
    severity: Severity
    message: str
    node: Node | None = field(default=None, compare=False)
    line: int | None = None
    column: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def __str__(self) -> str:
        parts = [self.severity.value]
        if self.line is not None:
            parts.append(f"{self.line}:{self.column}")
        if self.plugin:
            parts.append(f"[{self.plugin}]")
        return f"{' '.join(parts)}: {self.message}"
