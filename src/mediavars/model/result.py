"""Processing result: the tree being transformed plus its diagnostics sink."""

from __future__ import annotations

from mediavars.model.diagnostic import Diagnostic, Severity
from mediavars.model.tree import Node, Root


class Result:
    """Collects diagnostics for one document while plugins run over it."""

    def __init__(self, root: Root, source_path: str | None = None) -> None:
        self.root = root
        self.source_path = source_path
        self.messages: list[Diagnostic] = []

    def warn(self, message: str, node: Node | None = None, plugin: str = "") -> Diagnostic:
        """Record a warning, optionally pointing at the node that caused it."""
        line = column = None
        if node is not None and node.source is not None and node.source.start is not None:
            line = node.source.start.line
            column = node.source.start.column
        diagnostic = Diagnostic(
            plugin=plugin,
            severity=Severity.WARNING,
            message=message,
            node=node,
            line=line,
            column=column,
        )
        self.messages.append(diagnostic)
        return diagnostic

    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.messages if d.is_warning]

    @property
    def css(self) -> str:
        from mediavars.writer import stringify

        return stringify(self.root)
