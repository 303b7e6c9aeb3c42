"""Mediavars model layer -- public type re-exports."""

from mediavars.model.diagnostic import Diagnostic, Severity
from mediavars.model.result import Result
from mediavars.model.tree import (
    AtRule,
    Comment,
    Container,
    Declaration,
    Node,
    Position,
    Root,
    Rule,
    Source,
)

__all__ = [
    # tree
    "Position",
    "Source",
    "Node",
    "Container",
    "Root",
    "Rule",
    "AtRule",
    "Declaration",
    "Comment",
    # diagnostics
    "Severity",
    "Diagnostic",
    "Result",
]
