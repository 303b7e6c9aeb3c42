"""Move function calls out of at-rule params into placeholder declarations."""

from __future__ import annotations

import itertools

from mediavars.carrier import PLACEHOLDER_PREFIX
from mediavars.model.tree import Declaration, Node, Rule
from mediavars.scanner import Span

__all__ = [
    "PlaceholderCollisionError",
    "PlaceholderSeeds",
    "externalize",
    "placeholder",
    "restore",
]


class PlaceholderCollisionError(RuntimeError):
    """A generated placeholder already exists; substituting it would corrupt params."""


def placeholder(seed: str, span: Span) -> str:
    """Return the placeholder property name for *span* of an at-rule seeded *seed*.

    The trailing ``e`` keeps one placeholder from being a prefix of another.
    """
    return f"{PLACEHOLDER_PREFIX}{seed}-{span.start}e"


class PlaceholderSeeds:
    """Hands out per-document unique seeds for one externalization run.

    A node parsed from source is seeded with its ``line-offset``; a node
    built in code (no source position) gets a positional ``iN`` seed.  A seed
    handed out twice (for example to a cloned node sharing its original's
    source) is suffixed so it stays unique.
    """

    def __init__(self) -> None:
        self._counter = itertools.count()
        self._issued: dict[str, int] = {}

    def __call__(self, node: Node) -> str:
        start = node.source.start if node.source is not None else None
        if start is not None:
            seed = f"{start.line}-{start.offset}"
        else:
            seed = f"i{next(self._counter)}"
        seen = self._issued.get(seed, 0)
        self._issued[seed] = seen + 1
        if seen:
            seed = f"{seed}d{seen}"
        return seed


def externalize(spans: list[Span], params: str, carrier: Rule, seed: str) -> str:
    """Replace each span of *params* with a placeholder declared in *carrier*.

    One declaration ``placeholder: original-text`` is appended per span, in
    span order.  Returns the rewritten params; with no spans, *params* is
    returned unchanged and nothing is appended.
    """
    if not spans:
        return params

    existing = {child.prop for child in carrier.nodes if isinstance(child, Declaration)}
    parts: list[str] = []
    last = 0
    for span in spans:
        prop = placeholder(seed, span)
        if prop in params or prop in existing:
            raise PlaceholderCollisionError(f"Placeholder {prop!r} is already in use")
        parts.append(params[last:span.start])
        parts.append(prop)
        last = span.end
        carrier.append(Declaration(prop=prop, value=span.text(params)))
        existing.add(prop)
    parts.append(params[last:])
    return "".join(parts)


def restore(params: str, carrier: Rule) -> str:
    """Substitute every placeholder declared in *carrier* with its value.

    Declarations are applied in order; each replaces all occurrences of its
    placeholder, so a placeholder repeated in *params* is fully resolved.
    """
    for child in carrier.nodes:
        if isinstance(child, Declaration) and child.prop.startswith(PLACEHOLDER_PREFIX):
            params = params.replace(child.prop, child.value)
    return params
