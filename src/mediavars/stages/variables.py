"""Variable expansion stage: replaces ``var(--name)`` in declaration values."""

from __future__ import annotations

import logging

from mediavars.config import MediaVariablesConfig
from mediavars.model.result import Result
from mediavars.model.tree import Declaration, Root, Rule
from mediavars.scanner import ScanError, scan

logger = logging.getLogger(__name__)

ROOT_SELECTOR = ":root"


def split_var_arguments(inner: str) -> tuple[str, str | None]:
    """Split the inside of ``var(...)`` into the name and the optional fallback."""
    depth = 0
    for idx, char in enumerate(inner):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            return inner[:idx].strip(), inner[idx + 1:].strip()
    return inner.strip(), None


class VariablesStage:
    """Substitute custom properties declared on top-level ``:root`` rules.

    Every declaration value in the document is expanded, carrier rules
    included.  An undefined variable without fallback is reported and left
    as written.  Unless ``preserve_variables`` is set, the ``:root`` custom
    properties (and ``:root`` rules left empty) are removed.
    """

    name = "variables"

    def __init__(self, config: MediaVariablesConfig | None = None) -> None:
        self.config = config or MediaVariablesConfig()

    def __call__(self, root: Root, result: Result) -> None:
        definitions: dict[str, str] = {}
        custom_properties: list[Declaration] = []
        for node in root.nodes:
            if not isinstance(node, Rule) or node.selector != ROOT_SELECTOR:
                continue
            for child in node.nodes:
                if isinstance(child, Declaration) and child.prop.startswith("--"):
                    definitions[child.prop] = child.value
                    custom_properties.append(child)

        expanded = 0
        for decl in list(root.walk_decls()):
            if "var(" not in decl.value:
                continue
            value = self.expand(decl.value, definitions, result, decl)
            if value != decl.value:
                decl.value = value
                expanded += 1
        logger.debug("Expanded var() in %d declaration(s)", expanded)

        if self.config.preserve_variables:
            return
        for decl in custom_properties:
            parent = decl.parent
            decl.remove()
            if isinstance(parent, Rule) and not parent.nodes:
                parent.remove()

    def expand(
        self,
        value: str,
        definitions: dict[str, str],
        result: Result,
        decl: Declaration,
        seen: frozenset[str] = frozenset(),
    ) -> str:
        """Return *value* with every ``var()`` call replaced where possible."""
        try:
            spans = scan(value, prefixes=("var(",))
        except ScanError as exc:
            result.warn(f"{exc} in {decl.prop}", node=decl, plugin=self.name)
            return value

        for span in reversed(spans):
            call = span.text(value)
            name, fallback = split_var_arguments(call[len("var("):-1])
            if name in seen:
                result.warn(f"Circular variable reference {name}", node=decl, plugin=self.name)
                continue
            if name in definitions:
                replacement = self.expand(definitions[name], definitions, result, decl, seen | {name})
            elif fallback is not None:
                replacement = self.expand(fallback, definitions, result, decl, seen)
            else:
                result.warn(
                    f"Variable {name} is undefined and used without a fallback",
                    node=decl,
                    plugin=self.name,
                )
                continue
            value = value[:span.start] + replacement + value[span.end:]
        return value
