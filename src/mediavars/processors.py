"""Per-at-rule processing for both steps of the media-variables protocol.

Step one externalizes ``calc()``/``var()`` calls from condition at-rules (such
as ``@media``) and alias at-rules (such as ``@custom-media``) into wrapper
carriers.  Step two reads the resolved declarations back into the params and
unwraps the at-rules.
"""

from __future__ import annotations

import logging

from mediavars.carrier import create_carrier_rule, ensure_carrier, is_carrier_rule, is_state_carrier, unwrap
from mediavars.externalize import PlaceholderSeeds, externalize, restore
from mediavars.model.result import Result
from mediavars.model.tree import AtRule, Container, Declaration, Rule
from mediavars.scanner import ScanError, Span, UnterminatedFunctionError, scan

__all__ = [
    "PLUGIN_NAME",
    "process_alias_rule",
    "process_condition_rule",
    "remove_orphan_carriers",
    "resolve_condition_rule",
]

PLUGIN_NAME = "media-variables"

logger = logging.getLogger(__name__)


def _scan_params(at_rule: AtRule, result: Result, strict: bool) -> list[Span] | None:
    """Scan *at_rule*'s params, warning and returning None on failure."""
    try:
        return scan(at_rule.params, strict=strict)
    except UnterminatedFunctionError as exc:
        result.warn(str(exc), node=at_rule, plugin=PLUGIN_NAME)
    except ScanError as exc:
        logger.debug("Scan of @%s params failed: %s", at_rule.name, exc)
        result.warn(
            f"Unknown error while parsing @{at_rule.name} params", node=at_rule, plugin=PLUGIN_NAME
        )
    return None


def process_condition_rule(
    at_rule: AtRule, result: Result, seeds: PlaceholderSeeds, strict: bool = False
) -> None:
    """Externalize the function calls in a condition at-rule's params.

    The at-rule ends up inside a wrapper carrier even when nothing was
    found, since the wrapper is what step two looks for.  On a scan failure
    the at-rule is left untouched.
    """
    spans = _scan_params(at_rule, result, strict)
    if spans is None:
        return
    carrier = ensure_carrier(at_rule)
    at_rule.params = externalize(spans, at_rule.params, carrier, seeds(at_rule))


def _alias_name(params: str) -> str:
    parts = params.split(None, 1)
    return parts[0] if parts else ""


def _referencing_names(root: Container, alias: AtRule, name: str) -> set[str]:
    """Return *name* plus every alias of the same kind that expands to it."""
    others: dict[str, str] = {}
    for rule in root.walk_at_rules(alias.name):
        other = _alias_name(rule.params)
        if rule is not alias and other:
            others[other] = rule.params
    names = {name}
    changed = True
    while changed:
        changed = False
        for other, params in others.items():
            if other not in names and any(f"({n})" in params for n in names):
                names.add(other)
                changed = True
    return names


def process_alias_rule(
    alias: AtRule,
    result: Result,
    seeds: PlaceholderSeeds,
    condition_rules: tuple[str, ...] = ("media",),
    strict: bool = False,
) -> list[AtRule]:
    """Externalize an alias at-rule and copy its declarations to every referencing rule.

    The declarations are built in a scratch carrier that never joins the
    tree; each condition at-rule whose params contain ``(<alias name>)``,
    or the name of an alias that expands to it, gets its own clones in its
    wrapper carrier.  Returns the at-rules that received declarations.
    """
    spans = _scan_params(alias, result, strict)
    if spans is None:
        return []
    name = _alias_name(alias.params)
    if not name:
        result.warn(f"Missing name in @{alias.name}", node=alias, plugin=PLUGIN_NAME)
        return []

    scratch = create_carrier_rule()
    alias.params = externalize(spans, alias.params, scratch, seeds(alias))
    declarations = [child for child in scratch.nodes if isinstance(child, Declaration)]
    if not declarations:
        return []

    root = alias.root()
    assert isinstance(root, Container)
    references = [f"({n})" for n in _referencing_names(root, alias, name)]
    targets: list[AtRule] = []
    for at_rule in list(root.walk_at_rules()):
        if at_rule.name not in condition_rules:
            continue
        if not any(reference in at_rule.params for reference in references):
            continue
        carrier = ensure_carrier(at_rule)
        for declaration in declarations:
            carrier.append(declaration.clone())
        targets.append(at_rule)
    logger.debug("Alias %s copied to %d at-rule(s)", name, len(targets))
    return targets


def resolve_condition_rule(at_rule: AtRule) -> bool:
    """Substitute resolved declarations into *at_rule*'s params and unwrap it.

    Returns False (and does nothing) when the at-rule has no wrapper carrier.
    """
    carrier = at_rule.parent
    if not is_carrier_rule(carrier) or is_state_carrier(carrier):
        return False
    assert isinstance(carrier, Rule)
    at_rule.params = restore(at_rule.params, carrier)
    unwrap(at_rule)
    return True


def remove_orphan_carriers(root: Container, result: Result) -> int:
    """Delete wrapper carriers left without an at-rule to restore."""
    removed = 0
    for rule in list(root.walk_rules()):
        if not is_carrier_rule(rule) or is_state_carrier(rule):
            continue
        if any(isinstance(child, AtRule) for child in rule.nodes):
            continue
        result.warn("Removed a carrier rule that no longer wraps an at-rule", node=rule, plugin=PLUGIN_NAME)
        rule.remove()
        removed += 1
    return removed
