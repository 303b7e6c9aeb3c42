"""Custom media stage: expands ``(--name)`` references with their ``@custom-media`` query."""

from __future__ import annotations

import logging

from mediavars.config import MediaVariablesConfig
from mediavars.model.result import Result
from mediavars.model.tree import AtRule, Root

logger = logging.getLogger(__name__)


class CustomMediaStage:
    """Replace ``(--name)`` in condition at-rules with the aliased query.

    ``@custom-media --small (max-width: 30em);`` turns ``@media (--small)``
    into ``@media (max-width: 30em)``.  Aliases may reference other aliases.
    The alias at-rules are removed afterwards.
    """

    name = "custom-media"

    def __init__(self, config: MediaVariablesConfig | None = None) -> None:
        self.config = config or MediaVariablesConfig()

    def __call__(self, root: Root, result: Result) -> None:
        aliases: dict[str, str] = {}
        alias_rules: list[AtRule] = []
        for name in self.config.alias_rules:
            for rule in list(root.walk_at_rules(name)):
                parts = rule.params.split(None, 1)
                if len(parts) < 2:
                    result.warn(f"Missing query in @{rule.name}", node=rule, plugin=self.name)
                    continue
                aliases[parts[0]] = parts[1].strip()
                alias_rules.append(rule)
        if not aliases:
            return

        for name in self.config.condition_rules:
            for at_rule in root.walk_at_rules(name):
                at_rule.params = self._expand(at_rule, aliases, result)

        for rule in alias_rules:
            rule.remove()
        logger.debug("Expanded %d custom media alias(es)", len(aliases))

    def _expand(self, at_rule: AtRule, aliases: dict[str, str], result: Result) -> str:
        params = at_rule.params
        # Each pass resolves one level of alias-in-alias nesting.
        for _ in range(len(aliases) + 1):
            changed = False
            for alias, query in aliases.items():
                reference = f"({alias})"
                if reference in params:
                    params = params.replace(reference, query)
                    changed = True
            if not changed:
                return params
        result.warn(f"Circular @custom-media reference in {at_rule.params!r}", node=at_rule, plugin=self.name)
        return at_rule.params
