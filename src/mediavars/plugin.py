"""The media-variables plugin: a two-step state machine persisted in the document.

The plugin is added to a pipeline twice, before and after the stages that
resolve ``var()``/``calc()`` in declarations.  It cannot see those stages, so
it records which step runs next in a state carrier at the top of the
document:

* no state carrier: first call.  Insert one holding ``0`` and run step 0.
* ``0``: run step 0 (externalize), then store ``1``.
* ``1``: run step 1 (resolve and unwrap), then remove the state carrier.

After the last step the document holds no carrier at all, so the same
document can be processed again from scratch.
"""

from __future__ import annotations

import logging
from typing import Callable

from mediavars.carrier import create_state_carrier, find_state_declaration
from mediavars.config import MediaVariablesConfig
from mediavars.externalize import PlaceholderSeeds
from mediavars.model.result import Result
from mediavars.model.tree import Root
from mediavars.processors import (
    PLUGIN_NAME,
    process_alias_rule,
    process_condition_rule,
    remove_orphan_carriers,
    resolve_condition_rule,
)

__all__ = ["MediaVariables"]

logger = logging.getLogger(__name__)

Step = Callable[[Root, Result], None]


class MediaVariables:
    """Resolve ``var()`` and ``calc()`` inside ``@media`` and ``@custom-media`` params."""

    name = PLUGIN_NAME

    def __init__(self, config: MediaVariablesConfig | None = None) -> None:
        self.config = config or MediaVariablesConfig()
        self.steps: tuple[Step, ...] = (self.externalize, self.resolve)

    def __call__(self, root: Root, result: Result) -> None:
        state = find_state_declaration(root)
        if state is None:
            state = create_state_carrier(root)
            step = 0
        else:
            step = self._parse_step(state.value)
            if step is None:
                result.warn(
                    f"Invalid {PLUGIN_NAME} step {state.value!r}, starting over",
                    node=state.parent,
                    plugin=PLUGIN_NAME,
                )
                step = 0
                state.value = "0"

        logger.debug("Running %s step %d of %d", PLUGIN_NAME, step + 1, len(self.steps))
        self.steps[step](root, result)

        if step + 1 < len(self.steps):
            state.value = str(step + 1)
        else:
            assert state.parent is not None
            state.parent.remove()

    def _parse_step(self, value: str) -> int | None:
        try:
            step = int(value.strip())
        except ValueError:
            return None
        if 0 <= step < len(self.steps):
            return step
        return None

    def externalize(self, root: Root, result: Result) -> None:
        """Step 0: move calls out of alias and condition at-rules into carriers."""
        seeds = PlaceholderSeeds()
        strict = self.config.strict_functions
        for name in self.config.alias_rules:
            for alias in list(root.walk_at_rules(name)):
                process_alias_rule(alias, result, seeds, self.config.condition_rules, strict)
        for name in self.config.condition_rules:
            for at_rule in list(root.walk_at_rules(name)):
                process_condition_rule(at_rule, result, seeds, strict)

    def resolve(self, root: Root, result: Result) -> None:
        """Step 1: write resolved values back into the params and unwrap."""
        resolved = 0
        for at_rule in list(root.walk_at_rules()):
            if at_rule.name in self.config.condition_rules and resolve_condition_rule(at_rule):
                resolved += 1
        remove_orphan_carriers(root, result)
        logger.info("%s resolved %d at-rule(s)", PLUGIN_NAME, resolved)
