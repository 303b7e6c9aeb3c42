"""Plugin pipeline: parse CSS, run each plugin over the tree, collect warnings."""

from __future__ import annotations

import logging

from mediavars.config import MediaVariablesConfig
from mediavars.model.result import Result
from mediavars.model.tree import Root
from mediavars.parser import parse_css
from mediavars.pipeline.base import Plugin

__all__ = ["Pipeline", "Plugin", "default_plugins", "process"]

logger = logging.getLogger(__name__)


def default_plugins(config: MediaVariablesConfig | None = None) -> list[Plugin]:
    """Media-variables around the stages that resolve custom media, var() and calc()."""
    from mediavars.plugin import MediaVariables
    from mediavars.stages import CalcStage, CustomMediaStage, VariablesStage

    config = config or MediaVariablesConfig()
    media_variables = MediaVariables(config)
    return [
        media_variables,
        CustomMediaStage(config),
        VariablesStage(config),
        CalcStage(config),
        media_variables,
    ]


class Pipeline:
    """Runs plugins, in order, over one document at a time."""

    def __init__(self, plugins: list[Plugin] | None = None) -> None:
        self.plugins: list[Plugin] = list(plugins) if plugins is not None else default_plugins()

    def use(self, plugin: Plugin) -> Pipeline:
        self.plugins.append(plugin)
        return self

    def process(self, source: str | Root, source_path: str | None = None) -> Result:
        """Parse *source* (unless it is already a tree) and apply every plugin.

        Raises :class:`~mediavars.parser.ParseError` if *source* is not valid CSS.
        """
        root = source if isinstance(source, Root) else parse_css(source, source_path)
        result = Result(root, source_path=source_path)
        for plugin in self.plugins:
            logger.debug("Applying plugin %s", getattr(plugin, "name", type(plugin).__name__))
            plugin(root, result)
        return result


def process(
    source: str | Root,
    plugins: list[Plugin] | None = None,
    source_path: str | None = None,
) -> Result:
    """Process *source* with *plugins* (the default pipeline when omitted)."""
    return Pipeline(plugins).process(source, source_path=source_path)
