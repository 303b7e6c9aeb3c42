"""Resolve var() and calc() inside @media and @custom-media params.

The plugin runs twice around the stages that resolve declarations: the first
run moves every call out of the at-rule params into placeholder declarations,
the second writes the resolved values back.
"""

__version__ = "0.1.0"

from mediavars.config import MediaVariablesConfig  # noqa: E402
from mediavars.model import Result, Root  # noqa: E402
from mediavars.parser import ParseError, parse_css  # noqa: E402
from mediavars.pipeline import Pipeline, default_plugins, process  # noqa: E402
from mediavars.plugin import MediaVariables  # noqa: E402
from mediavars.writer import stringify  # noqa: E402

__all__ = [
    "MediaVariables",
    "MediaVariablesConfig",
    "ParseError",
    "Pipeline",
    "Result",
    "Root",
    "default_plugins",
    "parse_css",
    "process",
    "stringify",
]
