"""Stages that resolve values in declarations, run between the two media-variables steps."""

from mediavars.stages.calc import CalcStage
from mediavars.stages.custom_media import CustomMediaStage
from mediavars.stages.variables import VariablesStage

__all__ = ["CalcStage", "CustomMediaStage", "VariablesStage"]
