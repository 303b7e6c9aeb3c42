from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MediaVariablesConfig:
    condition_rules: tuple[str, ...] = ("media",)
    alias_rules: tuple[str, ...] = ("custom-media",)
    strict_functions: bool = False  # only match calc(/var( not glued to an identifier
    precision: int = 5  # decimal places kept by the calc stage
    preserve_variables: bool = False  # keep :root custom properties after substitution
