"""Calc stage: reduces ``calc()`` expressions in declaration values."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput, VisitError

from mediavars.config import MediaVariablesConfig
from mediavars.model.result import Result
from mediavars.model.tree import Root
from mediavars.scanner import ScanError, scan

__all__ = ["CalcError", "CalcStage", "Quantity", "evaluate", "format_quantity"]

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "calc.lark"

_DIMENSION_RE = re.compile(r"^((?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)(.*)$", re.IGNORECASE)

_PARSER: Lark | None = None


def _get_parser() -> Lark:
    global _PARSER
    if _PARSER is None:
        _PARSER = Lark(GRAMMAR_PATH.read_text(), parser="lalr", start="start")
    return _PARSER


class CalcError(ValueError):
    """Raised when an expression cannot be reduced to a single value."""


@dataclass(frozen=True)
class Quantity:
    """A number with an optional unit (``""`` for plain numbers)."""

    value: float
    unit: str = ""


class _Evaluator(Transformer):  # type: ignore[type-arg]
    def dimension(self, items: list[Token]) -> Quantity:
        match = _DIMENSION_RE.match(str(items[0]))
        assert match is not None
        return Quantity(float(match.group(1)), match.group(2).lower())

    def neg(self, items: list[Quantity]) -> Quantity:
        return Quantity(-items[0].value, items[0].unit)

    def add(self, items: list[Quantity]) -> Quantity:
        left, right = items
        return Quantity(left.value + right.value, _common_unit(left, right))

    def sub(self, items: list[Quantity]) -> Quantity:
        left, right = items
        return Quantity(left.value - right.value, _common_unit(left, right))

    def mul(self, items: list[Quantity]) -> Quantity:
        left, right = items
        if left.unit and right.unit:
            raise CalcError(f"Cannot multiply {left.unit} by {right.unit}")
        return Quantity(left.value * right.value, left.unit or right.unit)

    def div(self, items: list[Quantity]) -> Quantity:
        left, right = items
        if right.unit:
            raise CalcError(f"Cannot divide by a {right.unit} value")
        if right.value == 0:
            raise CalcError("Division by zero")
        return Quantity(left.value / right.value, left.unit)


def _common_unit(left: Quantity, right: Quantity) -> str:
    if left.unit != right.unit:
        raise CalcError(f"Cannot combine {left.unit or 'number'} and {right.unit or 'number'}")
    return left.unit


def evaluate(expression: str) -> Quantity:
    """Reduce an arithmetic expression such as ``calc(1000px - 1px)``.

    Raises:
        CalcError: the expression is not valid arithmetic or mixes units.
    """
    try:
        tree = _get_parser().parse(expression)
    except UnexpectedInput as e:
        raise CalcError(f"Cannot parse {expression!r}") from e
    try:
        return _Evaluator().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, CalcError):
            raise e.orig_exc from e
        raise


def format_quantity(quantity: Quantity, precision: int = 5) -> str:
    text = f"{round(quantity.value, precision):.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return f"{text}{quantity.unit}"


class CalcStage:
    """Replace every reducible ``calc()`` in declaration values with its result.

    Expressions that cannot be reduced (mixed units, leftover ``var()``,
    unknown functions) are left exactly as written.
    """

    name = "calc"

    def __init__(self, config: MediaVariablesConfig | None = None) -> None:
        self.config = config or MediaVariablesConfig()

    def __call__(self, root: Root, result: Result) -> None:
        for decl in root.walk_decls():
            if "calc(" not in decl.value:
                continue
            try:
                spans = scan(decl.value, prefixes=("calc(",))
            except ScanError as exc:
                result.warn(f"{exc} in {decl.prop}", node=decl, plugin=self.name)
                continue
            value = decl.value
            for span in reversed(spans):
                try:
                    quantity = evaluate(span.text(value))
                except CalcError as exc:
                    logger.debug("Leaving %s as is: %s", span.text(value), exc)
                    continue
                replacement = format_quantity(quantity, self.config.precision)
                value = value[:span.start] + replacement + value[span.end:]
            decl.value = value
