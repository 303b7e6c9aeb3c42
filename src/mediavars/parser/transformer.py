"""Lark Transformer that converts a CSS parse tree into the document tree model."""

from __future__ import annotations

import re
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from mediavars.model.tree import AtRule, Comment, Declaration, Node, Position, Root, Rule, Source
from mediavars.parser.errors import ParseError

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)

_PARSER: Lark | None = None


def _get_parser() -> Lark:
    global _PARSER
    if _PARSER is None:
        _PARSER = Lark(
            GRAMMAR_PATH.read_text(),
            parser="lalr",
            start="start",
        )
    return _PARSER


class _Block:
    """Marker for the children of a ``{ ... }`` block."""

    def __init__(self, nodes: list[Node]):
        self.nodes = nodes


class CssTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a Lark parse tree into Root/Rule/AtRule/Declaration/Comment nodes."""

    def __init__(self, source_path: str | None = None) -> None:
        super().__init__()
        self.source_path = source_path

    def _source(self, token: Token) -> Source:
        start = Position(line=token.line, column=token.column, offset=token.start_pos)
        end = None
        if token.end_line is not None:
            end = Position(line=token.end_line, column=token.end_column, offset=token.end_pos)
        return Source(start=start, end=end, input=self.source_path)

    # ---- terminals ----

    def COMMENT(self, token: Token) -> Comment:
        text = str(token)[2:-2].strip()
        return Comment(text=text, source=self._source(token))

    # ---- structural ----

    def declaration(self, items: list[Token]) -> Declaration:
        token = items[0]
        text = str(token).strip()
        prop, sep, value = text.partition(":")
        if not sep or not prop.strip():
            raise ParseError(
                f"Unknown word {text!r}", line=token.line, column=token.column, source_path=self.source_path
            )
        value = value.strip()
        important = False
        match = _IMPORTANT_RE.search(value)
        if match:
            important = True
            value = value[: match.start()]
        return Declaration(
            prop=prop.strip(),
            value=value,
            important=important,
            source=self._source(token),
        )

    def block(self, items: list[Node]) -> _Block:
        return _Block(list(items))

    def rule(self, items: list[object]) -> Rule:
        token, block = items
        assert isinstance(token, Token) and isinstance(block, _Block)
        return Rule(selector=str(token).strip(), nodes=block.nodes, source=self._source(token))

    def at_rule(self, items: list[object]) -> AtRule:
        keyword = items[0]
        assert isinstance(keyword, Token)
        params = ""
        block: _Block | None = None
        for item in items[1:]:
            if isinstance(item, _Block):
                block = item
            else:
                params = str(item).strip()
        return AtRule(
            name=str(keyword)[1:],
            params=params,
            has_block=block is not None,
            nodes=block.nodes if block is not None else [],
            source=self._source(keyword),
        )

    def start(self, items: list[Node]) -> Root:
        return Root(nodes=list(items))


def _describe(exc: UnexpectedInput) -> str:
    if isinstance(exc, UnexpectedCharacters):
        return f"Unexpected character {exc.char!r}"
    if isinstance(exc, UnexpectedToken):
        if exc.token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected {str(exc.token)!r}"
    return "Unexpected end of input"


def parse_css(source: str, source_path: str | None = None) -> Root:
    """Parse a CSS source string into a Root node."""
    parser = _get_parser()
    try:
        tree = parser.parse(source)
    except UnexpectedInput as e:
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        raise ParseError(_describe(e), line=line, column=column, source_path=source_path) from e
    transformer = CssTransformer(source_path=source_path)
    try:
        root = transformer.transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from e
        raise
    root.source = Source(start=Position(line=1, column=1, offset=0), input=source_path)
    return root
