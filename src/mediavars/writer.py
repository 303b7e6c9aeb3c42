"""Serialise a document tree back to CSS text."""

from __future__ import annotations

from mediavars.model.tree import AtRule, Comment, Container, Declaration, Node, Root, Rule

__all__ = ["stringify"]


def _header(node: Container) -> str:
    if isinstance(node, Rule):
        return node.selector
    if isinstance(node, AtRule):
        return f"@{node.name} {node.params}" if node.params else f"@{node.name}"
    raise TypeError(f"Cannot write header for {type(node).__name__}")


def _write(node: Node, indent: str, depth: int) -> list[str]:
    pad = indent * depth
    if isinstance(node, Declaration):
        important = " !important" if node.important else ""
        return [f"{pad}{node.prop}: {node.value}{important};"]
    if isinstance(node, Comment):
        return [f"{pad}/* {node.text} */"]
    if isinstance(node, AtRule) and not node.has_block:
        return [f"{pad}{_header(node)};"]
    if isinstance(node, Container):
        header = _header(node)
        if not node.nodes:
            return [f"{pad}{header} {{}}"]
        lines = [f"{pad}{header} {{"]
        for child in node.nodes:
            lines.extend(_write(child, indent, depth + 1))
        lines.append(f"{pad}}}")
        return lines
    raise TypeError(f"Cannot write node of type {type(node).__name__}")


def stringify(node: Node, indent: str = "    ") -> str:
    """Return canonical CSS text for *node*.

    Empty blocks are written as ``{}``, every other block puts one child per
    line. A non-empty Root ends with a newline.
    """
    if isinstance(node, Root):
        lines: list[str] = []
        for child in node.nodes:
            lines.extend(_write(child, indent, 0))
        return "\n".join(lines) + "\n" if lines else ""
    return "\n".join(_write(node, indent, 0))
