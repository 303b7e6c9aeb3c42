"""Document tree model: Root, Rule, AtRule, Declaration, and Comment nodes."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import ClassVar, Iterator


@dataclass(frozen=True)
class Position:
    """A location in the CSS source (1-based line/column, 0-based offset)."""

    line: int
    column: int
    offset: int = 0


@dataclass
class Source:
    """Where a node came from in its input."""

    start: Position | None = None
    end: Position | None = None
    input: str | None = None


@dataclass(eq=False)
class Node:
    """Base class for every node in the tree.

    Nodes compare by identity: two declarations with the same text are still
    two different nodes.
    """

    type: ClassVar[str] = "node"

    source: Source | None = field(default=None, kw_only=True)
    parent: Container | None = field(default=None, kw_only=True, repr=False)

    def remove(self) -> Node:
        """Detach this node from its parent (no-op when already detached)."""
        if self.parent is not None:
            self.parent.remove_child(self)
        return self

    def root(self) -> Node:
        """Return the top-most ancestor."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def next(self) -> Node | None:
        if self.parent is None:
            return None
        idx = self.parent.index(self)
        siblings = self.parent.nodes
        return siblings[idx + 1] if idx + 1 < len(siblings) else None

    def prev(self) -> Node | None:
        if self.parent is None:
            return None
        idx = self.parent.index(self)
        return self.parent.nodes[idx - 1] if idx > 0 else None

    def clone(self, **overrides: object) -> Node:
        """Return a detached deep copy of this node.

        The source is copied along with the node so diagnostics on the clone
        still point at the original location.
        """
        parent, self.parent = self.parent, None
        try:
            cloned = copy.deepcopy(self)
        finally:
            self.parent = parent
        for key, value in overrides.items():
            setattr(cloned, key, value)
        return cloned


@dataclass(eq=False)
class Container(Node):
    """A node holding an ordered list of children."""

    nodes: list[Node] = field(default_factory=list, kw_only=True)

    def __post_init__(self) -> None:
        for child in self.nodes:
            if child.parent is not None and child.parent is not self:
                child.parent.remove_child(child)
            child.parent = self

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self.nodes))

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def first(self) -> Node | None:
        return self.nodes[0] if self.nodes else None

    @property
    def last(self) -> Node | None:
        return self.nodes[-1] if self.nodes else None

    def index(self, child: Node) -> int:
        """Return the position of *child*, compared by identity."""
        for idx, node in enumerate(self.nodes):
            if node is child:
                return idx
        raise ValueError(f"{child!r} is not a child of {self!r}")

    def _adopt(self, node: Node) -> Node:
        # Moving, never copying: a node with a parent is detached first.
        if node.parent is not None:
            node.parent.remove_child(node)
        node.parent = self
        return node

    def append(self, *nodes: Node) -> Container:
        for node in nodes:
            self.nodes.append(self._adopt(node))
        return self

    def prepend(self, *nodes: Node) -> Container:
        for node in reversed(nodes):
            self.nodes.insert(0, self._adopt(node))
        return self

    def insert_before(self, existing: Node, node: Node) -> Container:
        self._adopt(node)
        self.nodes.insert(self.index(existing), node)
        return self

    def insert_after(self, existing: Node, node: Node) -> Container:
        self._adopt(node)
        self.nodes.insert(self.index(existing) + 1, node)
        return self

    def remove_child(self, child: Node) -> Container:
        del self.nodes[self.index(child)]
        child.parent = None
        return self

    def remove_all(self) -> Container:
        for child in self.nodes:
            child.parent = None
        self.nodes = []
        return self

    # --- traversal ------------------------------------------------------------

    def walk(self) -> Iterator[Node]:
        """Yield every descendant depth-first, in document order.

        Each level is iterated over a snapshot, so callers may wrap, move or
        remove the node they were just given.
        """
        for child in list(self.nodes):
            yield child
            if isinstance(child, Container):
                yield from child.walk()

    def walk_at_rules(self, name: str | None = None) -> Iterator[AtRule]:
        for node in self.walk():
            if isinstance(node, AtRule) and (name is None or node.name == name):
                yield node

    def walk_rules(self, selector: str | None = None) -> Iterator[Rule]:
        for node in self.walk():
            if isinstance(node, Rule) and (selector is None or node.selector == selector):
                yield node

    def walk_decls(self, prop: str | None = None) -> Iterator[Declaration]:
        for node in self.walk():
            if isinstance(node, Declaration) and (prop is None or node.prop == prop):
                yield node


@dataclass(eq=False)
class Root(Container):
    """The document itself."""

    type: ClassVar[str] = "root"


@dataclass(eq=False)
class Rule(Container):
    """A qualified rule: ``selector { ... }``."""

    type: ClassVar[str] = "rule"

    selector: str = ""


@dataclass(eq=False)
class AtRule(Container):
    """An at-rule such as ``@media (...) { ... }`` or ``@custom-media --x (...);``."""

    type: ClassVar[str] = "atrule"

    name: str = ""
    params: str = ""
    has_block: bool = True


@dataclass(eq=False)
class Declaration(Node):
    """A ``prop: value`` pair."""

    type: ClassVar[str] = "decl"

    prop: str = ""
    value: str = ""
    important: bool = False


@dataclass(eq=False)
class Comment(Node):
    """A ``/* ... */`` comment; *text* excludes the delimiters."""

    type: ClassVar[str] = "comment"

    text: str = ""
