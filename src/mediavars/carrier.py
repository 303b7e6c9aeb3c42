"""Carrier rules: reserved rules that hold externalized declarations and step state.

A carrier is an ordinary :class:`Rule` whose selector is
:data:`CARRIER_SELECTOR`.  It plays one of two roles:

* a *wrapper* carrier is the parent of exactly one condition at-rule and holds
  the placeholder declarations extracted from that at-rule's params;
* the *state* carrier is a top-level rule holding the single
  :data:`STEP_PROPERTY` declaration that records which step runs next.

The reserved names below are fixed for the whole process.
"""

from __future__ import annotations

from mediavars.model.tree import AtRule, Comment, Container, Declaration, Node, Root, Rule

__all__ = [
    "CARRIER_SELECTOR",
    "PLACEHOLDER_PREFIX",
    "STEP_PROPERTY",
    "create_carrier_rule",
    "create_state_carrier",
    "ensure_carrier",
    "find_state_declaration",
    "is_carrier_rule",
    "is_state_carrier",
    "unwrap",
    "wrap",
]

CARRIER_SELECTOR = "::-media-variables"
STEP_PROPERTY = "-media-variables-step"
PLACEHOLDER_PREFIX = "-mv-"

CARRIER_COMMENT = (
    "If you can see this comment, media-variables probably ran only once.\n"
    "Add it to the plugin list a second time, after the stages that resolve\n"
    "var() and calc() in declarations.\n\n"
    "Otherwise, it's a bug in media-variables."
)


def is_carrier_rule(node: Node | None) -> bool:
    return isinstance(node, Rule) and node.selector == CARRIER_SELECTOR


def is_state_carrier(node: Node | None) -> bool:
    """True for a carrier holding the step declaration."""
    if not is_carrier_rule(node):
        return False
    assert isinstance(node, Rule)
    return any(
        isinstance(child, Declaration) and child.prop == STEP_PROPERTY for child in node.nodes
    )


def create_carrier_rule() -> Rule:
    """Create an empty carrier holding only the explanatory comment."""
    rule = Rule(selector=CARRIER_SELECTOR)
    rule.append(Comment(text=CARRIER_COMMENT))
    return rule


def wrap(node: Node, carrier: Rule) -> Rule:
    """Put *carrier* in *node*'s place and move *node* inside it.

    The node is moved, not copied, and the carrier takes over its source so
    diagnostics raised against the carrier still point at the original rule.
    """
    parent = node.parent
    if parent is None:
        raise ValueError("Cannot wrap a detached node")
    parent.insert_before(node, carrier)
    carrier.append(node)
    carrier.source = node.source
    return carrier


def unwrap(node: Node) -> Node:
    """Move *node* back to its carrier's position and delete the carrier."""
    carrier = node.parent
    if not is_carrier_rule(carrier):
        raise ValueError("Node is not wrapped in a carrier rule")
    assert isinstance(carrier, Rule)
    grandparent = carrier.parent
    if grandparent is None:
        raise ValueError("Carrier rule is detached from the document")
    grandparent.insert_before(carrier, node)
    carrier.remove()
    return node


def ensure_carrier(at_rule: AtRule) -> Rule:
    """Return the wrapper carrier of *at_rule*, wrapping it in a new one if needed."""
    if is_carrier_rule(at_rule.parent):
        assert isinstance(at_rule.parent, Rule)
        return at_rule.parent
    return wrap(at_rule, create_carrier_rule())


def find_state_declaration(root: Container) -> Declaration | None:
    """Return the step declaration of the document's state carrier, if any."""
    for node in root.nodes:
        if not is_carrier_rule(node):
            continue
        assert isinstance(node, Rule)
        for child in node.nodes:
            if isinstance(child, Declaration) and child.prop == STEP_PROPERTY:
                return child
    return None


def create_state_carrier(root: Root, step: int = 0) -> Declaration:
    """Insert a state carrier as the first node of *root*; return its step declaration."""
    carrier = create_carrier_rule()
    declaration = Declaration(prop=STEP_PROPERTY, value=str(step))
    carrier.append(declaration)
    root.prepend(carrier)
    return declaration
