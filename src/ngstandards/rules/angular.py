# SPDX-License-Identifier: MIT
"""Syntax helpers shared by the Angular rules.

Every helper degrades to ``None`` / empty on shapes it does not expect.
"""

from __future__ import annotations

from collections.abc import Callable

from ngstandards.rules.base import EXIT_SUFFIX, Handler
from ngstandards.rules.context import ClassFrame, RuleContext
from ngstandards.rules.nodes import Node

ANGULAR_CORE = "@angular/core"

CLASS_KINDS = ("class_declaration", "abstract_class_declaration", "class")
FUNCTION_KINDS = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)
PARAMETER_KINDS = ("required_parameter", "optional_parameter")
LITERAL_KINDS = frozenset({"string", "number", "true", "false", "null", "regex"})

# Decorator callee -> class classifier
CLASSIFIERS = {
    "Component": "is-component",
    "Injectable": "is-injectable",
    "Directive": "is-directive",
    "Pipe": "is-pipe",
}
IS_ANGULAR = "is-angular"


def text_of(node: object) -> str | None:
    """Leaf text of a node, or None."""
    if not isinstance(node, Node):
        return None
    value = node.attribute("text")
    return value if isinstance(value, str) else None


def unwrap_parens(node: Node | None) -> Node | None:
    while node is not None and node.kind == "parenthesized_expression":
        inner = next(node.children(), None)
        node = inner
    return node


# --- Decorators ---


def decorator_name(decorator: Node) -> str | None:
    """Callee name of ``@Name(...)``; bare ``@Name`` and ``@a.b()`` give None."""
    call = decorator.attribute("call_expression")
    if not isinstance(call, Node):
        return None
    callee = call.attribute("function")
    if not isinstance(callee, Node) or callee.kind != "identifier":
        return None
    return text_of(callee)


def decorator_arguments(decorator: Node) -> list[Node] | None:
    """Argument nodes of a decorator call, or None if it is not a call."""
    args = decorator.attribute("call_expression.arguments")
    if not isinstance(args, Node):
        return None
    return list(args.children())


def class_decorators(class_node: Node) -> list[Node]:
    """Decorators of a class, including ones written before ``export``."""
    decorators = list(class_node.attribute_nodes("decorator"))
    parent = class_node.parent
    if parent is not None and parent.kind == "export_statement":
        decorators = list(parent.attribute_nodes("decorator")) + decorators
    return decorators


def member_decorators(member: Node) -> list[Node]:
    """Decorators of a class member or parameter.

    Method decorators are siblings in the class body rather than children,
    so the run of decorators directly before the member is included.
    """
    own = list(member.attribute_nodes("decorator"))
    body = member.parent
    if body is None or body.kind != "class_body":
        return own
    leading: list[Node] = []
    for child in body.children():
        if child is member:
            return leading + own
        leading = [*leading, child] if child.kind == "decorator" else []
    return own


def has_decorator(node: Node, name: str) -> bool:
    return any(decorator_name(d) == name for d in member_decorators(node))


def class_name(class_node: Node) -> str | None:
    return text_of(class_node.attribute("name"))


def classify_class(class_node: Node) -> ClassFrame:
    classifiers: set[str] = set()
    for decorator in class_decorators(class_node):
        marker = CLASSIFIERS.get(decorator_name(decorator) or "")
        if marker is not None:
            classifiers.update((marker, IS_ANGULAR))
    return ClassFrame(class_name(class_node), frozenset(classifiers), class_node)


def track_classes(
    ctx: RuleContext,
    on_enter: Callable[[Node, ClassFrame], None] | None = None,
) -> dict[str, Handler]:
    """Handlers that push a ClassFrame on every class node and pop it on exit."""

    def enter(node: Node) -> None:
        frame = classify_class(node)
        ctx.classes.push(frame)
        if on_enter is not None:
            on_enter(node, frame)

    def leave(node: Node) -> None:
        ctx.classes.pop()

    handlers: dict[str, Handler] = {}
    for kind in CLASS_KINDS:
        handlers[kind] = enter
        handlers[kind + EXIT_SUFFIX] = leave
    return handlers


def enclosing_class(node: Node) -> Node | None:
    """Nearest class node that directly owns ``node`` as a member."""
    body = node.parent
    if body is None or body.kind != "class_body":
        return None
    owner = body.parent
    return owner if owner is not None and owner.kind in CLASS_KINDS else None


# --- Object literals ---


_PROPERTY_KINDS = frozenset(
    {"pair", "shorthand_property_identifier", "method_definition", "spread_element"}
)


def object_properties(obj: Node) -> list[Node]:
    return [p for p in obj.children() if p.kind in _PROPERTY_KINDS]


def property_key(prop: Node) -> str | None:
    if prop.kind == "shorthand_property_identifier":
        return text_of(prop)
    key = prop.attribute("key") if prop.kind == "pair" else prop.attribute("name")
    if not isinstance(key, Node):
        return None
    if key.kind == "string":
        value = key.attribute("value")
        return value if isinstance(value, str) else None
    return text_of(key)


def find_property(obj: Node, name: str) -> Node | None:
    for prop in object_properties(obj):
        if property_key(prop) == name:
            return prop
    return None


def property_value(prop: Node) -> Node | None:
    value = prop.attribute("value") if prop.kind == "pair" else None
    return value if isinstance(value, Node) else None


def is_literal(node: Node | None) -> bool:
    return node is not None and node.kind in LITERAL_KINDS


def string_value(node: Node | None) -> str | None:
    if node is None or node.kind != "string":
        return None
    value = node.attribute("value")
    return value if isinstance(value, str) else None


# --- Calls and functions ---


def callee(call: Node) -> Node | None:
    """Callee of a call_expression with parentheses stripped."""
    fn = call.attribute("function")
    return unwrap_parens(fn) if isinstance(fn, Node) else None


def call_arguments(call: Node) -> list[Node]:
    args = call.attribute("arguments")
    return list(args.children()) if isinstance(args, Node) else []


def member_property_name(member: Node | None) -> str | None:
    if member is None or member.kind != "member_expression":
        return None
    return text_of(member.attribute("property"))


def is_async_function(node: Node | None) -> bool:
    node = unwrap_parens(node)
    return node is not None and node.kind in FUNCTION_KINDS and node.attribute("async") is True


# --- Methods and parameters ---


def method_name(method: Node) -> str | None:
    name = method.attribute("name")
    if isinstance(name, Node) and name.kind == "string":
        return string_value(name)
    return text_of(name)


def find_constructor(class_node: Node) -> Node | None:
    body = class_node.attribute("body")
    if not isinstance(body, Node):
        return None
    for member in body.children_of_kind("method_definition"):
        if method_name(member) == "constructor":
            return member
    return None


def method_parameters(method: Node) -> list[Node]:
    params = method.attribute("parameters")
    if not isinstance(params, Node):
        return []
    return params.children_of_kind(*PARAMETER_KINDS)


def is_parameter_property(param: Node) -> bool:
    """``private x: T`` / ``readonly x: T`` constructor shorthand."""
    return isinstance(param.attribute("accessibility_modifier"), Node) or (
        param.attribute("readonly") is True
    )


def parameter_name(param: Node) -> str | None:
    pattern = param.attribute("pattern")
    if isinstance(pattern, Node) and pattern.kind == "identifier":
        return text_of(pattern)
    return None


def has_type_annotation(param: Node) -> bool:
    return isinstance(param.attribute("type"), Node)
