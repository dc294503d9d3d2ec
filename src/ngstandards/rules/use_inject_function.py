# SPDX-License-Identifier: MIT
"""Rule 3: use-inject-function — Angular classes use inject(), not constructor parameters."""

from __future__ import annotations

from ngstandards.rules.angular import (
    IS_ANGULAR,
    decorator_name,
    enclosing_class,
    has_type_annotation,
    is_parameter_property,
    method_name,
    method_parameters,
    parameter_name,
    track_classes,
)
from ngstandards.rules.base import EventKey, Handler, RuleSeverity
from ngstandards.rules.config import NoOptions
from ngstandards.rules.context import RuleContext
from ngstandards.rules.nodes import Node


def _injected_name(param: Node) -> str | None:
    """Name of a constructor parameter that looks like a DI injection, else None."""
    if is_parameter_property(param):
        return parameter_name(param)
    decorators = param.attribute_nodes("decorator")
    if decorators:
        if any(decorator_name(d) == "Inject" for d in decorators):
            return parameter_name(param)
        return None
    if has_type_annotation(param):
        return parameter_name(param)
    return None


def _looks_injected(param: Node) -> bool:
    return (
        is_parameter_property(param)
        or bool(param.attribute_nodes("decorator"))
        or has_type_annotation(param)
    )


class UseInjectFunctionRule:
    """Report each injected constructor parameter, then the constructor itself."""

    id = "use-inject-function"
    description = "Enforce using inject() function instead of constructor injection"
    default_severity = RuleSeverity.WARN
    fixable = False
    messages = {
        "useInjectFunction": (
            "Use inject() function instead of constructor injection. "
            'Move "{{ serviceName }}" to a class property with inject().'
        ),
        "avoidConstructor": (
            "Avoid using constructor for dependency injection. "
            "Use inject() function in class properties instead."
        ),
    }
    options_model = NoOptions

    def create(self, ctx: RuleContext) -> dict[EventKey, Handler]:
        def check_method(node: Node) -> None:
            if method_name(node) != "constructor" or enclosing_class(node) is None:
                return
            if not ctx.classes.inside(IS_ANGULAR):
                return
            params = method_parameters(node)
            for param in params:
                service = _injected_name(param)
                if service is not None:
                    ctx.report(param, "useInjectFunction", {"serviceName": service})
            if any(_looks_injected(p) for p in params):
                name = node.attribute("name")
                ctx.report(name if isinstance(name, Node) else node, "avoidConstructor")

        return {**track_classes(ctx), "method_definition": check_method}
