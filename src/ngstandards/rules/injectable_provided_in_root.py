# SPDX-License-Identifier: MIT
"""Rule 1: enforce-injectable-provided-in-root — @Injectable must say providedIn: 'root'."""

from __future__ import annotations

from ngstandards.rules.angular import (
    find_property,
    is_literal,
    object_properties,
    property_value,
    string_value,
)
from ngstandards.rules.base import EventKey, Handler, RuleSeverity
from ngstandards.rules.config import NoOptions
from ngstandards.rules.context import RuleContext
from ngstandards.rules.nodes import Node, Span
from ngstandards.rules.selectors import compile_selector

_INJECTABLE = compile_selector('decorator[call_expression.function.text="Injectable"]')

_ROOT_OBJECT = "{ providedIn: 'root' }"


class InjectableProvidedInRootRule:
    """Flag @Injectable() calls that omit providedIn or provide somewhere other than root."""

    id = "enforce-injectable-provided-in-root"
    description = "Enforce that all services use providedIn: 'root'"
    default_severity = RuleSeverity.ERROR
    fixable = True
    messages = {
        "missingProvidedIn": "Injectable services must use providedIn: 'root'",
        "incorrectProvidedIn": "Injectable services must use providedIn: 'root', not '{{ value }}'",
    }
    options_model = NoOptions

    def create(self, ctx: RuleContext) -> dict[EventKey, Handler]:
        fixer = ctx.fixer

        def check(decorator: Node) -> None:
            call_args = decorator.attribute("call_expression.arguments")
            if not isinstance(call_args, Node):
                return
            args = list(call_args.children())
            if not args:
                close_paren = Span(call_args.span.end - 1, call_args.span.end - 1)
                ctx.report(
                    decorator,
                    "missingProvidedIn",
                    fix=fixer.insert_before(close_paren, _ROOT_OBJECT),
                )
                return

            metadata = args[0]
            if metadata.kind != "object":
                return

            prop = find_property(metadata, "providedIn")
            if prop is None:
                props = object_properties(metadata)
                if not props:
                    fix = fixer.replace(metadata, _ROOT_OBJECT)
                else:
                    fix = fixer.insert_before(props[0], "providedIn: 'root', ")
                ctx.report(metadata, "missingProvidedIn", fix=fix)
                return

            value = property_value(prop)
            # Module references, shorthand and template strings are left alone
            if value is None or not is_literal(value):
                return
            literal = string_value(value)
            if literal == "root":
                return
            ctx.report(
                value,
                "incorrectProvidedIn",
                {"value": literal if literal is not None else value.text},
                fix=fixer.replace(value, "'root'"),
            )

        return {_INJECTABLE: check}
