# SPDX-License-Identifier: MIT
"""Rule 4: enforce-inject-function — @Injectable services must not use constructor injection."""

from __future__ import annotations

from ngstandards.rules.angular import (
    ANGULAR_CORE,
    find_constructor,
    has_type_annotation,
    is_parameter_property,
    method_parameters,
    track_classes,
)
from ngstandards.rules.base import EventKey, Handler, RuleSeverity
from ngstandards.rules.config import NoOptions
from ngstandards.rules.context import ClassFrame, RuleContext
from ngstandards.rules.nodes import Node


class InjectFunctionRule:
    """Report constructor injection in services, and the file when inject is not imported."""

    id = "enforce-inject-function"
    description = (
        "Enforce the use of inject() function instead of constructor injection in services"
    )
    default_severity = RuleSeverity.ERROR
    fixable = False
    messages = {
        "useInjectFunction": (
            "Use inject() function instead of constructor injection. "
            "Example: private userService = inject(UserService);"
        ),
    }
    options_model = NoOptions

    def create(self, ctx: RuleContext) -> dict[EventKey, Handler]:
        def record_import(node: Node) -> None:
            ctx.imports.record(node)

        def check_class(node: Node, frame: ClassFrame) -> None:
            if not frame.has("is-injectable"):
                return
            ctor = find_constructor(node)
            if ctor is None:
                return
            params = method_parameters(ctor)
            if not any(is_parameter_property(p) or has_type_annotation(p) for p in params):
                return
            ctx.report(ctor, "useInjectFunction")
            if not ctx.imports.imports_from(ANGULAR_CORE, "inject"):
                ctx.report(ctx.program, "useInjectFunction")

        return {**track_classes(ctx, on_enter=check_class), "import_statement": record_import}
