# SPDX-License-Identifier: MIT
"""Rule 5: enforce-signal-inputs — components use input()/input.required(), not @Input()."""

from __future__ import annotations

from ngstandards.rules.angular import ANGULAR_CORE, enclosing_class, has_decorator, track_classes
from ngstandards.rules.base import TRAVERSAL_END, EventKey, Handler, RuleSeverity
from ngstandards.rules.config import NoOptions
from ngstandards.rules.context import RuleContext
from ngstandards.rules.nodes import Node

_FIELD_KINDS = ("public_field_definition", "field_definition")


class SignalInputsRule:
    """Report @Input() properties in components; once per file if input is never imported."""

    id = "enforce-signal-inputs"
    description = "Enforce the use of signal inputs instead of @Input() decorator"
    default_severity = RuleSeverity.ERROR
    fixable = False
    messages = {
        "useSignalInput": (
            "Use input() or input.required() instead of @Input() decorator. "
            "Signal inputs provide better type safety and performance."
        ),
        "missingInputImport": "Import input from @angular/core to use signal inputs.",
    }
    options_model = NoOptions

    def create(self, ctx: RuleContext) -> dict[EventKey, Handler]:
        occurrences = 0

        def record_import(node: Node) -> None:
            ctx.imports.record(node)

        def check_field(node: Node) -> None:
            nonlocal occurrences
            if enclosing_class(node) is None or not ctx.classes.inside("is-component"):
                return
            if has_decorator(node, "Input"):
                occurrences += 1
                ctx.report(node, "useSignalInput")

        def finish(program: Node) -> None:
            if occurrences and not ctx.imports.imports_from(ANGULAR_CORE, "input"):
                ctx.report(program, "missingInputImport")

        handlers: dict[EventKey, Handler] = {
            **track_classes(ctx),
            "import_statement": record_import,
            TRAVERSAL_END: finish,
        }
        for kind in _FIELD_KINDS:
            handlers[kind] = check_field
        return handlers
