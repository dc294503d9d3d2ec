# SPDX-License-Identifier: MIT
"""Rule 2: enforce-standalone-components — components declare standalone: true, no NgModules."""

from __future__ import annotations

from ngstandards.rules.angular import (
    decorator_arguments,
    find_property,
    is_literal,
    object_properties,
    property_value,
)
from ngstandards.rules.base import EventKey, Handler, RuleSeverity
from ngstandards.rules.config import NoOptions
from ngstandards.rules.context import RuleContext, import_specifier_binding
from ngstandards.rules.nodes import Node, Span
from ngstandards.rules.selectors import compile_selector

_COMPONENT = compile_selector('decorator[call_expression.function.text="Component"]')
_IMPORT = compile_selector("import_statement[source.value][import_clause]")

NG_MODULES = frozenset(
    {
        "CommonModule",
        "BrowserModule",
        "FormsModule",
        "ReactiveFormsModule",
        "HttpClientModule",
        "RouterModule",
    }
)


def _comma_after(prop: Node) -> int | None:
    """Offset of the comma that follows a property, skipping whitespace and comments."""
    text = prop.source.text
    i = prop.span.end
    while i < len(text):
        if text[i].isspace():
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = len(text) if newline < 0 else newline
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            i = len(text) if close < 0 else close + 2
        else:
            return i if text[i] == "," else None
    return None


class StandaloneComponentsRule:
    """Require standalone: true on @Component and flag NgModule imports from Angular."""

    id = "enforce-standalone-components"
    description = "Enforce that all components are standalone"
    default_severity = RuleSeverity.ERROR
    fixable = True
    messages = {
        "notStandalone": (
            'Components must be standalone. Add "standalone: true" to the component decorator'
        ),
        "standaloneNotTrue": "Components must have standalone: true, not {{ value }}",
        "noNgModule": "Do not import NgModules. Components should be standalone",
    }
    options_model = NoOptions

    def create(self, ctx: RuleContext) -> dict[EventKey, Handler]:
        fixer = ctx.fixer
        source = ctx.source_file

        def check_component(decorator: Node) -> None:
            args = decorator_arguments(decorator)
            if not args or args[0].kind != "object":
                return
            metadata = args[0]
            prop = find_property(metadata, "standalone")

            if prop is None:
                props = object_properties(metadata)
                if not props:
                    fix = fixer.replace(metadata, "{ standalone: true }")
                else:
                    selector = find_property(metadata, "selector")
                    if selector is not None:
                        indent = source.line_indent(selector.span.start)
                        comma = _comma_after(selector)
                        if comma is not None:
                            fix = fixer.insert_after(
                                Span(comma, comma + 1), f"\n{indent}standalone: true,"
                            )
                        else:
                            fix = fixer.insert_after(selector, f",\n{indent}standalone: true")
                    else:
                        indent = source.line_indent(props[0].span.start)
                        fix = fixer.insert_before(props[0], f"standalone: true,\n{indent}")
                ctx.report(metadata, "notStandalone", fix=fix)
                return

            value = property_value(prop)
            if value is None or not is_literal(value) or value.kind == "true":
                return
            ctx.report(
                value,
                "standaloneNotTrue",
                {"value": value.text},
                fix=fixer.replace(value, "true"),
            )

        def check_import(node: Node) -> None:
            module = node.attribute("source.value")
            if not isinstance(module, str) or not module.startswith("@angular/"):
                return
            named = node.attribute("import_clause.named_imports")
            if not isinstance(named, Node):
                return
            for spec in named.children_of_kind("import_specifier"):
                binding = import_specifier_binding(spec, module)
                if binding is not None and binding.imported_name in NG_MODULES:
                    ctx.report(spec, "noNgModule")

        return {_COMPONENT: check_component, _IMPORT: check_import}
