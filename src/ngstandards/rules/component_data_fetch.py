# SPDX-License-Identifier: MIT
"""Rule 6: no-component-data-fetch — components leave data loading to route resolvers.

Without type information, "this call fetches data" is a name heuristic:
an HTTP verb called on a receiver whose name mentions http/api/service, or
any member call whose method name contains a fetch keyword. Both lists are
options; expect false positives (``target()`` contains ``get``) and misses.
"""

from __future__ import annotations

from ngstandards.rules.angular import (
    callee,
    enclosing_class,
    member_property_name,
    method_name,
    text_of,
    track_classes,
    unwrap_parens,
)
from ngstandards.rules.base import EventKey, Handler, RuleSeverity
from ngstandards.rules.config import RuleOptions
from ngstandards.rules.context import RuleContext
from ngstandards.rules.nodes import Node


class ComponentDataFetchOptions(RuleOptions):
    http_methods: tuple[str, ...] = ("get", "post", "put", "patch", "delete", "head", "options")
    http_receiver_keywords: tuple[str, ...] = ("http", "api", "service")
    fetch_keywords: tuple[str, ...] = (
        "fetch",
        "load",
        "get",
        "find",
        "search",
        "query",
        "retrieveData",
    )
    lifecycle_hooks: tuple[str, ...] = ("ngOnInit", "ngAfterViewInit", "ngOnChanges")


def _receiver_name(member: Node) -> str | None:
    """``http`` for ``this.http.get`` and for ``http.get``."""
    obj = unwrap_parens(member.attribute("object"))  # type: ignore[arg-type]
    if obj is None:
        return None
    if obj.kind == "member_expression":
        return member_property_name(obj)
    return text_of(obj)


class ComponentDataFetchRule:
    """Flag HTTP calls, fetch-like calls, and async/subscribing lifecycle hooks in components."""

    id = "no-component-data-fetch"
    description = "Prevent components from fetching data directly - use resolvers instead"
    default_severity = RuleSeverity.ERROR
    fixable = False
    messages = {
        "noDataFetchInComponent": (
            "Components should not fetch data directly. "
            "Use route resolvers to load data before component initialization."
        ),
        "noHttpInComponent": (
            "HTTP calls should not be made in components. Move data fetching to a resolver."
        ),
        "noAsyncInLifecycle": (
            "Avoid async operations in component lifecycle hooks. Use resolvers for data loading."
        ),
    }
    options_model = ComponentDataFetchOptions

    def create(self, ctx: RuleContext) -> dict[EventKey, Handler]:
        opts: ComponentDataFetchOptions = ctx.options  # type: ignore[assignment]
        http_methods = frozenset(opts.http_methods)
        receivers = [k.lower() for k in opts.http_receiver_keywords]
        keywords = [k.lower() for k in opts.fetch_keywords]
        hooks = frozenset(opts.lifecycle_hooks)

        def check_call(node: Node) -> None:
            if not ctx.classes.inside("is-component"):
                return
            fn = callee(node)
            method = member_property_name(fn)
            if fn is None or method is None:
                return
            if method in http_methods:
                receiver = (_receiver_name(fn) or "").lower()
                if any(k in receiver for k in receivers):
                    ctx.report(node, "noHttpInComponent")
                    return
            lowered = method.lower()
            if any(k in lowered for k in keywords):
                ctx.report(node, "noDataFetchInComponent")

        def check_method(node: Node) -> None:
            if enclosing_class(node) is None or not ctx.classes.inside("is-component"):
                return
            if method_name(node) not in hooks:
                return
            if node.attribute("async") is True:
                ctx.report(node, "noAsyncInLifecycle")
            if ".subscribe(" in node.text:
                ctx.report(node, "noDataFetchInComponent")

        return {
            **track_classes(ctx),
            "call_expression": check_call,
            "method_definition": check_method,
        }
