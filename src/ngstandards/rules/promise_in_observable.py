# SPDX-License-Identifier: MIT
"""Rule 7: no-promise-in-observable — keep Promises out of RxJS pipelines.

Promise-returning calls are recognised by name only: a configured list of
known functions, method-name prefixes, and methods of the current file that
are ``async`` or declare a ``Promise`` return type. A method is only known
once the walk has passed its definition.
"""

from __future__ import annotations

from ngstandards.rules.angular import (
    FUNCTION_KINDS,
    call_arguments,
    callee,
    is_async_function,
    member_property_name,
    method_name,
    text_of,
    unwrap_parens,
)
from ngstandards.rules.base import EventKey, Handler, RuleSeverity
from ngstandards.rules.config import RuleOptions
from ngstandards.rules.context import RuleContext
from ngstandards.rules.nodes import Node

_PROMISE_STATICS = frozenset({"resolve", "reject", "all", "race"})
_WRAPPER_MARKERS = ("await", ".then(", "Promise.")


class PromiseInObservableOptions(RuleOptions):
    known_promise_functions: tuple[str, ...] = (
        "fetch",
        "getDoc",
        "getDocs",
        "setDoc",
        "updateDoc",
        "deleteDoc",
        "addDoc",
        "signInWithPopup",
        "signInWithEmailAndPassword",
        "createUserWithEmailAndPassword",
        "signOut",
    )
    promise_method_prefixes: tuple[str, ...] = (
        "get",
        "fetch",
        "load",
        "save",
        "create",
        "update",
        "delete",
    )


def _is_promise_static(fn: Node | None) -> bool:
    """``Promise.resolve`` and friends."""
    if fn is None or fn.kind != "member_expression":
        return False
    receiver = unwrap_parens(fn.attribute("object"))  # type: ignore[arg-type]
    return text_of(receiver) == "Promise" and member_property_name(fn) in _PROMISE_STATICS


def _invokes_async_function(fn: Node | None) -> bool:
    """``(async () => ...)()`` or ``(async () => ...).call(...)``."""
    if is_async_function(fn):
        return True
    if fn is None or fn.kind != "member_expression":
        return False
    target = fn.attribute("object")
    return is_async_function(target if isinstance(target, Node) else None)


def _returns_promise(method: Node) -> bool:
    if method.attribute("async") is True:
        return True
    return_type = method.attribute("return_type")
    return isinstance(return_type, Node) and "Promise" in return_type.text


class PromiseInObservableRule:
    """Report from(promise), Promise statics inside from(), and Observables wrapping async work."""

    id = "no-promise-in-observable"
    description = "Prevent mixing Promises with Observables"
    default_severity = RuleSeverity.WARN
    fixable = False
    messages = {
        "noPromiseInObservable": (
            "Do not mix Promises with Observables. "
            "Use Observable-based APIs or convert at service boundary."
        ),
        "avoidFromPromise": (
            "Avoid using from() with Promises. "
            "Use Observable-based APIs (e.g., AngularFire observables) instead."
        ),
        "avoidObservableWrapper": (
            "Avoid wrapping Promises in Observables. Use native Observable APIs."
        ),
    }
    options_model = PromiseInObservableOptions

    def create(self, ctx: RuleContext) -> dict[EventKey, Handler]:
        opts: PromiseInObservableOptions = ctx.options  # type: ignore[assignment]
        known = frozenset(opts.known_promise_functions)
        prefixes = tuple(opts.promise_method_prefixes)
        promise_methods: set[str] = set()

        def is_rxjs_from(fn: Node | None) -> bool:
            if fn is None or fn.kind != "identifier" or text_of(fn) != "from":
                return False
            binding = ctx.imports.lookup("from")
            if binding is None:
                return True
            return binding.imported_name == "from" and binding.module_path.startswith("rxjs")

        def is_promise_call(call: Node) -> bool:
            fn = callee(call)
            if fn is None:
                return False
            if fn.kind == "identifier":
                name = text_of(fn)
                return name in known or name in promise_methods
            method = member_property_name(fn)
            if method is None:
                return False
            return method in known or method in promise_methods or method.startswith(prefixes)

        def record_import(node: Node) -> None:
            ctx.imports.record(node)

        def record_method(node: Node) -> None:
            name = method_name(node)
            if name is not None and _returns_promise(node):
                promise_methods.add(name)

        def check_call(node: Node) -> None:
            if not is_rxjs_from(callee(node)):
                return
            args = call_arguments(node)
            arg = unwrap_parens(args[0]) if args else None
            if arg is None or arg.kind != "call_expression":
                return
            fn = callee(arg)
            if _is_promise_static(fn):
                ctx.report(node, "noPromiseInObservable")
            elif is_promise_call(arg) or _invokes_async_function(fn):
                ctx.report(node, "avoidFromPromise")

        def check_new(node: Node) -> None:
            if text_of(node.attribute("constructor")) != "Observable":
                return
            args = node.attribute("arguments")
            first = next(args.children(), None) if isinstance(args, Node) else None
            first = unwrap_parens(first)
            if first is None or first.kind not in FUNCTION_KINDS:
                return
            body = first.text
            if any(marker in body for marker in _WRAPPER_MARKERS):
                ctx.report(node, "avoidObservableWrapper")

        return {
            "import_statement": record_import,
            "method_definition": record_method,
            "call_expression": check_call,
            "new_expression": check_new,
        }
