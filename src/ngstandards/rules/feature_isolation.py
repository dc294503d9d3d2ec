# SPDX-License-Identifier: MIT
"""Rule 8: enforce-feature-isolation — features import only from themselves and shared code.

Purely path-based. The feature of a file is the first folder under
``featureRoot`` that is not a shared path; files outside a feature are not
checked. Relative imports resolve against the importing file's directory,
``@/x`` resolves to ``<aliasRoot>/x``, and ``@shared/x`` style aliases name
a shared path directly.
"""

from __future__ import annotations

import posixpath
import re

from ngstandards.rules.angular import string_value
from ngstandards.rules.base import EventKey, Handler, RuleSeverity
from ngstandards.rules.config import RuleOptions
from ngstandards.rules.context import RuleContext
from ngstandards.rules.nodes import Node

_ARCHITECTURAL = tuple(
    re.compile(p)
    for p in (
        r"/services?/",
        r"/models?/",
        r"/guards?/",
        r"/stores?/",
        r"\.service$",
        r"\.model$",
        r"\.guard$",
        r"\.store$",
    )
)
_SERVICE_NAME = re.compile(r"/([^/]+)\.(?:service|model|guard|store)")
_SHARED_MODULE = re.compile(r"shared/([^/]+)")


class FeatureIsolationOptions(RuleOptions):
    feature_root: str = "src/app"
    shared_paths: tuple[str, ...] = ("shared", "core")
    alias_root: str = "src"
    report_shared_overuse: bool = False


def is_architectural(import_path: str) -> bool:
    """Service, model, guard or store import."""
    return any(p.search(import_path) for p in _ARCHITECTURAL)


class FeatureIsolationRule:
    """Report cross-feature imports and feature-owned code imported from shared folders."""

    id = "enforce-feature-isolation"
    description = "Enforce feature isolation - features should not import from other features"
    default_severity = RuleSeverity.ERROR
    fixable = False
    messages = {
        "crossFeatureImport": (
            'Feature "{{ currentFeature }}" should not import from feature '
            '"{{ importedFeature }}". Features must be isolated'
        ),
        "importFromShared": (
            'Feature "{{ feature }}" is importing "{{ service }}" which should be '
            "in the feature folder, not in shared"
        ),
        "sharedOveruse": (
            'Consider moving "{{ module }}" to a specific feature '
            "if it's not used by 3+ features"
        ),
    }
    options_model = FeatureIsolationOptions

    def create(self, ctx: RuleContext) -> dict[EventKey, Handler]:
        opts: FeatureIsolationOptions = ctx.options  # type: ignore[assignment]
        shared = frozenset(opts.shared_paths)
        feature_pattern = re.compile(re.escape(opts.feature_root.rstrip("/")) + r"/([^/]+)/")
        alias_root = opts.alias_root.rstrip("/")
        filename = ctx.filename.replace("\\", "/")

        def feature_of(path: str) -> str | None:
            match = feature_pattern.search(path)
            if match is None or match.group(1) in shared:
                return None
            return match.group(1)

        def is_shared_import(import_path: str) -> bool:
            return any(
                f"/{s}/" in import_path
                or import_path.startswith((f"{s}/", f"@{s}/"))
                for s in shared
            )

        def is_local(import_path: str) -> bool:
            return import_path.startswith((".", "@/")) or any(
                import_path.startswith(f"@{s}/") for s in shared
            )

        def resolve(import_path: str) -> str:
            if import_path.startswith("."):
                return posixpath.normpath(posixpath.join(posixpath.dirname(filename), import_path))
            if import_path.startswith("@/"):
                return f"{alias_root}/{import_path[2:]}"
            return import_path

        current = feature_of(filename)

        def check_import(node: Node) -> None:
            source = node.attribute("source")
            import_path = string_value(source if isinstance(source, Node) else None)
            if current is None or import_path is None or not is_local(import_path):
                return
            imported = feature_of(resolve(import_path))
            if imported is not None and imported != current:
                ctx.report(
                    node,
                    "crossFeatureImport",
                    {"currentFeature": current, "importedFeature": imported},
                )
            if not (is_shared_import(import_path) and is_architectural(import_path)):
                return
            match = _SERVICE_NAME.search(import_path)
            ctx.report(
                node,
                "importFromShared",
                {"feature": current, "service": match.group(1) if match else "module"},
            )
            if opts.report_shared_overuse:
                module = _SHARED_MODULE.search(import_path)
                if module is not None:
                    ctx.report(node, "sharedOveruse", {"module": module.group(1)})

        return {"import_statement": check_import}
