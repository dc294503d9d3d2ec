# SPDX-License-Identifier: MIT
"""Rule context — per-file, per-rule state: imports, class frames, reporting."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ngstandards.rules.base import Diagnostic, RuleSeverity
from ngstandards.rules.fixes import Fix, RuleFixer, TextEdit
from ngstandards.rules.nodes import Node, SourceFile, Span

if TYPE_CHECKING:
    from pydantic import BaseModel

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@dataclass(frozen=True)
class ImportBinding:
    """One local name bound by an import statement."""

    local_name: str
    imported_name: str  # "default" for default imports, "*" for namespace imports
    module_path: str


class ImportTracker:
    """Import bindings seen so far in the current file, keyed by local name."""

    def __init__(self) -> None:
        self._bindings: dict[str, ImportBinding] = {}

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[ImportBinding]:
        return iter(self._bindings.values())

    def record(self, node: Node) -> list[ImportBinding]:
        """Record the bindings of an import_statement node and return them."""
        module = node.attribute("source.value")
        clause = node.attribute("import_clause")
        if not isinstance(module, str) or not isinstance(clause, Node):
            return []

        added: list[ImportBinding] = []
        for part in clause.children():
            if part.kind == "identifier":
                added.append(ImportBinding(part.text, "default", module))
            elif part.kind == "namespace_import":
                local = part.attribute("identifier.text")
                if isinstance(local, str):
                    added.append(ImportBinding(local, "*", module))
            elif part.kind == "named_imports":
                for spec in part.children_of_kind("import_specifier"):
                    binding = import_specifier_binding(spec, module)
                    if binding is not None:
                        added.append(binding)
        for binding in added:
            self._bindings[binding.local_name] = binding
        return added

    def lookup(self, local_name: str) -> ImportBinding | None:
        return self._bindings.get(local_name)

    def bindings_from(self, module_path: str) -> list[ImportBinding]:
        return [b for b in self._bindings.values() if b.module_path == module_path]

    def imports_from(self, module_path: str, imported_name: str) -> bool:
        return any(b.imported_name == imported_name for b in self.bindings_from(module_path))


def _module_export_name(node: Node | None) -> str | None:
    if node is None:
        return None
    if node.kind == "string":
        value = node.attribute("value")
        return value if isinstance(value, str) else None
    text = node.attribute("text")
    return text if isinstance(text, str) else None


def import_specifier_binding(spec: Node, module_path: str) -> ImportBinding | None:
    """Binding for ``{ name }`` or ``{ name as alias }``; None on odd shapes."""
    name = spec.attribute("name")
    imported = _module_export_name(name if isinstance(name, Node) else None)
    if imported is None:
        return None
    alias = spec.attribute("alias")
    local = _module_export_name(alias if isinstance(alias, Node) else None) or imported
    return ImportBinding(local, imported, module_path)


@dataclass(frozen=True)
class ClassFrame:
    """Classification of one enclosing class declaration."""

    class_name: str | None
    classifiers: frozenset[str] = field(default_factory=frozenset)
    node: Node | None = None

    def has(self, classifier: str) -> bool:
        return classifier in self.classifiers


class ClassStack:
    """Stack of ClassFrames; depth equals the class nesting of the current node."""

    def __init__(self) -> None:
        self._frames: list[ClassFrame] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def top(self) -> ClassFrame | None:
        return self._frames[-1] if self._frames else None

    def push(self, frame: ClassFrame) -> None:
        self._frames.append(frame)

    def pop(self) -> ClassFrame:
        return self._frames.pop()

    def inside(self, classifier: str) -> bool:
        """True only when the innermost class carries the classifier."""
        top = self.top
        return top is not None and top.has(classifier)


def format_message(template: str, data: Mapping[str, str]) -> str:
    """Fill ``{{ key }}`` placeholders; unknown keys stay verbatim."""

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        return data[key] if key in data else match.group(0)

    return _PLACEHOLDER_RE.sub(_sub, template)


class RuleContext:
    """Context passed to one rule for one file's traversal."""

    def __init__(
        self,
        rule_id: str,
        messages: Mapping[str, str],
        source_file: SourceFile,
        options: BaseModel,
        severity: RuleSeverity = RuleSeverity.ERROR,
        sink: Callable[[Diagnostic], None] | None = None,
    ) -> None:
        self.rule_id = rule_id
        self.messages = messages
        self.source_file = source_file
        self.options = options
        self.severity = severity
        self.imports = ImportTracker()
        self.classes = ClassStack()
        self.fixer = RuleFixer()
        self.diagnostics: list[Diagnostic] = []
        self._sink = sink or self.diagnostics.append

    @property
    def filename(self) -> str:
        return self.source_file.filename

    @property
    def program(self) -> Node:
        assert self.source_file.root is not None
        return self.source_file.root

    def report(
        self,
        target: Node | Span,
        message_id: str,
        data: Mapping[str, Any] | None = None,
        fix: TextEdit | Sequence[TextEdit] | None = None,
    ) -> None:
        """Record a diagnostic for this rule.

        Raises:
            KeyError: If message_id is not one of the rule's messages.
            FixError: If the fix edits overlap or fall outside the source.
        """
        template = self.messages[message_id]
        str_data = {k: _stringify(v) for k, v in (data or {}).items()}
        built_fix = None
        if fix is not None:
            edits = [fix] if isinstance(fix, TextEdit) else list(fix)
            built_fix = Fix.from_edits(edits, len(self.source_file))
        span = target.span if isinstance(target, Node) else target
        self._sink(
            Diagnostic(
                rule_id=self.rule_id,
                message_id=message_id,
                message=format_message(template, str_data),
                span=span,
                severity=self.severity,
                data=str_data,
                fix=built_fix,
            )
        )


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
