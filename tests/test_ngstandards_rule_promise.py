# SPDX-License-Identifier: MIT
"""Tests for Rule 7: no-promise-in-observable."""

from __future__ import annotations

from typing import Any

import pytest

from ngstandards.rules.base import LintReport, RuleSeverity
from ngstandards.rules.engine import RuleEngine
from ngstandards.rules.parser import parse_source
from ngstandards.rules.promise_in_observable import PromiseInObservableRule


def _run(code: str, **options: Any) -> LintReport:
    engine = RuleEngine(
        rule_classes=[PromiseInObservableRule],
        options={PromiseInObservableRule.id: options} if options else None,
    )
    return engine.run(parse_source(code, "data.service.ts"))


class TestValid:
    @pytest.mark.parametrize(
        "code",
        [
            "async function loadUser(id: string) {\n"
            "  const user = await getDoc(doc(db, 'users', id));\n"
            "  return user.data();\n"
            "}\n",
            "function saveUser(user: User) {\n"
            "  return setDoc(doc(db, 'users', user.id), user);\n"
            "}\n",
            "function getUserUpdates() {\n"
            "  return interval(1000).pipe(switchMap(() => this.loadData()));\n"
            "}\n",
            "const numbers$ = from([1, 2, 3, 4, 5]);\nconst iterable$ = from(myIterable);\n",
            "new Observable(observer => {\n  observer.next(value);\n  observer.complete();\n});\n",
            "const x$ = of(fetch('/api'));\n",
            "const y$ = from((() => [1]).call(this));\n",
        ],
    )
    def test_no_report(self, code: str) -> None:
        assert _run(code).diagnostics == []


class TestFromPromise:
    @pytest.mark.parametrize(
        "code",
        [
            "const user$ = from(getDoc(doc(db, 'users', id)));",
            "const data$ = from(fetch('/api/users'));",
            "const auth$ = from(signInWithEmailAndPassword(auth, email, password));",
            "const result$ = from(this.saveData(data));",
            "const out$ = from(this.auth.signOut());",
            "const v$ = from((async () => 42)());",
            "const w$ = from((async function () { return 1; }).call(this));",
        ],
    )
    def test_avoid_from_promise(self, code: str) -> None:
        report = _run(code)
        assert report.message_ids == ["avoidFromPromise"]
        assert report.diagnostics[0].severity == RuleSeverity.WARN

    def test_method_in_class(self) -> None:
        code = (
            "class UserApi {\n"
            "  loadUser(id: string) {\n"
            "    return from(this.getUserData(id));\n"
            "  }\n"
            "}\n"
        )
        assert _run(code).message_ids == ["avoidFromPromise"]

    def test_tracked_async_method(self) -> None:
        code = (
            "class Sync {\n"
            "  async refresh() {}\n"
            "  stream() {\n"
            "    return from(this.refresh());\n"
            "  }\n"
            "}\n"
        )
        assert _run(code).message_ids == ["avoidFromPromise"]

    def test_tracked_promise_return_type(self) -> None:
        code = (
            "class Sync {\n"
            "  token(): Promise<string> { return Promise.resolve('t'); }\n"
            "  stream() { return from(this.token()); }\n"
            "}\n"
        )
        assert _run(code).message_ids == ["avoidFromPromise"]

    def test_untracked_method(self) -> None:
        code = (
            "class Sync {\n"
            "  items(): string[] { return []; }\n"
            "  s() { return from(this.items()); }\n"
            "}\n"
        )
        assert _run(code).diagnostics == []

    def test_from_imported_from_rxjs(self) -> None:
        code = "import { from } from 'rxjs';\nconst d$ = from(fetch('/x'));\n"
        assert _run(code).message_ids == ["avoidFromPromise"]

    def test_from_imported_elsewhere(self) -> None:
        code = "import { from } from './helpers';\nconst d$ = from(fetch('/x'));\n"
        assert _run(code).diagnostics == []


class TestPromiseStatics:
    @pytest.mark.parametrize("method", ["resolve", "reject", "all", "race"])
    def test_promise_static_in_from(self, method: str) -> None:
        report = _run(f"const v$ = from(Promise.{method}(x));")
        assert report.message_ids == ["noPromiseInObservable"]

    def test_promise_all_reported_once(self) -> None:
        code = (
            "class UserApi {\n"
            "  getUserWithPosts(id: string) {\n"
            "    return from(Promise.all([\n"
            "      this.getUser(id),\n"
            "      this.getUserPosts(id)\n"
            "    ]));\n"
            "  }\n"
            "}\n"
        )
        assert _run(code).message_ids == ["noPromiseInObservable"]


class TestObservableWrapper:
    def test_async_executor(self) -> None:
        code = (
            "const user$ = new Observable(async (observer) => {\n"
            "  const user = await getDoc(doc(db, 'users', id));\n"
            "  observer.next(user.data());\n"
            "  observer.complete();\n"
            "});\n"
        )
        assert _run(code).message_ids == ["avoidObservableWrapper"]

    def test_then_in_executor(self) -> None:
        code = (
            "const data$ = new Observable(observer => {\n"
            "  fetch('/api/data').then(response => {\n"
            "    observer.next(response);\n"
            "    observer.complete();\n"
            "  });\n"
            "});\n"
        )
        assert _run(code).message_ids == ["avoidObservableWrapper"]

    def test_function_expression_executor(self) -> None:
        code = "new Observable(function (o) { Promise.resolve(1).then(v => o.next(v)); });"
        assert _run(code).message_ids == ["avoidObservableWrapper"]

    def test_other_constructor(self) -> None:
        assert _run("new Subject(async () => await x);").diagnostics == []

    def test_non_function_argument(self) -> None:
        assert _run("new Observable(subscribeFn);").diagnostics == []


class TestOptions:
    def test_custom_known_functions(self) -> None:
        code = "const d$ = from(queryDatabase('users'));"
        assert _run(code).diagnostics == []
        report = _run(code, knownPromiseFunctions=["queryDatabase"])
        assert report.message_ids == ["avoidFromPromise"]

    def test_custom_prefixes(self) -> None:
        code = "const d$ = from(this.api.readAll());"
        assert _run(code).diagnostics == []
        assert _run(code, promiseMethodPrefixes=["read"]).message_ids == ["avoidFromPromise"]
