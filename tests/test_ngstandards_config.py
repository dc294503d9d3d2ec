# SPDX-License-Identifier: MIT
"""Tests for ngstandards.rules.config — presets and rule option validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ngstandards.rules.base import RuleSeverity
from ngstandards.rules.config import (
    PRESETS,
    ConfigError,
    NoOptions,
    load_preset,
    resolve_options,
)
from ngstandards.rules.feature_isolation import FeatureIsolationOptions
from ngstandards.rules.registry import RULE_REGISTRY


class TestPresets:
    def test_all_presets_exist(self) -> None:
        assert set(PRESETS) == {"recommended", "strict", "warnings"}

    def test_every_preset_covers_every_rule(self) -> None:
        ids = {cls.id for cls in RULE_REGISTRY}
        for preset in PRESETS.values():
            assert set(preset.severities) == ids, preset.name

    def test_strict_is_all_errors(self) -> None:
        assert set(PRESETS["strict"].severities.values()) == {RuleSeverity.ERROR}

    def test_warnings_never_errors(self) -> None:
        assert RuleSeverity.ERROR not in PRESETS["warnings"].severities.values()

    def test_recommended_disables_overlapping_rule(self) -> None:
        assert PRESETS["recommended"].severities["enforce-inject-function"] == RuleSeverity.OFF
        assert PRESETS["recommended"].severities["use-inject-function"] == RuleSeverity.ERROR


class TestLoadPreset:
    def test_cli_override_highest_priority(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NGSTANDARDS_PRESET", "warnings")
        assert load_preset(cli_preset="strict").name == "strict"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NGSTANDARDS_PRESET", "strict")
        assert load_preset().name == "strict"

    def test_default_is_recommended(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NGSTANDARDS_PRESET", raising=False)
        assert load_preset().name == "recommended"

    def test_invalid_preset_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown preset"):
            load_preset(cli_preset="nonexistent")

    def test_invalid_env_preset_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NGSTANDARDS_PRESET", "badname")
        with pytest.raises(ValueError, match="Unknown preset"):
            load_preset()


class TestResolveOptions:
    def test_defaults_when_absent(self) -> None:
        opts = resolve_options("enforce-feature-isolation", FeatureIsolationOptions, None)
        assert opts.feature_root == "src/app"
        assert opts.shared_paths == ("shared", "core")
        assert opts.report_shared_overuse is False

    def test_camel_case_keys(self) -> None:
        opts = resolve_options(
            "enforce-feature-isolation",
            FeatureIsolationOptions,
            {"featureRoot": "apps/web/src/app", "sharedPaths": ["common"]},
        )
        assert opts.feature_root == "apps/web/src/app"
        assert opts.shared_paths == ("common",)

    def test_snake_case_keys_accepted(self) -> None:
        opts = resolve_options(
            "enforce-feature-isolation", FeatureIsolationOptions, {"alias_root": "lib"}
        )
        assert opts.alias_root == "lib"

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ConfigError, match="enforce-feature-isolation"):
            resolve_options(
                "enforce-feature-isolation", FeatureIsolationOptions, {"featureRot": "src"}
            )

    def test_wrong_type_rejected_without_echoing_value(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            resolve_options(
                "enforce-feature-isolation", FeatureIsolationOptions, {"featureRoot": 987654}
            )
        message = str(exc_info.value)
        assert "featureRoot" in message
        assert "987654" not in message
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_no_options_rejects_everything(self) -> None:
        with pytest.raises(ConfigError):
            resolve_options("enforce-signal-inputs", NoOptions, {"anything": 1})

    def test_options_are_frozen(self) -> None:
        opts = resolve_options("enforce-feature-isolation", FeatureIsolationOptions, {})
        with pytest.raises(ValidationError):
            opts.feature_root = "elsewhere"  # type: ignore[misc]
