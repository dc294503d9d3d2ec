# SPDX-License-Identifier: MIT
"""Presets and per-rule option validation for the lint engine."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ngstandards.rules.base import NgStandardsError, RuleSeverity


class ConfigError(NgStandardsError):
    """Rule options or preset selection are invalid."""


class RuleOptions(BaseModel):
    """Base for rule option schemas: camelCase keys, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class NoOptions(RuleOptions):
    """Schema for rules that accept no options."""


def _error_summary(e: ValidationError) -> str:
    """Field paths and error type codes only; never echoes raw values."""
    parts: list[str] = []
    for err in e.errors():
        loc = ".".join(str(loc) for loc in err["loc"])
        parts.append(f"{loc}: {err['type']}")
    return "; ".join(parts)


def resolve_options(
    rule_id: str, model: type[BaseModel], raw: Mapping[str, Any] | None
) -> BaseModel:
    """Validate raw options against a rule's schema, falling back to defaults.

    Raises:
        ConfigError: If a value has the wrong shape or a key is unknown.
    """
    try:
        return model.model_validate(dict(raw or {}))
    except ValidationError as e:
        msg = f"Invalid options for rule {rule_id!r}: {_error_summary(e)}"
        raise ConfigError(msg) from e


@dataclass(frozen=True)
class PresetConfig:
    """A named rule-id -> severity bundle."""

    name: str
    severities: Mapping[str, RuleSeverity]


_ERROR = RuleSeverity.ERROR
_WARN = RuleSeverity.WARN
_OFF = RuleSeverity.OFF

PRESETS: dict[str, PresetConfig] = {
    "recommended": PresetConfig(
        name="recommended",
        severities={
            "enforce-injectable-provided-in-root": _ERROR,
            "use-inject-function": _ERROR,
            "enforce-standalone-components": _ERROR,
            "no-promise-in-observable": _ERROR,
            "enforce-feature-isolation": _ERROR,
            "enforce-signal-inputs": _ERROR,
            "no-component-data-fetch": _WARN,
            # Overlaps use-inject-function; opt in explicitly.
            "enforce-inject-function": _OFF,
        },
    ),
    "strict": PresetConfig(
        name="strict",
        severities={
            "enforce-injectable-provided-in-root": _ERROR,
            "use-inject-function": _ERROR,
            "enforce-standalone-components": _ERROR,
            "no-promise-in-observable": _ERROR,
            "enforce-feature-isolation": _ERROR,
            "enforce-signal-inputs": _ERROR,
            "no-component-data-fetch": _ERROR,
            "enforce-inject-function": _ERROR,
        },
    ),
    "warnings": PresetConfig(
        name="warnings",
        severities={
            "enforce-injectable-provided-in-root": _WARN,
            "use-inject-function": _WARN,
            "enforce-standalone-components": _WARN,
            "no-promise-in-observable": _WARN,
            "enforce-feature-isolation": _WARN,
            "enforce-signal-inputs": _WARN,
            "no-component-data-fetch": _WARN,
            "enforce-inject-function": _OFF,
        },
    ),
}


def load_preset(cli_preset: str | None = None) -> PresetConfig:
    """Load preset config with CLI > env > default priority.

    Args:
        cli_preset: Preset name from CLI --preset flag (highest priority).

    Returns:
        PresetConfig for the resolved preset.

    Raises:
        ValueError: If the preset name is not recognized.
    """
    name = cli_preset or os.environ.get("NGSTANDARDS_PRESET", "recommended")
    if name not in PRESETS:
        msg = f"Unknown preset: {name!r}. Valid presets: {sorted(PRESETS.keys())}"
        raise ValueError(msg)
    return PRESETS[name]
