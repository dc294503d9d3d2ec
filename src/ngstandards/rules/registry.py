# SPDX-License-Identifier: MIT
"""Rule class registry — explicit, ordered list of all rule classes."""

from __future__ import annotations

from ngstandards.rules.base import Rule
from ngstandards.rules.component_data_fetch import ComponentDataFetchRule
from ngstandards.rules.feature_isolation import FeatureIsolationRule
from ngstandards.rules.inject_function import InjectFunctionRule
from ngstandards.rules.injectable_provided_in_root import InjectableProvidedInRootRule
from ngstandards.rules.promise_in_observable import PromiseInObservableRule
from ngstandards.rules.signal_inputs import SignalInputsRule
from ngstandards.rules.standalone_components import StandaloneComponentsRule
from ngstandards.rules.use_inject_function import UseInjectFunctionRule

RULE_REGISTRY: list[type[Rule]] = [
    InjectableProvidedInRootRule,
    UseInjectFunctionRule,
    StandaloneComponentsRule,
    PromiseInObservableRule,
    FeatureIsolationRule,
    SignalInputsRule,
    InjectFunctionRule,
    ComponentDataFetchRule,
]
