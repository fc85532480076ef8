"""Assumption schema helpers, constants, and migration utilities."""

from __future__ import annotations

import math
from copy import deepcopy
from typing import Any

from src.defaults import DEFAULTS, PERCENT_FIELDS


SCHEMA_VERSION = 1
SCENARIO_TYPE = "scenario"
LAST_INPUTS_TYPE = "last_inputs"

# Keys written by the browser calculator's local storage echo.
LEGACY_KEY_MAP = {
    "ordersPerDay": "orders_per_day",
    "monthlyChurn": "monthly_churn",
    "contributionMargin": "contribution_margin",
    "fixedCostsPerMonth": "fixed_costs_per_month",
}


def _coerce_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("boolean is not a numeric assumption")
    val = float(value)
    if not math.isfinite(val):
        raise ValueError("non-finite assumption")
    return val


def migrate_assumptions(raw_inputs: dict) -> tuple[dict, list[str], list[str]]:
    """Sanitise incoming assumptions onto the current schema.

    Returns (assumptions, warnings, unknown_keys). Missing fields take their
    default, unparseable values are reset to default with a warning,
    percentages are clamped to [0, 100] and other fields to be non-negative.
    Zero churn or CAC are left in place for validation to reject.
    """
    warnings: list[str] = []
    unknown_keys: list[str] = []
    inputs = deepcopy(DEFAULTS)
    payload = raw_inputs if isinstance(raw_inputs, dict) else {}

    legacy_used = False
    for k, v in payload.items():
        if k in inputs:
            inputs[k] = v
        elif k in LEGACY_KEY_MAP:
            target = LEGACY_KEY_MAP[k]
            if target not in payload:
                inputs[target] = v
                legacy_used = True
        else:
            unknown_keys.append(k)
    if legacy_used:
        warnings.append("Migrated camelCase assumption keys from the legacy calculator.")

    for key in DEFAULTS:
        try:
            val = _coerce_float(inputs[key])
        except (TypeError, ValueError):
            inputs[key] = float(DEFAULTS[key])
            warnings.append(f"{key} invalid and reset to default.")
            continue
        if key in PERCENT_FIELDS:
            clamped = min(100.0, max(0.0, val))
        else:
            clamped = max(0.0, val)
        if clamped != val:
            warnings.append(f"{key}={val:g} clamped to {clamped:g}.")
        inputs[key] = clamped

    return inputs, warnings, sorted(unknown_keys)


def migrate_import_payload(payload: dict) -> tuple[dict, dict | None, list[str], list[str]]:
    """Parse an imported scenario bundle or bare assumptions dict."""
    if not isinstance(payload, dict):
        return deepcopy(DEFAULTS), None, ["Import payload is not a JSON object."], []

    payload_type = payload.get("type")
    if payload_type in {SCENARIO_TYPE, LAST_INPUTS_TYPE}:
        assumptions, warnings, unknown = migrate_assumptions(payload.get("assumptions", {}))
        ui_state = payload.get("ui_state") if isinstance(payload.get("ui_state"), dict) else None
        version = payload.get("schema_version")
        if version != SCHEMA_VERSION:
            warnings.append(f"Imported schema_version={version}; migrated to schema_version={SCHEMA_VERSION}.")
        return assumptions, ui_state, warnings, unknown

    assumptions, warnings, unknown = migrate_assumptions(payload)
    warnings.append("Imported legacy assumption JSON without bundle metadata.")
    return assumptions, None, warnings, unknown
