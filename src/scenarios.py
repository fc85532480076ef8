"""Named scenario presets and percentile-driven assumption adjustment."""

from __future__ import annotations

from copy import deepcopy

from src.defaults import DEFAULTS, TUNABLE_FIELDS
from src.model import round_half_up


SCENARIO_PRESETS = {
    "conservative": {
        "investment": 300000.0,
        "orders_per_day": 60.0,
        "aov": 80.0,
        "cac": 90.0,
        "monthly_churn": 12.0,
        "contribution_margin": 32.0,
        "fixed_costs_per_month": 65000.0,
    },
    "balanced": deepcopy(DEFAULTS),
    "aggressive": {
        "investment": 500000.0,
        "orders_per_day": 150.0,
        "aov": 110.0,
        "cac": 60.0,
        "monthly_churn": 7.0,
        "contribution_margin": 42.0,
        "fixed_costs_per_month": 110000.0,
    },
}

LEGACY_SCENARIO_ALIASES = {
    "bear": "conservative",
    "base": "balanced",
    "bull": "aggressive",
}

SCENARIO_LABELS = {
    "conservative": "Conservative (lean launch)",
    "balanced": "Balanced",
    "aggressive": "Aggressive (rapid scale)",
}

PERCENTILE_MIN = 10
PERCENTILE_MAX = 90
PERCENTILE_MEDIAN = 50

PERCENTILE_RANGES = {
    "orders_per_day": {"p10": 20.0, "p50": 100.0, "p90": 200.0},
    "aov": {"p10": 50.0, "p50": 95.0, "p90": 150.0},
    "cac": {"p10": 40.0, "p50": 75.0, "p90": 120.0},
    "monthly_churn": {"p10": 5.0, "p50": 10.0, "p90": 20.0},
    "contribution_margin": {"p10": 25.0, "p50": 36.0, "p90": 50.0},
    "fixed_costs_per_month": {"p10": 50000.0, "p50": 85000.0, "p90": 150000.0},
}


def scenario_names() -> list[str]:
    return list(SCENARIO_PRESETS.keys())


def resolve_scenario_name(name: str) -> str:
    key = str(name).strip().lower()
    key = LEGACY_SCENARIO_ALIASES.get(key, key)
    if key not in SCENARIO_PRESETS:
        raise ValueError(f"Unknown scenario: {name}")
    return key


def load_scenario(name: str) -> dict:
    """Return a complete, independent copy of a preset's assumptions."""
    return deepcopy(SCENARIO_PRESETS[resolve_scenario_name(name)])


def clamp_percentile(percentile: float) -> float:
    return float(min(PERCENTILE_MAX, max(PERCENTILE_MIN, float(percentile))))


def parameter_from_percentile(percentile: float, anchors: dict) -> int:
    p = clamp_percentile(percentile)
    if p <= PERCENTILE_MEDIAN:
        ratio = (p - PERCENTILE_MIN) / (PERCENTILE_MEDIAN - PERCENTILE_MIN)
        return round_half_up(anchors["p10"] + (anchors["p50"] - anchors["p10"]) * ratio)
    ratio = (p - PERCENTILE_MEDIAN) / (PERCENTILE_MAX - PERCENTILE_MEDIAN)
    return round_half_up(anchors["p50"] + (anchors["p90"] - anchors["p50"]) * ratio)


def percentile_inputs(percentile: float) -> dict:
    return {field: float(parameter_from_percentile(percentile, PERCENTILE_RANGES[field])) for field in TUNABLE_FIELDS}


def apply_percentile(inputs: dict, percentile: float) -> dict:
    """Replace every tunable field with its percentile value; other fields are kept."""
    out = deepcopy(inputs)
    out.update(percentile_inputs(percentile))
    return out
