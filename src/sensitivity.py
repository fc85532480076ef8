"""One-way sensitivity analysis helpers."""

from __future__ import annotations

from copy import deepcopy

import pandas as pd

from src.defaults import PERCENT_FIELDS, TUNABLE_FIELDS
from src.metrics import headline_row
from src.model import run_model


DEFAULT_SENSITIVITY_DRIVERS = list(TUNABLE_FIELDS)

TARGET_OPTIONS = [
    "Month 12 EBITDA",
    "Month 12 Revenue",
    "Month 60 EBITDA",
    "Ending Cumulative Cash",
    "Minimum Cumulative Cash",
    "Total Revenue",
    "Total EBITDA",
    "LTV/CAC Ratio",
]

# Targets reported as plain ratios rather than currency amounts.
RATIO_TARGETS = {"LTV/CAC Ratio"}


def is_money_target(target_metric: str) -> bool:
    return target_metric not in RATIO_TARGETS


def available_sensitivity_drivers(inputs: dict) -> list[str]:
    drivers = []
    for k, v in inputs.items():
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            continue
        drivers.append(k)
    return sorted(drivers)


def evaluate_outputs(df: pd.DataFrame) -> dict:
    month_12 = headline_row(df, 12)
    return {
        "Month 12 EBITDA": float(month_12["EBITDA"]),
        "Month 12 Revenue": float(month_12["Revenue"]),
        "Month 60 EBITDA": float(df["EBITDA"].iloc[-1]),
        "Ending Cumulative Cash": float(df["Cumulative Cash"].iloc[-1]),
        "Minimum Cumulative Cash": float(df["Cumulative Cash"].min()),
        "Total Revenue": float(df["Revenue"].sum()),
        "Total EBITDA": float(df["EBITDA"].sum()),
        "LTV/CAC Ratio": float(df["LTV/CAC Ratio"].iloc[0]),
    }


def _shocked_value(driver: str, value: float, mult: float) -> float:
    shocked = float(value) * mult
    if driver in PERCENT_FIELDS:
        # Churn must stay strictly positive for the lifetime calculation.
        shocked = min(max(shocked, 0.01), 100.0)
    return shocked


def run_one_way_sensitivity(base_inputs: dict, delta_pct: float, drivers: list[str] | None = None) -> pd.DataFrame:
    base = evaluate_outputs(run_model(base_inputs))

    if drivers is None:
        drivers = [d for d in DEFAULT_SENSITIVITY_DRIVERS if d in base_inputs]

    rows = []
    for driver in drivers:
        if driver not in base_inputs or not isinstance(base_inputs[driver], (int, float)):
            continue
        for case, mult in [("Low", 1 - delta_pct), ("High", 1 + delta_pct)]:
            scenario = deepcopy(base_inputs)
            scenario[driver] = _shocked_value(driver, scenario[driver], mult)
            out = evaluate_outputs(run_model(scenario))
            rows.append(
                {
                    "Driver": driver,
                    "Case": case,
                    "Input Value": scenario[driver],
                    **{k: out[k] for k in base.keys()},
                    **{f"Delta {k}": out[k] - base[k] for k in base.keys()},
                }
            )

    return pd.DataFrame(rows)


def tornado_frame(sens_df: pd.DataFrame, target_metric: str) -> pd.DataFrame:
    """Low/High deltas per driver ordered by swing for a tornado chart."""
    delta_col = f"Delta {target_metric}"
    if sens_df.empty or delta_col not in sens_df.columns:
        return pd.DataFrame(columns=["Driver", "Low", "High", "Swing"])
    pivot = sens_df.pivot_table(index="Driver", columns="Case", values=delta_col, aggfunc="first").reset_index()
    for case in ("Low", "High"):
        if case not in pivot.columns:
            pivot[case] = 0.0
    pivot["Swing"] = (pivot["High"] - pivot["Low"]).abs()
    out = pivot[["Driver", "Low", "High", "Swing"]].sort_values("Swing", ascending=True).reset_index(drop=True)
    out.columns.name = None
    return out
