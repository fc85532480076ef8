"""Projection accounting and roll-forward integrity checks."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from src.export import build_balance_sheet


def _finding(
    check: str,
    max_abs_delta: float,
    month: str,
    lhs_name: str,
    rhs_name: str,
) -> dict[str, Any]:
    return {
        "Check": check,
        "Max Abs Delta": float(max_abs_delta),
        "Month of Max Delta": month,
        "LHS": lhs_name,
        "RHS": rhs_name,
    }


def _month_of_max_delta(df: pd.DataFrame, delta: np.ndarray) -> str:
    if len(delta) == 0:
        return ""
    idx = int(np.argmax(np.abs(delta)))
    if "Month_Label" in df.columns and idx < len(df):
        return str(df.iloc[idx]["Month_Label"])
    return str(idx)


def _check_series_identity(
    findings: list[dict[str, Any]],
    df: pd.DataFrame,
    check_name: str,
    lhs_name: str,
    rhs_name: str,
    lhs: np.ndarray,
    rhs: np.ndarray,
    tol: float,
) -> None:
    delta = np.nan_to_num(np.asarray(lhs, dtype=float) - np.asarray(rhs, dtype=float), nan=0.0)
    if len(delta) == 0:
        return
    max_abs = float(np.max(np.abs(delta)))
    if max_abs > float(tol):
        findings.append(_finding(check_name, max_abs, _month_of_max_delta(df, delta), lhs_name, rhs_name))


def run_integrity_checks(df: pd.DataFrame, assumptions: dict, tol: float = 1e-3) -> list[dict[str, Any]]:
    """Return integrity findings (empty list means all checks passed)."""
    if not isinstance(df, pd.DataFrame) or df.empty:
        return [{"Check": "Dataframe not available", "Max Abs Delta": np.nan, "Month of Max Delta": "", "LHS": "", "RHS": ""}]

    findings: list[dict[str, Any]] = []
    months = df["Month_Number"].to_numpy()

    if not np.array_equal(months, np.arange(1, len(df) + 1)):
        findings.append(_finding("Month sequence", np.nan, "", "Month_Number", "1..N"))

    # P&L identities.
    _check_series_identity(
        findings,
        df,
        "Revenue identity",
        "Revenue",
        "Monthly Orders * AOV",
        df["Revenue"].to_numpy(),
        (df["Monthly Orders"] * float(assumptions["aov"])).to_numpy(),
        tol,
    )
    _check_series_identity(
        findings,
        df,
        "Acquisition spend identity",
        "Customer Acquisition Cost",
        "New Customers * CAC",
        df["Customer Acquisition Cost"].to_numpy(),
        (df["New Customers"] * float(assumptions["cac"])).to_numpy(),
        tol,
    )
    _check_series_identity(
        findings,
        df,
        "EBITDA identity",
        "EBITDA",
        "Gross Profit - Customer Acquisition Cost - Fixed Costs",
        df["EBITDA"].to_numpy(),
        (df["Gross Profit"] - df["Customer Acquisition Cost"] - float(assumptions["fixed_costs_per_month"])).to_numpy(),
        tol,
    )
    _check_series_identity(
        findings,
        df,
        "Net income identity",
        "Net Income",
        "EBITDA",
        df["Net Income"].to_numpy(),
        df["EBITDA"].to_numpy(),
        tol,
    )

    # Carried state roll-forwards.
    prev_cash = np.concatenate(([-float(assumptions["investment"])], df["Cumulative Cash"].to_numpy()[:-1]))
    _check_series_identity(
        findings,
        df,
        "Cumulative cash roll-forward",
        "Cumulative Cash",
        "Prior Cumulative Cash + EBITDA",
        df["Cumulative Cash"].to_numpy(),
        prev_cash + df["EBITDA"].to_numpy(),
        tol,
    )
    prev_active = np.concatenate(([0.0], df["Active Customers"].to_numpy(dtype=float)[:-1]))
    _check_series_identity(
        findings,
        df,
        "Active customer roll-forward",
        "Active Customers",
        "Prior Active - Churned + New",
        df["Active Customers"].to_numpy(dtype=float),
        prev_active - df["Churned Customers"].to_numpy(dtype=float) + df["New Customers"].to_numpy(dtype=float),
        tol,
    )
    active = df["Active Customers"].to_numpy(dtype=float)
    _check_series_identity(
        findings,
        df,
        "Active customers non-negative",
        "Active Customers",
        "max(0, Active Customers)",
        active,
        np.maximum(0.0, active),
        tol,
    )

    # Balance sheet must balance in the base currency.
    bs = build_balance_sheet(df, assumptions, "AED")
    _check_series_identity(
        findings,
        df,
        "Balance sheet identity",
        "Total Assets",
        "Total Liabilities + Total Equity",
        bs["Total Assets (AED)"].to_numpy(),
        (bs["Total Liabilities (AED)"] + bs["Total Equity (AED)"]).to_numpy(),
        tol,
    )

    return findings
