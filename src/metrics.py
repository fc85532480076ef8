"""Metric calculations for dashboard and summary outputs."""

from __future__ import annotations

import math

import pandas as pd


HEADLINE_MONTH = 12
CHART_SAMPLE_STEP = 6
HEALTHY_LTV_CAC = 3.0


def _safe_div(a: float, b: float) -> float:
    return float(a / b) if b else 0.0


def _first_month(df: pd.DataFrame, mask: pd.Series) -> int | None:
    hits = df.loc[mask, "Month_Number"]
    if hits.empty:
        return None
    return int(hits.iloc[0])


def headline_row(df: pd.DataFrame, month: int = HEADLINE_MONTH) -> pd.Series:
    """Row for the headline month, falling back to the last projected month."""
    match = df.loc[df["Month_Number"] == int(month)]
    if match.empty:
        return df.iloc[-1]
    return match.iloc[0]


def sample_every(df: pd.DataFrame, step: int = CHART_SAMPLE_STEP) -> pd.DataFrame:
    """Every step-th month starting with month 1, as plotted on the charts."""
    return df.iloc[:: max(1, int(step))].reset_index(drop=True)


def compute_metrics(df: pd.DataFrame) -> dict:
    by_year = df.groupby("Year", as_index=False).sum(numeric_only=True)
    full_years = len(df) // 12

    revenue_by_year = by_year[["Year", "Revenue"]].copy()
    ebitda_by_year = by_year[["Year", "EBITDA"]].copy()
    ebitda_margin = by_year.apply(lambda r: _safe_div(r["EBITDA"], r["Revenue"]), axis=1)
    year_end_customers = df.groupby("Year")["Active Customers"].last()

    min_idx = df["Cumulative Cash"].idxmin()
    headline = headline_row(df)

    metrics = {
        "revenue_by_year": revenue_by_year,
        "ebitda_by_year": ebitda_by_year,
        "ebitda_margin_by_year": ebitda_margin,
        "year_end_customers": year_end_customers,
        "total_revenue": float(df["Revenue"].sum()),
        "total_ebitda": float(df["EBITDA"].sum()),
        "total_acquisition_spend": float(df["Customer Acquisition Cost"].sum()),
        "ending_cumulative_cash": float(df["Cumulative Cash"].iloc[-1]),
        "minimum_cumulative_cash": float(df.loc[min_idx, "Cumulative Cash"]),
        "minimum_cumulative_cash_month": int(df.loc[min_idx, "Month_Number"]),
        "ebitda_break_even_month": _first_month(df, df["EBITDA"] >= 0),
        "payback_month": _first_month(df, df["Cumulative Cash"] >= 0),
        "burn_months": int((df["Burn Rate"] > 0).sum()),
        "headline_month": int(headline["Month_Number"]),
        "headline_ltv_cac": float(headline["LTV/CAC Ratio"]),
        "headline_ltv_cac_healthy": bool(headline["LTV/CAC Ratio"] > HEALTHY_LTV_CAC),
        "headline_arpu": float(headline["ARPU"]),
        "headline_revenue": float(headline["Revenue"]),
        "headline_active_customers": int(headline["Active Customers"]),
        "headline_burn_rate": float(headline["Burn Rate"]),
        "headline_runway": float(headline["Runway Months"]),
        "headline_runway_unbounded": bool(math.isinf(float(headline["Runway Months"]))),
        "headline_operating_leverage": float(headline["Operating Leverage"]),
        "headline_market_penetration": float(headline["Market Penetration %"]),
        "full_years": int(full_years),
    }

    if full_years >= 2:
        start_rev = by_year.loc[by_year["Year"] == 1, "Revenue"].sum()
        last_rev = by_year.loc[by_year["Year"] == full_years, "Revenue"].sum()
        years = max(full_years - 1, 1)
        metrics["revenue_cagr"] = (last_rev / start_rev) ** (1 / years) - 1 if start_rev > 0 else 0
    else:
        metrics["revenue_cagr"] = None

    return metrics


def runway_label(runway: float) -> str:
    if math.isinf(runway):
        return "∞"
    return f"{int(math.floor(runway + 0.5))}"
