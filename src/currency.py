"""Presentation-time currency conversion and formatting (AED base)."""

from __future__ import annotations

import math

import pandas as pd


BASE_CURRENCY = "AED"

EXCHANGE_RATES = {
    "AED": 1.0,
    "USD": 0.272,
    "EUR": 0.249,
}

CURRENCY_SYMBOLS = {
    "AED": "",
    "USD": "$",
    "EUR": "€",
}

NON_MONETARY_COLUMNS = {
    "Month_Number",
    "Year",
    "Month_Label",
    "Monthly Orders",
    "Churned Customers",
    "New Customers",
    "Active Customers",
    "Runway Months",
    "Operating Leverage",
    "LTV/CAC Ratio",
}


def _rate(currency: str) -> float:
    if currency not in EXCHANGE_RATES:
        raise ValueError(f"Unsupported currency: {currency}")
    return EXCHANGE_RATES[currency]


def convert_currency(amount: float, to_currency: str, from_currency: str = BASE_CURRENCY) -> float:
    if from_currency == to_currency:
        _rate(to_currency)
        return float(amount)
    base_amount = float(amount) / _rate(from_currency)
    return base_amount * _rate(to_currency)


def format_currency(amount: float, currency: str, from_currency: str = BASE_CURRENCY) -> str:
    converted = convert_currency(amount, currency, from_currency)
    if not math.isfinite(converted):
        return "∞" if converted > 0 else "-∞"
    rounded = int(math.floor(converted + 0.5))
    suffix = f" {BASE_CURRENCY}" if currency == BASE_CURRENCY else ""
    sign = "-" if rounded < 0 else ""
    return f"{sign}{CURRENCY_SYMBOLS[currency]}{abs(rounded):,}{suffix}"


def money_columns(df: pd.DataFrame) -> list[str]:
    cols: list[str] = []
    for col in df.columns:
        if col in NON_MONETARY_COLUMNS:
            continue
        if not pd.api.types.is_numeric_dtype(df[col]):
            continue
        if col.endswith("%"):
            continue
        cols.append(col)
    return cols


def apply_currency(df: pd.DataFrame, currency: str) -> pd.DataFrame:
    """Return a presentation dataframe with monetary columns expressed in currency."""
    factor = convert_currency(1.0, currency)
    out = df.copy()
    if currency == BASE_CURRENCY:
        return out
    for col in money_columns(out):
        out[col] = out[col] * factor
    return out


def currency_label(currency: str) -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, "")
    return f"{currency} ({symbol})" if symbol else currency
