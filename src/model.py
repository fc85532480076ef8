"""Core 60-month unit-economics projection engine."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Dict

import numpy as np
import pandas as pd

from src.defaults import PROJECTION_MONTHS


TAM_SIZE = 4_200_000_000.0
ORDERS_PER_ACTIVE_CUSTOMER = 2.5
FIRST_MONTH_ORDERS_PER_NEW_CUSTOMER = 1.2
DAYS_PER_MONTH = 30

# Runway when the business is not burning cash.
RUNWAY_UNBOUNDED = math.inf


class InvalidParameter(ValueError):
    """Raised when an assumption cannot be projected."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


@dataclass(frozen=True)
class ModelInputs:
    investment: float
    orders_per_day: float
    aov: float
    cac: float
    monthly_churn: float
    contribution_margin: float
    fixed_costs_per_month: float

    def __post_init__(self):
        validate_inputs(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict) -> "ModelInputs":
        validate_inputs(data)
        return cls(**{f.name: float(data[f.name]) for f in fields(cls)})

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MonthlyMetrics:
    month: int
    monthly_orders: float
    churned_customers: int
    new_customers: int
    active_customers: int
    revenue: float
    gross_profit: float
    customer_acquisition_cost: float
    ebitda: float
    cumulative_cash: float
    ltv: float
    ltv_cac_ratio: float
    mrr: float
    arpu: float
    gross_margin: float
    burn_rate: float
    runway: float
    market_penetration: float
    operating_leverage: float
    net_income: float
    customer_cohort_value: float


INPUT_FIELDS = [f.name for f in fields(ModelInputs)]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def growth_rate(month: int) -> float:
    """Monthly order growth tier for a 1-based month."""
    if month <= 6:
        return 1.08
    if month <= 18:
        return 1.05
    return 1.03


def base_daily_orders(orders_per_day: float, month: int) -> float:
    # The tier rate for this month is compounded from month 1, not piecewise.
    if month == 1:
        return orders_per_day
    return orders_per_day * growth_rate(month) ** (month - 1)


def validate_inputs(inputs: Dict) -> None:
    values: dict[str, float] = {}
    for field in INPUT_FIELDS:
        if field not in inputs:
            raise InvalidParameter(field, "is required.")
        raw = inputs[field]
        if isinstance(raw, bool):
            raise InvalidParameter(field, "must be numeric.")
        try:
            val = float(raw)
        except (TypeError, ValueError):
            raise InvalidParameter(field, "must be numeric.") from None
        if not math.isfinite(val):
            raise InvalidParameter(field, "must be finite.")
        values[field] = val

    for field in ("investment", "orders_per_day", "aov", "fixed_costs_per_month"):
        if values[field] < 0:
            raise InvalidParameter(field, "must be non-negative.")
    if not (0 < values["monthly_churn"] <= 100):
        raise InvalidParameter("monthly_churn", "must be in (0, 100].")
    if values["cac"] <= 0:
        raise InvalidParameter("cac", "must be greater than zero.")
    if not (0 <= values["contribution_margin"] <= 100):
        raise InvalidParameter("contribution_margin", "must be in [0, 100].")


def project(inputs: ModelInputs) -> list[MonthlyMetrics]:
    """Simulate PROJECTION_MONTHS months, threading active customers and cumulative cash."""
    results: list[MonthlyMetrics] = []
    active_customers = 0
    cumulative_cash = -inputs.investment

    churn = inputs.monthly_churn / 100
    margin = inputs.contribution_margin / 100
    avg_lifespan_months = 1 / churn
    ltv = inputs.aov * margin * avg_lifespan_months
    ltv_cac_ratio = ltv / inputs.cac

    for month in range(1, PROJECTION_MONTHS + 1):
        monthly_orders = base_daily_orders(inputs.orders_per_day, month) * DAYS_PER_MONTH

        churned = round_half_up(active_customers * churn)
        orders_from_active = active_customers * ORDERS_PER_ACTIVE_CUSTOMER
        orders_from_new = max(0.0, monthly_orders - orders_from_active)
        # At minimum the churned customers are replaced.
        new_customers = max(churned, round_half_up(orders_from_new / FIRST_MONTH_ORDERS_PER_NEW_CUSTOMER))
        active_customers = active_customers - churned + new_customers

        revenue = monthly_orders * inputs.aov
        gross_profit = revenue * margin
        acquisition_cost = new_customers * inputs.cac
        ebitda = gross_profit - acquisition_cost - inputs.fixed_costs_per_month
        # No depreciation, interest or tax in this model.
        net_income = gross_profit - (acquisition_cost + inputs.fixed_costs_per_month)
        cumulative_cash += ebitda

        burn_rate = max(0.0, -ebitda)
        runway = max(0.0, cumulative_cash / burn_rate) if burn_rate > 0 else RUNWAY_UNBOUNDED

        results.append(
            MonthlyMetrics(
                month=month,
                monthly_orders=monthly_orders,
                churned_customers=churned,
                new_customers=new_customers,
                active_customers=active_customers,
                revenue=revenue,
                gross_profit=gross_profit,
                customer_acquisition_cost=acquisition_cost,
                ebitda=ebitda,
                cumulative_cash=cumulative_cash,
                ltv=ltv,
                ltv_cac_ratio=ltv_cac_ratio,
                mrr=revenue,
                arpu=revenue / active_customers if active_customers > 0 else 0.0,
                gross_margin=inputs.contribution_margin,
                burn_rate=burn_rate,
                runway=runway,
                market_penetration=revenue * 12 / TAM_SIZE * 100,
                operating_leverage=(
                    revenue / inputs.fixed_costs_per_month if inputs.fixed_costs_per_month > 0 else 0.0
                ),
                net_income=net_income,
                customer_cohort_value=active_customers * ltv,
            )
        )

    return results


COLUMN_BY_FIELD = {
    "month": "Month_Number",
    "monthly_orders": "Monthly Orders",
    "churned_customers": "Churned Customers",
    "new_customers": "New Customers",
    "active_customers": "Active Customers",
    "revenue": "Revenue",
    "gross_profit": "Gross Profit",
    "customer_acquisition_cost": "Customer Acquisition Cost",
    "ebitda": "EBITDA",
    "net_income": "Net Income",
    "cumulative_cash": "Cumulative Cash",
    "mrr": "MRR",
    "arpu": "ARPU",
    "gross_margin": "Gross Margin %",
    "burn_rate": "Burn Rate",
    "runway": "Runway Months",
    "market_penetration": "Market Penetration %",
    "operating_leverage": "Operating Leverage",
    "ltv": "LTV",
    "ltv_cac_ratio": "LTV/CAC Ratio",
    "customer_cohort_value": "Customer Cohort Value",
}


def run_model(raw_inputs: Dict) -> pd.DataFrame:
    inputs = ModelInputs.from_dict(raw_inputs)
    rows = project(inputs)

    t = np.arange(len(rows))
    data: dict[str, object] = {
        "Year": ((t // 12) + 1).astype(int),
        "Month_Label": [f"Month {r.month}" for r in rows],
    }
    for field, column in COLUMN_BY_FIELD.items():
        data[column] = [getattr(r, field) for r in rows]

    df = pd.DataFrame(data)
    df = df[["Month_Number", "Year", "Month_Label"] + [c for c in COLUMN_BY_FIELD.values() if c != "Month_Number"]]
    df.attrs.update(inputs.to_dict())
    return df
