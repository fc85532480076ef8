"""36-month financial statement exports (P&L and balance sheet, CSV and XLSX)."""

from __future__ import annotations

from io import BytesIO

import pandas as pd
from openpyxl.styles import Font, PatternFill

from src.currency import convert_currency


EXPORT_MONTHS = 36
GENERAL_ADMIN_SHARE = 0.6
TECHNOLOGY_SHARE = 0.4

PNL_SHEET = "P&L 36M"
BALANCE_SHEET = "Balance Sheet 36M"

# Header fill colours per sheet (ARGB).
SHEET_HEADER_FILLS = {
    PNL_SHEET: "FF3B82F6",
    BALANCE_SHEET: "FF10B981",
}


def _money(label: str, currency: str) -> str:
    return f"{label} ({currency})"


def _export_window(df: pd.DataFrame) -> pd.DataFrame:
    return df.sort_values("Month_Number").head(EXPORT_MONTHS).reset_index(drop=True)


def build_pnl_statement(df: pd.DataFrame, inputs: dict, currency: str) -> pd.DataFrame:
    window = _export_window(df)
    fx = convert_currency(1.0, currency)
    fixed = float(inputs["fixed_costs_per_month"])

    revenue = window["Revenue"] * fx
    gross_profit = window["Gross Profit"] * fx
    marketing = window["Customer Acquisition Cost"] * fx
    general_admin = pd.Series(fixed * GENERAL_ADMIN_SHARE * fx, index=window.index)
    technology = pd.Series(fixed * TECHNOLOGY_SHARE * fx, index=window.index)
    depreciation = pd.Series(0.0, index=window.index)
    interest = pd.Series(0.0, index=window.index)
    tax = pd.Series(0.0, index=window.index)
    ebitda = window["EBITDA"] * fx
    ebit = ebitda - depreciation
    ebt = ebit - interest

    return pd.DataFrame(
        {
            "Month": window["Month_Number"].astype(int),
            _money("Revenue", currency): revenue,
            _money("Cost of Goods Sold", currency): revenue - gross_profit,
            _money("Gross Profit", currency): gross_profit,
            _money("Marketing & Sales (CAC)", currency): marketing,
            _money("General & Admin", currency): general_admin,
            _money("Technology & R&D", currency): technology,
            _money("Total Operating Expenses", currency): marketing + general_admin + technology,
            _money("EBITDA", currency): ebitda,
            _money("Depreciation & Amortization", currency): depreciation,
            _money("EBIT", currency): ebit,
            _money("Interest Expense", currency): interest,
            _money("EBT", currency): ebt,
            _money("Tax", currency): tax,
            _money("Net Income", currency): window["Net Income"] * fx,
        }
    )


def build_balance_sheet(df: pd.DataFrame, inputs: dict, currency: str) -> pd.DataFrame:
    """Cash-only balance sheet: cash equals paid-in capital plus retained earnings."""
    window = _export_window(df)
    fx = convert_currency(1.0, currency)
    zeros = pd.Series(0.0, index=window.index)

    paid_in = pd.Series(float(inputs["investment"]) * fx, index=window.index)
    retained = (window["Net Income"] * fx).cumsum()
    cash = paid_in + retained
    # No receivables, inventory, fixed assets or liabilities are modelled.
    total_current_assets = cash.copy()
    total_assets = total_current_assets.copy()
    total_liabilities = zeros.copy()

    return pd.DataFrame(
        {
            "Month": window["Month_Number"].astype(int),
            _money("Cash & Equivalents", currency): cash,
            _money("Accounts Receivable", currency): zeros,
            _money("Inventory", currency): zeros,
            _money("Total Current Assets", currency): total_current_assets,
            _money("PP&E", currency): zeros,
            _money("Intangibles", currency): zeros,
            _money("Total Assets", currency): total_assets,
            _money("Accounts Payable", currency): zeros,
            _money("Accrued Expenses", currency): zeros,
            _money("Debt", currency): zeros,
            _money("Total Liabilities", currency): total_liabilities,
            _money("Paid-in Capital", currency): paid_in,
            _money("Retained Earnings", currency): retained,
            _money("Total Equity", currency): paid_in + retained,
        }
    )


def build_statement_frames(df: pd.DataFrame, inputs: dict, currency: str) -> dict[str, pd.DataFrame]:
    return {
        PNL_SHEET: build_pnl_statement(df, inputs, currency),
        BALANCE_SHEET: build_balance_sheet(df, inputs, currency),
    }


def statement_csv(frame: pd.DataFrame) -> str:
    return frame.round(0).to_csv(index=False, float_format="%.0f")


def export_filename(kind: str, currency: str) -> str:
    if kind == "pnl":
        return f"justcook_36m_pnl_{currency}.csv"
    if kind == "balance_sheet":
        return f"justcook_36m_balance_sheet_{currency}.csv"
    if kind == "xlsx":
        return f"justcook_financials_{currency}.xlsx"
    raise ValueError(f"Unsupported export kind: {kind}")


def _style_sheet(ws, frame: pd.DataFrame, fill_argb: str) -> None:
    header_font = Font(bold=True, color="FFFFFFFF")
    header_fill = PatternFill(fill_type="solid", fgColor=fill_argb)
    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
    ws.freeze_panes = "A2"

    for idx, col in enumerate(frame.columns, start=1):
        letter = ws.cell(row=1, column=idx).column_letter
        ws.column_dimensions[letter].width = max(10, min(40, len(str(col)) + 2))
        if col == "Month":
            continue
        for row in range(2, len(frame) + 2):
            ws.cell(row=row, column=idx).number_format = "#,##0"


def build_financials_xlsx_bytes(frames: dict[str, pd.DataFrame]) -> bytes:
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for sheet_name, frame in frames.items():
            frame.to_excel(writer, sheet_name=sheet_name[:31], index=False)
            _style_sheet(writer.sheets[sheet_name[:31]], frame, SHEET_HEADER_FILLS.get(sheet_name, "FF3B82F6"))
    output.seek(0)
    return output.getvalue()
