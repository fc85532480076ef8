import json
from copy import deepcopy
from dataclasses import asdict

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from src.currency import EXCHANGE_RATES, apply_currency, convert_currency, currency_label, format_currency
from src.defaults import DEFAULTS, TUNABLE_FIELDS
from src.export import (
    BALANCE_SHEET,
    PNL_SHEET,
    build_financials_xlsx_bytes,
    build_statement_frames,
    export_filename,
    statement_csv,
)
from src.goal_seek import goal_seek_tolerance, solve_input_for_target
from src.input_metadata import INPUT_GUIDANCE, advisory_warnings, help_with_guidance, input_label
from src.integrity_checks import run_integrity_checks
from src.metrics import compute_metrics, runway_label, sample_every
from src.model import InvalidParameter, run_model
from src.persistence import (
    build_scenario_bundle,
    clear_last_inputs,
    delete_saved,
    list_saved_names,
    load_last_inputs,
    load_saved,
    parse_import_json,
    save_last_inputs,
    save_named_bundle,
    storage_root_path,
)
from src.runtime_logging import (
    append_runtime_event,
    install_global_exception_logging,
    read_runtime_events,
    summarize_runtime_events,
    runtime_log_path,
)
from src.scenarios import (
    PERCENTILE_MAX,
    PERCENTILE_MEDIAN,
    PERCENTILE_MIN,
    SCENARIO_LABELS,
    apply_percentile,
    load_scenario,
    scenario_names,
)
from src.schema import migrate_assumptions, migrate_import_payload
from src.sensitivity import (
    DEFAULT_SENSITIVITY_DRIVERS,
    TARGET_OPTIONS,
    available_sensitivity_drivers,
    is_money_target,
    run_one_way_sensitivity,
    tornado_frame,
)


install_global_exception_logging()


UI_DEFAULTS = {
    "scenario_choice": "balanced",
    "percentile": PERCENTILE_MEDIAN,
    "currency": "AED",
    "autosave_last_inputs": True,
    "sensitivity_delta": 0.1,
    "sensitivity_drivers": list(DEFAULT_SENSITIVITY_DRIVERS),
    "sensitivity_target": "Month 12 EBITDA",
    "sensitivity_result_df": None,
    "goal_target_metric": "Ending Cumulative Cash",
    "goal_adjustable_input": "orders_per_day",
    "goal_target_value": 0.0,
    "goal_seek_result": None,
    "save_name": "",
    "overwrite_save": False,
    "import_json_text": "",
    "scenario_feedback": None,
    "runtime_min_level": "INFO",
}

# Keys echoed to local storage alongside the assumptions.
PERSISTED_UI_KEYS = ["scenario_choice", "percentile", "currency"]


def _clamp_to_guidance(key: str, value: float) -> float:
    g = INPUT_GUIDANCE.get(key)
    if not g or key == "investment":
        return float(value)
    return float(min(g["max"], max(g["min"], float(value))))


def _assumptions_from_state() -> dict:
    return {k: float(st.session_state.get(k, v)) for k, v in DEFAULTS.items()}


def _serialize_assumptions(assumptions: dict) -> str:
    return json.dumps(assumptions, sort_keys=True, separators=(",", ":"))


def _current_ui_state() -> dict:
    return {k: deepcopy(st.session_state.get(k, UI_DEFAULTS[k])) for k in PERSISTED_UI_KEYS}


@st.cache_data(show_spinner=False)
def _run_model_cached(assumptions_json: str) -> pd.DataFrame:
    return run_model(json.loads(assumptions_json))


@st.cache_data(show_spinner=False)
def _run_sensitivity_cached(assumptions_json: str, delta: float, drivers: tuple[str, ...]) -> pd.DataFrame:
    return run_one_way_sensitivity(json.loads(assumptions_json), delta, drivers=list(drivers))


def _apply_assumptions_to_state(assumptions: dict) -> list[str]:
    migrated, warnings, unknown = migrate_assumptions(assumptions)
    if unknown:
        warnings.append(f"Ignored unknown keys: {', '.join(unknown)}")
    for k, v in migrated.items():
        clamped = _clamp_to_guidance(k, v)
        if clamped != float(v):
            warnings.append(f"{k}={float(v):g} moved into slider range ({clamped:g}).")
        st.session_state[k] = clamped
    return warnings


def _apply_ui_state(ui_state: dict | None) -> None:
    if not isinstance(ui_state, dict):
        return
    if ui_state.get("scenario_choice") in scenario_names():
        st.session_state["scenario_choice"] = ui_state["scenario_choice"]
    if ui_state.get("currency") in EXCHANGE_RATES:
        st.session_state["currency"] = ui_state["currency"]
    try:
        st.session_state["percentile"] = int(min(PERCENTILE_MAX, max(PERCENTILE_MIN, int(ui_state["percentile"]))))
    except (KeyError, TypeError, ValueError):
        pass


def _init_session_state() -> None:
    if st.session_state.get("_initialized"):
        return
    for k, v in UI_DEFAULTS.items():
        st.session_state.setdefault(k, deepcopy(v))
    for k, v in DEFAULTS.items():
        st.session_state.setdefault(k, float(v))

    echo = load_last_inputs()
    if echo is not None:
        assumptions, ui_state, warnings, unknown = echo
        warnings = warnings + _apply_assumptions_to_state(assumptions)
        _apply_ui_state(ui_state)
        append_runtime_event(
            level="INFO",
            event="last_inputs_restored",
            message="Restored assumptions from the last session.",
            context={"warnings": warnings, "unknown_keys": unknown},
        )
    st.session_state["_last_echo_json"] = ""
    st.session_state["_initialized"] = True


def _on_scenario_change() -> None:
    name = st.session_state["scenario_choice"]
    for k, v in load_scenario(name).items():
        st.session_state[k] = _clamp_to_guidance(k, v)
    st.session_state["percentile"] = PERCENTILE_MEDIAN


def _on_percentile_change() -> None:
    adjusted = apply_percentile(_assumptions_from_state(), st.session_state["percentile"])
    for k in TUNABLE_FIELDS:
        st.session_state[k] = _clamp_to_guidance(k, adjusted[k])


def _on_save_scenario() -> None:
    name = str(st.session_state.get("save_name", "")).strip()
    bundle = build_scenario_bundle(name, _assumptions_from_state())
    ok, msg = save_named_bundle(name, bundle, overwrite=bool(st.session_state.get("overwrite_save")))
    if not ok:
        append_runtime_event(
            level="WARNING",
            event="save_scenario_failed",
            message=msg,
            context={"name": name},
        )
    st.session_state["scenario_feedback"] = ("success" if ok else "warning", f"{name}: {msg}")


def _on_load_saved(name: str) -> None:
    bundle = load_saved(name)
    if bundle is None:
        append_runtime_event(
            level="WARNING",
            event="saved_scenario_missing",
            message="Saved scenario not found.",
            context={"name": name},
        )
        st.session_state["scenario_feedback"] = ("warning", f"Saved scenario `{name}` was not found.")
        return
    assumptions, _, warnings, unknown = migrate_import_payload(bundle)
    warnings = warnings + _apply_assumptions_to_state(assumptions)
    if unknown:
        warnings.append(f"Ignored unknown keys: {', '.join(unknown)}")
    st.session_state["scenario_feedback"] = ("success", f"Loaded `{name}`." + (f" {' | '.join(warnings)}" if warnings else ""))


def _on_delete_saved(name: str) -> None:
    deleted = delete_saved(name)
    st.session_state["scenario_feedback"] = (
        ("success", f"Deleted `{name}`.") if deleted else ("warning", f"Saved scenario `{name}` could not be deleted.")
    )


def _on_import_json() -> None:
    raw = str(st.session_state.get("import_json_text", ""))
    assumptions, ui_state, warnings, unknown = parse_import_json(raw)
    if not assumptions:
        append_runtime_event(
            level="WARNING",
            event="import_json_failed",
            message="Import JSON could not be parsed.",
            context={"warnings": warnings},
        )
        st.session_state["scenario_feedback"] = ("warning", " | ".join(warnings))
        return
    warnings = warnings + _apply_assumptions_to_state(assumptions)
    _apply_ui_state(ui_state)
    if unknown:
        warnings.append(f"Ignored unknown keys: {', '.join(unknown)}")
    st.session_state["scenario_feedback"] = ("success", "Imported assumptions." + (f" {' | '.join(warnings)}" if warnings else ""))


def _on_clear_last_inputs() -> None:
    cleared = clear_last_inputs()
    st.session_state["autosave_last_inputs"] = False
    st.session_state["scenario_feedback"] = (
        "success" if cleared else "info",
        "Remembered inputs cleared; autosave paused." if cleared else "No remembered inputs were stored.",
    )


def _on_apply_goal_seek_value() -> None:
    result = st.session_state.get("goal_seek_result")
    if not isinstance(result, dict) or result.get("value") is None:
        return
    key = result["input"]
    st.session_state[key] = _clamp_to_guidance(key, result["value"])


def _log_download(kind: str) -> None:
    append_runtime_event(
        level="INFO",
        event="export_downloaded",
        message=f"Downloaded {kind} export.",
        context={"kind": kind, "currency": st.session_state.get("currency")},
    )


def _money_label(label: str, currency: str) -> str:
    return f"{label} ({currency})"


def _line_chart(df: pd.DataFrame, columns: list[str], title: str, currency: str) -> go.Figure:
    melted = df.melt(id_vars="Month_Label", value_vars=columns, var_name="Series", value_name="Value")
    fig = px.line(melted, x="Month_Label", y="Value", color="Series", title=title, markers=True)
    fig.update_layout(xaxis_title="", yaxis_title=currency, legend_title_text="", hovermode="x unified")
    return fig


_init_session_state()

st.set_page_config(page_title="JustCook Financial Model", layout="wide")
st.title("JustCook Financial Model")
st.caption("60-month unit-economics projection: tiered order growth, churn-driven customer base, CAC spend and cash runway.")

with st.sidebar:
    st.header("Business Parameters")
    st.selectbox(
        "Scenario Preset",
        options=scenario_names(),
        format_func=lambda k: SCENARIO_LABELS.get(k, k),
        key="scenario_choice",
        on_change=_on_scenario_change,
        help="Loads a complete assumption set; every tunable field is replaced at once.",
    )
    st.selectbox(
        "Currency",
        options=list(EXCHANGE_RATES.keys()),
        format_func=currency_label,
        key="currency",
        help="Display currency. The model runs in AED and converts at presentation time.",
    )
    st.slider(
        "Market Percentile",
        min_value=PERCENTILE_MIN,
        max_value=PERCENTILE_MAX,
        step=1,
        key="percentile",
        on_change=_on_percentile_change,
        help="Moves all six operating assumptions together between p10, p50 and p90 market benchmarks.",
    )
    st.number_input(
        input_label("investment"),
        min_value=0.0,
        step=float(INPUT_GUIDANCE["investment"]["step"]),
        key="investment",
        help=help_with_guidance("investment", "Amount in AED."),
    )
    for field in TUNABLE_FIELDS:
        g = INPUT_GUIDANCE[field]
        st.slider(
            g["label"],
            min_value=float(g["min"]),
            max_value=float(g["max"]),
            step=float(g["step"]),
            key=field,
            help=help_with_guidance(field, "Amount in AED." if g["unit"] == "currency" else ""),
        )
    st.toggle(
        "Remember inputs between sessions",
        key="autosave_last_inputs",
        help="Echo the current inputs to local storage after each recompute.",
    )
    st.caption(f"Storage: `{storage_root_path()}`")

currency = st.session_state["currency"]
assumptions, input_warnings, unknown_keys = migrate_assumptions(_assumptions_from_state())
if unknown_keys:
    input_warnings.append(f"Ignored unknown keys: {', '.join(unknown_keys)}")
input_warnings.extend(advisory_warnings(assumptions))
assumptions_json = _serialize_assumptions(assumptions)

try:
    nominal_df = _run_model_cached(assumptions_json)
except InvalidParameter as exc:
    append_runtime_event(
        level="ERROR",
        event="model_validation_failed",
        message="Projection inputs failed validation.",
        context={"field": exc.field, "assumptions": assumptions},
        exc=exc,
    )
    st.error(f"Input validation error: {exc}")
    st.stop()

if st.session_state.get("autosave_last_inputs") and st.session_state.get("_last_echo_json") != assumptions_json:
    ok, msg = save_last_inputs(assumptions, _current_ui_state())
    if ok:
        st.session_state["_last_echo_json"] = assumptions_json
    else:
        append_runtime_event(
            level="WARNING",
            event="last_inputs_save_failed",
            message=msg,
            context={"storage_root": storage_root_path()},
        )

view_df = apply_currency(nominal_df, currency)
metrics = compute_metrics(nominal_df)
integrity_findings = run_integrity_checks(nominal_df, assumptions, tol=1e-3)
if integrity_findings and st.session_state.get("_integrity_log_signature") != assumptions_json:
    append_runtime_event(
        level="ERROR",
        event="integrity_checks_failed",
        message=f"{len(integrity_findings)} integrity check(s) failed.",
        context={"findings": integrity_findings},
    )
    st.session_state["_integrity_log_signature"] = assumptions_json

if input_warnings:
    with st.expander(f"[!] Input Warnings ({len(input_warnings)})", expanded=False):
        for warning in input_warnings:
            st.write(f"- {warning}")

projection_tab, statements_tab, sensitivity_tab, goal_tab, scenarios_tab, diagnostics_tab = st.tabs(
    ["Projection", "Statements & Export", "Sensitivity", "Goal Seek", "Saved Scenarios", "Diagnostics"]
)

with projection_tab:
    st.subheader(f"Month {metrics['headline_month']} snapshot")
    k1, k2, k3 = st.columns(3)
    k1.metric(
        "LTV / CAC Ratio",
        f"{metrics['headline_ltv_cac']:.1f}",
        delta="healthy" if metrics["headline_ltv_cac_healthy"] else "below 3x",
        delta_color="normal" if metrics["headline_ltv_cac_healthy"] else "inverse",
    )
    k2.metric("Gross Margin", f"{assumptions['contribution_margin']:.1f}%")
    k3.metric("ARPU", format_currency(metrics["headline_arpu"], currency))

    k4, k5, k6 = st.columns(3)
    k4.metric("Market Penetration", f"{metrics['headline_market_penetration']:.3f}%")
    k5.metric("Customer Base", f"{metrics['headline_active_customers']:,}")
    k6.metric("Revenue Rate", format_currency(metrics["headline_revenue"], currency))

    k7, k8, k9 = st.columns(3)
    burn = metrics["headline_burn_rate"]
    k7.metric("Monthly Burn", format_currency(burn, currency) if burn > 0 else "Profitable")
    k8.metric("Runway (months)", runway_label(metrics["headline_runway"]))
    k9.metric("Operating Leverage", f"{metrics['headline_operating_leverage']:.1f}x")

    break_even = metrics["ebitda_break_even_month"]
    payback = metrics["payback_month"]
    st.caption(
        f"EBITDA break-even: {'month ' + str(break_even) if break_even else 'not within 60 months'} | "
        f"Cash payback: {'month ' + str(payback) if payback else 'not within 60 months'} | "
        f"Cash trough: {format_currency(metrics['minimum_cumulative_cash'], currency)} "
        f"(month {metrics['minimum_cumulative_cash_month']})"
    )

    sampled = sample_every(view_df)
    revenue_cols = ["Revenue", "EBITDA"]
    st.plotly_chart(
        _line_chart(sampled, revenue_cols, "Revenue Growth & Operational Leverage", currency),
        width="stretch",
    )

    pnl_chart_df = sampled[["Month_Label", "Gross Profit", "Net Income"]].copy()
    pnl_chart_df["Fixed Costs"] = -convert_currency(assumptions["fixed_costs_per_month"], currency)
    st.plotly_chart(
        _line_chart(pnl_chart_df, ["Gross Profit", "Net Income", "Fixed Costs"], "Profit & Loss Progression", currency),
        width="stretch",
    )

    business_fig = go.Figure()
    business_fig.add_trace(go.Scatter(x=sampled["Month_Label"], y=sampled["Active Customers"], name="Active Customers"))
    business_fig.add_trace(
        go.Scatter(x=sampled["Month_Label"], y=sampled["ARPU"], name=_money_label("ARPU", currency), yaxis="y2")
    )
    business_fig.update_layout(
        title="Customer Growth & Business Metrics",
        yaxis={"title": "Customers"},
        yaxis2={"title": currency, "overlaying": "y", "side": "right", "showgrid": False},
        hovermode="x unified",
    )
    st.plotly_chart(business_fig, width="stretch")

    cash_color = "rgb(34, 197, 94)" if metrics["headline_ltv_cac_healthy"] else "rgb(239, 68, 68)"
    cash_fig = go.Figure(
        go.Scatter(
            x=sampled["Month_Label"],
            y=sampled["Cumulative Cash"],
            name=_money_label("Cumulative Cash", currency),
            line={"color": cash_color},
            fill="tozeroy",
        )
    )
    cash_fig.update_layout(title="Cash Flow & Path to Self-Sustainability", yaxis_title=currency)
    st.plotly_chart(cash_fig, width="stretch")

    st.subheader("Monthly projection")
    display_df = view_df.drop(columns=["Month_Label"]).copy()
    display_df["Runway Months"] = display_df["Runway Months"].apply(runway_label)
    st.dataframe(display_df.round(2), width="stretch", hide_index=True)
    st.download_button(
        "Download Projection CSV",
        view_df.to_csv(index=False),
        file_name=f"justcook_60m_projection_{currency}.csv",
        mime="text/csv",
        on_click=_log_download,
        args=("projection_csv",),
        help="All 60 months in the selected currency.",
    )

with statements_tab:
    frames = build_statement_frames(nominal_df, assumptions, currency)
    st.subheader("Profit & Loss (first 36 months)")
    st.dataframe(frames[PNL_SHEET].round(0), width="stretch", hide_index=True)
    st.subheader("Balance Sheet (first 36 months)")
    st.dataframe(frames[BALANCE_SHEET].round(0), width="stretch", hide_index=True)

    d1, d2, d3 = st.columns(3)
    d1.download_button(
        "Download P&L CSV",
        statement_csv(frames[PNL_SHEET]),
        file_name=export_filename("pnl", currency),
        mime="text/csv",
        on_click=_log_download,
        args=("pnl_csv",),
    )
    d2.download_button(
        "Download Balance Sheet CSV",
        statement_csv(frames[BALANCE_SHEET]),
        file_name=export_filename("balance_sheet", currency),
        mime="text/csv",
        on_click=_log_download,
        args=("balance_sheet_csv",),
    )
    d3.download_button(
        "Download Financials XLSX",
        build_financials_xlsx_bytes(frames),
        file_name=export_filename("xlsx", currency),
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        on_click=_log_download,
        args=("financials_xlsx",),
    )

with sensitivity_tab:
    st.subheader("One-way sensitivity")
    st.slider(
        "Shock size",
        min_value=0.01,
        max_value=0.5,
        step=0.01,
        key="sensitivity_delta",
        help="Each driver is moved down and up by this fraction while the others stay fixed.",
    )
    driver_options = available_sensitivity_drivers(assumptions)
    st.multiselect(
        "Drivers",
        options=driver_options,
        format_func=input_label,
        key="sensitivity_drivers",
        help="Assumptions to shock.",
    )
    st.selectbox("Target metric", TARGET_OPTIONS, key="sensitivity_target", help="Output plotted on the tornado chart.")
    if st.button("Run Sensitivity", key="run_sensitivity", help="Re-run the projection for every shocked driver."):
        if st.session_state["sensitivity_drivers"]:
            st.session_state["sensitivity_result_df"] = _run_sensitivity_cached(
                assumptions_json,
                float(st.session_state["sensitivity_delta"]),
                tuple(st.session_state["sensitivity_drivers"]),
            )
        else:
            st.session_state["sensitivity_result_df"] = None
            st.warning("Select at least one driver.")

    sens_df = st.session_state.get("sensitivity_result_df")
    if isinstance(sens_df, pd.DataFrame) and not sens_df.empty:
        target = st.session_state["sensitivity_target"]
        tornado = tornado_frame(sens_df, target)
        tornado["Driver"] = tornado["Driver"].map(input_label)
        if is_money_target(target):
            fx = convert_currency(1.0, currency)
            tornado[["Low", "High"]] = tornado[["Low", "High"]] * fx
            tornado_title = f"Change in {target} ({currency})"
        else:
            tornado_title = f"Change in {target}"
        tornado_fig = go.Figure()
        tornado_fig.add_trace(go.Bar(y=tornado["Driver"], x=tornado["Low"], name="Low", orientation="h"))
        tornado_fig.add_trace(go.Bar(y=tornado["Driver"], x=tornado["High"], name="High", orientation="h"))
        tornado_fig.update_layout(title=tornado_title, barmode="overlay")
        st.plotly_chart(tornado_fig, width="stretch")
        st.dataframe(sens_df.round(2), width="stretch", hide_index=True)

with goal_tab:
    st.subheader("Goal seek")
    g1, g2, g3 = st.columns(3)
    g1.selectbox("Target metric", TARGET_OPTIONS, key="goal_target_metric", help="Metric to hit.")
    g2.selectbox(
        "Adjustable input",
        options=available_sensitivity_drivers(assumptions),
        format_func=input_label,
        key="goal_adjustable_input",
        help="Single assumption the solver is allowed to move.",
    )
    g3.number_input(
        "Target value",
        key="goal_target_value",
        help="Desired value of the target metric; money targets are in AED.",
    )
    goal_input = st.session_state["goal_adjustable_input"]
    goal_metric = st.session_state["goal_target_metric"]
    guidance = INPUT_GUIDANCE[goal_input]
    if st.button("Run Goal Seek", key="run_goal_seek", help="Bisect the input between its slider bounds."):
        result = solve_input_for_target(
            assumptions,
            goal_input,
            goal_metric,
            float(st.session_state["goal_target_value"]),
            float(guidance["min"]),
            float(guidance["max"]),
            tol=goal_seek_tolerance(goal_metric),
            max_iter=80,
        )
        st.session_state["goal_seek_result"] = {"input": goal_input, **asdict(result)}
        append_runtime_event(
            level="INFO" if result.status == "solved" else "WARNING",
            event="goal_seek_completed",
            message=result.message,
            context=st.session_state["goal_seek_result"],
        )

    result = st.session_state.get("goal_seek_result")
    if isinstance(result, dict):
        if result["status"] == "solved":
            st.success(
                f"{input_label(result['input'])} = {result['value']:,.2f} reaches {result['achieved']:,.2f} "
                f"after {result['iterations']} iteration(s)."
            )
            st.button(
                "Apply Solved Value",
                key="apply_goal_seek",
                on_click=_on_apply_goal_seek_value,
                help="Copy the solved value into the sidebar input.",
            )
        else:
            st.warning(result["message"])

with scenarios_tab:
    st.subheader("Saved scenarios")
    feedback = st.session_state.get("scenario_feedback")
    if feedback:
        getattr(st, feedback[0], st.info)(feedback[1])
    st.text_input("Save Name", key="save_name", placeholder="e.g., Seed Round Plan", help="Name for the saved scenario.")
    st.checkbox("Overwrite if exists", key="overwrite_save", help="Replace a saved scenario with the same name.")
    st.button(
        "Save Scenario",
        key="save_scenario",
        on_click=_on_save_scenario,
        disabled=not str(st.session_state.get("save_name", "")).strip(),
        help="Store the current assumptions under the given name.",
    )

    saved_names = list_saved_names()
    selected_saved = st.selectbox("Saved Scenarios", [""] + saved_names, key="selected_saved", help="Pick a saved scenario.")
    s1, s2 = st.columns(2)
    s1.button(
        "Load Scenario",
        key="load_saved_scenario",
        on_click=_on_load_saved,
        args=(selected_saved,),
        disabled=not selected_saved,
        help="Replace the current assumptions with the saved ones.",
    )
    s2.button(
        "Delete Scenario",
        key="delete_saved_scenario",
        on_click=_on_delete_saved,
        args=(selected_saved,),
        disabled=not selected_saved,
        help="Remove the saved scenario from local storage.",
    )

    st.text_area("Import JSON", key="import_json_text", help="Paste a scenario bundle or a bare assumptions object.")
    st.button("Import JSON", key="import_json", on_click=_on_import_json, help="Apply the pasted assumptions.")
    st.download_button(
        "Download Current Scenario JSON",
        json.dumps(build_scenario_bundle("current", assumptions), indent=2),
        file_name="justcook_scenario.json",
        mime="application/json",
        help="Export the current assumptions as a scenario bundle.",
    )
    st.button(
        "Clear Remembered Inputs",
        key="clear_last_inputs",
        on_click=_on_clear_last_inputs,
        help="Delete the last-input echo and pause autosave.",
    )

with diagnostics_tab:
    st.subheader("Accounting integrity")
    if integrity_findings:
        st.dataframe(pd.DataFrame(integrity_findings), width="stretch", hide_index=True)
    else:
        st.caption("All integrity checks passed.")
    st.subheader("Runtime events")
    st.caption(f"Log file: `{runtime_log_path()}`")
    st.selectbox(
        "Minimum level",
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        key="runtime_min_level",
        help="Hide events below this severity.",
    )
    events = read_runtime_events(limit=200, min_level=st.session_state["runtime_min_level"])
    if events:
        counts = summarize_runtime_events(events)
        st.caption(" | ".join(f"{level}: {n}" for level, n in counts.items()))
        events_df = pd.DataFrame(events)
        events_df["context"] = events_df["context"].apply(lambda c: json.dumps(c, default=str))
        st.dataframe(events_df.iloc[::-1], width="stretch", hide_index=True)
    else:
        st.caption("No runtime events recorded.")
