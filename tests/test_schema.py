from __future__ import annotations

from copy import deepcopy

from src.defaults import DEFAULTS
from src.schema import SCHEMA_VERSION, migrate_assumptions, migrate_import_payload


def test_migrate_fills_missing_fields_with_defaults():
    inputs, warnings, unknown = migrate_assumptions({"aov": 120})
    assert inputs["aov"] == 120.0
    assert inputs["cac"] == DEFAULTS["cac"]
    assert warnings == []
    assert unknown == []


def test_migrate_maps_legacy_camel_case_keys():
    inputs, warnings, unknown = migrate_assumptions({"ordersPerDay": 80, "monthlyChurn": 6, "aov": 99})
    assert inputs["orders_per_day"] == 80.0
    assert inputs["monthly_churn"] == 6.0
    assert any("camelCase" in w for w in warnings)
    assert unknown == []


def test_snake_case_wins_over_legacy_key():
    inputs, _, _ = migrate_assumptions({"ordersPerDay": 80, "orders_per_day": 120})
    assert inputs["orders_per_day"] == 120.0


def test_migrate_resets_invalid_and_clamps_out_of_range_values():
    inputs, warnings, unknown = migrate_assumptions(
        {"aov": "abc", "contribution_margin": 140, "investment": -5, "cac": float("inf"), "theme": "dark"}
    )
    assert inputs["aov"] == DEFAULTS["aov"]
    assert inputs["cac"] == DEFAULTS["cac"]
    assert inputs["contribution_margin"] == 100.0
    assert inputs["investment"] == 0.0
    assert "aov invalid and reset to default." in warnings
    assert any("contribution_margin=140 clamped to 100" in w for w in warnings)
    assert unknown == ["theme"]


def test_zero_churn_is_left_for_validation():
    inputs, warnings, _ = migrate_assumptions({"monthly_churn": 0})
    assert inputs["monthly_churn"] == 0.0
    assert warnings == []


def test_migrate_import_payload_reads_bundles():
    payload = {
        "type": "scenario",
        "schema_version": SCHEMA_VERSION,
        "name": "plan",
        "assumptions": {"cac": 50},
        "ui_state": {"currency": "USD"},
    }
    assumptions, ui_state, warnings, unknown = migrate_import_payload(payload)
    assert assumptions["cac"] == 50.0
    assert ui_state == {"currency": "USD"}
    assert warnings == []
    assert unknown == []


def test_migrate_import_payload_flags_schema_mismatch_and_legacy_payloads():
    _, _, warnings, _ = migrate_import_payload({"type": "last_inputs", "schema_version": 0, "assumptions": {}})
    assert any("schema_version=0" in w for w in warnings)

    assumptions, ui_state, warnings, _ = migrate_import_payload(deepcopy(DEFAULTS))
    assert assumptions == DEFAULTS
    assert ui_state is None
    assert any("without bundle metadata" in w for w in warnings)

    assumptions, ui_state, warnings, _ = migrate_import_payload(["not", "a", "dict"])
    assert assumptions == DEFAULTS
    assert "not a JSON object" in warnings[0]
