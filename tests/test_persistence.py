from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path

import pytest

from src.defaults import DEFAULTS
import src.persistence as persistence


@pytest.fixture
def store(tmp_path, monkeypatch):
    monkeypatch.setattr(persistence, "STORE_DIR", Path(tmp_path))
    monkeypatch.setattr(persistence, "SCENARIO_STORE_FILE", Path(tmp_path) / "scenarios.json")
    monkeypatch.setattr(persistence, "LAST_INPUTS_FILE", Path(tmp_path) / "last_inputs.json")
    return Path(tmp_path)


def test_scenario_bundle_roundtrip_and_local_store(store):
    assumptions = deepcopy(DEFAULTS)
    assumptions["aov"] = 120.0
    bundle = persistence.build_scenario_bundle("plan", assumptions)

    ok, _ = persistence.save_named_bundle("plan", bundle, overwrite=False)
    assert ok
    assert persistence.list_saved_names() == ["plan"]
    loaded = persistence.load_saved("plan")
    assert loaded is not None
    assert loaded["type"] == "scenario"
    assert loaded["assumptions"]["aov"] == 120.0

    ok, msg = persistence.save_named_bundle("plan", bundle, overwrite=False)
    assert not ok
    assert "exists" in msg
    ok, _ = persistence.save_named_bundle("plan", bundle, overwrite=True)
    assert ok

    assert persistence.delete_saved("plan")
    assert not persistence.delete_saved("plan")
    assert persistence.list_saved_names() == []


def test_save_requires_name(store):
    ok, msg = persistence.save_named_bundle("  ", {}, overwrite=False)
    assert not ok
    assert msg == "Name is required."


def test_last_inputs_echo_roundtrip(store):
    assert persistence.load_last_inputs() is None

    assumptions = deepcopy(DEFAULTS)
    assumptions["orders_per_day"] = 140.0
    ok, _ = persistence.save_last_inputs(assumptions, {"currency": "EUR"})
    assert ok
    assert (store / "last_inputs.json").exists()

    restored, ui_state, warnings, unknown = persistence.load_last_inputs()
    assert restored["orders_per_day"] == 140.0
    assert ui_state == {"currency": "EUR"}
    assert warnings == []
    assert unknown == []

    assert persistence.clear_last_inputs()
    assert persistence.load_last_inputs() is None
    assert not persistence.clear_last_inputs()


def test_legacy_browser_echo_is_migrated(store):
    (store / "last_inputs.json").write_text(json.dumps({"ordersPerDay": 75, "fixedCostsPerMonth": 60000}), encoding="utf-8")
    restored, ui_state, warnings, _ = persistence.load_last_inputs()
    assert restored["orders_per_day"] == 75.0
    assert restored["fixed_costs_per_month"] == 60000.0
    assert ui_state is None
    assert any("legacy" in w.lower() for w in warnings)


def test_corrupt_store_reads_as_empty(store):
    (store / "scenarios.json").write_text("{not json", encoding="utf-8")
    assert persistence.list_saved_names() == []


def test_parse_import_json_reports_bad_json():
    assumptions, ui_state, warnings, unknown = persistence.parse_import_json("{oops")
    assert assumptions == {}
    assert ui_state is None
    assert warnings == ["Could not parse import JSON."]


def test_storage_root_can_be_set_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("JUSTCOOK_STORAGE_ROOT", str(tmp_path / "store"))
    assert persistence.storage_root_from_env() == tmp_path / "store"
    monkeypatch.setenv("JUSTCOOK_STORAGE_ROOT", "   ")
    assert persistence.storage_root_from_env() == Path(".local_store")


def test_delete_reports_failure_when_store_is_unwritable(store, monkeypatch):
    ok, _ = persistence.save_named_bundle("plan", persistence.build_scenario_bundle("plan", deepcopy(DEFAULTS)))
    assert ok

    def _fail(p, data):
        raise OSError("read-only file system")

    monkeypatch.setattr(persistence, "_write_json", _fail)
    assert persistence.delete_saved("plan") is False
    assert persistence.list_saved_names() == ["plan"]
