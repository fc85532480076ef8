"""Local persistence: last-input echo and named saved scenarios."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path

from src.schema import LAST_INPUTS_TYPE, SCENARIO_TYPE, SCHEMA_VERSION, migrate_import_payload


STORE_DIR = Path(".local_store")
SCENARIO_STORE_FILE = STORE_DIR / "scenarios.json"
LAST_INPUTS_FILE = STORE_DIR / "last_inputs.json"

_DEFAULT_STORE_DIR = Path(".local_store")
_STORAGE_ENV_VAR = "JUSTCOOK_STORAGE_ROOT"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _expand_storage_root(path_value: str | Path | None) -> Path:
    if path_value is None:
        return _DEFAULT_STORE_DIR
    text = str(path_value).strip()
    if not text:
        return _DEFAULT_STORE_DIR
    return Path(os.path.expandvars(os.path.expanduser(text)))


def configure_storage_root(path_value: str | Path | None) -> Path:
    """Point scenario and last-input files at a storage directory."""

    global STORE_DIR, SCENARIO_STORE_FILE, LAST_INPUTS_FILE
    STORE_DIR = _expand_storage_root(path_value)
    SCENARIO_STORE_FILE = STORE_DIR / "scenarios.json"
    LAST_INPUTS_FILE = STORE_DIR / "last_inputs.json"
    return STORE_DIR


def storage_root_path() -> str:
    return str(STORE_DIR.resolve())


def storage_root_from_env() -> Path:
    return _expand_storage_root(os.getenv(_STORAGE_ENV_VAR, ""))


def _read_json(p: Path) -> dict:
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _write_json(p: Path, data: dict) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(f"{p.suffix}.tmp")
    tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
    tmp.replace(p)


def _load_store() -> dict:
    return _read_json(SCENARIO_STORE_FILE)


def list_saved_names() -> list[str]:
    return sorted(_load_store().keys())


def load_saved(name: str) -> dict | None:
    return deepcopy(_load_store().get(name))


def save_named_bundle(name: str, bundle: dict, overwrite: bool = False) -> tuple[bool, str]:
    if not name.strip():
        return False, "Name is required."
    store = _load_store()
    if name in store and not overwrite:
        return False, "Name already exists."
    store[name] = bundle
    try:
        _write_json(SCENARIO_STORE_FILE, store)
    except OSError as exc:
        return False, f"Could not write scenario store: {exc}"
    return True, "Saved."


def delete_saved(name: str) -> bool:
    store = _load_store()
    if name not in store:
        return False
    del store[name]
    try:
        _write_json(SCENARIO_STORE_FILE, store)
    except OSError:
        return False
    return True


def build_scenario_bundle(name: str, assumptions: dict) -> dict:
    return {
        "type": SCENARIO_TYPE,
        "schema_version": SCHEMA_VERSION,
        "name": name,
        "created_at": _now_iso(),
        "assumptions": deepcopy(assumptions),
    }


def save_last_inputs(assumptions: dict, ui_state: dict | None = None) -> tuple[bool, str]:
    """Echo the most recent inputs so the next session starts from them."""
    payload = {
        "type": LAST_INPUTS_TYPE,
        "schema_version": SCHEMA_VERSION,
        "saved_at": _now_iso(),
        "assumptions": deepcopy(assumptions),
        "ui_state": deepcopy(ui_state or {}),
    }
    try:
        _write_json(LAST_INPUTS_FILE, payload)
    except OSError as exc:
        return False, f"Could not write last inputs: {exc}"
    return True, "Saved."


def load_last_inputs() -> tuple[dict, dict | None, list[str], list[str]] | None:
    """Return migrated (assumptions, ui_state, warnings, unknown_keys), or None when nothing is stored."""
    payload = _read_json(LAST_INPUTS_FILE)
    if not payload:
        return None
    return migrate_import_payload(payload)


def clear_last_inputs() -> bool:
    if not LAST_INPUTS_FILE.exists():
        return False
    LAST_INPUTS_FILE.unlink()
    return True


def parse_import_json(raw_json: str) -> tuple[dict, dict | None, list[str], list[str]]:
    try:
        payload = json.loads(raw_json)
    except json.JSONDecodeError:
        return {}, None, ["Could not parse import JSON."], []
    return migrate_import_payload(payload)


configure_storage_root(storage_root_from_env())
