from __future__ import annotations

from src.defaults import DEFAULTS
from src.input_metadata import INPUT_GUIDANCE, advisory_warnings, help_with_guidance, input_label


def test_every_assumption_has_guidance():
    assert set(INPUT_GUIDANCE) == set(DEFAULTS)
    for key, g in INPUT_GUIDANCE.items():
        assert g["min"] <= DEFAULTS[key] <= g["max"], key


def test_help_text_includes_reasonable_range():
    text = help_with_guidance("monthly_churn", "Monthly share of customers lost.")
    assert text.startswith("Monthly share of customers lost.")
    assert "Reasonable range: 2 to 30 %." in text
    assert "Reasonable range: 50,000 to 2,000,000." in help_with_guidance("investment")
    assert help_with_guidance("unknown", "Base.") == "Base."


def test_advisory_warnings_flag_out_of_range_inputs():
    inputs = dict(DEFAULTS)
    inputs["orders_per_day"] = 1000.0
    warnings = advisory_warnings(inputs)
    assert len(warnings) == 1
    assert warnings[0].startswith("orders_per_day=1,000.00")
    assert advisory_warnings(DEFAULTS) == []


def test_input_label_falls_back_to_title_case():
    assert input_label("aov") == "Average Order Value"
    assert input_label("some_field") == "Some Field"
