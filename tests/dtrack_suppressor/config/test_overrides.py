from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from dtrack_suppressor.config.overrides import RowOverride, load_overrides
from dtrack_suppressor.core.domain.enums import AnalysisJustification, AnalysisResponse, AnalysisState


def _write(tmp_path, data) -> str:
    path = tmp_path / "overrides.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_only_present_fields_are_returned(tmp_path):
    path = _write(tmp_path, {
        "p1": {"analysisState": "NOT_AFFECTED", "analysisJustification": "code not reachable"},
        "billing": {"suppressed": False, "comment": "keep visible"},
    })

    overrides = load_overrides(path)

    assert overrides["p1"] == {
        "analysis_state": AnalysisState.NOT_AFFECTED,
        "analysis_justification": AnalysisJustification.CODE_NOT_REACHABLE,
    }
    assert overrides["billing"] == {"suppressed": False, "comment": "keep visible"}


def test_snake_case_and_short_names_accepted():
    row = RowOverride.model_validate({"state": "resolved", "response": "update", "details": "patched"})
    assert row.changes() == {
        "analysis_state": AnalysisState.RESOLVED,
        "analysis_response": AnalysisResponse.UPDATE,
        "analysis_details": "patched",
    }
    assert RowOverride.model_validate({"analysis_state": "EXPLOITABLE"}).analysis_state is AnalysisState.EXPLOITABLE


def test_null_clears_optional_fields_only():
    row = RowOverride.model_validate({"comment": None, "analysisState": None, "suppressed": None})
    assert row.changes() == {"comment": None}


def test_unknown_field_rejected():
    with pytest.raises(ValidationError):
        RowOverride.model_validate({"severity": "HIGH"})


def test_unknown_enum_label_rejected():
    with pytest.raises(ValidationError):
        RowOverride.model_validate({"analysisState": "MAYBE"})


def test_invalid_json_raises_value_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid overrides file"):
        load_overrides(path)


def test_wrong_shape_raises_validation_error(tmp_path):
    with pytest.raises(ValidationError):
        load_overrides(_write(tmp_path, ["p1"]))
