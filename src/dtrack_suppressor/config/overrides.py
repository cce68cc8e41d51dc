from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, RootModel, field_validator

from ..core.domain.enums import AnalysisJustification, AnalysisResponse, AnalysisState


class RowOverride(BaseModel):
    """Per-project edit read from an overrides file.

    Field names may be given in wire form (analysisState) or snake_case
    (analysis_state). Only fields present in the file are applied.
    """

    model_config = ConfigDict(extra="forbid")

    suppressed: Optional[bool] = None
    analysis_state: Optional[AnalysisState] = Field(None, validation_alias=AliasChoices("analysisState", "analysis_state", "state"))
    analysis_justification: Optional[AnalysisJustification] = Field(
        None, validation_alias=AliasChoices("analysisJustification", "analysis_justification", "justification")
    )
    analysis_response: Optional[AnalysisResponse] = Field(
        None, validation_alias=AliasChoices("analysisResponse", "analysis_response", "response")
    )
    analysis_details: Optional[str] = Field(None, validation_alias=AliasChoices("analysisDetails", "analysis_details", "details"))
    comment: Optional[str] = None

    @field_validator("analysis_state", "analysis_justification", "analysis_response", mode="before")
    @classmethod
    def _parse_label(cls, value: Any, info) -> Any:
        if not isinstance(value, str):
            return value
        enum_cls = {
            "analysis_state": AnalysisState,
            "analysis_justification": AnalysisJustification,
            "analysis_response": AnalysisResponse,
        }[info.field_name]
        return enum_cls.from_str(value)

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were set in the file, as edit_row keyword arguments."""
        data = self.model_dump(exclude_unset=True)
        # null clears optional fields but cannot unset the required ones
        return {k: v for k, v in data.items() if v is not None or k not in ("suppressed", "analysis_state")}


class OverridesFile(RootModel[dict[str, RowOverride]]):
    """Mapping of project UUID or name to a RowOverride."""


def load_overrides(path: str | Path) -> dict[str, dict[str, Any]]:
    """Read a JSON overrides file and return {project key: edit_row kwargs}.

    Raises:
        pydantic.ValidationError: If the file does not match the expected shape.
        ValueError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid overrides file {path}: {e}") from e
    parsed = OverridesFile.model_validate(data)
    return {key: row.changes() for key, row in parsed.root.items()}
