"""Merge of the operator's global analysis settings with per-project rows.

Rows are keyed by project UUID. Every function here is pure: it returns new
``AnalysisConfig`` objects and never mutates its input. The intended call
sequence mirrors the operator's actions::

    rows = default_rows(projects)
    rows = apply_global(global_config, rows)      # "apply to all"
    rows[uuid] = edit_row(rows[uuid], comment="n/a") # later row edits win
    rows = finalize(rows)                          # at submission

A global value is written into the rows only when ``apply_global`` runs; it
is not re-applied afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ..domain.enums import AnalysisJustification, AnalysisResponse, AnalysisState
from ..domain.models import AnalysisConfig, Project, ProjectSelection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GlobalAnalysisConfig:
    """Settings to apply to every row. ``None`` leaves the row's own value in place."""

    suppressed: Optional[bool] = None
    analysis_state: Optional[AnalysisState] = None
    analysis_justification: Optional[AnalysisJustification] = None
    analysis_response: Optional[AnalysisResponse] = None
    analysis_details: Optional[str] = None
    comment: Optional[str] = None

    def changes(self) -> dict[str, object]:
        values = {
            "suppressed": self.suppressed,
            "analysis_state": self.analysis_state,
            "analysis_justification": self.analysis_justification,
            "analysis_response": self.analysis_response,
            "analysis_details": self.analysis_details,
            "comment": self.comment,
        }
        return {k: v for k, v in values.items() if v is not None and v != ""}


def default_rows(projects: Iterable[Project], base: AnalysisConfig | None = None) -> dict[str, AnalysisConfig]:
    base = base or AnalysisConfig()
    return {p.uuid: base for p in projects}


def edit_row(row: AnalysisConfig, **changes) -> AnalysisConfig:
    """Apply a single row edit. A state change re-derives the justification."""
    return row.with_updates(**changes)


def apply_global(global_config: GlobalAnalysisConfig, rows: Mapping[str, AnalysisConfig]) -> dict[str, AnalysisConfig]:
    changes = global_config.changes()
    if not changes:
        return dict(rows)
    logger.debug(f"Applying global settings {sorted(changes)} to {len(rows)} row(s)")
    # with_updates sets the state first, so a global justification only
    # lands on rows that end up NOT_AFFECTED
    return {key: row.with_updates(**changes) for key, row in rows.items()}


def finalize(rows: Mapping[str, AnalysisConfig]) -> dict[str, AnalysisConfig]:
    return {key: row.with_state(row.analysis_state) for key, row in rows.items()}


def resolve(
    global_config: GlobalAnalysisConfig | None,
    rows: Mapping[str, AnalysisConfig],
) -> dict[str, AnalysisConfig]:
    if global_config is not None:
        rows = apply_global(global_config, rows)
    return finalize(rows)


def to_selections(projects: Iterable[Project], rows: Mapping[str, AnalysisConfig]) -> list[ProjectSelection]:
    """Pair projects with their rows, in project order. Projects without a row are skipped."""
    return [ProjectSelection(project=p, config=rows[p.uuid]) for p in projects if p.uuid in rows]
