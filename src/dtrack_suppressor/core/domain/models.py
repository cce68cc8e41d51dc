from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from .enums import AnalysisJustification, AnalysisResponse, AnalysisState
from .errors import ValidationInvariant


@dataclass(frozen=True)
class Vulnerability:
    uuid: str
    source: str
    vuln_id: str

    @property
    def label(self) -> str:
        return f"{self.source}/{self.vuln_id}"


@dataclass(frozen=True)
class Project:
    uuid: str
    name: str
    version: Optional[str] = None
    active: bool = True

    @property
    def display_name(self) -> str:
        if self.version:
            return f"{self.name} {self.version}"
        return self.name


@dataclass(frozen=True)
class Finding:
    project_uuid: str
    component_uuid: Optional[str]
    vulnerability_uuid: Optional[str]
    suppressed: bool = False

    component_name: Optional[str] = None
    component_version: Optional[str] = None


@dataclass(frozen=True)
class AnalysisConfig:
    """Triage decision applied to every finding of one project.

    ``analysis_justification`` is only meaningful for NOT_AFFECTED. Empty
    strings are normalized to None; enum fields also accept their names.
    """

    suppressed: bool = True
    analysis_state: AnalysisState = AnalysisState.FALSE_POSITIVE
    analysis_justification: Optional[AnalysisJustification] = None
    analysis_response: Optional[AnalysisResponse] = None
    analysis_details: Optional[str] = None
    comment: Optional[str] = None

    def __post_init__(self) -> None:
        state = self.analysis_state
        if isinstance(state, str):
            state = AnalysisState.from_str(state) or AnalysisState.NOT_SET
        justification = self.analysis_justification
        if isinstance(justification, str):
            justification = AnalysisJustification.from_str(justification)
        response = self.analysis_response
        if isinstance(response, str):
            response = AnalysisResponse.from_str(response)
        object.__setattr__(self, "analysis_state", state)
        object.__setattr__(self, "analysis_justification", justification)
        object.__setattr__(self, "analysis_response", response)
        object.__setattr__(self, "analysis_details", self.analysis_details or None)
        object.__setattr__(self, "comment", self.comment or None)

        if justification is not None and state is not AnalysisState.NOT_AFFECTED:
            raise ValidationInvariant(
                f"analysis_justification={justification.name} requires NOT_AFFECTED, got {state.name}"
            )

    @property
    def justification_enabled(self) -> bool:
        return self.analysis_state is AnalysisState.NOT_AFFECTED

    def with_state(self, state: AnalysisState | str) -> "AnalysisConfig":
        """Return a copy with a new state; the justification is cleared unless NOT_AFFECTED."""
        return self.with_updates(analysis_state=state)

    def with_updates(self, **kwargs) -> "AnalysisConfig":
        state = kwargs.get("analysis_state", self.analysis_state)
        if isinstance(state, str):
            state = AnalysisState.from_str(state) or AnalysisState.NOT_SET
            kwargs["analysis_state"] = state
        if state is not AnalysisState.NOT_AFFECTED:
            # justification control is disabled for every other state
            kwargs["analysis_justification"] = None
        return replace(self, **kwargs)


@dataclass(frozen=True)
class ProjectSelection:
    project: Project
    config: AnalysisConfig


@dataclass(frozen=True)
class MutationTarget:
    project: Project
    component_uuid: str
    vulnerability_uuid: str
    config: AnalysisConfig

    component_name: Optional[str] = None


@dataclass(frozen=True)
class TargetFailure:
    project: Project
    component_uuid: Optional[str]
    error: str
    status: Optional[int] = None


@dataclass
class SuppressionResult:
    success_count: int = 0
    failures: list[TargetFailure] = field(default_factory=list)
    noop_projects: list[Project] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def attempted(self) -> int:
        return self.success_count + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def record_success(self) -> None:
        self.success_count += 1

    def record_failure(self, project: Project, component_uuid: Optional[str], error: Exception) -> None:
        status = getattr(error, "status", None)
        self.failures.append(TargetFailure(project=project, component_uuid=component_uuid, error=str(error), status=status))

    def record_noop(self, project: Project) -> None:
        self.noop_projects.append(project)
