from __future__ import annotations

from typing import Sequence

import pytest

from dtrack_suppressor.core.domain.enums import AnalysisState
from dtrack_suppressor.core.domain.errors import MissingCredential, RequestFailed
from dtrack_suppressor.core.domain.models import (
    AnalysisConfig,
    Finding,
    MutationTarget,
    Project,
    ProjectSelection,
    Vulnerability,
)
from dtrack_suppressor.core.usecases.suppress_vulnerability import SuppressVulnerabilityUseCase


VULN = Vulnerability(uuid="v-uuid", source="NVD", vuln_id="CVE-2024-0001")


class FakeStore:
    def __init__(
        self,
        findings: dict[str, list[Finding]],
        *,
        failing_puts: dict[tuple[str, str], int] | None = None,
        failing_projects: set[str] | None = None,
    ) -> None:
        self._findings = findings
        self._failing_puts = failing_puts or {}
        self._failing_projects = failing_projects or set()
        self.put_calls: list[MutationTarget] = []
        self.list_calls: list[str] = []

    def resolve_vulnerability(self, source: str, vuln_id: str) -> Vulnerability:
        return VULN

    def list_affected_projects(self, source: str, vuln_id: str) -> Sequence[Project]:
        return []

    def list_findings(self, project_uuid: str) -> Sequence[Finding]:
        self.list_calls.append(project_uuid)
        if project_uuid in self._failing_projects:
            raise RequestFailed(503)
        return self._findings.get(project_uuid, [])

    def put_analysis(self, target: MutationTarget) -> dict:
        self.put_calls.append(target)
        status = self._failing_puts.get((target.project.uuid, target.component_uuid))
        if status is not None:
            raise RequestFailed(status)
        return {}


def _finding(project: str, component: str, *, vuln: str = VULN.uuid, suppressed: bool = False) -> Finding:
    return Finding(project_uuid=project, component_uuid=component, vulnerability_uuid=vuln, suppressed=suppressed)


def _selection(uuid: str, name: str, cfg: AnalysisConfig | None = None) -> ProjectSelection:
    return ProjectSelection(project=Project(uuid=uuid, name=name), config=cfg or AnalysisConfig())


def test_one_call_per_unique_component_across_both_halves():
    store = FakeStore({
        "p1": [_finding("p1", "c1"), _finding("p1", "c2"), _finding("p1", "c1", suppressed=True)],
        "p2": [_finding("p2", "c9", vuln="other")],
    })
    uc = SuppressVulnerabilityUseCase(store)

    result = uc.run(VULN, [_selection("p1", "A"), _selection("p2", "B")])

    assert result.success_count == 2
    assert result.failure_count == 0
    assert [p.uuid for p in result.noop_projects] == ["p2"]
    assert [(t.project.uuid, t.component_uuid) for t in store.put_calls] == [("p1", "c1"), ("p1", "c2")]
    assert all(t.config.suppressed and t.config.analysis_state is AnalysisState.FALSE_POSITIVE for t in store.put_calls)


def test_failed_component_does_not_stop_the_run():
    store = FakeStore(
        {"p1": [_finding("p1", "c1"), _finding("p1", "c2"), _finding("p1", "c3")]},
        failing_puts={("p1", "c2"): 500},
    )
    uc = SuppressVulnerabilityUseCase(store)

    result = uc.run(VULN, [_selection("p1", "A")])

    assert len(store.put_calls) == 3
    assert result.success_count == 2
    assert result.failure_count == 1
    failure = result.failures[0]
    assert failure.project.uuid == "p1"
    assert failure.component_uuid == "c2"
    assert failure.status == 500
    assert not result.ok


def test_failure_in_one_project_does_not_affect_others():
    store = FakeStore(
        {"p1": [_finding("p1", "c1")], "p2": [_finding("p2", "c1")]},
        failing_puts={("p1", "c1"): 403},
    )
    uc = SuppressVulnerabilityUseCase(store)

    result = uc.run(VULN, [_selection("p1", "A"), _selection("p2", "B")])

    assert result.success_count == 1
    assert [(f.project.uuid, f.component_uuid) for f in result.failures] == [("p1", "c1")]


def test_findings_failure_is_recorded_and_next_project_processed():
    store = FakeStore({"p2": [_finding("p2", "c1")]}, failing_projects={"p1"})
    uc = SuppressVulnerabilityUseCase(store)

    result = uc.run(VULN, [_selection("p1", "A"), _selection("p2", "B")])

    assert store.list_calls == ["p1", "p2"]
    assert result.success_count == 1
    assert result.failure_count == 1
    assert result.failures[0].component_uuid is None
    assert result.failures[0].status == 503


def test_accounting_matches_attempted_calls():
    store = FakeStore(
        {
            "p1": [_finding("p1", f"c{i}") for i in range(5)],
            "p2": [_finding("p2", "c0"), _finding("p2", "c0", suppressed=True)],
        },
        failing_puts={("p1", "c1"): 500, ("p1", "c4"): 502},
    )
    uc = SuppressVulnerabilityUseCase(store)

    result = uc.run(VULN, [_selection("p1", "A"), _selection("p2", "B")])

    assert result.success_count + result.failure_count == len(store.put_calls) == 6
    assert result.attempted == 6


def test_each_project_uses_its_own_config():
    store = FakeStore({"p1": [_finding("p1", "c1")], "p2": [_finding("p2", "c1")]})
    uc = SuppressVulnerabilityUseCase(store)
    resolved = AnalysisConfig(analysis_state=AnalysisState.RESOLVED, suppressed=False, comment="fixed")

    uc.run(VULN, [_selection("p1", "A"), _selection("p2", "B", resolved)])

    by_project = {t.project.uuid: t.config for t in store.put_calls}
    assert by_project["p1"] == AnalysisConfig()
    assert by_project["p2"] is resolved


def test_no_selections_makes_no_calls():
    store = FakeStore({})
    result = SuppressVulnerabilityUseCase(store).run(VULN, [])
    assert store.list_calls == []
    assert store.put_calls == []
    assert result.attempted == 0
    assert result.ok


def test_missing_credential_aborts_the_run():
    class NoTokenStore(FakeStore):
        def list_findings(self, project_uuid: str) -> Sequence[Finding]:
            raise MissingCredential()

    uc = SuppressVulnerabilityUseCase(NoTokenStore({}))
    with pytest.raises(MissingCredential):
        uc.run(VULN, [_selection("p1", "A")])
