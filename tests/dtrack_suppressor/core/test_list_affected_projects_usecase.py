from __future__ import annotations

from typing import Sequence

import pytest

from dtrack_suppressor.core.domain.models import Finding, MutationTarget, Project, Vulnerability
from dtrack_suppressor.core.usecases.list_affected_projects import ListAffectedProjectsUseCase


class FakeStore:
    def __init__(self, projects: list[Project]) -> None:
        self._projects = projects
        self.calls: list[tuple[str, str]] = []

    def resolve_vulnerability(self, source: str, vuln_id: str) -> Vulnerability:
        return Vulnerability(uuid="v", source=source, vuln_id=vuln_id)

    def list_affected_projects(self, source: str, vuln_id: str) -> Sequence[Project]:
        self.calls.append((source, vuln_id))
        return self._projects

    def list_findings(self, project_uuid: str) -> Sequence[Finding]:
        return []

    def put_analysis(self, target: MutationTarget) -> dict:
        return {}


PROJECTS = [
    Project(uuid="p1", name="payments-api", version="2.0"),
    Project(uuid="p2", name="payments-web", version="1.0", active=False),
    Project(uuid="p3", name="search"),
]


def test_inactive_projects_excluded_by_default():
    store = FakeStore(PROJECTS)
    projects = ListAffectedProjectsUseCase(store).execute("NVD", "CVE-2024-0001")
    assert [p.uuid for p in projects] == ["p1", "p3"]
    assert store.calls == [("NVD", "CVE-2024-0001")]


def test_include_inactive_keeps_backend_order():
    projects = ListAffectedProjectsUseCase(FakeStore(PROJECTS)).execute("NVD", "CVE-2024-0001", include_inactive=True)
    assert [p.uuid for p in projects] == ["p1", "p2", "p3"]


def test_filter_expression_applies_after_active_check():
    uc = ListAffectedProjectsUseCase(FakeStore(PROJECTS))
    projects = uc.execute("NVD", "CVE-2024-0001", filter_expr='name.startswith("payments")')
    assert [p.uuid for p in projects] == ["p1"]


def test_filter_on_missing_version():
    uc = ListAffectedProjectsUseCase(FakeStore(PROJECTS))
    projects = uc.execute("NVD", "CVE-2024-0001", filter_expr="version is None")
    assert [p.uuid for p in projects] == ["p3"]


def test_invalid_filter_raises_value_error():
    uc = ListAffectedProjectsUseCase(FakeStore(PROJECTS))
    with pytest.raises(ValueError, match="Filter evaluation error"):
        uc.execute("NVD", "CVE-2024-0001", filter_expr="undefined_name > 1")


def test_empty_backend_result():
    assert ListAffectedProjectsUseCase(FakeStore([])).execute("NVD", "CVE-2024-0001") == []
