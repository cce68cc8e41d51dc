from __future__ import annotations

from typing import Protocol, Sequence

from ..domain.models import Finding, MutationTarget, Project, Vulnerability


class FindingsStorePort(Protocol):
    def resolve_vulnerability(self, source: str, vuln_id: str) -> Vulnerability:
        """Return the vulnerability for (source, id).

        Raises NotFound when the backend has no UUID for it.
        """
        ...

    def list_affected_projects(self, source: str, vuln_id: str) -> Sequence[Project]:
        """Return every project affected by the vulnerability. May be empty."""
        ...

    def list_findings(self, project_uuid: str) -> Sequence[Finding]:
        """Return all findings of the project, unsuppressed first, then suppressed.

        The same component may appear in both halves.
        """
        ...

    def put_analysis(self, target: MutationTarget) -> dict:
        """Upsert the analysis keyed by (project, component, vulnerability)."""
        ...
