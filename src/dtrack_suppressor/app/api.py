from __future__ import annotations

from typing import Any, Mapping, Sequence

from .container import Container
from ..config.settings import AppConfig
from ..core.domain.models import AnalysisConfig, Finding, Project, ProjectSelection, SuppressionResult, Vulnerability
from ..core.services.config_resolver import GlobalAnalysisConfig
from ..core.services.reconciler import reconcile_findings


class DependencyTrackSuppressor:
    """Client for applying one triage decision to every instance of a vulnerability.

    The container and its HTTP client are initialized once and reused across
    calls; every call still fetches fresh data from the server.

    Example:
        # Using default configuration (DTRACK_API_URL / DTRACK_API_KEY)
        with DependencyTrackSuppressor() as client:
            result = client.suppress("NVD", "CVE-2024-0001")
            print(result.success_count, result.failure_count)

        # Explicit settings and a global decision
        with DependencyTrackSuppressor(api_url="https://dtrack.example.com", api_key="...") as client:
            result = client.suppress(
                "NVD",
                "CVE-2024-0001",
                global_config=GlobalAnalysisConfig(
                    analysis_state=AnalysisState.NOT_AFFECTED,
                    analysis_justification=AnalysisJustification.CODE_NOT_REACHABLE,
                ),
            )
    """

    def __init__(
        self,
        *,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout_seconds: float | None = None,
        requests_per_second: float | None = None,
    ):
        """Initialize the client.

        Args:
            api_url: Dependency-Track base URL. If None, uses DTRACK_API_URL or http://localhost:8081.
            api_key: Bearer token. If None, uses DTRACK_API_KEY. Calls fail with
                     MissingCredential when neither is set.
            timeout_seconds: Optional per-request timeout. If None, uses DTRACK_TIMEOUT_SECONDS or no timeout.
            requests_per_second: Optional client-side throttle. If None, uses DTRACK_REQUESTS_PER_SECOND.
        """
        self._container = Container()

        config_dict: dict[str, Any] = {}
        if api_url is not None:
            config_dict["api_url"] = api_url
        if api_key is not None:
            config_dict["api_key"] = api_key
        if timeout_seconds is not None:
            config_dict["timeout_seconds"] = timeout_seconds
        if requests_per_second is not None:
            config_dict["requests_per_second"] = requests_per_second

        self._container.config.from_pydantic(AppConfig(**config_dict))
        self._container.init_resources()

    def resolve_vulnerability(self, source: str, vuln_id: str) -> Vulnerability:
        """Return the vulnerability for (source, id).

        Raises:
            NotFound: If the server has no UUID for it.
            MissingCredential: If no API token is configured.
        """
        return self._container.store().resolve_vulnerability(source, vuln_id)

    def list_affected_projects(
        self,
        source: str,
        vuln_id: str,
        *,
        include_inactive: bool = False,
        filter_expr: str | None = None,
    ) -> Sequence[Project]:
        """Return projects affected by the vulnerability.

        Args:
            include_inactive: Also return projects marked inactive.
            filter_expr: Filter expression over uuid, name, version, active.
                         Example: 'name.startswith("payments") and version != "legacy"'.

        Raises:
            FilterError: If filter_expr is invalid (a ValueError).
        """
        uc = self._container.list_projects_uc()
        return uc.execute(source, vuln_id, include_inactive=include_inactive, filter_expr=filter_expr)

    def list_findings(self, project_uuid: str, vulnerability_uuid: str | None = None) -> Sequence[Finding]:
        """Return findings of a project, both suppressed and unsuppressed.

        With vulnerability_uuid, return one finding per component affected by that vulnerability.
        """
        findings = self._container.store().list_findings(project_uuid)
        if vulnerability_uuid is None:
            return findings
        return reconcile_findings(findings, vulnerability_uuid)

    def suppress(
        self,
        source: str,
        vuln_id: str,
        *,
        global_config: GlobalAnalysisConfig | None = None,
        row_overrides: Mapping[str, Mapping[str, Any]] | None = None,
        base_config: AnalysisConfig | None = None,
        include_inactive: bool = False,
        filter_expr: str | None = None,
    ) -> SuppressionResult:
        """Apply an analysis to every component affected by the vulnerability.

        Args:
            global_config: Values applied to every project ("apply to all").
            row_overrides: Per-project edits keyed by project UUID or name, applied after global_config.
            base_config: Starting row for every project (default: suppressed FALSE_POSITIVE).
            include_inactive: Also process inactive projects.
            filter_expr: Project filter expression (see list_affected_projects).

        Returns:
            SuppressionResult with the success count and one entry per failed call.
        """
        uc = self._container.bulk_suppress_uc()
        return uc.execute(
            source,
            vuln_id,
            global_config=global_config,
            row_overrides=row_overrides,
            base_config=base_config,
            include_inactive=include_inactive,
            filter_expr=filter_expr,
        )

    def run(self, vulnerability: Vulnerability, selections: Sequence[ProjectSelection]) -> SuppressionResult:
        """Apply already resolved per-project configs for an already resolved vulnerability."""
        uc = self._container.suppress_uc()
        return uc.run(vulnerability, selections)

    def close(self) -> None:
        """Close the client and release the HTTP connection pool."""
        self._container.shutdown_resources()

    def __enter__(self) -> DependencyTrackSuppressor:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = [
    "DependencyTrackSuppressor",
    "AppConfig",
]
