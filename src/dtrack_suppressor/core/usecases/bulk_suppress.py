from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..domain.models import AnalysisConfig, Project, SuppressionResult
from ..ports.findings_port import FindingsStorePort
from ..services.config_resolver import (
    GlobalAnalysisConfig,
    apply_global,
    default_rows,
    edit_row,
    finalize,
    to_selections,
)
from .list_affected_projects import ListAffectedProjectsUseCase
from .suppress_vulnerability import SuppressVulnerabilityUseCase

logger = logging.getLogger(__name__)


def _match_project(key: str, projects: Sequence[Project]) -> Project | None:
    for p in projects:
        if p.uuid == key:
            return p
    for p in projects:
        if p.name == key or p.display_name == key:
            return p
    return None


class BulkSuppressUseCase:
    """Resolve a vulnerability, build one analysis per affected project and apply it everywhere."""

    def __init__(
        self,
        store: FindingsStorePort,
        list_projects: ListAffectedProjectsUseCase | None = None,
        suppress: SuppressVulnerabilityUseCase | None = None,
    ) -> None:
        self._store = store
        self._list_projects = list_projects or ListAffectedProjectsUseCase(store)
        self._suppress = suppress or SuppressVulnerabilityUseCase(store)

    def execute(
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
        vulnerability = self._store.resolve_vulnerability(source, vuln_id)
        logger.info(f"Resolved {vulnerability.label} to {vulnerability.uuid}")

        projects = self._list_projects.execute(
            source, vuln_id, include_inactive=include_inactive, filter_expr=filter_expr
        )
        if not projects:
            logger.warning(f"No projects found for {vulnerability.label}")
            return SuppressionResult()

        rows = default_rows(projects, base_config)
        if global_config is not None:
            rows = apply_global(global_config, rows)
        for key, changes in (row_overrides or {}).items():
            project = _match_project(key, projects)
            if project is None:
                logger.warning(f"Override for '{key}' does not match any selected project, ignoring")
                continue
            rows[project.uuid] = edit_row(rows[project.uuid], **changes)
        rows = finalize(rows)

        return self._suppress.run(vulnerability, to_selections(projects, rows))
