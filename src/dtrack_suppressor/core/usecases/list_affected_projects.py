from __future__ import annotations

import logging
from typing import Sequence

from ..domain.models import Project
from ..ports.findings_port import FindingsStorePort
from ...shared.filter_utils import filter_projects

logger = logging.getLogger(__name__)


class ListAffectedProjectsUseCase:
    def __init__(self, store: FindingsStorePort) -> None:
        self._store = store

    def execute(
        self,
        source: str,
        vuln_id: str,
        *,
        include_inactive: bool = False,
        filter_expr: str | None = None,
    ) -> Sequence[Project]:
        logger.info(f"Listing projects affected by {source}/{vuln_id}: include_inactive={include_inactive}, filter={filter_expr}")
        projects = list(self._store.list_affected_projects(source, vuln_id))
        logger.info(f"Backend reported {len(projects)} affected project(s)")

        if not include_inactive:
            projects = [p for p in projects if p.active]
        if filter_expr:
            projects = filter_projects(projects, filter_expr)

        logger.debug(f"{len(projects)} project(s) selected")
        return projects
