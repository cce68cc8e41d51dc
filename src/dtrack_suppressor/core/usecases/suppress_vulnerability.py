from __future__ import annotations

import logging
from typing import Sequence

from ..domain.errors import RequestFailed
from ..domain.models import ProjectSelection, SuppressionResult, Vulnerability
from ..ports.findings_port import FindingsStorePort
from ..services.reconciler import build_targets

logger = logging.getLogger(__name__)


class SuppressVulnerabilityUseCase:
    """Write one analysis per (project, component) affected by a vulnerability.

    Projects are processed in the given order and components in the order the
    reconciler returns them. A failed call is recorded and the run moves on to
    the next component or project; nothing is retried or rolled back.
    MissingCredential and NotFound are not caught and abort the run.
    """

    def __init__(self, store: FindingsStorePort) -> None:
        self._store = store

    def run(self, vulnerability: Vulnerability, selections: Sequence[ProjectSelection]) -> SuppressionResult:
        logger.info(f"Processing {vulnerability.label} in {len(selections)} project(s)")
        result = SuppressionResult()

        for selection in selections:
            project = selection.project
            try:
                findings = self._store.list_findings(project.uuid)
            except RequestFailed as e:
                logger.error(f"Error fetching findings for project {project.display_name}: {e}")
                result.record_failure(project, None, e)
                continue

            targets = build_targets(project, findings, vulnerability, selection.config)
            if not targets:
                logger.warning(f"No findings for {vulnerability.label} in project {project.display_name}")
                result.record_noop(project)
                continue

            logger.debug(f"{len(targets)} unique component(s) in {project.display_name}")
            for target in targets:
                try:
                    self._store.put_analysis(target)
                except RequestFailed as e:
                    logger.error(f"Error updating {target.component_uuid} in {project.display_name}: {e}")
                    result.record_failure(project, target.component_uuid, e)
                    continue
                result.record_success()

        logger.info(
            f"Processed {vulnerability.label}: {result.success_count} succeeded, "
            f"{result.failure_count} failed, {len(result.noop_projects)} project(s) without findings"
        )
        return result
