from __future__ import annotations

import logging
from collections.abc import Iterable

from ..domain.models import AnalysisConfig, Finding, MutationTarget, Project, Vulnerability

logger = logging.getLogger(__name__)


def reconcile_findings(findings: Iterable[Finding], vulnerability_uuid: str) -> list[Finding]:
    """Reduce raw findings of one project to one finding per component.

    Only findings for ``vulnerability_uuid`` are kept. Findings without a
    component UUID cannot be addressed and are dropped. When a component
    appears more than once (e.g. in both the unsuppressed and the suppressed
    query), the first occurrence wins, so input order decides the tie.
    """
    unique: dict[str, Finding] = {}
    dropped = 0
    for finding in findings:
        if finding.vulnerability_uuid != vulnerability_uuid:
            continue
        if not finding.component_uuid:
            dropped += 1
            continue
        if finding.component_uuid in unique:
            logger.debug(f"Duplicate finding for component {finding.component_uuid} (suppressed={finding.suppressed}), keeping first")
            continue
        unique[finding.component_uuid] = finding
    if dropped:
        logger.warning(f"Dropped {dropped} finding(s) without a component UUID")
    return list(unique.values())


def build_targets(
    project: Project,
    findings: Iterable[Finding],
    vulnerability: Vulnerability,
    config: AnalysisConfig,
) -> list[MutationTarget]:
    """Return one mutation target per distinct component affected in ``project``."""
    return [
        MutationTarget(
            project=project,
            component_uuid=f.component_uuid,  # type: ignore[arg-type]
            vulnerability_uuid=vulnerability.uuid,
            config=config,
            component_name=f.component_name,
        )
        for f in reconcile_findings(findings, vulnerability.uuid)
    ]
