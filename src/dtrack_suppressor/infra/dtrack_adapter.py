from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Mapping, Sequence, TypeVar

import httpx
from pydantic import ValidationError

from ..config.tokens import mask_token
from ..config.urls import (
    get_affected_projects_url,
    get_analysis_url,
    get_project_findings_url,
    get_vulnerability_url,
)
from ..core.domain.errors import MissingCredential, NotFound, RequestFailed
from ..core.domain.models import Finding, MutationTarget, Project, Vulnerability
from ..core.ports.findings_port import FindingsStorePort
from .http_client import HttpClient, ResponseShapeError
from .schemas import DtAnalysisRequest, DtFinding, DtProject, DtVulnerability

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_project(p: DtProject) -> Project:
    return Project(uuid=p.uuid, name=p.name, version=p.version, active=p.active is not False)


def _to_finding(f: DtFinding, project_uuid: str, suppressed_query: bool) -> Finding:
    component = f.component
    suppressed = suppressed_query
    if f.analysis is not None and f.analysis.isSuppressed is not None:
        suppressed = f.analysis.isSuppressed
    return Finding(
        project_uuid=project_uuid,
        component_uuid=component.uuid if component else None,
        vulnerability_uuid=f.vulnerability.uuid if f.vulnerability else None,
        suppressed=suppressed,
        component_name=component.name if component else None,
        component_version=component.version if component else None,
    )


class DependencyTrackAdapter(FindingsStorePort):
    """Findings store backed by the Dependency-Track REST API (/api/v1)."""

    def __init__(self, http_client: HttpClient, api_key: str | None) -> None:
        self._http = http_client
        self._api_key = api_key
        logger.debug(f"DependencyTrackAdapter using token {mask_token(api_key)}")

    def _auth_headers(self) -> dict[str, str]:
        if not self._api_key:
            raise MissingCredential()
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    def _call(self, fn: Callable[..., T], url: str, *args: Any, **kwargs: Any) -> T:
        """Invoke an HttpClient method, mapping every failure to RequestFailed."""
        try:
            return fn(url, *args, **kwargs)
        except httpx.HTTPStatusError as e:
            raise RequestFailed(e.response.status_code, url=url) from e
        except httpx.HTTPError as e:
            # transport failures, redirect loops and undecodable bodies alike
            raise RequestFailed(None, f"API request failed: {type(e).__name__}: {e}", url=url) from e
        except (ResponseShapeError, json.JSONDecodeError) as e:
            raise RequestFailed(None, f"Unexpected response body from {url}: {e}", url=url) from e

    def resolve_vulnerability(self, source: str, vuln_id: str) -> Vulnerability:
        headers = self._auth_headers()
        url = get_vulnerability_url(source, vuln_id)
        try:
            raw = self._call(self._http.get_json, url, headers=headers)
        except RequestFailed as e:
            if e.status == 404:
                raise NotFound(source, vuln_id) from e
            raise
        vuln = DtVulnerability.model_validate(raw)
        if not vuln.uuid:
            raise NotFound(source, vuln_id)
        return Vulnerability(uuid=vuln.uuid, source=vuln.source or source, vuln_id=vuln.vulnId or vuln_id)

    def list_affected_projects(self, source: str, vuln_id: str) -> Sequence[Project]:
        headers = self._auth_headers()
        url = get_affected_projects_url(source, vuln_id)
        raw = self._call(self._http.get_json_list, url, headers=headers)
        try:
            return [_to_project(DtProject.model_validate(item)) for item in raw]
        except ValidationError as e:
            raise RequestFailed(None, f"Unexpected project payload from {url}: {e}", url=url) from e

    def _fetch_findings(self, project_uuid: str, suppressed: bool, headers: Mapping[str, str]) -> list[Finding]:
        url = get_project_findings_url(project_uuid)
        params = {"suppressed": "true" if suppressed else "false"}
        raw = self._call(self._http.get_json_list, url, params=params, headers=headers)
        try:
            return [_to_finding(DtFinding.model_validate(item), project_uuid, suppressed) for item in raw]
        except ValidationError as e:
            raise RequestFailed(None, f"Unexpected finding payload from {url}: {e}", url=url) from e

    def list_findings(self, project_uuid: str) -> Sequence[Finding]:
        """Return all findings of a project.

        The API can only filter on one suppression state, so both states are
        queried in parallel and the results are concatenated, unsuppressed
        first. A failed suppressed query yields an empty half; a failed
        unsuppressed query raises.
        """
        headers = self._auth_headers()
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="findings") as pool:
            unsuppressed_future = pool.submit(self._fetch_findings, project_uuid, False, headers)
            suppressed_future = pool.submit(self._fetch_findings, project_uuid, True, headers)
            try:
                suppressed = suppressed_future.result()
            except RequestFailed as e:
                logger.warning(f"Suppressed findings unavailable for project {project_uuid}, continuing without them: {e}")
                suppressed = []
            unsuppressed = unsuppressed_future.result()

        logger.debug(f"Project {project_uuid}: {len(unsuppressed)} unsuppressed, {len(suppressed)} suppressed finding(s)")
        return [*unsuppressed, *suppressed]

    def put_analysis(self, target: MutationTarget) -> dict:
        headers = self._auth_headers()
        payload = DtAnalysisRequest.from_target(target).to_payload()
        logger.debug(f"PUT analysis for component {target.component_uuid} in project {target.project.uuid}: {payload}")
        return self._call(self._http.put_json, get_analysis_url(), payload, headers=headers)
