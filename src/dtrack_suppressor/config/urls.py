from __future__ import annotations

from urllib.parse import quote


API_PREFIX = "/api/v1"


def _segment(value: str) -> str:
	return quote(value, safe="")


def get_vulnerability_url(source: str, vuln_id: str) -> str:
	return f"{API_PREFIX}/vulnerability/source/{_segment(source)}/vuln/{_segment(vuln_id)}"


def get_affected_projects_url(source: str, vuln_id: str) -> str:
	return f"{get_vulnerability_url(source, vuln_id)}/projects"


def get_project_findings_url(project_uuid: str) -> str:
	return f"{API_PREFIX}/finding/project/{_segment(project_uuid)}"


def get_analysis_url() -> str:
    return f"{API_PREFIX}/analysis"
