from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ..core.domain.models import MutationTarget


class DtVulnerability(BaseModel):
	"""GET /vulnerability/source/{source}/vuln/{vulnId}"""
	uuid: Optional[str] = None
	vulnId: Optional[str] = None
	source: Optional[str] = None


class DtProject(BaseModel):
	"""Element of GET /vulnerability/source/{source}/vuln/{vulnId}/projects"""
	uuid: str
	name: str
	version: Optional[str] = None
	# Older servers omit the flag; such projects are treated as active
	active: Optional[bool] = None


class DtFindingComponent(BaseModel):
	uuid: Optional[str] = None
	name: Optional[str] = None
	version: Optional[str] = None
	project: Optional[str] = None


class DtFindingVulnerability(BaseModel):
	uuid: Optional[str] = None
	vulnId: Optional[str] = None
	source: Optional[str] = None


class DtFindingAnalysis(BaseModel):
	state: Optional[str] = None
	isSuppressed: Optional[bool] = None


class DtFinding(BaseModel):
	"""Element of GET /finding/project/{uuid}?suppressed=..."""
	component: Optional[DtFindingComponent] = None
	vulnerability: Optional[DtFindingVulnerability] = None
	analysis: Optional[DtFindingAnalysis] = None


class DtAnalysisRequest(BaseModel):
    """Body of PUT /analysis. Optional fields are omitted when empty."""
    project: str
    component: str
    vulnerability: str
    analysisState: str
    analysisJustification: Optional[str] = None
    analysisResponse: Optional[str] = None
    analysisDetails: Optional[str] = None
    comment: Optional[str] = None
    suppressed: bool
    # older API versions read isSuppressed instead of suppressed
    isSuppressed: bool

    @classmethod
    def from_target(cls, target: MutationTarget) -> "DtAnalysisRequest":
        cfg = target.config
        return cls(
            project=target.project.uuid,
            component=target.component_uuid,
            vulnerability=target.vulnerability_uuid,
            analysisState=cfg.analysis_state.value,
            analysisJustification=cfg.analysis_justification.value if cfg.analysis_justification else None,
            analysisResponse=cfg.analysis_response.value if cfg.analysis_response else None,
            analysisDetails=cfg.analysis_details or None,
            comment=cfg.comment or None,
            suppressed=cfg.suppressed,
            isSuppressed=cfg.suppressed,
        )

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)
