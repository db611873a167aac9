"""
Analysis Request/Response Models — API contract schemas.

These are the public-facing Pydantic models used by FastAPI endpoints.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from ipscore.models.assessment_models import GeoConsistencyResult, IspAssessment, ProxyAssessment
from ipscore.models.input_models import FingerprintRecord, IpRecord, NetworkRecord
from ipscore.models.score_models import ScoreReport
from ipscore.models.threat_models import ThreatCheckResult

_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
IPV4_PATTERN = re.compile(rf"^(?:{_OCTET}\.){{3}}{_OCTET}$")


class AnalyzeRequest(BaseModel):
    """Request body for /analyze."""

    ip: str | None = Field(
        default=None,
        description="IPv4 address to analyze. Omit to analyze the server's own public IP.",
    )
    ip_record: IpRecord | None = Field(
        default=None, description="Pre-fetched geolocation record; skips the lookup"
    )
    fingerprint: FingerprintRecord | None = None
    network: NetworkRecord | None = None

    @field_validator("ip")
    @classmethod
    def _valid_ipv4(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not IPV4_PATTERN.match(v):
            raise ValueError("ip must be a dotted-quad IPv4 address, e.g. 192.168.1.1")
        return v


class ScoreRequest(BaseModel):
    """Request body for /score: inputs already gathered by the caller."""

    ip_record: IpRecord | None = None
    threats: list[ThreatCheckResult] = Field(default_factory=list)
    fingerprint: FingerprintRecord | None = None
    network: NetworkRecord | None = None


class ProxyDisplay(BaseModel):
    type_name: str
    anonymity: str
    protocol: str
    risk_level: str


class ReportSummary(BaseModel):
    """Display block for the dashboard."""

    band: str = Field(..., description="excellent | good | average | poor")
    status: str
    threats_found: str
    proxy: ProxyDisplay
    location_consistent: bool
    isp_label: str
    webrtc_leak: bool = False
    tips: list[str] = Field(default_factory=list)


class AuditEntry(BaseModel):
    """Audit metadata for an analysis run."""

    run_id: str
    ip: str
    final_score: int
    risk_factor_count: int
    threats_flagged: int
    proxy_type: str
    timed_out: bool = False
    gatherer_errors: int = 0
    duration_ms: float = 0.0


class AnalysisResponse(BaseModel):
    """Top-level response for /analyze and /score."""

    message: str = "analysis_complete"
    run_id: str = ""
    ip: str = "Unknown"
    report: ScoreReport
    threats: list[ThreatCheckResult] = Field(default_factory=list)
    proxy: ProxyAssessment
    geo: GeoConsistencyResult
    isp: IspAssessment
    ip_record: IpRecord | None = None
    summary: ReportSummary | None = None
    timed_out: bool = False
    errors: dict[str, str] = Field(
        default_factory=dict, description="Gatherer name -> error, for gatherers that fell back"
    )
    audit: AuditEntry | None = None
