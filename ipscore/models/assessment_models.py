"""
Assessment Data Models — intermediate outputs of the proxy, geo and ISP checks.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProxyType(str, Enum):
    DIRECT = "direct"
    CLOUD = "cloud"
    DATACENTER = "datacenter"
    VPN = "vpn"
    HOSTING = "hosting"
    OVERSEAS = "overseas"
    CDN = "cdn"


class ProxyAssessment(BaseModel):
    """Inferred proxy/VPN usage for an IP record."""

    model_config = ConfigDict(frozen=True)

    detected: bool = False
    type: ProxyType = ProxyType.DIRECT
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    penalty: float = 0


class GeoConsistencyResult(BaseModel):
    """Cross-check of IP-reported location against browser signals."""

    model_config = ConfigDict(frozen=True)

    consistent: bool = True
    penalty: int = 0
    reasons: list[str] = Field(default_factory=list)


class IspAssessment(BaseModel):
    """Informational ISP classification. Never applied to the score."""

    model_config = ConfigDict(frozen=True)

    adjustment: int = 0
    risk_label: str | None = None
