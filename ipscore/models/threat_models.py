"""
Threat Intelligence Data Models — severity tiers and per-source check results.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return SEVERITY_ORDER.index(self)


# Ascending: low < medium < high < critical
SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.LOW,
    Severity.MEDIUM,
    Severity.HIGH,
    Severity.CRITICAL,
)

# Score points removed per flagged threat
SEVERITY_DEDUCTIONS: dict[Severity, int] = {
    Severity.CRITICAL: 30,
    Severity.HIGH: 20,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}


class ThreatSource(BaseModel):
    """A configured threat feed. Weight is shown in the UI only."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name, e.g. 'Malware Database'")
    check: str = Field(..., description="Check identifier fed to the estimator")
    weight: int = Field(..., description="Display weight, unused by the scoring math")


class ThreatCheckResult(BaseModel):
    """Outcome of a single threat source check for one IP."""

    model_config = ConfigDict(frozen=True)

    source: str
    is_threat: bool = False
    severity: Severity | None = None
    weight: int = 0
    details: str = ""
    errored: bool = False

    @model_validator(mode="after")
    def _severity_only_for_threats(self) -> "ThreatCheckResult":
        if self.is_threat and self.severity is None:
            raise ValueError("a flagged threat must carry a severity")
        if not self.is_threat and self.severity is not None:
            raise ValueError("severity must be empty when no threat is flagged")
        return self
