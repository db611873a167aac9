"""
Score Report Models — final score, risk factors and the deduction ledger.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ipscore.models.assessment_models import GeoConsistencyResult, IspAssessment, ProxyAssessment
from ipscore.models.threat_models import ThreatCheckResult


class Deduction(BaseModel):
    """A single labelled subtraction from the score."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: int


class ScoreReport(BaseModel):
    """Result of one scoring pass. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    initial_score: int = 100
    final_score: int = Field(..., ge=0, le=100, description="Final reputation score 0-100")
    risk_factors: list[str] = Field(
        default_factory=list,
        description="Detected risks in detection order: threats, proxy, geography",
    )
    deduction_ledger: list[Deduction] = Field(default_factory=list)
    floor_rule: str = Field(default="", description="Name of the floor rule that applied")

    @property
    def total_deducted(self) -> int:
        return sum(d.amount for d in self.deduction_ledger)


class EngineResult(BaseModel):
    """Score report plus the intermediate assessments behind it."""

    model_config = ConfigDict(frozen=True)

    report: ScoreReport
    threats: list[ThreatCheckResult] = Field(default_factory=list)
    proxy: ProxyAssessment = Field(default_factory=ProxyAssessment)
    geo: GeoConsistencyResult = Field(default_factory=GeoConsistencyResult)
    isp: IspAssessment = Field(default_factory=IspAssessment)
