"""
Score Aggregator — Folds threat, proxy and geo assessments into one score.

    score = 100
          - Σ severity deduction of every flagged threat
          - proxy deduction     (detected and confidence > 0.9)
          - 2                   (inconsistent geography with penalty > 10)

then the first matching floor rule raises the score to its minimum:

    no risk factors    -> 100
    critical threat    -> max(score, 30)
    high threat        -> max(score, 70)
    <= 1 risk factor   -> max(score, 98)
    <= 2 risk factors  -> max(score, 90)
    otherwise          -> max(score, 80)

and the result is clamped to [0, 100] and rounded. The order of the floor
rules is product policy: a critical threat dominates the count-based floors.
ISP analysis is reported alongside but never changes the score.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from ipscore.core.geo_consistency import GeoConsistencyChecker
from ipscore.core.isp_analyzer import analyze_isp
from ipscore.core.proxy_heuristic import ProxyHeuristic
from ipscore.core.tables import DEFAULT_PROXY_DEDUCTION, PROXY_DEDUCTIONS
from ipscore.models.assessment_models import GeoConsistencyResult, ProxyAssessment
from ipscore.models.input_models import FingerprintRecord, IpRecord, NetworkRecord
from ipscore.models.score_models import Deduction, EngineResult, ScoreReport
from ipscore.models.threat_models import SEVERITY_DEDUCTIONS, Severity, ThreatCheckResult

INITIAL_SCORE = 100

PROXY_CONFIDENCE_GATE = 0.9
GEO_PENALTY_GATE = 10
GEO_DEDUCTION = 2

GEO_RISK_FACTOR = "Severe geographic anomalies detected"
GEO_LEDGER_LABEL = "Geographic location"


@dataclass(frozen=True)
class FloorContext:
    risk_count: int
    top_severity: Severity | None


@dataclass(frozen=True)
class FloorRule:
    name: str
    applies: Callable[[FloorContext], bool]
    floor: int


# Evaluated in order, first match wins. Do not reorder.
FLOOR_POLICY: tuple[FloorRule, ...] = (
    FloorRule("no_risk", lambda c: c.risk_count == 0, 100),
    FloorRule("critical_threat", lambda c: c.top_severity == Severity.CRITICAL, 30),
    FloorRule("high_threat", lambda c: c.top_severity == Severity.HIGH, 70),
    FloorRule("single_low_risk", lambda c: c.risk_count <= 1, 98),
    FloorRule("two_low_risks", lambda c: c.risk_count <= 2, 90),
    FloorRule("multiple_low_risks", lambda c: True, 80),
)


def top_severity(threats: list[ThreatCheckResult]) -> Severity | None:
    """Most severe flag among the threat results, or None when nothing is flagged."""
    flagged = [t.severity for t in threats if t.is_threat and t.severity is not None]
    return max(flagged, key=lambda s: s.rank, default=None)


def proxy_deduction(proxy: ProxyAssessment) -> int:
    """Points removed for a proxy, 0 unless detected with confidence above 0.9."""
    if not (proxy.detected and proxy.confidence > PROXY_CONFIDENCE_GATE):
        return 0
    return PROXY_DEDUCTIONS.get(proxy.type, DEFAULT_PROXY_DEDUCTION)


def geo_deduction(geo: GeoConsistencyResult) -> int:
    """
    Flat 2 points for a severe geographic anomaly.

    Independent of the checker's own penalty value, which only gates it.
    """
    if not geo.consistent and geo.penalty > GEO_PENALTY_GATE:
        return GEO_DEDUCTION
    return 0


def apply_floor(
    score: float,
    context: FloorContext,
    policy: tuple[FloorRule, ...] = FLOOR_POLICY,
) -> tuple[float, str]:
    for rule in policy:
        if rule.applies(context):
            return max(score, rule.floor), rule.name
    return score, ""


def finalize(score: float) -> int:
    """Clamp to [0, 100] and round half up."""
    clamped = max(0.0, min(100.0, float(score)))
    return int(math.floor(clamped + 0.5))


def compute_score(
    threats: list[ThreatCheckResult],
    proxy: ProxyAssessment | None = None,
    geo: GeoConsistencyResult | None = None,
    policy: tuple[FloorRule, ...] = FLOOR_POLICY,
) -> ScoreReport:
    """
    Compute the reputation score from already-computed assessments.

    Total over its inputs: missing assessments count as "no evidence".

    Args:
        threats: One result per threat source (may be empty)
        proxy: Proxy/VPN assessment, or None
        geo: Geo-consistency result, or None
        policy: Ordered floor rules

    Returns:
        ScoreReport with risk factors in detection order and the ledger.
    """
    score: float = INITIAL_SCORE
    risk_factors: list[str] = []
    ledger: list[Deduction] = []

    # ── Threat intelligence ──
    threat_deduction = 0
    for threat in threats:
        if not threat.is_threat or threat.severity is None:
            continue
        deduction = SEVERITY_DEDUCTIONS[threat.severity]
        threat_deduction += deduction
        risk_factors.append(f"{threat.source} ({threat.severity.value})")
        ledger.append(Deduction(label=f"Threat Intelligence-{threat.source}", amount=deduction))
    score -= threat_deduction

    # ── Proxy / VPN ──
    if proxy is not None:
        deduction = proxy_deduction(proxy)
        if deduction > 0:
            score -= deduction
            risk_factors.append(proxy.type.value)
            ledger.append(Deduction(label=f"Proxy Detection-{proxy.type.value}", amount=deduction))

    # ── Geography ──
    if geo is not None:
        deduction = geo_deduction(geo)
        if deduction > 0:
            score -= deduction
            risk_factors.append(GEO_RISK_FACTOR)
            ledger.append(Deduction(label=GEO_LEDGER_LABEL, amount=deduction))

    context = FloorContext(
        risk_count=len(risk_factors),
        top_severity=top_severity(threats),
    )
    score, floor_rule = apply_floor(score, context, policy)

    return ScoreReport(
        initial_score=INITIAL_SCORE,
        final_score=finalize(score),
        risk_factors=risk_factors,
        deduction_ledger=ledger,
        floor_rule=floor_rule,
    )


class ScoreAggregator:
    """
    Runs the proxy, geo and ISP checks for one set of inputs and scores them.

    Holds only read-only tables, so one instance may serve concurrent runs.
    """

    def __init__(
        self,
        proxy_heuristic: ProxyHeuristic | None = None,
        geo_checker: GeoConsistencyChecker | None = None,
        policy: tuple[FloorRule, ...] = FLOOR_POLICY,
    ) -> None:
        self.proxy_heuristic = proxy_heuristic or ProxyHeuristic()
        self.geo_checker = geo_checker or GeoConsistencyChecker()
        self.policy = policy

    def aggregate(
        self,
        ip_record: IpRecord | None,
        threats: list[ThreatCheckResult],
        fingerprint: FingerprintRecord | None = None,
        network: NetworkRecord | None = None,
    ) -> EngineResult:
        proxy = self.proxy_heuristic.assess(ip_record)
        geo = self.geo_checker.check(ip_record, network, fingerprint)
        isp = analyze_isp(ip_record)

        report = compute_score(threats, proxy, geo, self.policy)

        return EngineResult(
            report=report,
            threats=list(threats),
            proxy=proxy,
            geo=geo,
            isp=isp,
        )
