"""
Threat Classifier — Turns estimator probabilities into per-source results.

Each configured threat source is checked once per run. Sources are evaluated
sequentially with an optional pacing delay; a failing source is recorded as
errored and does not stop the remaining checks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ipscore.core.estimator import estimate, is_reserved_ip
from ipscore.core.tables import THREAT_SOURCES
from ipscore.models.threat_models import Severity, ThreatCheckResult, ThreatSource

logger = logging.getLogger("ipscore.threats")

THREAT_THRESHOLD = 0.8

# Checked top-down; first threshold exceeded wins
SEVERITY_THRESHOLDS: tuple[tuple[float, Severity], ...] = (
    (0.95, Severity.CRITICAL),
    (0.9, Severity.HIGH),
    (0.85, Severity.MEDIUM),
    (0.8, Severity.LOW),
)

RESERVED_DETAILS = "Reserved/Private IP"

EstimatorFn = Callable[[str, str], float]


def classify(probability: float) -> tuple[bool, Severity | None]:
    """Map a probability to (is_threat, severity)."""
    if probability <= THREAT_THRESHOLD:
        return False, None
    for threshold, severity in SEVERITY_THRESHOLDS:
        if probability > threshold:
            return True, severity
    return False, None


def perform_basic_threat_check(
    ip: str,
    check_name: str,
    estimator: EstimatorFn = estimate,
) -> tuple[bool, Severity | None, str]:
    """
    Check one IP against one simulated feed.

    Returns:
        (is_threat, severity, details)
    """
    if is_reserved_ip(ip):
        return False, None, RESERVED_DETAILS

    probability = estimator(ip, check_name)
    is_threat, severity = classify(probability)
    return is_threat, severity, f"Risk assessment: {probability * 100:.1f}%"


class ThreatClassifier:
    """Runs every configured threat source against one IP."""

    def __init__(
        self,
        sources: tuple[ThreatSource, ...] = THREAT_SOURCES,
        estimator: EstimatorFn = estimate,
        delay: float = 0.0,
    ) -> None:
        self.sources = sources
        self.estimator = estimator
        self.delay = delay

    def check_source(self, source: ThreatSource, ip: str) -> ThreatCheckResult:
        """Check a single source, recording failures instead of raising."""
        try:
            is_threat, severity, details = perform_basic_threat_check(
                ip, source.check, self.estimator
            )
        except Exception as e:
            logger.warning(f"Threat source {source.name} failed: {e}")
            return ThreatCheckResult(
                source=source.name,
                weight=source.weight,
                details=f"Check failed: {type(e).__name__}",
                errored=True,
            )

        return ThreatCheckResult(
            source=source.name,
            is_threat=is_threat,
            severity=severity,
            weight=source.weight,
            details=details,
        )

    async def run(self, ip: str | None) -> list[ThreatCheckResult]:
        """Check all sources in order. No IP means nothing to check."""
        if not ip or ip.strip().lower() == "unknown":
            return []

        results: list[ThreatCheckResult] = []
        for i, source in enumerate(self.sources):
            results.append(self.check_source(source, ip))
            if self.delay > 0 and i < len(self.sources) - 1:
                await asyncio.sleep(self.delay)

        flagged = sum(1 for r in results if r.is_threat)
        logger.debug(f"{ip}: {flagged}/{len(results)} threat sources flagged")
        return results
