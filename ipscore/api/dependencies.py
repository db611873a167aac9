"""
FastAPI Dependencies — Shared, read-only collaborators injected via Depends().

Nothing here holds per-analysis state; every request builds its own AnalysisRun.
"""

from __future__ import annotations

from functools import lru_cache

from ipscore.audit.logger import AuditLogger
from ipscore.config import settings
from ipscore.core.score_aggregator import ScoreAggregator
from ipscore.core.threat_classifier import ThreatClassifier
from ipscore.gatherers.ip_lookup import IpLookup


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()


@lru_cache
def get_ip_lookup() -> IpLookup:
    """IP geolocation client configured from settings."""
    return IpLookup()


@lru_cache
def get_threat_classifier() -> ThreatClassifier:
    """Threat classifier over the fixed threat sources."""
    return ThreatClassifier(delay=settings.threat_check_delay)


@lru_cache
def get_score_aggregator() -> ScoreAggregator:
    """Aggregator holding the static lookup tables."""
    return ScoreAggregator()
