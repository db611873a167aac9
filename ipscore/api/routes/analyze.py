"""
Analysis Routes — POST /analyze and POST /score

/analyze gathers everything for an IP and scores it.
/score only scores inputs the caller has already gathered.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ipscore.api.dependencies import (
    get_audit_logger,
    get_ip_lookup,
    get_score_aggregator,
    get_threat_classifier,
)
from ipscore.audit.logger import AuditLogger
from ipscore.core.presentation import summarize
from ipscore.core.score_aggregator import ScoreAggregator
from ipscore.core.threat_classifier import ThreatClassifier
from ipscore.gatherers.ip_lookup import IpLookup, sentinel_record
from ipscore.models.analysis_models import AnalysisResponse, AnalyzeRequest, ScoreRequest
from ipscore.workers.analysis_run import AnalysisRun

logger = logging.getLogger("ipscore.api.analyze")
router = APIRouter()


def _fallback_response(request: AnalyzeRequest, aggregator: ScoreAggregator, error: str) -> AnalysisResponse:
    """Report built from empty inputs when the run itself crashed."""
    ip_record = request.ip_record or sentinel_record(request.ip)
    result = aggregator.aggregate(ip_record, [], request.fingerprint, request.network)
    return AnalysisResponse(
        message="analysis_failed",
        ip=ip_record.ip or "Unknown",
        report=result.report,
        threats=result.threats,
        proxy=result.proxy,
        geo=result.geo,
        isp=result.isp,
        ip_record=ip_record,
        summary=summarize(result, request.fingerprint),
        errors={"run": error},
    )


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze(
    request: AnalyzeRequest,
    lookup: IpLookup = Depends(get_ip_lookup),
    classifier: ThreatClassifier = Depends(get_threat_classifier),
    aggregator: ScoreAggregator = Depends(get_score_aggregator),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Run a full analysis for one IP (or the server's own IP when omitted)."""
    try:
        run = AnalysisRun(
            request,
            lookup=lookup,
            classifier=classifier,
            aggregator=aggregator,
        )
        response = await run.run()
    except Exception as e:
        logger.exception("Unexpected analysis error")
        return _fallback_response(request, aggregator, f"{type(e).__name__}: {e}")

    if response.audit:
        audit.log(response.audit)

    return response


@router.post("/score", response_model=AnalysisResponse)
async def score(
    request: ScoreRequest,
    aggregator: ScoreAggregator = Depends(get_score_aggregator),
):
    """Score pre-gathered inputs. Pure: no lookups, no audit record."""
    result = aggregator.aggregate(
        request.ip_record, request.threats, request.fingerprint, request.network
    )
    ip = (request.ip_record.ip if request.ip_record else None) or "Unknown"

    return AnalysisResponse(
        message="score_complete",
        ip=ip,
        report=result.report,
        threats=result.threats,
        proxy=result.proxy,
        geo=result.geo,
        isp=result.isp,
        ip_record=request.ip_record,
        summary=summarize(result, request.fingerprint),
    )
