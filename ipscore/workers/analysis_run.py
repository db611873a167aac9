"""
Analysis Run — Per-request orchestrator for one IP reputation analysis.

Pipeline:
1. Run the four gatherers concurrently (IP lookup, threat checks,
   fingerprint, network), each under its own timeout
2. Race the whole gather phase against the outer analysis timeout
3. Replace anything missing with safe defaults
4. Score with the aggregator
5. Build the display summary and audit entry

A run owns its inputs and its report; nothing is shared between runs.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Any, Awaitable

from ipscore.config import settings
from ipscore.core.presentation import summarize
from ipscore.core.score_aggregator import ScoreAggregator
from ipscore.core.threat_classifier import ThreatClassifier
from ipscore.gatherers.ip_lookup import IpLookup, sentinel_record
from ipscore.models.analysis_models import AnalysisResponse, AnalyzeRequest, AuditEntry
from ipscore.models.input_models import FingerprintRecord, IpRecord, NetworkRecord
from ipscore.models.threat_models import ThreatCheckResult

logger = logging.getLogger("ipscore.run")


class AnalysisRun:
    """One analysis of one IP. Construct a new instance per request."""

    def __init__(
        self,
        request: AnalyzeRequest,
        lookup: IpLookup | None = None,
        classifier: ThreatClassifier | None = None,
        aggregator: ScoreAggregator | None = None,
        gatherer_timeout: float | None = None,
        analysis_timeout: float | None = None,
    ) -> None:
        self.request = request
        self.lookup = lookup or IpLookup()
        self.classifier = classifier or ThreatClassifier(delay=settings.threat_check_delay)
        self.aggregator = aggregator or ScoreAggregator()
        self.gatherer_timeout = (
            gatherer_timeout if gatherer_timeout is not None else settings.gatherer_timeout
        )
        self.analysis_timeout = (
            analysis_timeout if analysis_timeout is not None else settings.analysis_timeout
        )

        self.run_id = str(uuid.uuid4())[:8]
        self.errors: dict[str, str] = {}
        self.timed_out = False

        # Filled in by the gatherers as they finish
        self.ip_record: IpRecord | None = None
        self.threats: list[ThreatCheckResult] = []
        self.fingerprint = FingerprintRecord()
        self.network = NetworkRecord()

    # ── Gatherers ──

    async def _guard(self, name: str, coro: Awaitable[Any], default: Any) -> Any:
        """Await a gatherer under the per-task timeout; failures yield the default."""
        try:
            return await asyncio.wait_for(coro, timeout=self.gatherer_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"[{self.run_id}] {name} timed out after {self.gatherer_timeout}s")
            self.errors[name] = "timeout"
        except Exception as e:
            logger.warning(f"[{self.run_id}] {name} failed: {type(e).__name__}: {e}")
            self.errors[name] = f"{type(e).__name__}: {e}"
        return default

    async def _gather_ip(self) -> IpRecord:
        if self.request.ip_record is not None:
            record = self.request.ip_record
            if record.ip is None and self.request.ip:
                record = record.model_copy(update={"ip": self.request.ip})
        else:
            record = await self._guard(
                "ip_lookup",
                self.lookup.fetch(self.request.ip),
                sentinel_record(self.request.ip),
            )
        self.ip_record = record
        return record

    async def _gather_threats(self, ip_task: asyncio.Task) -> None:
        async def check() -> list[ThreatCheckResult]:
            ip = self.request.ip
            if ip is None:
                # Self-lookup: the IP is only known once the lookup finishes
                record = await asyncio.shield(ip_task)
                ip = record.ip
            return await self.classifier.run(ip)

        self.threats = await self._guard("threats", check(), [])

    async def _gather_fingerprint(self) -> None:
        async def read() -> FingerprintRecord:
            return self.request.fingerprint or FingerprintRecord()

        self.fingerprint = await self._guard("fingerprint", read(), FingerprintRecord())

    async def _gather_network(self) -> None:
        async def read() -> NetworkRecord:
            return self.request.network or NetworkRecord()

        self.network = await self._guard("network", read(), NetworkRecord())

    async def _gather_all(self) -> None:
        ip_task = asyncio.ensure_future(self._gather_ip())
        await asyncio.gather(
            ip_task,
            self._gather_threats(ip_task),
            self._gather_fingerprint(),
            self._gather_network(),
        )

    # ── Run ──

    async def run(self) -> AnalysisResponse:
        """
        Execute the analysis.

        Always returns a response: gatherer failures and the outer timeout
        fall back to defaults and are listed in `errors`.
        """
        start_time = time.monotonic()
        requested = self.request.ip or "self"
        logger.info(f"[{self.run_id}] Starting analysis of {requested}")

        try:
            await asyncio.wait_for(self._gather_all(), timeout=self.analysis_timeout)
        except asyncio.TimeoutError:
            self.timed_out = True
            self.errors["run"] = f"Analysis timeout after {self.analysis_timeout}s"
            logger.warning(f"[{self.run_id}] Gather phase timed out, scoring with defaults")

        ip_record = self.ip_record or sentinel_record(self.request.ip)
        ip = ip_record.ip or "Unknown"

        result = self.aggregator.aggregate(
            ip_record, self.threats, self.fingerprint, self.network
        )
        report = result.report
        logger.info(
            f"[{self.run_id}] Score {report.final_score}/100, "
            f"{len(report.risk_factors)} risk factors, {report.total_deducted} points deducted "
            f"(floor={report.floor_rule})"
        )

        elapsed_ms = (time.monotonic() - start_time) * 1000
        audit = AuditEntry(
            run_id=self.run_id,
            ip=ip,
            final_score=report.final_score,
            risk_factor_count=len(report.risk_factors),
            threats_flagged=sum(1 for t in result.threats if t.is_threat),
            proxy_type=result.proxy.type.value,
            timed_out=self.timed_out,
            gatherer_errors=len(self.errors),
            duration_ms=round(elapsed_ms, 2),
        )

        logger.info(f"[{self.run_id}] Analysis complete in {elapsed_ms:.0f}ms")

        return AnalysisResponse(
            message="analysis_complete",
            run_id=self.run_id,
            ip=ip,
            report=report,
            threats=result.threats,
            proxy=result.proxy,
            geo=result.geo,
            isp=result.isp,
            ip_record=ip_record,
            summary=summarize(result, self.fingerprint),
            timed_out=self.timed_out,
            errors=dict(self.errors),
            audit=audit,
        )
