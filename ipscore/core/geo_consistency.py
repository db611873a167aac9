"""
Geo-Consistency Checker — Compares the IP's location with browser signals.

Three independent sub-checks, each adding to the penalty:
  timezone  +8  IP zone and browser zone more than 2 hours apart
  language  +5  browser language not expected for the IP's country
  latency   +3  measured latency above twice the country baseline
"""

from __future__ import annotations

from ipscore.core.tables import (
    COUNTRY_LANGUAGES,
    COUNTRY_LATENCY_MS,
    DEFAULT_LATENCY_MS,
    TIMEZONE_OFFSETS,
)
from ipscore.models.assessment_models import GeoConsistencyResult
from ipscore.models.input_models import FingerprintRecord, IpRecord, NetworkRecord

TIMEZONE_MAX_HOURS = 2
TIMEZONE_PENALTY = 8
LANGUAGE_PENALTY = 5
LATENCY_FACTOR = 2
LATENCY_PENALTY = 3

REASON_TIMEZONE = "timezone mismatch"
REASON_LANGUAGE = "language anomaly"
REASON_LATENCY = "latency anomaly"


class GeoConsistencyChecker:
    def __init__(
        self,
        timezone_offsets: dict[str, float] = TIMEZONE_OFFSETS,
        country_languages: dict[str, tuple[str, ...]] = COUNTRY_LANGUAGES,
        country_latency: dict[str, int] = COUNTRY_LATENCY_MS,
        default_latency: int = DEFAULT_LATENCY_MS,
    ) -> None:
        self.timezone_offsets = timezone_offsets
        self.country_languages = country_languages
        self.country_latency = country_latency
        self.default_latency = default_latency

    def timezone_distance(self, tz1: str, tz2: str) -> float:
        """Hours between two zones. Unlisted zones count as UTC."""
        return abs(self.timezone_offsets.get(tz1, 0) - self.timezone_offsets.get(tz2, 0))

    def expected_languages(self, country_code: str | None) -> tuple[str, ...]:
        if not country_code:
            return ()
        return self.country_languages.get(country_code.upper(), ())

    def expected_latency(self, country_code: str | None) -> int:
        if not country_code:
            return self.default_latency
        return self.country_latency.get(country_code.upper(), self.default_latency)

    def check(
        self,
        ip_record: IpRecord | None,
        network_record: NetworkRecord | None,
        fingerprint_record: FingerprintRecord | None = None,
    ) -> GeoConsistencyResult:
        if ip_record is None or network_record is None:
            return GeoConsistencyResult(consistent=True, penalty=0)

        reasons: list[str] = []
        penalty = 0

        ip_tz = ip_record.timezone
        browser_tz = network_record.time_zone
        if ip_tz and browser_tz and ip_tz != browser_tz:
            if self.timezone_distance(ip_tz, browser_tz) > TIMEZONE_MAX_HOURS:
                reasons.append(REASON_TIMEZONE)
                penalty += TIMEZONE_PENALTY

        if fingerprint_record is not None and fingerprint_record.language:
            browser_lang = fingerprint_record.language.split("-")[0].lower()
            expected = self.expected_languages(ip_record.country_code)
            if expected and browser_lang not in expected:
                reasons.append(REASON_LANGUAGE)
                penalty += LANGUAGE_PENALTY

        # A zero reading is treated as "not measured"
        latency = network_record.latency_ms
        if latency:
            if latency > self.expected_latency(ip_record.country_code) * LATENCY_FACTOR:
                reasons.append(REASON_LATENCY)
                penalty += LATENCY_PENALTY

        return GeoConsistencyResult(
            consistent=not reasons,
            penalty=penalty,
            reasons=reasons,
        )
