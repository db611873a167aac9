"""
Test fixtures shared across all IP Score tests.
"""

import asyncio

import pytest

from ipscore.models.input_models import FingerprintRecord, IpRecord, NetworkRecord
from ipscore.models.threat_models import Severity, ThreatCheckResult


def flagged(source: str, severity: Severity | str) -> ThreatCheckResult:
    return ThreatCheckResult(source=source, is_threat=True, severity=Severity(severity))


def clear(source: str) -> ThreatCheckResult:
    return ThreatCheckResult(source=source)


class FakeLookup:
    """Stand-in for IpLookup: returns a fixed record, raises, or stalls."""

    def __init__(self, record: IpRecord | None = None, error: Exception | None = None, delay: float = 0.0):
        self.record = record
        self.error = error
        self.delay = delay
        self.calls: list[str | None] = []

    async def fetch(self, ip: str | None = None) -> IpRecord:
        self.calls.append(ip)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.record or IpRecord(ip=ip)


@pytest.fixture
def scenario_threats():
    """The two-critical scenario for 220.246.84.46 (malware + attack source)."""
    return [
        flagged("Malware Database", "critical"),
        clear("Spam Lists"),
        clear("Botnet"),
        flagged("Attack Source IP", "critical"),
        clear("Phishing Websites"),
    ]


@pytest.fixture
def all_clear_threats():
    return [
        clear("Malware Database"),
        clear("Spam Lists"),
        clear("Botnet"),
        clear("Attack Source IP"),
        clear("Phishing Websites"),
    ]


@pytest.fixture
def residential_record():
    """A plain consumer ISP in the US."""
    return IpRecord(
        ip="203.0.113.10",
        country="United States",
        country_code="US",
        region="California",
        city="San Jose",
        timezone="America/Los_Angeles",
        org="Comcast Cable Communications",
        isp="Comcast Cable",
        asn="AS7922",
    )


@pytest.fixture
def vpn_record():
    return IpRecord(
        ip="198.51.100.20",
        country="Japan",
        country_code="JP",
        timezone="America/New_York",
        org="NordVPN Services",
        asn="AS0",
    )


@pytest.fixture
def us_fingerprint():
    return FingerprintRecord(language="en-US", user_agent="Mozilla/5.0", webrtc="Not detected")


@pytest.fixture
def us_network():
    return NetworkRecord(latency=40, time_zone="America/Los_Angeles")
