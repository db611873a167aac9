"""
Tests for data models — aliases, sentinel handling and invariants.
"""

import pytest
from pydantic import ValidationError

from ipscore.models.analysis_models import AnalyzeRequest
from ipscore.models.input_models import FingerprintRecord, IpRecord, NetworkRecord
from ipscore.models.score_models import Deduction, ScoreReport
from ipscore.models.threat_models import SEVERITY_ORDER, Severity, ThreatCheckResult


def test_ip_record_accepts_lookup_payload():
    record = IpRecord.model_validate({
        "ip": "8.8.8.8",
        "country_name": "United States",
        "country_code": "US",
        "timezone": "America/Los_Angeles",
        "org": "Google LLC",
        "asn": "AS15169",
        "latitude": 37.4,
    })
    assert record.country == "United States"
    assert record.country_code == "US"
    assert record.asn == "AS15169"


def test_ip_record_camel_case_and_field_names():
    record = IpRecord.model_validate({"countryCode": "JP", "country": "Japan"})
    assert record.country_code == "JP"
    assert record.country == "Japan"


@pytest.mark.parametrize("value", ["Unknown", "unknown", "", "N/A"])
def test_ip_record_sentinels_become_none(value):
    record = IpRecord(org=value, timezone=value, country=value)
    assert record.org is None
    assert record.timezone is None
    assert record.country is None


def test_ip_record_numeric_asn():
    assert IpRecord.model_validate({"asn": 16509}).asn == "16509"


def test_ip_record_is_frozen():
    record = IpRecord(ip="1.1.1.1")
    with pytest.raises(ValidationError):
        record.ip = "2.2.2.2"


def test_fingerprint_camel_case():
    fp = FingerprintRecord.model_validate({
        "userAgent": "Mozilla/5.0",
        "cookieEnabled": True,
        "hardwareConcurrency": 8,
        "webRTC": "Not supported",
        "webdriver": None,
    })
    assert fp.user_agent == "Mozilla/5.0"
    assert fp.cookie_enabled is True
    assert fp.webrtc == "Not supported"
    assert fp.webdriver is False


def test_fingerprint_rejects_unknown_webrtc_state():
    with pytest.raises(ValidationError):
        FingerprintRecord(webrtc="Maybe")


@pytest.mark.parametrize("latency, expected", [
    (42, 42.0),
    (12.5, 12.5),
    ("Unknown", None),
    (None, None),
])
def test_network_latency_ms(latency, expected):
    assert NetworkRecord(latency=latency).latency_ms == expected


def test_network_time_zone_alias():
    net = NetworkRecord.model_validate({"timeZone": "Asia/Tokyo", "dns": [{"server": "1.1.1.1"}]})
    assert net.time_zone == "Asia/Tokyo"
    assert net.dns[0].server == "1.1.1.1"


def test_threat_result_requires_severity_when_flagged():
    with pytest.raises(ValidationError):
        ThreatCheckResult(source="Botnet", is_threat=True)


def test_threat_result_rejects_severity_when_clear():
    with pytest.raises(ValidationError):
        ThreatCheckResult(source="Botnet", severity=Severity.LOW)


def test_severity_rank():
    assert [s.rank for s in SEVERITY_ORDER] == [0, 1, 2, 3]
    assert Severity.CRITICAL.rank > Severity.HIGH.rank


def test_score_report_bounds():
    with pytest.raises(ValidationError):
        ScoreReport(final_score=101)
    report = ScoreReport(
        final_score=70,
        deduction_ledger=[Deduction(label="a", amount=20), Deduction(label="b", amount=10)],
    )
    assert report.total_deducted == 30


@pytest.mark.parametrize("ip", ["256.1.1.1", "1.2.3", "abc", "1.2.3.4.5", "2001:db8::1"])
def test_analyze_request_rejects_bad_ip(ip):
    with pytest.raises(ValidationError):
        AnalyzeRequest(ip=ip)


def test_analyze_request_strips_ip():
    assert AnalyzeRequest(ip=" 8.8.8.8 ").ip == "8.8.8.8"
    assert AnalyzeRequest().ip is None
