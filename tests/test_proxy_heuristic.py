"""
Tests for Proxy/VPN Heuristic — keyword and ASN matching, detection threshold.
"""

import pytest

from ipscore.core.proxy_heuristic import ProxyHeuristic, parse_asn
from ipscore.models.assessment_models import ProxyType
from ipscore.models.input_models import IpRecord

heuristic = ProxyHeuristic()


def test_residential_is_direct(residential_record):
    proxy = heuristic.assess(residential_record)
    assert proxy.detected is False
    assert proxy.type == ProxyType.DIRECT
    assert proxy.confidence == 1.0
    assert proxy.penalty == 0


def test_missing_record_is_direct():
    proxy = heuristic.assess(None)
    assert proxy.detected is False
    assert proxy.confidence == 1.0


def test_missing_org_is_no_evidence():
    proxy = heuristic.assess(IpRecord(ip="8.8.8.8", org="Unknown"))
    assert proxy.detected is False
    assert proxy.type == ProxyType.DIRECT


def test_vpn_keyword():
    proxy = heuristic.assess(IpRecord(org="NordVPN Services"))
    assert proxy.detected is True
    assert proxy.type == ProxyType.VPN
    assert proxy.confidence == 0.95
    assert proxy.penalty == 25


def test_isp_field_is_matched_too():
    proxy = heuristic.assess(IpRecord(org="Some Org", isp="Vultr Holdings"))
    assert proxy.type == ProxyType.DATACENTER
    assert proxy.confidence == 0.9
    assert proxy.penalty == 22


def test_overseas_host():
    proxy = heuristic.assess(IpRecord(org="AS16276 OVH SAS"))
    assert proxy.detected is True
    assert proxy.type == ProxyType.OVERSEAS
    assert proxy.confidence == 0.8


def test_hosting_weight_is_not_detected():
    # 0.7 is not above the 0.7 detection threshold
    proxy = heuristic.assess(IpRecord(org="Example Hosting Ltd"))
    assert proxy.detected is False
    assert proxy.type == ProxyType.DIRECT
    assert proxy.confidence == pytest.approx(0.3)


def test_first_row_wins_on_equal_weight():
    proxy = heuristic.assess(IpRecord(org="Google LLC", isp="OVH"))
    assert proxy.type == ProxyType.CLOUD
    assert proxy.penalty == 18


def test_higher_weight_replaces_earlier_match():
    proxy = heuristic.assess(IpRecord(org="Hetzner Online", isp="Private VPN"))
    assert proxy.type == ProxyType.VPN


def test_asn_below_keyword_weight_does_not_override():
    proxy = heuristic.assess(IpRecord(org="Amazon.com, Inc.", asn="AS16509"))
    assert proxy.type == ProxyType.CLOUD
    assert proxy.confidence == 0.8
    assert proxy.penalty == 18


def test_amazon_asn_alone_is_not_detected():
    proxy = heuristic.assess(IpRecord(org="Example", asn="AS16509"))
    assert proxy.detected is False
    assert proxy.confidence == pytest.approx(0.3)


@pytest.mark.parametrize("asn", ["AS13335", "AS14061"])
def test_both_cdn_asn_rows(asn):
    score, proxy_type, penalty = heuristic.indicators(IpRecord(asn=asn))
    assert score == 0.3
    assert proxy_type == ProxyType.CDN
    assert penalty == pytest.approx(6.0)


def test_assess_is_idempotent(vpn_record):
    assert heuristic.assess(vpn_record) == heuristic.assess(vpn_record)


@pytest.mark.parametrize("raw, expected", [
    ("AS13335", 13335),
    ("AS13335 Cloudflare, Inc.", 13335),
    ("16509", 16509),
    ("ASN", None),
    ("", None),
    (None, None),
])
def test_parse_asn(raw, expected):
    assert parse_asn(raw) == expected
