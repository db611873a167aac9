"""
Tests for Geo-Consistency Checker — timezone, language and latency sub-checks.
"""

from ipscore.core.geo_consistency import (
    REASON_LANGUAGE,
    REASON_LATENCY,
    REASON_TIMEZONE,
    GeoConsistencyChecker,
)
from ipscore.models.input_models import FingerprintRecord, IpRecord, NetworkRecord

checker = GeoConsistencyChecker()


def test_consistent_residential(residential_record, us_fingerprint, us_network):
    geo = checker.check(residential_record, us_network, us_fingerprint)
    assert geo.consistent is True
    assert geo.penalty == 0
    assert geo.reasons == []


def test_missing_inputs_are_consistent(residential_record):
    assert checker.check(None, NetworkRecord()).consistent is True
    assert checker.check(residential_record, None).consistent is True


# --- Timezone ---


def test_timezone_mismatch():
    geo = checker.check(
        IpRecord(timezone="America/New_York"),
        NetworkRecord(time_zone="Asia/Tokyo"),
    )
    assert geo.consistent is False
    assert geo.penalty == 8
    assert geo.reasons == [REASON_TIMEZONE]


def test_timezone_within_two_hours():
    geo = checker.check(
        IpRecord(timezone="America/New_York"),
        NetworkRecord(time_zone="America/Chicago"),
    )
    assert geo.consistent is True


def test_unlisted_zones_default_to_utc():
    assert checker.timezone_distance("Europe/Berlin", "Asia/Tokyo") == 9
    geo = checker.check(
        IpRecord(timezone="Europe/Berlin"),
        NetworkRecord(time_zone="Europe/Madrid"),
    )
    assert geo.consistent is True


def test_fractional_offset():
    assert checker.timezone_distance("Asia/Mumbai", "Europe/London") == 5.5


# --- Language ---


def test_language_anomaly():
    geo = checker.check(
        IpRecord(country_code="JP"),
        NetworkRecord(),
        FingerprintRecord(language="en-US"),
    )
    assert geo.reasons == [REASON_LANGUAGE]
    assert geo.penalty == 5


def test_language_matches_any_expected():
    geo = checker.check(
        IpRecord(country_code="IN"),
        NetworkRecord(),
        FingerprintRecord(language="hi-IN"),
    )
    assert geo.consistent is True


def test_language_unlisted_country_skipped():
    geo = checker.check(
        IpRecord(country_code="NL"),
        NetworkRecord(),
        FingerprintRecord(language="ja"),
    )
    assert geo.consistent is True


# --- Latency ---


def test_latency_anomaly():
    geo = checker.check(IpRecord(country_code="US"), NetworkRecord(latency=101))
    assert geo.reasons == [REASON_LATENCY]
    assert geo.penalty == 3


def test_latency_at_twice_expected_is_fine():
    geo = checker.check(IpRecord(country_code="US"), NetworkRecord(latency=100))
    assert geo.consistent is True


def test_latency_default_baseline():
    assert checker.expected_latency("NL") == 100
    assert checker.expected_latency(None) == 100
    geo = checker.check(IpRecord(), NetworkRecord(latency=201))
    assert geo.reasons == [REASON_LATENCY]


def test_unknown_latency_skipped():
    geo = checker.check(IpRecord(country_code="GB"), NetworkRecord(latency="Unknown"))
    assert geo.consistent is True


# --- Combined ---


def test_penalties_accumulate_in_order():
    geo = checker.check(
        IpRecord(country_code="JP", timezone="America/New_York"),
        NetworkRecord(time_zone="Asia/Tokyo", latency=500),
        FingerprintRecord(language="en-US"),
    )
    assert geo.consistent is False
    assert geo.penalty == 16
    assert geo.reasons == [REASON_TIMEZONE, REASON_LANGUAGE, REASON_LATENCY]


def test_custom_tables_are_used():
    custom = GeoConsistencyChecker(
        timezone_offsets={"Pacific/Auckland": 12},
        country_languages={"NZ": ("en", "mi")},
        country_latency={"NZ": 10},
    )
    geo = custom.check(
        IpRecord(country_code="NZ", timezone="Pacific/Auckland"),
        NetworkRecord(time_zone="Europe/London", latency=25),
        FingerprintRecord(language="mi"),
    )
    assert geo.reasons == [REASON_TIMEZONE, REASON_LATENCY]
    assert geo.penalty == 11
