"""
Lookup Tables — static data consumed by the heuristics.

Tables are plain tuples/dicts of immutable records so components can be
constructed with alternative data in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv4Network

from ipscore.models.assessment_models import ProxyType
from ipscore.models.threat_models import ThreatSource


@dataclass(frozen=True)
class ProviderRule:
    """Keyword set identifying a class of network provider."""

    keywords: tuple[str, ...]
    type: ProxyType
    penalty: int
    weight: float


@dataclass(frozen=True)
class AsnRule:
    """Inclusive ASN range mapped to a provider class."""

    min_asn: int
    max_asn: int
    type: ProxyType
    weight: float

    def matches(self, asn: int) -> bool:
        return self.min_asn <= asn <= self.max_asn


@dataclass(frozen=True)
class AddressRange:
    """Inclusive IPv4 address range."""

    start: IPv4Address
    end: IPv4Address

    @classmethod
    def from_network(cls, cidr: str) -> "AddressRange":
        net = IPv4Network(cidr)
        return cls(net.network_address, net.broadcast_address)

    def __contains__(self, addr: IPv4Address) -> bool:
        return self.start <= addr <= self.end


# ── Threat feeds ──

THREAT_SOURCES: tuple[ThreatSource, ...] = (
    ThreatSource(name="Malware Database", check="malware", weight=40),
    ThreatSource(name="Spam Lists", check="spam", weight=25),
    ThreatSource(name="Botnet", check="botnet", weight=35),
    ThreatSource(name="Attack Source IP", check="attack", weight=30),
    ThreatSource(name="Phishing Websites", check="phishing", weight=20),
)

# Ranges that never reach the threat estimator
RESERVED_RANGES: tuple[AddressRange, ...] = (
    AddressRange.from_network("0.0.0.0/8"),
    AddressRange.from_network("10.0.0.0/8"),
    AddressRange.from_network("127.0.0.0/8"),
    AddressRange.from_network("169.254.0.0/16"),
    AddressRange.from_network("172.16.0.0/12"),
    AddressRange.from_network("192.168.0.0/16"),
    AddressRange(IPv4Address("224.0.0.0"), IPv4Address("255.255.255.255")),
)

# ── Proxy / VPN heuristic ──

# Order matters: on equal weight the first matching row wins
PROXY_PROVIDERS: tuple[ProviderRule, ...] = (
    ProviderRule(("amazon", "aws", "ec2"), ProxyType.CLOUD, penalty=18, weight=0.8),
    ProviderRule(("google", "gcp", "compute"), ProxyType.CLOUD, penalty=18, weight=0.8),
    ProviderRule(("microsoft", "azure"), ProxyType.CLOUD, penalty=18, weight=0.8),
    ProviderRule(("digitalocean", "linode", "vultr"), ProxyType.DATACENTER, penalty=22, weight=0.9),
    ProviderRule(("vpn", "proxy", "anonymous"), ProxyType.VPN, penalty=25, weight=0.95),
    ProviderRule(("hosting", "server", "datacenter"), ProxyType.HOSTING, penalty=15, weight=0.7),
    ProviderRule(("ovh", "hetzner", "contabo"), ProxyType.OVERSEAS, penalty=20, weight=0.8),
)

SUSPICIOUS_ASNS: tuple[AsnRule, ...] = (
    AsnRule(13335, 13335, ProxyType.CDN, weight=0.3),  # Cloudflare
    AsnRule(14061, 14061, ProxyType.CDN, weight=0.3),  # DigitalOcean
    AsnRule(16509, 16509, ProxyType.CLOUD, weight=0.7),  # Amazon
)

# Score points removed when a proxy is confidently detected
PROXY_DEDUCTIONS: dict[ProxyType, int] = {
    ProxyType.VPN: 8,
    ProxyType.DATACENTER: 5,
    ProxyType.CLOUD: 0,
    ProxyType.HOSTING: 0,
    ProxyType.OVERSEAS: 3,
    ProxyType.CDN: 0,
}
DEFAULT_PROXY_DEDUCTION = 3

PROXY_DISPLAY_NAMES: dict[ProxyType, str] = {
    ProxyType.CLOUD: "Cloud Service",
    ProxyType.DATACENTER: "Data Center",
    ProxyType.VPN: "VPN",
    ProxyType.HOSTING: "Hosting Service",
    ProxyType.OVERSEAS: "Overseas Network",
    ProxyType.DIRECT: "Direct Connection",
}

# ── ISP analysis ──

RISK_ISP_KEYWORDS: tuple[str, ...] = (
    "amazon", "aws", "google", "gcp", "microsoft", "azure",
    "digitalocean", "linode", "vultr", "ovh", "hetzner",
    "hosting", "server", "datacenter", "cloud",
)

# ── Geo consistency ──

# Standard (non-DST) UTC offsets in hours
TIMEZONE_OFFSETS: dict[str, float] = {
    "America/New_York": -5,
    "America/Los_Angeles": -8,
    "America/Chicago": -6,
    "Europe/London": 0,
    "Europe/Paris": 1,
    "Europe/Moscow": 3,
    "Asia/Tokyo": 9,
    "Asia/Shanghai": 8,
    "Asia/Mumbai": 5.5,
    "Australia/Sydney": 10,
}

COUNTRY_LANGUAGES: dict[str, tuple[str, ...]] = {
    "US": ("en",),
    "CN": ("zh",),
    "JP": ("ja",),
    "KR": ("ko",),
    "DE": ("de",),
    "FR": ("fr",),
    "ES": ("es",),
    "IT": ("it",),
    "RU": ("ru",),
    "BR": ("pt",),
    "IN": ("en", "hi"),
}

# Expected round-trip latency in ms
COUNTRY_LATENCY_MS: dict[str, int] = {
    "US": 50,
    "CN": 200,
    "JP": 100,
    "KR": 80,
    "DE": 30,
    "FR": 40,
    "GB": 20,
    "AU": 150,
}
DEFAULT_LATENCY_MS = 100
