"""
Proxy/VPN Heuristic — Infers proxy usage from organisation, ISP and ASN.

score = max(weight of every matching provider/ASN row)
Type and penalty come from the first row that reached the maximum;
a later row with an equal weight does not replace it.
detected = score > 0.7

Nothing is cached: each call recomputes from the given IpRecord.
"""

from __future__ import annotations

import re

from ipscore.core.tables import PROXY_PROVIDERS, SUSPICIOUS_ASNS, AsnRule, ProviderRule
from ipscore.models.assessment_models import ProxyAssessment, ProxyType
from ipscore.models.input_models import IpRecord

DETECTION_THRESHOLD = 0.7

# ASN rows carry no penalty of their own: penalty = weight * ASN_PENALTY_SCALE
ASN_PENALTY_SCALE = 20


def parse_asn(asn: str | None) -> int | None:
    """'AS13335 Cloudflare' -> 13335. None when there are no digits."""
    if not asn:
        return None
    digits = re.sub(r"\D", "", asn)
    return int(digits) if digits else None


class ProxyHeuristic:
    """Keyword and ASN table matcher."""

    def __init__(
        self,
        providers: tuple[ProviderRule, ...] = PROXY_PROVIDERS,
        asns: tuple[AsnRule, ...] = SUSPICIOUS_ASNS,
    ) -> None:
        self.providers = providers
        self.asns = asns

    def indicators(self, ip_record: IpRecord | None) -> tuple[float, ProxyType, float]:
        """Raw (score, type, penalty) before the detection threshold."""
        score = 0.0
        detected_type = ProxyType.DIRECT
        penalty: float = 0

        if ip_record is None:
            return score, detected_type, penalty

        org = (ip_record.org or "").lower()
        isp = (ip_record.isp or "").lower()

        for rule in self.providers:
            if any(k in org or k in isp for k in rule.keywords):
                if rule.weight > score:
                    score = rule.weight
                    detected_type = rule.type
                    penalty = rule.penalty

        asn = parse_asn(ip_record.asn)
        if asn is not None:
            for rule in self.asns:
                if rule.matches(asn) and rule.weight > score:
                    score = rule.weight
                    detected_type = rule.type
                    penalty = rule.weight * ASN_PENALTY_SCALE

        return score, detected_type, penalty

    def assess(self, ip_record: IpRecord | None) -> ProxyAssessment:
        score, detected_type, penalty = self.indicators(ip_record)

        if score > DETECTION_THRESHOLD:
            return ProxyAssessment(
                detected=True,
                type=detected_type,
                confidence=score,
                penalty=penalty,
            )

        return ProxyAssessment(
            detected=False,
            type=ProxyType.DIRECT,
            confidence=1 - score,
            penalty=0,
        )
