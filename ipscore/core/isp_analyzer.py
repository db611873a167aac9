"""
ISP Analyzer — Labels hosting/cloud organisations for display.

The adjustment is informational and is never applied to the score.
"""

from __future__ import annotations

from ipscore.core.tables import RISK_ISP_KEYWORDS
from ipscore.models.assessment_models import IspAssessment
from ipscore.models.input_models import IpRecord

CLOUD_PROVIDER_ADJUSTMENT = -12
CLOUD_PROVIDER_LABEL = "Cloud Provider"


def analyze_isp(
    ip_record: IpRecord | None,
    keywords: tuple[str, ...] = RISK_ISP_KEYWORDS,
) -> IspAssessment:
    if ip_record is None or not ip_record.org:
        return IspAssessment()

    org = ip_record.org.lower()
    if any(k in org for k in keywords):
        return IspAssessment(
            adjustment=CLOUD_PROVIDER_ADJUSTMENT,
            risk_label=CLOUD_PROVIDER_LABEL,
        )
    return IspAssessment()
