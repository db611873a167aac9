"""
Report Presentation — display fields derived from a scored analysis.

Pure helpers used to build the summary block of an analysis response.
"""

from __future__ import annotations

from ipscore.core.tables import PROXY_DISPLAY_NAMES
from ipscore.models.analysis_models import ProxyDisplay, ReportSummary
from ipscore.models.assessment_models import ProxyAssessment, ProxyType
from ipscore.models.input_models import FingerprintRecord
from ipscore.models.score_models import EngineResult

# (minimum score, band, status text), highest first
SCORE_BANDS: tuple[tuple[int, str, str], ...] = (
    (90, "excellent", "Excellent Security"),
    (75, "good", "Good Security"),
    (60, "average", "Average Security"),
)
POOR_BAND = ("poor", "Security Risk")

TIP_RESIDENTIAL_IP = "Consider using a reputable residential IP for better access to services"
TIP_ADDRESS_RISKS = "Address detected security risks to improve your IP reputation"
TIP_AUTOMATION = "Automated browser detected - use regular browsers for better compatibility"
SAFE_TIPS = (
    "Your IP has an excellent security rating",
    "Regular IP security checks are a good habit",
    "Enable firewall to protect your device",
)
LOW_SCORE_TIP_THRESHOLD = 70


def score_band(score: int) -> tuple[str, str]:
    """(band, status text) for a final score."""
    for minimum, band, status in SCORE_BANDS:
        if score >= minimum:
            return band, status
    return POOR_BAND


def proxy_display_name(proxy_type: ProxyType) -> str:
    return PROXY_DISPLAY_NAMES.get(proxy_type, proxy_type.value)


def describe_proxy(proxy: ProxyAssessment) -> ProxyDisplay:
    if not proxy.detected:
        return ProxyDisplay(
            type_name=proxy_display_name(proxy.type),
            anonymity="None",
            protocol="Direct",
            risk_level="Low",
        )

    risk_level = "High" if proxy.type in (ProxyType.VPN, ProxyType.DATACENTER) else "Medium"
    return ProxyDisplay(
        type_name=proxy_display_name(proxy.type),
        anonymity="High",
        protocol="HTTP/SOCKS",
        risk_level=risk_level,
    )


def security_tips(
    score: int,
    risk_factors: list[str],
    fingerprint: FingerprintRecord | None,
) -> list[str]:
    tips: list[str] = []
    if score < LOW_SCORE_TIP_THRESHOLD:
        tips.append(TIP_RESIDENTIAL_IP)
    if risk_factors:
        tips.append(TIP_ADDRESS_RISKS)
    if fingerprint is not None and fingerprint.webdriver:
        tips.append(TIP_AUTOMATION)
    return tips or list(SAFE_TIPS)


def summarize(result: EngineResult, fingerprint: FingerprintRecord | None = None) -> ReportSummary:
    """Build the display summary for a scored analysis."""
    report = result.report
    band, status = score_band(report.final_score)
    flagged = sum(1 for t in result.threats if t.is_threat)

    return ReportSummary(
        band=band,
        status=status,
        threats_found=f"{flagged} threats found out of {len(result.threats)} checks",
        proxy=describe_proxy(result.proxy),
        location_consistent=result.geo.consistent,
        isp_label=result.isp.risk_label or "Normal ISP",
        webrtc_leak=fingerprint is not None and fingerprint.webrtc == "Detected",
        tips=security_tips(report.final_score, report.risk_factors, fingerprint),
    )
