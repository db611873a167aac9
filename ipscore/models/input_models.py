"""
Input Record Models — snapshots produced by the gatherers.

Every field is optional: a gatherer that fails or times out yields an empty
record and the scoring engine reads absent fields as "no evidence".
Browser-side camelCase keys and ipapi.co field names are accepted as aliases.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Placeholder strings the gatherers emit when a value could not be detected
_SENTINELS = {"", "unknown", "n/a"}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in _SENTINELS:
        return None
    return value


class IpRecord(BaseModel):
    """Geolocation and network ownership metadata for one IP address."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    ip: str | None = None
    country: str | None = Field(
        default=None,
        validation_alias=AliasChoices("country_name", "country"),
        description="Country display name",
    )
    country_code: str | None = Field(
        default=None, validation_alias=AliasChoices("country_code", "countryCode")
    )
    region: str | None = None
    city: str | None = None
    postal: str | None = None
    timezone: str | None = None
    org: str | None = None
    isp: str | None = None
    asn: str | None = None

    @field_validator(
        "country", "country_code", "region", "city", "postal",
        "timezone", "org", "isp", mode="before",
    )
    @classmethod
    def _drop_sentinels(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("asn", mode="before")
    @classmethod
    def _asn_as_text(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        if isinstance(v, int):
            return str(v)
        return v


class FingerprintRecord(BaseModel):
    """Browser-derived device fingerprint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    user_agent: str | None = Field(
        default=None, validation_alias=AliasChoices("user_agent", "userAgent")
    )
    language: str | None = None
    platform: str | None = None
    cookie_enabled: bool | None = Field(
        default=None, validation_alias=AliasChoices("cookie_enabled", "cookieEnabled")
    )
    do_not_track: str | None = Field(
        default=None, validation_alias=AliasChoices("do_not_track", "doNotTrack")
    )
    hardware_concurrency: int | str | None = Field(
        default=None,
        validation_alias=AliasChoices("hardware_concurrency", "hardwareConcurrency"),
    )
    device_memory: float | str | None = Field(
        default=None, validation_alias=AliasChoices("device_memory", "deviceMemory")
    )
    color_depth: int | None = Field(
        default=None, validation_alias=AliasChoices("color_depth", "colorDepth")
    )
    screen_resolution: str | None = Field(
        default=None,
        validation_alias=AliasChoices("screen_resolution", "screenResolution"),
    )
    timezone_offset: int | None = Field(
        default=None, validation_alias=AliasChoices("timezone_offset", "timezoneOffset")
    )
    webdriver: bool = False
    webrtc: Literal["Detected", "Not detected", "Not supported"] | None = Field(
        default=None, validation_alias=AliasChoices("webrtc", "webRTC")
    )

    @field_validator("language", mode="before")
    @classmethod
    def _drop_sentinels(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("webdriver", mode="before")
    @classmethod
    def _webdriver_default(cls, v: Any) -> Any:
        return False if v is None else v


class DnsServer(BaseModel):
    """One DNS resolver observed by the browser probe."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    server: str
    provider: str = ""
    location: str = ""
    latency: float | str | None = None


class NetworkRecord(BaseModel):
    """Browser-side network measurements."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    latency: float | str | None = None  # ms, or "Unknown"
    dns: list[DnsServer] = Field(default_factory=list)
    time_zone: str | None = Field(
        default=None, validation_alias=AliasChoices("time_zone", "timeZone")
    )

    @field_validator("time_zone", mode="before")
    @classmethod
    def _drop_sentinels(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def latency_ms(self) -> float | None:
        """Measured latency when it is an actual number."""
        if isinstance(self.latency, (int, float)) and not isinstance(self.latency, bool):
            return float(self.latency)
        return None
