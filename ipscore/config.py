"""
IP Score Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
Every value has a safe default so the service starts without any setup.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── IP Lookup ──
    ip_lookup_url: str = Field(
        default="https://ipapi.co/{ip}/json/",
        description="Geolocation endpoint for a given IP ({ip} is substituted)",
    )
    ip_self_lookup_urls: list[str] = Field(
        default=[
            "https://api.ipify.org?format=json",
            "https://ipapi.co/json/",
            "https://api.ipgeolocation.io/ipgeo?apiKey=free",
        ],
        description="JSON services that report the caller's own IP, tried in order",
    )
    ip_self_lookup_text_url: str = Field(
        default="https://api.ipify.org",
        description="Plain-text own-IP service used when every JSON service fails (empty disables)",
    )
    ip_lookup_timeout: float = Field(default=5.0, description="HTTP timeout per lookup in seconds")
    ip_lookup_retries: int = Field(default=2, description="Max lookup attempts")

    # ── Analysis Run ──
    gatherer_timeout: float = Field(
        default=5.0, description="Timeout per gatherer task in seconds"
    )
    analysis_timeout: float = Field(
        default=10.0,
        description="Outer timeout for the whole gather phase. On expiry, scoring uses defaults.",
    )
    threat_check_delay: float = Field(
        default=0.0,
        description="Pacing delay between threat source checks in seconds (0 disables)",
    )

    # ── Server ──
    port: int = Field(default=8000, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # ── Audit ──
    audit_enabled: bool = Field(default=True, description="Write an audit record per analysis")
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance, imported by other modules
settings = Settings()
