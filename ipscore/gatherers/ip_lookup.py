"""
IP Lookup — fetches geolocation and ownership metadata for an IP.

Talks to an ipapi.co-compatible JSON endpoint. Failures raise IpLookupError;
the analysis run turns them into the sentinel record.

Self-lookup (no IP given) first discovers the caller's public IP by walking
the configured own-IP services in order, falling back to a plain-text
service, then enriches that IP through the geolocation endpoint.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx
from pydantic import ValidationError

from ipscore.config import settings
from ipscore.gatherers.retry import async_retry
from ipscore.models.input_models import IpRecord

logger = logging.getLogger("ipscore.lookup")

PLAIN_IP_PATTERN = re.compile(r"^\d+\.\d+\.\d+\.\d+$")


class IpLookupError(Exception):
    """The geolocation service could not produce a usable record."""


def sentinel_record(ip: str | None = None) -> IpRecord:
    """Record used when the lookup fails: IP (if known), nothing else."""
    return IpRecord(ip=ip or "Unknown", country="Unknown")


class IpLookup:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        url_template: str | None = None,
        self_urls: list[str] | None = None,
        self_text_url: str | None = None,
        timeout: float | None = None,
        attempts: int | None = None,
    ) -> None:
        self.client = client
        self.url_template = url_template or settings.ip_lookup_url
        self.self_urls = list(self_urls if self_urls is not None else settings.ip_self_lookup_urls)
        self.self_text_url = (
            self_text_url if self_text_url is not None else settings.ip_self_lookup_text_url
        )
        self.timeout = timeout if timeout is not None else settings.ip_lookup_timeout
        self.attempts = attempts if attempts is not None else settings.ip_lookup_retries

    def url_for(self, ip: str) -> str:
        return self.url_template.format(ip=ip)

    async def _get(self, url: str) -> httpx.Response:
        if self.client is not None:
            resp = await self.client.get(url, timeout=self.timeout)
            resp.raise_for_status()
            return resp

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp

    async def _get_payload(self, url: str) -> dict[str, Any]:
        """GET a JSON object, mapping every failure to IpLookupError."""
        try:
            resp = await async_retry(lambda: self._get(url), attempts=self.attempts)
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise IpLookupError(f"{type(e).__name__}: {e}") from e

        if not isinstance(data, dict):
            raise IpLookupError("Unexpected response payload")
        if data.get("error"):
            raise IpLookupError(str(data.get("reason") or data.get("message") or "lookup error"))
        return data

    async def _get_plain_ip(self) -> str | None:
        try:
            resp = await async_retry(lambda: self._get(self.self_text_url), attempts=self.attempts)
        except httpx.HTTPError as e:
            logger.info(f"Plain-text self-lookup failed: {type(e).__name__}: {e}")
            return None

        text = resp.text.strip()
        return text if PLAIN_IP_PATTERN.match(text) else None

    async def discover_ip(self) -> dict[str, Any]:
        """
        Find the caller's public IP.

        Returns the payload of the first JSON service whose response carries
        an `ip`, or {"ip": ...} from the plain-text service.

        Raises:
            IpLookupError: when no service reports an IP.
        """
        for url in self.self_urls:
            try:
                data = await self._get_payload(url)
            except IpLookupError as e:
                logger.info(f"Self-lookup via {url} failed: {e}")
                continue
            if data.get("ip"):
                return data
            logger.info(f"Self-lookup via {url} returned no IP")

        if self.self_text_url:
            ip = await self._get_plain_ip()
            if ip:
                return {"ip": ip}

        raise IpLookupError("No self-lookup service reported an IP address")

    async def fetch(self, ip: str | None = None) -> IpRecord:
        """
        Look up an IP, or the caller's own public IP when ip is None.

        For a self-lookup a failed geolocation call is not fatal: the record
        is built from whatever the discovering service returned.

        Raises:
            IpLookupError: on HTTP failure, a non-JSON body, an error payload,
                or a self-lookup that finds no IP.
        """
        discovered: dict[str, Any] = {}
        if ip is None:
            discovered = await self.discover_ip()
            ip = str(discovered["ip"])
            try:
                geo = await self._get_payload(self.url_for(ip))
            except IpLookupError as e:
                logger.warning(f"Geolocation for own IP {ip} failed, using discovery payload: {e}")
                geo = {}
        else:
            geo = await self._get_payload(self.url_for(ip))

        try:
            record = IpRecord.model_validate({**discovered, **geo})
        except ValidationError as e:
            raise IpLookupError(f"Malformed lookup payload: {e.error_count()} errors") from e

        if record.ip is None:
            record = record.model_copy(update={"ip": ip})

        logger.debug(f"Lookup {record.ip}: org={record.org!r} country={record.country_code!r}")
        return record
