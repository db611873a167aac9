"""
Deterministic Risk Estimator — simulated threat-feed probability.

Stands in for a real threat-intelligence lookup. The hash is a 32-bit signed
rolling hash, so the same (ip, check) pair yields the same value in every
process regardless of PYTHONHASHSEED.
"""

from __future__ import annotations

from ipaddress import IPv4Address

from ipscore.core.tables import RESERVED_RANGES, AddressRange

_INT32_MASK = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - 0x100000000 if value & 0x80000000 else value


def rolling_hash(text: str) -> int:
    """
    Signed 32-bit hash: h = (h << 5) - h + code_unit, wrapped each step.

    Iterates UTF-16 code units, so a non-BMP character contributes its
    surrogate pair.
    """
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32((h << 5) - h + unit)
    return h


def estimate(ip: str, check_name: str) -> float:
    """Pseudo-probability in [0, 1) for an (ip, check) pair."""
    return (abs(rolling_hash(ip + check_name)) % 1000) / 1000


def parse_ipv4(ip: str | None) -> IPv4Address | None:
    """
    Dotted-quad to address, reading each octet as a decimal number.

    Leading zeros are accepted ("010.0.0.1" is 10.0.0.1), matching the
    request validator. None for anything that is not four octets 0-255.
    """
    if not ip:
        return None
    octets = ip.strip().split(".")
    if len(octets) != 4 or not all(o.isdigit() and o.isascii() for o in octets):
        return None
    values = [int(o) for o in octets]
    if any(v > 255 for v in values):
        return None
    return IPv4Address(bytes(values))


def is_reserved_ip(
    ip: str | None,
    ranges: tuple[AddressRange, ...] = RESERVED_RANGES,
) -> bool:
    """True for private, loopback, link-local, multicast and other reserved IPv4."""
    addr = parse_ipv4(ip)
    if addr is None:
        return False
    return any(addr in r for r in ranges)
