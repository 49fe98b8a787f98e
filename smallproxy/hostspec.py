"""Host specifications: an IP address with optional netmask, or a domain name."""

from __future__ import annotations

import enum
import ipaddress
import re
import string
from dataclasses import dataclass

IPV6_LEN = 16

_V4_MAPPED_PREFIX = b"\x00" * 10 + b"\xff\xff"
_FULL_MASK = b"\xff" * IPV6_LEN
_MASK_BITS = re.compile(r"\s*\+?(\d+)")
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class HostSpecType(enum.Enum):
    NONE = 0
    STRING = 1
    NUMERIC = 2


class HostSpecError(ValueError):
    """Raised for a bogus address, netmask or host name."""


def _fold(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def _parse_address(ip: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    if "%" in ip:
        return None
    try:
        return ipaddress.ip_address(ip)
    except ValueError:
        return None


def ip_to_bytes(ip: str) -> bytes | None:
    """Return the 16-byte form of an IPv4 or IPv6 address, or None.

    IPv4 addresses are given in their IPv4-mapped IPv6 form.
    """
    addr = _parse_address(ip)
    if addr is None:
        return None
    if addr.version == 4:
        return _V4_MAPPED_PREFIX + addr.packed
    return addr.packed


def _netmask(text: str, v6: bool) -> bytes:
    if "." in text:
        if v6:
            raise HostSpecError(f"dotted netmask {text!r} not allowed for IPv6")
        try:
            v4 = ipaddress.IPv4Address(text)
        except ValueError:
            raise HostSpecError(f"invalid netmask {text!r}") from None
        return b"\xff" * (IPV6_LEN - 4) + v4.packed

    found = _MASK_BITS.match(text)
    if not found:
        raise HostSpecError(f"invalid netmask {text!r}")
    bits = int(found.group(1))
    if not v6:
        bits += 12 * 8
    if bits > 8 * IPV6_LEN:
        raise HostSpecError(f"netmask {text!r} out of range")
    whole, rest = divmod(bits, 8)
    mask = b"\xff" * whole
    if rest:
        mask += bytes([(0xFF << (8 - rest)) & 0xFF])
    return mask.ljust(IPV6_LEN, b"\x00")


@dataclass(frozen=True)
class HostSpec:
    """A parsed host specification."""

    type: HostSpecType = HostSpecType.NONE
    string: str | None = None
    network: bytes = bytes(IPV6_LEN)
    mask: bytes = bytes(IPV6_LEN)

    def match(self, ip: str) -> bool:
        """Whether the textual address or host name ``ip`` matches."""
        if not ip:
            return False
        numeric = ip_to_bytes(ip)
        if self.type is HostSpecType.STRING:
            if numeric is not None or self.string is None:
                return False
            return _string_match(ip, self.string)
        if self.type is HostSpecType.NUMERIC:
            if numeric is None:
                return False
            return all(a & m == n for a, m, n in zip(numeric, self.mask, self.network))
        return False


def _string_match(name: str, spec: str) -> bool:
    name, spec = _fold(name), _fold(spec)
    if name == spec:
        return True
    if not spec.startswith("."):
        return False
    return name.endswith(spec)


def parse_hostspec(location: str | None) -> HostSpec:
    """Parse an address, ``address/mask`` pair, or domain name."""
    if location is None:
        return HostSpec()

    address, sep, mask_text = location.rpartition("/")
    if not sep:
        address, mask_text = location, None

    numeric = ip_to_bytes(address)
    if numeric is not None:
        if mask_text is None:
            return HostSpec(HostSpecType.NUMERIC, network=numeric, mask=_FULL_MASK)
        parsed = _parse_address(address)
        v6 = parsed is not None and parsed.version == 6
        mask = _netmask(mask_text, v6)
        network = bytes(a & m for a, m in zip(numeric, mask))
        return HostSpec(HostSpecType.NUMERIC, network=network, mask=mask)

    if mask_text is not None or ":" in address:
        raise HostSpecError(f"invalid host specification {location!r}")
    return HostSpec(HostSpecType.STRING, string=address)