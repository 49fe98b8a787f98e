"""Detection of connections that loop back into the proxy itself."""

from __future__ import annotations

import ipaddress
import threading
import time
from dataclasses import dataclass
from typing import Callable

TIMEOUT_SECS = 15

_Address = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass(frozen=True)
class _Record:
    address: _Address
    port: int
    stamp: int


def _parse(addr: tuple) -> tuple[_Address, int]:
    host, port = addr[0], addr[1]
    host = str(host).split("%", 1)[0]
    return ipaddress.ip_address(host), int(port)


class LoopRecords:
    """Recently made outgoing connections, kept for a limited time.

    Addresses are socket address tuples: ``(host, port)`` or the
    four-element IPv6 form.
    """

    def __init__(self, timeout: int = TIMEOUT_SECS,
                 clock: Callable[[], float] = time.time) -> None:
        self.timeout = timeout
        self._clock = clock
        self._records: list[_Record] = []
        self._lock = threading.Lock()

    def _now(self) -> int:
        return int(self._clock())

    def add(self, addr: tuple) -> None:
        """Remember an outgoing connection made from ``addr``."""
        address, port = _parse(addr)
        now = self._now()
        with self._lock:
            self._records.append(_Record(address, port, now))

    def loops(self, addr: tuple) -> bool:
        """Whether ``addr`` matches a remembered connection; expired ones are dropped."""
        address, port = _parse(addr)
        now = self._now()
        with self._lock:
            self._records = [r for r in self._records if r.stamp + self.timeout >= now]
            return any(
                r.address.version == address.version
                and r.port == port
                and r.address.packed == address.packed
                for r in self._records
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)