"""Access control for clients: allow or deny by address, network or name."""

from __future__ import annotations

import enum
import logging
import socket
import string
from dataclasses import dataclass
from typing import Callable, Iterable

from .hostspec import HostSpec, HostSpecError, HostSpecType, parse_hostspec

logger = logging.getLogger(__name__)

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

Resolver = Callable[[str], Iterable[str]]
ReverseResolver = Callable[[str], str]


class Access(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class _Rule:
    access: Access
    spec: HostSpec

    @property
    def allows(self) -> bool:
        return self.access is Access.ALLOW


def _default_resolver(name: str) -> list[str]:
    infos = socket.getaddrinfo(name, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    return [info[4][0] for info in infos]


def _default_reverse_resolver(ip: str) -> str:
    return socket.getnameinfo((ip, 0), 0)[0]


def _fold(text: str) -> str:
    return text.translate(_ASCII_LOWER)


class _ReverseName:
    """Client host name, looked up at most once successfully per check."""

    def __init__(self, ip: str, reverse_resolver: ReverseResolver) -> None:
        self._ip = ip
        self._reverse_resolver = reverse_resolver
        self._name: str | None = None

    def get(self) -> str | None:
        if not self._name:
            try:
                self._name = self._reverse_resolver(self._ip)
            except OSError:
                return None
        return self._name


class AccessList:
    """Ordered allow/deny rules; the first rule that decides wins.

    A list that has never had a rule inserted allows everything.  Once a
    rule has been inserted (even unsuccessfully), clients that no rule
    allows are denied.
    """

    def __init__(
        self,
        resolver: Resolver | None = None,
        reverse_resolver: ReverseResolver | None = None,
    ) -> None:
        self._resolver = resolver or _default_resolver
        self._reverse_resolver = reverse_resolver or _default_reverse_resolver
        self._rules: list[_Rule] | None = None

    def insert(self, location: str, access: Access) -> None:
        """Append a rule for an address, ``address/mask`` or domain name."""
        if self._rules is None:
            self._rules = []
        spec = parse_hostspec(location)
        if spec.type is HostSpecType.NONE:
            raise HostSpecError(f"invalid host specification {location!r}")
        self._rules.append(_Rule(access, spec))

    def check(self, ip: str) -> bool:
        """Whether the client at textual address ``ip`` may connect."""
        if self._rules is None:
            return True

        reverse = _ReverseName(ip, self._reverse_resolver)
        for rule in self._rules:
            if rule.spec.type is HostSpecType.STRING:
                verdict = self._string_verdict(rule, ip, reverse)
            elif rule.spec.type is HostSpecType.NUMERIC:
                verdict = rule.allows if rule.spec.match(ip) else None
            else:
                verdict = None

            if verdict is False:
                break
            if verdict is True:
                return True

        logger.info('Unauthorized connection from "%s".', ip)
        return False

    def _string_verdict(self, rule: _Rule, ip: str, reverse: _ReverseName) -> bool | None:
        pattern = rule.spec.string or ""

        # A leading period means a name suffix test only, with no forward lookup.
        if not pattern.startswith("."):
            try:
                addresses = list(self._resolver(pattern))
            except OSError:
                addresses = []
            if ip in addresses:
                return rule.allows

        name = reverse.get()
        if name is None or len(name) < len(pattern):
            return None
        if _fold(name).endswith(_fold(pattern)):
            return rule.allows
        return None

    def clear(self) -> None:
        """Drop every rule, so that everything is allowed again."""
        self._rules = None

    def __len__(self) -> int:
        return 0 if self._rules is None else len(self._rules)