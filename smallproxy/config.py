"""Run-time configuration of the proxy."""

from __future__ import annotations

from dataclasses import dataclass, field

from .acl import AccessList
from .anonymous import AnonymousHeaders
from .basicauth import BasicAuthList
from .connect_ports import ConnectPorts
from .htab import HashTable
from .url_filter import FilterOptions

_ERRPAGES_BUCKETCOUNT = 16


@dataclass
class HttpHeader:
    """A header added to outgoing requests by an AddHeader directive."""

    name: str
    value: str


@dataclass
class Config:
    """All settings read from the configuration file."""

    basicauth_list: BasicAuthList = field(default_factory=BasicAuthList)
    logf_name: str | None = None
    syslog: bool = False
    port: int = 0
    stathost: str | None = None
    quit: bool = False
    maxclients: int = 0
    user: str | None = None
    group: str | None = None
    listen_addrs: list[str] = field(default_factory=list)
    filter: str | None = None
    filter_opts: FilterOptions = FilterOptions(0)
    add_xtinyproxy: bool = False
    reverseonly: bool = False
    reversemagic: bool = False
    reversebaseurl: str | None = None
    pidpath: str | None = None
    idletimeout: int = 0
    bind_addrs: list[str] = field(default_factory=list)
    bindsame: bool = False
    via_proxy_name: str | None = None
    disable_viaheader: bool = False
    errorpages: HashTable | None = None
    errorpage_undef: str | None = None
    statpage: str | None = None
    access_list: AccessList = field(default_factory=AccessList)
    connect_ports: ConnectPorts = field(default_factory=ConnectPorts)
    anonymous_map: AnonymousHeaders | None = None
    add_headers: list[HttpHeader] = field(default_factory=list)

    def is_anonymous_enabled(self) -> bool:
        """Whether any header has been named for anonymous mode."""
        return self.anonymous_map is not None

    def add_anonymous_header(self, name: str) -> None:
        """Let the header ``name`` through in anonymous mode."""
        if self.anonymous_map is None:
            self.anonymous_map = AnonymousHeaders()
        self.anonymous_map.insert(name)

    def add_errorpage(self, filepath: str, errornum: int) -> None:
        """Map HTTP error ``errornum`` to the page at ``filepath``."""
        if errornum < 0:
            raise ValueError(f"invalid error number {errornum}")
        if self.errorpages is None:
            self.errorpages = HashTable(_ERRPAGES_BUCKETCOUNT)
        if not self.errorpages.insert(str(errornum), filepath):
            raise ValueError(f"error page for {errornum} already set")

    def errorpage_for(self, errornum: int) -> str | None:
        """Return the page for ``errornum``, or the default error page."""
        if not 100 <= errornum < 1000:
            raise ValueError(f"error number {errornum} out of range")
        if self.errorpages is None:
            return self.errorpage_undef
        page = self.errorpages.find(str(errornum))
        return self.errorpage_undef if page is None else page