"""Names of the configuration file directives."""

from __future__ import annotations

import enum
import string

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class Directive(enum.IntEnum):
    NIL = 0
    LOGFILE = enum.auto()
    PIDFILE = enum.auto()
    ANONYMOUS = enum.auto()
    VIAPROXYNAME = enum.auto()
    DEFAULTERRORFILE = enum.auto()
    STATFILE = enum.auto()
    STATHOST = enum.auto()
    XTINYPROXY = enum.auto()
    SYSLOG = enum.auto()
    BINDSAME = enum.auto()
    DISABLEVIAHEADER = enum.auto()
    PORT = enum.auto()
    MAXCLIENTS = enum.auto()
    MAXSPARESERVERS = enum.auto()
    MINSPARESERVERS = enum.auto()
    STARTSERVERS = enum.auto()
    MAXREQUESTSPERCHILD = enum.auto()
    TIMEOUT = enum.auto()
    CONNECTPORT = enum.auto()
    USER = enum.auto()
    GROUP = enum.auto()
    LISTEN = enum.auto()
    ALLOW = enum.auto()
    DENY = enum.auto()
    BIND = enum.auto()
    BASICAUTH = enum.auto()
    ERRORFILE = enum.auto()
    ADDHEADER = enum.auto()
    FILTER = enum.auto()
    FILTERURLS = enum.auto()
    FILTERTYPE = enum.auto()
    FILTEREXTENDED = enum.auto()
    FILTERDEFAULTDENY = enum.auto()
    FILTERCASESENSITIVE = enum.auto()
    REVERSEBASEURL = enum.auto()
    REVERSEONLY = enum.auto()
    REVERSEMAGIC = enum.auto()
    REVERSEPATH = enum.auto()
    UPSTREAM = enum.auto()
    LOGLEVEL = enum.auto()


_BY_NAME: dict[str, Directive] = {"": Directive.NIL}
_BY_NAME.update(
    (member.name.lower(), member) for member in Directive if member is not Directive.NIL
)


def find_directive(name: str) -> Directive | None:
    """Return the directive called ``name`` (ASCII case ignored), or None."""
    return _BY_NAME.get(name.translate(_ASCII_LOWER))