"""Host and URL filtering from a file of patterns."""

from __future__ import annotations

import enum
import logging
import os
import re
import string
from typing import Iterator

logger = logging.getLogger(__name__)

_LINE_CHUNK = 512 - 1
_WHITESPACE = " \t\n\v\f\r"
_PATTERN_WORD = re.compile(r"[ \t\n\v\f\r]*((?:[^ \t\n\v\f\r#]|(?<=\\)#)*)")

_CLASSES = {
    "alpha": "a-zA-Z",
    "digit": "0-9",
    "alnum": "a-zA-Z0-9",
    "upper": "A-Z",
    "lower": "a-z",
    "space": " \\t\\n\\r\\f\\v",
    "blank": " \\t",
    "punct": re.escape(string.punctuation).replace("-", "\\-"),
    "xdigit": "0-9A-Fa-f",
    "cntrl": "\\x00-\\x1f\\x7f",
    "print": "\\x20-\\x7e",
    "graph": "\\x21-\\x7e",
}


class FilterOptions(enum.IntFlag):
    CASESENSITIVE = 1 << 0
    URL = 1 << 1
    DEFAULT_DENY = 1 << 2
    TYPE_BRE = 1 << 8
    TYPE_ERE = 1 << 9
    TYPE_FNMATCH = 1 << 10


FILTER_TYPE_MASK = FilterOptions.TYPE_BRE | FilterOptions.TYPE_ERE | FilterOptions.TYPE_FNMATCH


class FilterError(Exception):
    """Raised when the filter file cannot be read or holds a bad pattern."""


def _bracket(pattern: str, start: int, negators: str, escapes: bool) -> tuple[str, int] | None:
    """Translate the bracket expression at ``start``; None if unterminated."""
    out = ["["]
    pos = start + 1
    if pos < len(pattern) and pattern[pos] in negators:
        out.append("^")
        pos += 1
    first = True
    while pos < len(pattern):
        char = pattern[pos]
        if char == "]" and not first:
            out.append("]")
            return "".join(out), pos + 1
        first = False
        if char == "[" and pos + 1 < len(pattern) and pattern[pos + 1] in ":.=":
            kind = pattern[pos + 1]
            end = pattern.find(kind + "]", pos + 2)
            if end == -1:
                return None
            name = pattern[pos + 2:end]
            if kind == ":":
                if name not in _CLASSES:
                    raise re.error(f"unknown character class {name!r}")
                out.append(_CLASSES[name])
            else:
                out.append(re.escape(name))
            pos = end + 2
            continue
        if char == "\\" and escapes and pos + 1 < len(pattern):
            out.append(re.escape(pattern[pos + 1]))
            pos += 2
            continue
        out.append("\\" + char if char in "\\[]^&~|" else char)
        pos += 1
    return None


def _translate_bre(pattern: str) -> str:
    out: list[str] = []
    pos = 0
    at_start = True
    while pos < len(pattern):
        char = pattern[pos]
        if char == "\\":
            if pos + 1 >= len(pattern):
                raise re.error("trailing backslash")
            escaped = pattern[pos + 1]
            pos += 2
            if escaped in "(){}|+?":
                out.append(escaped)
                at_start = escaped in "(|"
            elif escaped.isdigit() and escaped != "0":
                out.append("\\" + escaped)
                at_start = False
            else:
                out.append(re.escape(escaped))
                at_start = False
            continue
        if char == "[":
            translated = _bracket(pattern, pos, "^", escapes=False)
            if translated is None:
                raise re.error("unterminated bracket expression")
            text, pos = translated
            out.append(text)
            at_start = False
            continue
        if char == "^":
            out.append("^" if at_start else "\\^")
            pos += 1
            continue
        if char == "*" and at_start:
            out.append("\\*")
        elif char in "(){}|+?":
            out.append("\\" + char)
        elif char == "$":
            at_end = pos == len(pattern) - 1 or pattern.startswith("\\)", pos + 1)
            out.append("$" if at_end else "\\$")
        else:
            out.append(char)
        at_start = False
        pos += 1
    return "".join(out)


def _translate_ere(pattern: str) -> str:
    out: list[str] = []
    pos = 0
    while pos < len(pattern):
        char = pattern[pos]
        if char == "\\":
            if pos + 1 >= len(pattern):
                raise re.error("trailing backslash")
            out.append(re.escape(pattern[pos + 1]))
            pos += 2
        elif char == "[":
            translated = _bracket(pattern, pos, "^", escapes=False)
            if translated is None:
                raise re.error("unterminated bracket expression")
            text, pos = translated
            out.append(text)
        else:
            out.append(char)
            pos += 1
    return "".join(out)


def _translate_glob(pattern: str) -> str:
    out: list[str] = []
    pos = 0
    while pos < len(pattern):
        char = pattern[pos]
        if char == "*":
            out.append(".*")
        elif char == "?":
            out.append(".")
        elif char == "[":
            translated = _bracket(pattern, pos, "!^", escapes=True)
            if translated is not None:
                text, pos = translated
                out.append(text)
                continue
            out.append("\\[")
        elif char == "\\" and pos + 1 < len(pattern):
            out.append(re.escape(pattern[pos + 1]))
            pos += 2
            continue
        else:
            out.append(re.escape(char))
        pos += 1
    return "".join(out)


def _chunks(lines: Iterator[str]) -> Iterator[str]:
    """Split lines the way a fixed-size line reader would."""
    for line in lines:
        for start in range(0, len(line), _LINE_CHUNK):
            yield line[start:start + _LINE_CHUNK]


class Filter:
    """Patterns read from a file, deciding which hosts or URLs to block."""

    def __init__(self, path: str | os.PathLike[str] | None,
                 options: FilterOptions = FilterOptions(0)) -> None:
        self.path = path
        self.options = FilterOptions(options)
        self._patterns: list[re.Pattern[str]] = []
        self.loaded = False

    @property
    def _glob(self) -> bool:
        return bool(self.options & FilterOptions.TYPE_FNMATCH)

    def _compile(self, text: str) -> re.Pattern[str]:
        if self._glob:
            return re.compile(_translate_glob(text), re.DOTALL)
        flags = re.MULTILINE
        if not self.options & FilterOptions.CASESENSITIVE:
            flags |= re.IGNORECASE
        if self.options & FilterOptions.TYPE_ERE:
            return re.compile(_translate_ere(text), flags)
        return re.compile(_translate_bre(text), flags)

    def load(self) -> None:
        """Read the pattern file; does nothing if already loaded."""
        if self.loaded:
            return
        if self.path is None:
            raise FilterError("filter file: no file configured")
        patterns: list[re.Pattern[str]] = []
        try:
            with open(self.path, encoding="utf-8", errors="surrogateescape",
                      newline="") as handle:
                for lineno, chunk in enumerate(_chunks(iter(handle)), start=1):
                    text = _PATTERN_WORD.match(chunk).group(1)
                    if not text:
                        continue
                    try:
                        patterns.append(self._compile(text))
                    except re.error:
                        raise FilterError(
                            f"Bad regex in {self.path}: line {lineno} - {text}"
                        ) from None
        except OSError as exc:
            raise FilterError(f"filter file: {exc}") from exc
        self._patterns = patterns
        self.loaded = True

    def clear(self) -> None:
        """Forget every pattern."""
        if self.loaded:
            self._patterns = []
            self.loaded = False

    def reload(self) -> None:
        """Read the pattern file again, if one is configured."""
        if self.path is not None:
            logger.info("Re-reading filter file.")
            self.clear()
            self.load()

    def run(self, text: str) -> bool:
        """Return True if ``text`` is to be blocked."""
        default_deny = bool(self.options & FilterOptions.DEFAULT_DENY)
        if not self.loaded:
            return default_deny
        for pattern in self._patterns:
            found = pattern.fullmatch(text) if self._glob else pattern.search(text)
            if found:
                return not default_deny
        return default_deny