"""Proxy logging to a file or to syslog.

Messages logged before logging is set up are held back and written once
the destination is known.
"""

from __future__ import annotations

import enum
import os
import sys
import threading
import time

try:
    import syslog as _syslog
except ImportError:  # pragma: no cover - platforms without syslog
    _syslog = None

TIME_LENGTH = 16
STRING_LENGTH = 800


class LogLevel(enum.IntEnum):
    """Severity levels, numbered as syslog does, plus one for connections."""

    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7
    CONN = 8


_LABELS = {
    LogLevel.CRIT: "CRITICAL",
    LogLevel.ERR: "ERROR",
    LogLevel.WARNING: "WARNING",
    LogLevel.NOTICE: "NOTICE",
    LogLevel.INFO: "INFO",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.CONN: "CONNECT",
}


def _stdout_fd() -> int:
    try:
        return sys.stdout.fileno()
    except (AttributeError, ValueError, OSError):
        return 1


class ProxyLogger:
    """Writes log lines to a file descriptor or to syslog."""

    def __init__(self) -> None:
        self.log_level = LogLevel.INFO
        self.log_file_fd = -1
        self.log_file_name: str | None = None
        self.use_syslog = False
        self._stored: list[tuple[LogLevel, str]] | None = None
        self._initialized = False
        self._lock = threading.Lock()

    def open_log_file(self, path: str | os.PathLike[str] | None) -> int:
        """Open ``path`` for appending (standard output if None); return the fd."""
        if path is None:
            self.log_file_fd = _stdout_fd()
        else:
            self.log_file_fd = os.open(
                path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o600)
        return self.log_file_fd

    def close_log_file(self) -> None:
        """Close the log file, leaving standard output open."""
        if self.log_file_fd < 0 or self.log_file_fd == _stdout_fd():
            return
        os.close(self.log_file_fd)
        self.log_file_fd = -1

    def set_log_level(self, level: int) -> None:
        """Set the most verbose level that is still written."""
        self.log_level = LogLevel(level)

    def _suppressed(self, level: LogLevel) -> bool:
        if self.log_level is LogLevel.CONN:
            return level is LogLevel.INFO
        if self.log_level is LogLevel.INFO:
            return level > LogLevel.INFO and level is not LogLevel.CONN
        return level > self.log_level

    def log_message(self, level: int, message: str) -> None:
        """Log ``message`` at ``level``."""
        level = LogLevel(level)
        if self._suppressed(level):
            return

        if self.use_syslog and level is LogLevel.CONN:
            level = LogLevel.INFO

        if not self._initialized:
            if self._stored is None:
                self._stored = []
            self._stored.append((level, message[:STRING_LENGTH - 1]))
            return

        if not self.use_syslog and self.log_file_fd == -1:
            return

        if self.use_syslog:
            self._write_syslog(level, message)
        else:
            self._write_file(level, message)

    def _write_syslog(self, level: LogLevel, message: str) -> None:
        text = message[:STRING_LENGTH - 1]
        with self._lock:
            if _syslog is not None:
                _syslog.syslog(int(level), text)
            else:
                sys.stderr.write(f"{_LABELS[level]}: {text}\n")

    def _write_file(self, level: LogLevel, message: str) -> None:
        seconds, nanos = divmod(time.time_ns(), 1_000_000_000)
        stamp = time.strftime("%b %d %H:%M:%S", time.localtime(seconds))[:TIME_LENGTH - 1]
        prefix = f"{_LABELS[level]:<9} {stamp}.{nanos // 1_000_000:03d} [{os.getpid()}]: "
        line = (prefix + message)[:STRING_LENGTH - 2] + "\n"
        data = line.encode("utf-8", errors="replace")

        try:
            with self._lock:
                os.write(self.log_file_fd, data)
        except OSError as exc:
            self.use_syslog = True
            self.log_message(
                LogLevel.CRIT,
                f"ERROR: Could not write to log file {self.log_file_name}: {exc.strerror}.")
            self.log_message(LogLevel.CRIT, "Falling back to syslog logging")
            return

        try:
            with self._lock:
                os.fsync(self.log_file_fd)
        except OSError:
            pass

    def _send_stored_logs(self) -> None:
        stored, self._stored = self._stored, None
        if stored is None:
            return
        self.log_message(LogLevel.DEBUG, "sending stored logs")
        for level, text in stored:
            if self._suppressed(level):
                continue
            self.log_message(level, text)
        self.log_message(LogLevel.DEBUG, "done sending stored logs")

    def setup_logging(self, log_file: str | os.PathLike[str] | None = None,
                      use_syslog: bool = False) -> None:
        """Start logging to ``log_file`` (or syslog) and flush held-back messages."""
        self.log_file_name = None if log_file is None else os.fspath(log_file)
        self.use_syslog = use_syslog

        if not self.use_syslog:
            try:
                self.open_log_file(log_file)
            except OSError as exc:
                self.use_syslog = True
                self.log_message(
                    LogLevel.CRIT,
                    f"ERROR: Could not create log file {self.log_file_name}: {exc.strerror}.")
                self.log_message(LogLevel.CRIT, "Falling back to syslog logging.")

        if self.use_syslog and _syslog is not None:
            _syslog.openlog("smallproxy", _syslog.LOG_PID, _syslog.LOG_USER)

        self._initialized = True
        self._send_stored_logs()

    def shutdown_logging(self) -> None:
        """Stop logging and release the destination."""
        if not self._initialized:
            return
        if self.use_syslog:
            if _syslog is not None:
                _syslog.closelog()
        else:
            self.close_log_file()
        self._initialized = False