"""Ports that clients may reach with the CONNECT method."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class ConnectPorts:
    """Allowed CONNECT ports; with none configured every port is allowed."""

    def __init__(self) -> None:
        self._ports: list[int] | None = None

    def add(self, port: int) -> None:
        """Allow CONNECT to ``port``."""
        if self._ports is None:
            self._ports = []
        logger.info("Adding Port [%d] to the list allowed by CONNECT", port)
        self._ports.append(port)

    def is_allowed(self, port: int) -> bool:
        """Whether CONNECT to ``port`` is allowed."""
        if self._ports is None:
            return True
        return port in self._ports

    def __len__(self) -> int:
        return 0 if self._ports is None else len(self._ports)