"""Network reachability check consulted before pull and push."""

from __future__ import annotations

import logging
import socket

from syncgit.core.config import ConnectivityConfig

logger = logging.getLogger(__name__)


class ConnectivityProbe:
    """Checks whether a well-known host accepts TCP connections.

    The result is never cached: each is_online() call opens a new
    connection, so the state reflects the moment of the check.

    Attributes:
        host: Target host.
        port: Target TCP port.
        timeout: Connect timeout in seconds.

    """

    def __init__(self, host: str = "8.8.8.8", port: int = 53, timeout: float = 3.0) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ConnectivityConfig) -> ConnectivityProbe:
        return cls(host=config.host, port=config.port, timeout=config.timeout)

    def is_online(self) -> bool:
        """Return True if a TCP connection to host:port succeeds."""
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                pass
        except OSError as e:
            logger.debug("Connectivity check to %s:%d failed: %s", self.host, self.port, e)
            return False
        return True
