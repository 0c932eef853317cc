"""Per-invocation credentials for hosted HTTPS remotes.

The token is never written to .git/config. Instead, pull and push receive a
``-c url.<authenticated>.insteadOf=<plain>`` override so git rewrites the
remote URL for that single process only.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

# Username accepted by GitHub and most hosted forges for token auth
TOKEN_USERNAME = "x-access-token"

REDACTED = "***"


def auth_config_args(remote_url: str | None, token: str | None) -> list[str]:
    """Build git ``-c`` arguments that inject the token into HTTPS URLs.

    Args:
        remote_url: The remote's configured fetch URL.
        token: Access token, or None.

    Returns:
        ``["-c", "url.https://x-access-token:<token>@host/.insteadOf=https://host/"]``
        for HTTPS remotes without embedded credentials, otherwise ``[]``.

    """
    if not token or not remote_url:
        return []

    parts = urlsplit(remote_url)
    if parts.scheme != "https" or not parts.hostname:
        logger.debug("Remote is not HTTPS, token not applied")
        return []
    if parts.username or parts.password:
        logger.debug("Remote URL already carries credentials, token not applied")
        return []

    host = parts.netloc
    plain = f"https://{host}/"
    authenticated = f"https://{TOKEN_USERNAME}:{token}@{host}/"
    return ["-c", f"url.{authenticated}.insteadOf={plain}"]


def redact(text: str, token: str | None) -> str:
    """Replace every occurrence of token in text."""
    if not token:
        return text
    return text.replace(token, REDACTED)
