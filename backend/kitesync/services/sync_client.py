from __future__ import annotations

import logging
from typing import Any

import requests

from kitesync.config import settings

logger = logging.getLogger("kitesync.client")


def push_kites(
    kites: list[dict[str, Any]],
    *,
    base_url: str | None = None,
    timeout: int | None = None,
    preview: bool = False,
) -> dict[str, Any]:
    """POST a kites payload to a running sync API and return its JSON reply."""
    root = (base_url or settings.sync_server_url).rstrip("/")
    url = f"{root}{settings.api_prefix}/sync-talk-data"
    if preview:
        url = f"{url}/preview"

    response = requests.post(url, json={"kites": kites}, timeout=timeout or settings.sync_timeout_seconds)
    logger.info("talk_sync_push url=%s status=%s kites=%d", url, response.status_code, len(kites))
    response.raise_for_status()
    return response.json()
