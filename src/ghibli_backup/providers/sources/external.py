import asyncio
from typing import Any

import httpx

from ghibli_backup.errors import SourceTimeoutError
from ghibli_backup.providers.sources.http import get_json
from ghibli_backup.retrieval.endpoints import normalize_endpoint

DEFAULT_TIMEOUT_MS = 5000


class ExternalSource:
    """The public Ghibli API, bounded by a hard per-request timeout.

    The request runs under ``asyncio.wait_for``; when the bound elapses the
    request task is cancelled, so a late response can never be observed.
    """

    def __init__(
        self,
        base_url: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self.transport = transport

    @property
    def label(self) -> str:
        return "external"

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}{normalize_endpoint(endpoint)}"

    async def fetch(self, endpoint: str) -> Any:
        url = self.url_for(endpoint)
        timeout_seconds = self.timeout_ms / 1000.0
        try:
            return await asyncio.wait_for(
                get_json(url, timeout=timeout_seconds, transport=self.transport),
                timeout=timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise SourceTimeoutError("Request timeout", url=url) from exc
