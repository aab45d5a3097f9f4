import logging
from typing import Any

import httpx

from ghibli_backup.errors import SourceParseError, SourceStatusError, SourceTimeoutError, SourceTransportError

logger = logging.getLogger(__name__)
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0


async def get_json(
    url: str,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
    error_prefix: str = "HTTP error!",
) -> Any:
    """GET ``url`` and decode the body as JSON, mapping failures to SourceError."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
            http_response = await client.get(url)
    except httpx.TimeoutException as exc:
        raise SourceTimeoutError("Request timeout", url=url) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise SourceTransportError(f"{exc.__class__.__name__}: {exc}", url=url) from exc

    logger.debug("http.response url=%s status=%d", url, http_response.status_code)
    if not http_response.is_success:
        status = http_response.status_code
        raise SourceStatusError(f"{error_prefix} status: {status}", status_code=status, url=url)
    try:
        return http_response.json()
    except ValueError as exc:
        raise SourceParseError(f"Invalid JSON from {url}: {exc}", url=url) from exc
