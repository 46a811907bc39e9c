from __future__ import annotations

import logging

import httpx

from .errors import FetchFailed
from .settings import Settings

log = logging.getLogger("tabconvert.fetch")


def fetch(url: str, settings: Settings | None = None, client: httpx.Client | None = None) -> bytes:
    """
    Download the document at ``url`` (HTTP/HTTPS).

    No retries: a transport error or any status other than 200 raises
    FetchFailed with the cause attached.
    """
    settings = settings or Settings()

    own_client = client is None
    if own_client:
        client = httpx.Client(
            follow_redirects=settings.http_follow_redirects,
            timeout=httpx.Timeout(settings.http_timeout_seconds),
        )

    try:
        log.info("http.get url=%s", url)
        resp = client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchFailed(f"request to {url} failed: {e}") from e
    finally:
        if own_client:
            client.close()

    if resp.status_code != 200:
        raise FetchFailed(f"non-200 response: {resp.status_code} {resp.reason_phrase}")

    data = resp.content
    log.info("Downloaded %d bytes", len(data))
    return data
