"""Posting JSON documents to an HTTP endpoint."""

from __future__ import annotations

import logging
import urllib.error
import urllib.request

logger = logging.getLogger(__name__)

RESPONSE_LIMIT = 1024
DEFAULT_TIMEOUT = 10.0


class PostError(Exception):
    """The request could not be prepared or carried out."""


def send_json_post(
    url: str, json_data: str, timeout: float = DEFAULT_TIMEOUT
) -> tuple[int, str]:
    """POST ``json_data`` to ``url`` and return the status and response text.

    Any HTTP status counts as a completed request; at most ``RESPONSE_LIMIT``
    bytes of the response are read. Transport failures raise ``PostError``.
    """
    if url is None or json_data is None:
        raise ValueError("url and json_data must not be None")

    try:
        request = urllib.request.Request(
            url,
            data=json_data.encode("utf-8"),
            method="POST",
            headers={"Content-Type": "application/json"},
        )
    except ValueError as err:
        logger.error("could not prepare the HTTP request: %s", err)
        raise PostError(f"invalid request for {url!r}: {err}") from err

    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            status = response.status
            content_length = response.headers.get("Content-Length")
            raw = response.read(RESPONSE_LIMIT)
    except urllib.error.HTTPError as err:
        status = err.code
        content_length = err.headers.get("Content-Length") if err.headers else None
        try:
            raw = err.read(RESPONSE_LIMIT)
        finally:
            err.close()
    except (urllib.error.URLError, OSError) as err:
        logger.error("POST request failed: %s", err)
        raise PostError(f"POST to {url!r} failed: {err}") from err

    body = raw.decode("utf-8", errors="replace")
    logger.info("POST status = %d, content length = %s", status, content_length)
    if body:
        logger.info("server response: %s", body)
    return status, body