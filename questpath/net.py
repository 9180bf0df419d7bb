"""Blocking HTTP helpers wrapped for asyncio, with retries for transient failures."""

from __future__ import annotations

import asyncio
import json
import socket
from typing import Any
from urllib import error, request

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from .config import Config
from .errors import FetchError, FetchStatusError, TransientFetchError
from .logging_utils import log_error


def _perform_get(url: str, timeout: float) -> bytes:
    """Execute the blocking GET request and return the raw body."""

    req = request.Request(url, method="GET")
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            return resp.read()
    except error.HTTPError as exc:
        raise FetchStatusError(url, exc.code, str(exc.reason or "")) from exc
    except error.URLError as exc:
        raise TransientFetchError(url, str(exc.reason)) from exc
    except (socket.timeout, TimeoutError, ConnectionError) as exc:
        raise TransientFetchError(url, str(exc) or type(exc).__name__) from exc


async def fetch_bytes(
    url: str,
    *,
    timeout: float | None = None,
    max_attempts: int | None = None,
) -> bytes:
    """GET ``url`` in a worker thread and return the body.

    Transient network failures are retried up to ``max_attempts`` times
    (defaults to ``Config.FETCH_MAX_ATTEMPTS``). A non-2xx response raises
    ``FetchStatusError`` immediately: a missing collision file will still be
    missing on the next attempt.
    """

    resolved_timeout = timeout if timeout is not None else Config.FETCH_TIMEOUT_SECONDS
    attempts = max_attempts if max_attempts is not None else Config.FETCH_MAX_ATTEMPTS

    attempt_number = 0
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(TransientFetchError),
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_fixed(0.25),
        reraise=True,
    ):
        with attempt:
            attempt_number += 1
            if attempt_number > 1:
                log_error(f"Retrying {url} (attempt {attempt_number}/{attempts})")
            return await asyncio.to_thread(_perform_get, url, resolved_timeout)

    # AsyncRetrying with reraise=True always exits via return or raise
    raise RuntimeError("HTTP retry mechanism exited unexpectedly")


async def fetch_json(
    url: str,
    *,
    timeout: float | None = None,
    max_attempts: int | None = None,
) -> Any:
    """GET ``url`` and decode the body as JSON."""

    raw = await fetch_bytes(url, timeout=timeout, max_attempts=max_attempts)
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FetchError(url, "response was not valid JSON") from exc


__all__ = ["fetch_bytes", "fetch_json"]
