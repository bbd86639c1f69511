# transport.py
from __future__ import annotations

import asyncio
import json
import time
import httpx
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from utils.net_client import NetClient


def error_payload(message: str, code: int | None = None) -> Dict[str, Any]:
    """Ошибка в том же виде, что отдаёт сам YouTube API."""
    return {"error": {"code": code, "message": message}}


class HttpTransport:
    """
    Low-level async HTTP transport with retries.

    Тут НЕ должно быть бизнес-логики. Только:
    - отправка запросов
    - декод JSON
    - логи

    request_json never raises on HTTP/JSON/network failures, it returns an
    ``{"error": {...}}`` dict and the caller decides what is fatal.
    """

    def __init__(
        self,
        *,
        net_client: Any,
        base_url: str,
        logger: logging.Logger | None = None,
        sleep_fn: Callable[[float], Awaitable[Any]] | None = None,
        timeout: httpx.Timeout | float | None = None,
        headers: Dict[str, str] | None = None,
        limits: httpx.Limits | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self._sleep = sleep_fn or asyncio.sleep

        self._http = net_client.create_async_httpx_client(
            base_url=base_url,
            timeout=timeout or httpx.Timeout(15.0, read=30.0, connect=10.0),
            headers=headers
            or {
                "User-Agent": "playlist-player/0.1",
                "Accept": "application/json",
                "Accept-Encoding": "gzip, deflate",
            },
            limits=limits or httpx.Limits(max_keepalive_connections=6, max_connections=6),
        )

    async def close(self) -> None:
        try:
            await self._http.aclose()
        except Exception as e:
            self.logger.debug(f"Transport close failed: {e}")

    @staticmethod
    def _decode_error_body(resp: Any, status_code: int) -> Dict[str, Any]:
        # YouTube кладёт причину в {"error": {"code", "message"}}
        try:
            body = resp.json()
        except (UnicodeDecodeError, json.JSONDecodeError, ValueError):
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            return body
        return error_payload(f"HTTP {status_code}", status_code)

    async def request_json(
        self,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        attempts: int = 3,
        backoff: float = 0.6,
    ) -> Any:
        last_err: Exception | None = None

        for attempt in range(1, max(1, attempts) + 1):
            t0 = time.time()
            try:
                resp = await self._http.request("GET", endpoint, params=params or None)

                ct = resp.headers.get("Content-Type", "")
                bytes_len = len(resp.content or b"")

                try:
                    resp.raise_for_status()
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    self.logger.warning(f"HTTP {status_code} {endpoint} | CT:{ct}")
                    return self._decode_error_body(resp, status_code)

                try:
                    data = resp.json()
                except (UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
                    self.logger.error(f"JSON decode error on {endpoint}: {e} | CT:{ct}")
                    return error_payload("JSON decode error")

                elapsed = time.time() - t0
                self.logger.info(f"API {endpoint}: {elapsed:.2f}s; {bytes_len} bytes")
                return data

            except httpx.RequestError as e:
                last_err = NetClient.wrap_error(e, endpoint)
                self.logger.warning(f"Request error {endpoint} (attempt {attempt}/{attempts}): {e!r}")
                if attempt < attempts:
                    await self._sleep(backoff * attempt)
                continue
            except Exception as e:
                last_err = e
                self.logger.error(f"Unexpected error in transport for {endpoint}: {e}")
                break

        return error_payload(str(last_err) if last_err else "Unknown transport error")
