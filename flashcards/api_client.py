"""Async HTTP client for the flashcard REST API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from flashcards.config import client_settings
from flashcards.models import Flashcard, FlashcardDraft

logger = logging.getLogger(__name__)

# Failures where the request never reached the server
_RETRYABLE = (httpx.ConnectError, httpx.RemoteProtocolError)


class ApiError(Exception):
    """A request failed: non-2xx response or no response at all."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ApiTimeoutError(ApiError):
    pass


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"


class FlashcardClient:
    """Typed wrapper over the flashcard endpoints.

    Use as an async context manager so the connection pool is closed::

        async with FlashcardClient() as client:
            cards = await client.list_flashcards()
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or client_settings.api_url
        self.timeout = timeout if timeout is not None else client_settings.request_timeout
        self.max_retries = max_retries if max_retries is not None else client_settings.max_retries
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=transport)

    async def __aenter__(self) -> FlashcardClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send_with_retry(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.max_retries)),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type(_RETRYABLE),
            reraise=True,
        )
        return await retrying(self._http.request, method, path, **kwargs)

    async def _request(self, method: str, path: str, *, idempotent: bool = False, **kwargs: Any) -> Any:
        send = self._send_with_retry if idempotent else self._http.request
        logger.debug("%s %s", method, path)
        try:
            response = await send(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise ApiTimeoutError(f"Request timed out after {self.timeout:g}s") from e
        except httpx.TransportError as e:
            raise ApiError(f"Could not reach {self.base_url}: {e}") from e
        if response.is_error:
            raise ApiError(_error_message(response), status_code=response.status_code)
        return response.json()

    async def list_flashcards(self) -> list[Flashcard]:
        data = await self._request("GET", "/api/flashcards", idempotent=True)
        return [Flashcard.from_json(item) for item in data]

    async def list_by_category(self, category: str) -> list[Flashcard]:
        data = await self._request("GET", f"/api/flashcards/category/{quote(category, safe='')}", idempotent=True)
        return [Flashcard.from_json(item) for item in data]

    async def categories(self) -> list[str]:
        return list(await self._request("GET", "/api/categories", idempotent=True))

    async def create(self, draft: FlashcardDraft) -> Flashcard:
        data = await self._request("POST", "/api/flashcards", json=draft.to_json())
        return Flashcard.from_json(data)

    async def update(self, flashcard_id: str, draft: FlashcardDraft) -> Flashcard:
        data = await self._request("PUT", f"/api/flashcards/{quote(flashcard_id, safe='')}", json=draft.to_json())
        return Flashcard.from_json(data)

    async def delete(self, flashcard_id: str) -> str:
        data = await self._request("DELETE", f"/api/flashcards/{quote(flashcard_id, safe='')}")
        return data.get("message", "")

    async def increment_review(self, flashcard_id: str) -> Flashcard:
        data = await self._request("PATCH", f"/api/flashcards/{quote(flashcard_id, safe='')}/review")
        return Flashcard.from_json(data)
