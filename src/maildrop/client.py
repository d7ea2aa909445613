"""Maildrop GraphQL client — lists an inbox and merges in recent message bodies."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx

from src.maildrop.inbox import mailbox_address
from src.maildrop.queries import inbox_query, message_query
from src.maildrop.types import RECENT_LIMIT, InboxResult, Message, MessageContent

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.maildrop.cc/graphql"
DEFAULT_TIMEOUT_SECONDS = 8.0

_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class MaildropError(Exception):
    """Raised when a Maildrop request fails: transport error, non-2xx status or non-JSON body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass
class MaildropConfig:
    """Connection settings for the Maildrop API."""

    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> MaildropConfig:
        """Build MaildropConfig from environment variables.

        Raises ValueError if MAILDROP_TIMEOUT_SECONDS is not a positive number.
        """
        raw_timeout = os.environ.get("MAILDROP_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            timeout = 0.0
        if not timeout > 0:
            raise ValueError(
                f"MAILDROP_TIMEOUT_SECONDS must be a positive number, got {raw_timeout!r}"
            )
        return cls(
            api_url=os.environ.get("MAILDROP_API_URL", DEFAULT_API_URL),
            timeout=timeout,
        )


class MaildropClient:
    """Thin async wrapper around the Maildrop GraphQL endpoint.

    Every call is a single POST; there is no retry. Use the
    `maildrop_client()` context manager to construct and close the
    underlying HTTP client correctly.
    """

    def __init__(self, http: httpx.AsyncClient, api_url: str = DEFAULT_API_URL) -> None:
        self._http = http
        self._api_url = api_url

    # ── Public API ─────────────────────────────────────────────────────────────

    async def fetch_inbox(self, name: str) -> InboxResult:
        """List an inbox and attach content to its most recent messages.

        Makes one listing request, then up to ``RECENT_LIMIT`` detail requests
        concurrently.  A failed detail request leaves that message without
        content; a failed listing request raises MaildropError.
        """
        messages = await self.list_inbox(name)
        recent = messages[:RECENT_LIMIT]
        contents = await asyncio.gather(
            *(self._fetch_content(name, m.id) for m in recent)
        )
        merged = [m.with_content(c) for m, c in zip(recent, contents)]
        return InboxResult(
            mailbox=mailbox_address(name),
            messages=tuple(merged + messages[RECENT_LIMIT:]),
        )

    async def list_inbox(self, name: str) -> list[Message]:
        """Return message summaries for an inbox, in the order the API returns them."""
        payload = await self._post(self._build(inbox_query, name))
        listing = self._data_field(payload, "inbox")
        if not isinstance(listing, list):
            if listing is not None:
                logger.warning("Unexpected inbox payload for %s: %r", name, listing)
            return []
        return [Message.from_api(entry) for entry in listing if isinstance(entry, dict)]

    async def get_message(self, name: str, message_id: str) -> MessageContent:
        """Return the data and html body of one message."""
        payload = await self._post(self._build(message_query, name, message_id))
        message = self._data_field(payload, "message")
        if not isinstance(message, dict):
            return MessageContent()
        data = message.get("data")
        html = message.get("html")
        return MessageContent(
            data=str(data) if data else None,
            html=str(html) if html else None,
        )

    # ── Internal helpers ───────────────────────────────────────────────────────

    async def _fetch_content(self, name: str, message_id: str | None) -> MessageContent | None:
        """Fetch one message body, returning None instead of raising."""
        if not message_id:
            return None
        try:
            return await self.get_message(name, message_id)
        except MaildropError as exc:
            logger.debug("Content fetch failed for %s/%s: %s", name, message_id, exc)
            return None

    @staticmethod
    def _build(builder: Callable[..., str], *args: str) -> str:
        try:
            return builder(*args)
        except ValueError as exc:
            raise MaildropError(f"Invalid query parameter: {exc}") from exc

    async def _post(self, query: str) -> Any:
        """POST a GraphQL query and return the decoded JSON body."""
        logger.debug("Maildrop → %s", query)
        try:
            response = await self._http.post(
                self._api_url, json={"query": query}, headers=_HEADERS
            )
        except httpx.TimeoutException as exc:
            raise MaildropError("Request timed out") from exc
        except httpx.HTTPError as exc:
            raise MaildropError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise MaildropError(
                f"Maildrop returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise MaildropError(
                "Received non-JSON response",
                status_code=response.status_code,
                body=response.text,
            ) from exc

    @staticmethod
    def _data_field(payload: Any, name: str) -> Any:
        """Pull ``data.<name>`` out of a GraphQL response, or None if it's missing."""
        if not isinstance(payload, dict):
            return None
        errors = payload.get("errors")
        if errors:
            logger.warning("GraphQL errors in %s response: %s", name, errors)
        data = payload.get("data")
        if not isinstance(data, dict):
            return None
        return data.get(name)


@asynccontextmanager
async def maildrop_client(config: MaildropConfig | None = None) -> AsyncIterator[MaildropClient]:
    """Async context manager that yields a ready-to-use MaildropClient.

    Each request is bounded by ``config.timeout`` seconds; a request that
    exceeds it fails with MaildropError rather than hanging.

    Example::

        async with maildrop_client() as client:
            result = await client.fetch_inbox("test")
    """
    cfg = config or MaildropConfig.from_env()
    async with httpx.AsyncClient(timeout=cfg.timeout) as http:
        logger.debug("Maildrop client ready (%s, timeout=%ss)", cfg.api_url, cfg.timeout)
        yield MaildropClient(http, cfg.api_url)
