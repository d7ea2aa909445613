"""Shared pytest fixtures — a MaildropClient backed by httpx.MockTransport."""

import json
import re
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from src.maildrop.client import MaildropClient

API_URL = "https://api.test/graphql"

_ID_RE = re.compile(r'id: "([^"]*)"')


def summary(n: int) -> dict[str, str]:
    """One entry of an ``inbox`` listing."""
    return {
        "id": f"msg_{n}",
        "headerfrom": f"sender{n}@example.com",
        "subject": f"Subject {n}",
        "date": f"2026-02-2{n % 10}T09:00:00Z",
    }


class FakeMaildrop:
    """In-memory stand-in for the Maildrop GraphQL endpoint.

    ``listing`` is returned for inbox queries; ``bodies`` maps message id to
    the ``message`` payload.  Ids in ``failing`` answer with HTTP 500.
    """

    def __init__(self) -> None:
        self.listing: Any = []
        self.bodies: dict[str, dict[str, Any]] = {}
        self.failing: set[str] = set()
        self.listing_status = 200
        self.listing_text: str | None = None
        self.queries: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        query = json.loads(request.content)["query"]
        self.queries.append(query)
        if "inbox(" in query:
            if self.listing_text is not None:
                return httpx.Response(self.listing_status, text=self.listing_text)
            return httpx.Response(
                self.listing_status, json={"data": {"inbox": self.listing}}
            )
        match = _ID_RE.search(query)
        message_id = match.group(1) if match else ""
        if message_id in self.failing:
            return httpx.Response(500, text="boom")
        return httpx.Response(200, json={"data": {"message": self.bodies.get(message_id)}})

    @property
    def detail_queries(self) -> list[str]:
        return [q for q in self.queries if "message(" in q]


@pytest.fixture
def fake() -> FakeMaildrop:
    return FakeMaildrop()


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], MaildropClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> MaildropClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return MaildropClient(http, API_URL)
    return _make


@pytest.fixture
def client(fake: FakeMaildrop, make_client: Callable[..., MaildropClient]) -> MaildropClient:
    return make_client(fake)
