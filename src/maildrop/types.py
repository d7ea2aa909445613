"""Data types shared across the Maildrop client and the CLI presenter."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

#: Number of newest messages whose full content is fetched per inbox check.
#: Kept small so one check never fans out more than this many detail requests.
RECENT_LIMIT = 3


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True)
class MessageContent:
    """Body of a single message as returned by the ``message`` query."""

    data: str | None = None
    html: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.data and not self.html

    def to_dict(self) -> dict[str, str | None]:
        return {"data": self.data or None, "html": self.html or None}


@dataclass(frozen=True)
class Message:
    """A message summary from the ``inbox`` query, optionally merged with its content.

    ``content`` is only set for messages in the recent prefix whose detail
    query returned a non-empty data or html field.
    """

    id: str | None
    headerfrom: str | None
    subject: str | None
    date: str | None
    content: MessageContent | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Message:
        """Map one ``inbox`` list entry to a Message."""
        return cls(
            id=_optional_str(data.get("id")),
            headerfrom=_optional_str(data.get("headerfrom")),
            subject=_optional_str(data.get("subject")),
            date=_optional_str(data.get("date")),
        )

    def with_content(self, content: MessageContent | None) -> Message:
        """Return a copy carrying ``content``, or self when there is nothing to attach."""
        if content is None or content.is_empty:
            return self
        return replace(self, content=content)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "headerfrom": self.headerfrom,
            "subject": self.subject,
            "date": self.date,
        }
        if self.content is not None:
            out["content"] = self.content.to_dict()
        return out


@dataclass(frozen=True)
class InboxResult:
    """Everything shown for one inbox check, in upstream (newest-first) order."""

    mailbox: str
    messages: tuple[Message, ...] = field(default_factory=tuple)

    @property
    def recent(self) -> tuple[Message, ...]:
        return self.messages[:RECENT_LIMIT]

    @property
    def remaining(self) -> tuple[Message, ...]:
        return self.messages[RECENT_LIMIT:]

    def to_dict(self) -> dict[str, Any]:
        return {
            "mailbox": self.mailbox,
            "messages": [m.to_dict() for m in self.messages],
        }
