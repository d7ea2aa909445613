"""Inbox check command and the interactive session built on top of it."""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console
from rich.markup import escape

from src.cli.presenter import present, present_error
from src.maildrop.client import MaildropClient, MaildropError
from src.maildrop.inbox import mailbox_address, parse_inbox_from_input, split_flags

logger = logging.getLogger(__name__)
console = Console(width=200)

PROMPT = "maildrop> "
_EXIT_WORDS = frozenset({"quit", "exit"})

_USAGE = """\
Simple Maildrop checker (uses GraphQL API)
Usage examples:
  maildrop test                   -> checks test@maildrop.cc
  maildrop test --json            -> prints JSON output
  test@maildrop.cc                -> checks test@maildrop.cc
  check test --json               -> interactive command with JSON
  quit                            -> exit"""


async def check_inbox(
    client: MaildropClient,
    inbox: str | None,
    json_output: bool = False,
    out: Console = console,
) -> bool:
    """Fetch one inbox and present it. Returns False if nothing could be shown."""
    if not inbox:
        out.print("[yellow]No inbox specified[/yellow]")
        return False

    try:
        result = await client.fetch_inbox(inbox)
    except MaildropError as exc:
        logger.error("Inbox check failed for %s: %s", inbox, exc)
        present_error(exc, out)
        return False

    present(result, json_output, out)
    return True


class InteractiveSession:
    """Read-process loop: one line in, one inbox check out, until quit or EOF.

    Holds no inbox data between lines; the only state is the shared client.

    Usage::

        async with maildrop_client() as client:
            await InteractiveSession(client).run()
    """

    def __init__(self, client: MaildropClient, out: Console = console) -> None:
        self._client = client
        self._console = out

    async def handle_line(self, line: str) -> bool:
        """Process one input line. Returns False when the session should end."""
        cmd = line.strip()
        if not cmd:
            return True
        if cmd.lower() in _EXIT_WORDS:
            return False

        text, json_output = split_flags(cmd)
        inbox = parse_inbox_from_input(text)
        if not inbox:
            self._console.print(
                "[yellow]Could not determine inbox. "
                "Try 'check test' or 'test@maildrop.cc'[/yellow]"
            )
            return True

        shown = mailbox_address(inbox).encode("utf-8", "backslashreplace").decode("utf-8")
        self._console.print(f"Checking [bold]{escape(shown)}[/bold] ...")
        await check_inbox(self._client, inbox, json_output, self._console)
        return True

    async def run(self) -> None:
        """Print the usage banner and process lines until quit or end of input."""
        self._console.out(_USAGE, highlight=False)
        while True:
            try:
                line = await asyncio.to_thread(self._console.input, PROMPT)
            except EOFError:
                self._console.out("")
                break
            if not await self.handle_line(line):
                break
        self._console.print("Goodbye.")
