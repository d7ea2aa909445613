"""Render inbox results as JSON (machine mode) or formatted text (human mode)."""

from __future__ import annotations

import json

from rich.console import Console
from rich.markup import escape

from src.maildrop.client import MaildropError
from src.maildrop.types import RECENT_LIMIT, InboxResult, Message


def render_json(result: InboxResult) -> str:
    """Serialise an InboxResult with stable key order and two-space indentation."""
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def summary_line(message: Message) -> str:
    return (
        f"- id: {message.id} | from: {message.headerfrom} "
        f"| subject: {message.subject} | date: {message.date}"
    )


def write_raw(text: str, console: Console) -> None:
    """Write server-provided text byte-for-byte, bypassing rich's tab and control-char handling."""
    console.file.write(text + "\n")
    console.file.flush()


def present(result: InboxResult, json_output: bool, console: Console) -> None:
    """Write one inbox result to the console.

    Human mode shows the html body of the recent messages only; the plain
    ``data`` body is reserved for JSON output.
    """
    if json_output:
        console.out(render_json(result), highlight=False)
        return

    if not result.messages:
        console.print(f"[yellow]No messages found for {escape(result.mailbox)}[/yellow]")
        return

    console.print(
        f"Found [bold]{len(result.messages)}[/bold] message(s) for "
        f"{escape(result.mailbox)} (showing up to {RECENT_LIMIT} with html):"
    )
    for message in result.recent:
        console.out(summary_line(message), highlight=False)
        if message.content is not None and message.content.html:
            console.out("  html:", highlight=False)
            write_raw(message.content.html, console)

    if result.remaining:
        console.out("")
        console.print("[dim]Other messages (titles only):[/dim]")
        for message in result.remaining:
            console.out(summary_line(message), highlight=False)


def present_error(exc: MaildropError, console: Console) -> None:
    """Report a failed listing request with whatever the server sent back."""
    if exc.status_code is not None and exc.body is not None:
        console.print(f"[red]{escape(str(exc))}[/red]")
        write_raw(exc.body, console)
        return
    console.print(f"[red]Error querying Maildrop API: {escape(str(exc))}[/red]")
