"""CLI entry point for the Maildrop inbox checker."""

import asyncio
import logging

import click
from dotenv import load_dotenv

from src.cli.commands import InteractiveSession, check_inbox
from src.maildrop.client import MaildropConfig, maildrop_client
from src.maildrop.inbox import parse_inbox_from_input

logger = logging.getLogger(__name__)


@click.command()
@click.argument("inbox", required=False)
@click.option("--json", "-j", "json_output", is_flag=True, help="Print JSON instead of text.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Per-request timeout in seconds.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(inbox: str | None, json_output: bool, timeout: float | None, verbose: bool) -> None:
    """Check a Maildrop inbox, or start an interactive session when INBOX is omitted.

    INBOX may be a bare name (test) or a full address (test@maildrop.cc).
    """
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )
    try:
        config = MaildropConfig.from_env()
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'MAILDROP_TIMEOUT_SECONDS'") from exc
    if timeout is not None:
        config.timeout = timeout

    if inbox is None:
        asyncio.run(_interactive_async(config))
        return

    ok = asyncio.run(_check_async(config, parse_inbox_from_input(inbox), json_output))
    if not ok:
        raise SystemExit(1)


async def _check_async(config: MaildropConfig, inbox: str | None, json_output: bool) -> bool:
    async with maildrop_client(config) as client:
        return await check_inbox(client, inbox, json_output)


async def _interactive_async(config: MaildropConfig) -> None:
    async with maildrop_client(config) as client:
        await InteractiveSession(client).run()
