"""
Command line entry point.

    telepush send "message" [--token T] [--chat-id ID] [--parse-mode MODE] [--silent] [--timeout MS]

Token and chat id fall back to TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID.
"""

from __future__ import annotations

import argparse
import math
from loguru import logger
import os
import sys
import typing as t
from telepush.telepushClient import Telepush, TelepushError
from telepush.telepushConfig import SendOptions

TOKEN_ENV = "TELEGRAM_BOT_TOKEN"
CHAT_ID_ENV = "TELEGRAM_CHAT_ID"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="telepush", description="Push a message to a Telegram chat")
    commands = parser.add_subparsers(dest="command", metavar="command")

    send = commands.add_parser("send", help="Send a text message")
    send.add_argument("message", help="Message text")
    send.add_argument("--token", help=f"Telegram bot token (or {TOKEN_ENV})")
    send.add_argument("--chat-id", help=f"Telegram chat id (or {CHAT_ID_ENV})")
    send.add_argument("--parse-mode", choices=["Markdown", "MarkdownV2", "HTML"], help="Message formatting")
    send.add_argument("--silent", action="store_true", help="Disable notification")
    send.add_argument("--timeout", metavar="MS", help="Request timeout in ms (ignored unless a finite number)")
    send.add_argument("--verbose", action="store_true", help="Log request details to stderr")
    return parser


def parse_timeout(raw: str | None) -> float | None:
    """Milliseconds from --timeout; anything that is not a finite number means no timeout."""
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        logger.warning(f"Ignoring non-numeric --timeout value {raw!r}")
        return None
    return value


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def main(argv: t.Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    if args.command != "send":
        parser.print_usage(sys.stderr)
        return 1
    configure_logging(args.verbose)

    token = args.token or os.getenv(TOKEN_ENV)
    chat_id = args.chat_id or os.getenv(CHAT_ID_ENV)
    if not token or not chat_id:
        print("Missing token or chat id.", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    options = SendOptions(
        parse_mode=args.parse_mode,
        # absent rather than False when the flag is not given
        disable_notification=True if args.silent else None,
        timeout_ms=parse_timeout(args.timeout),
    )

    try:
        Telepush(token, chat_id).send(args.message, options)
    except TelepushError as e:
        print(e.message, file=sys.stderr)
        return 1

    print("sent")
    return 0


if __name__ == "__main__":
    sys.exit(main())
