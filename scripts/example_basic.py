#!/usr/bin/env python3
"""
Send a few real messages with telepush.

Before running:
1. Set environment variables:
   export TELEGRAM_BOT_TOKEN="your_bot_token_here"
   export TELEGRAM_CHAT_ID="your_chat_id_here"

2. Or pass them directly to the script:
   python example_basic.py --token YOUR_TOKEN --chat-id YOUR_CHAT_ID
"""

import argparse
from loguru import logger
import os
import sys
from telepush import SendOptions, Telepush, TelepushError, TelepushValidationError


def main():
    parser = argparse.ArgumentParser(description='telepush example')
    parser.add_argument('--token', help='Bot token (or set TELEGRAM_BOT_TOKEN env var)')
    parser.add_argument('--chat-id', help='Chat ID (or set TELEGRAM_CHAT_ID env var)')
    parser.add_argument('--timeout', type=int, default=10000, help='Default timeout in ms')
    args = parser.parse_args()

    try:
        logger.info("🤖 Creating telepush client...")
        tp = Telepush(
            args.token or os.getenv("TELEGRAM_BOT_TOKEN"),
            args.chat_id or os.getenv("TELEGRAM_CHAT_ID"),
            default_timeout_ms=args.timeout,
        )

        logger.info("📤 Sending plain message...")
        result = tp.send("Example: hello from telepush")
        logger.info(f"✅ Message sent! Message ID: {result.message_id}")

        logger.info("📤 Sending formatted, silent message...")
        result = tp.send(
            "*Example:* formatted and silent",
            SendOptions(parse_mode="MarkdownV2", disable_notification=True),
        )
        logger.info(f"✅ Formatted message sent! Message ID: {result.message_id}")

    except TelepushValidationError as e:
        logger.error(f"❌ Configuration error: {e}")
        logger.info("Set TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID, or pass --token and --chat-id")
        sys.exit(1)

    except TelepushError as e:
        logger.error(f"❌ Send failed: {e} (status={e.http_status}, code={e.remote_error_code})")
        sys.exit(1)


if __name__ == "__main__":
    main()
