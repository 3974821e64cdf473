"""
Telepush - push a text message to one Telegram chat.

A minimal Telegram sendMessage client with:
- One request per message, no retries
- Per-call or default timeouts
- A single error type (TelepushError) for every failure
- Sync and asyncio entry points

Basic usage:
    from telepush import Telepush

    tp = Telepush(token="123456:ABC-DEF...", chat_id=123456789)
    tp.send("Hello from Python! 🚀")
"""

__version__ = "0.1.0"

from .telepushClient import (
    SendResult,
    Telepush,
    TelepushError,
    TelepushValidationError,
    create_telepush,
)
from .telepushConfig import SendOptions, TelepushConfig

__all__ = [
    "Telepush",
    "TelepushError",
    "TelepushValidationError",
    "SendResult",
    "SendOptions",
    "TelepushConfig",
    "create_telepush",
    "__version__",
]
