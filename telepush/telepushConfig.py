from __future__ import annotations

import typing as t
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.telegram.org"

ParseMode = t.Literal["Markdown", "MarkdownV2", "HTML"]


@dataclass(frozen=True)
class TelepushConfig:
    token: str
    chat_id: str | int
    base_url: str = DEFAULT_BASE_URL
    default_timeout_ms: int | None = None   # per-request timeout, None -> wait forever


@dataclass(frozen=True)
class SendOptions:
    """
    Per-call options for sendMessage.

    Every field defaults to None, meaning "not set": unset fields are left out
    of the request body, while an explicit False is sent as false.
    """

    parse_mode: ParseMode | None = None     # None -> plain text
    disable_notification: bool | None = None
    protect_content: bool | None = None
    reply_to_message_id: int | None = None
    message_thread_id: int | None = None
    disable_web_page_preview: bool | None = None
    timeout_ms: float | None = None         # overrides TelepushConfig.default_timeout_ms


# SendOptions fields forwarded to sendMessage under the same name (timeout_ms is local only)
WIRE_FIELDS: tuple[str, ...] = (
    "parse_mode",
    "disable_notification",
    "protect_content",
    "reply_to_message_id",
    "message_thread_id",
    "disable_web_page_preview",
)
