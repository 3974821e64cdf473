"""
telepushClient.py

Send a text message to one pre-configured Telegram chat.

Basic usage:
  from telepush import Telepush
  tp = Telepush(token="123456:ABC-DEF...", chat_id=-1001234567890)
  tp.send("Training finished ✅")

Advanced:
  tp = Telepush(token, chat_id, default_timeout_ms=5000)       # default deadline
  tp.send("*bold*", SendOptions(parse_mode="MarkdownV2"))       # formatting
  tp.send("quiet", SendOptions(disable_notification=True))      # no sound
  await tp.send_async("from a coroutine")                        # asyncio callers

Configuration is always explicit: environment variables are read by the CLI,
never here. Every failure is raised as TelepushError.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import json
import time
import typing as t
from loguru import logger
import requests
from telepush.telepushConfig import DEFAULT_BASE_URL, WIRE_FIELDS, SendOptions, TelepushConfig

# sendMessage text limit
MAX_MESSAGE_LENGTH = 4096
READ_CHUNK_SIZE = 8192


@dataclass(frozen=True)
class SendResult:
    message_id: int
    unix_date: int
    text: str | None = None


class Telepush:
    """
    Minimal Telegram sendMessage client bound to a single chat.

    - One HTTP POST per send(), no retries.
    - Optional per-call or default timeout in milliseconds.
    - Option fields left as None are omitted from the request body.
    """

    def __init__(
        self,
        token: str | None,
        chat_id: str | int | None,
        *,
        base_url: str | None = None,
        default_timeout_ms: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise TelepushValidationError("token is required")
        # 0 is a valid chat id, so no truthiness check here
        if chat_id is None or chat_id == "":
            raise TelepushValidationError("chat_id is required")

        base_url = DEFAULT_BASE_URL if base_url is None else base_url
        self._cfg = TelepushConfig(
            token=token,
            chat_id=chat_id,
            base_url=base_url.removesuffix("/"),
            default_timeout_ms=default_timeout_ms,
        )
        # None -> a one-shot requests.post per call, no connection state kept here
        self._session = session

    @property
    def config(self) -> TelepushConfig:
        return self._cfg

    # ----------------------------- Public API -----------------------------

    def send(self, text: str, options: SendOptions | None = None) -> SendResult:
        """
        Send a text message to the configured chat.

        Args:
            text: Message text, sent as given (not stripped)
            options: Formatting/delivery flags and an optional timeout

        Returns:
            SendResult with the id, date and text of the created message

        Raises:
            TelepushValidationError: If text is empty or whitespace only
            TelepushError: On timeout, transport failure or API rejection
        """
        if not isinstance(text, str) or not text.strip():
            raise TelepushValidationError("text must be a non-empty string")

        if len(text) > MAX_MESSAGE_LENGTH:
            logger.warning(f"Message length {len(text)} exceeds Telegram limit of {MAX_MESSAGE_LENGTH} characters")

        options = options or SendOptions()
        payload = self._build_payload(text, options)
        timeout_ms = options.timeout_ms if options.timeout_ms is not None else self._cfg.default_timeout_ms
        timeout_seconds = timeout_ms / 1000 if timeout_ms and timeout_ms > 0 else None

        data, status = self._post_json("sendMessage", payload, timeout_seconds)
        return self._parse_result(data, status)

    async def send_async(self, text: str, options: SendOptions | None = None) -> SendResult:
        """Like send(), with the blocking request offloaded to a worker thread."""
        return await asyncio.to_thread(self.send, text, options)

    # --------------------------- Internal helpers -------------------------

    def _endpoint(self, method: str) -> str:
        return f"{self._cfg.base_url}/bot{self._cfg.token}/{method}"

    def _build_payload(self, text: str, options: SendOptions) -> dict[str, t.Any]:
        payload: dict[str, t.Any] = {
            "chat_id": self._cfg.chat_id,
            "text": text,
        }
        for name in WIRE_FIELDS:
            value = getattr(options, name)
            if value is not None:
                payload[name] = value
        return payload

    def _post_json(
        self, method: str, payload: dict[str, t.Any], timeout_seconds: float | None
    ) -> tuple[dict[str, t.Any], int]:
        """
        POST a JSON body once and decode the JSON reply. Transport problems become TelepushError.
        """
        post = self._session.post if self._session is not None else requests.post
        deadline = time.monotonic() + timeout_seconds if timeout_seconds else None
        try:
            logger.debug(f"Making request to {method} (timeout={timeout_seconds}s)")
            resp = post(
                self._endpoint(method),
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=timeout_seconds,
                stream=True,
            )
            try:
                body = self._read_body(resp, deadline)
            finally:
                resp.close()
            data = json.loads(body)
        except requests.Timeout as e:
            logger.warning(f"Request to {method} timed out after {timeout_seconds}s")
            raise TelepushError("Request timed out") from e
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Request to {method} failed: {e}")
            raise TelepushError(str(e) or type(e).__name__) from e

        if not isinstance(data, dict):
            raise TelepushError(f"Unexpected response body from {method}: {type(data).__name__}")
        return data, resp.status_code

    @staticmethod
    def _read_body(resp: requests.Response, deadline: float | None) -> bytes:
        """
        Read a streamed body. With a deadline, read byte by byte and give up once it has passed,
        so a server trickling its reply cannot outlast the timeout.
        """
        if deadline is None:
            return b"".join(resp.iter_content(chunk_size=READ_CHUNK_SIZE))

        chunks = []
        try:
            for chunk in resp.iter_content(chunk_size=1):
                if time.monotonic() > deadline:
                    raise requests.ReadTimeout("deadline passed while reading the response")
                chunks.append(chunk)
        except requests.ConnectionError as e:
            # iter_content reports a socket read timeout as ConnectionError
            if time.monotonic() > deadline:
                raise requests.ReadTimeout("deadline passed while reading the response") from e
            raise
        if time.monotonic() > deadline:
            raise requests.ReadTimeout("deadline passed before the response was read")
        return b"".join(chunks)

    def _parse_result(self, data: dict[str, t.Any], status: int) -> SendResult:
        """
        Turn a decoded Telegram reply into a SendResult, or raise with status and error_code attached.
        """
        error_code = data.get("error_code")
        description = data.get("description")

        if not 200 <= status < 300:
            logger.error(f"Telegram API error (HTTP {status}): {description}")
            raise TelepushError(description or f"HTTP {status}", status, error_code)

        if not data.get("ok", False):
            logger.error(f"Telegram API error ({error_code}): {description}")
            raise TelepushError(description or "Telegram API error", status, error_code)

        result = data.get("result")
        if result is None:
            raise TelepushError("Telegram API returned no result", status, error_code)

        if not isinstance(result, dict):
            raise TelepushError("Telegram API returned a malformed result", status, error_code)
        message_id = result.get("message_id")
        date = result.get("date")
        text = result.get("text")
        if not (_is_int(message_id) and _is_int(date) and (text is None or isinstance(text, str))):
            raise TelepushError("Telegram API returned a malformed result", status, error_code)

        sent = SendResult(message_id=message_id, unix_date=date, text=text)

        logger.debug(f"Request successful: {sent.message_id}")
        return sent


# ------------------------------ Exceptions -------------------------------

class TelepushError(Exception):
    """Any failure of a send: bad input, timeout, transport or Telegram rejection."""

    def __init__(
        self,
        message: str,
        http_status: int | None = None,
        remote_error_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.remote_error_code = remote_error_code


class TelepushValidationError(TelepushError, ValueError):
    """Invalid configuration or message text, raised before any request is made."""


# ------------------------------ Utility functions -------------------------------

def _is_int(value: t.Any) -> bool:
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def create_telepush(config: TelepushConfig, *, session: requests.Session | None = None) -> Telepush:
    """Build a client from a TelepushConfig."""
    return Telepush(
        config.token,
        config.chat_id,
        base_url=config.base_url,
        default_timeout_ms=config.default_timeout_ms,
        session=session,
    )
