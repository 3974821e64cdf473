import asyncio
import contextlib
import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from telepush import SendOptions, Telepush, TelepushError

REPLY_DELAY_SECONDS = 0.5
TRICKLE_INTERVAL_SECONDS = 0.02


class SlowBotHandler(BaseHTTPRequestHandler):
    """Answers sendMessage like Telegram, but only after REPLY_DELAY_SECONDS."""

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = json.loads(self.rfile.read(length))
        time.sleep(REPLY_DELAY_SECONDS)

        reply = json.dumps({"ok": True, "result": {"message_id": 1, "date": 1700000000, "text": body["text"]}})
        try:
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(reply)))
            self.end_headers()
            self.wfile.write(reply.encode())
        except (BrokenPipeError, ConnectionResetError):
            # client already gave up
            pass

    def log_message(self, format, *args):
        pass


class TrickleBotHandler(BaseHTTPRequestHandler):
    """Sends headers at once, then a valid reply one byte every TRICKLE_INTERVAL_SECONDS."""

    def do_POST(self):
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        reply = json.dumps({"ok": True, "result": {"message_id": 1, "date": 1}}).encode()
        try:
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(reply)))
            self.end_headers()
            for i in range(len(reply)):
                self.wfile.write(reply[i:i + 1])
                time.sleep(TRICKLE_INTERVAL_SECONDS)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


@contextlib.contextmanager
def serve(handler):
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def slow_bot_url():
    with serve(SlowBotHandler) as url:
        yield url


@pytest.fixture
def trickle_bot_url():
    with serve(TrickleBotHandler) as url:
        yield url


def test_trickling_reply_cannot_outlast_timeout(trickle_bot_url):
    client = Telepush("token", 1, base_url=trickle_bot_url)

    started = time.monotonic()
    with pytest.raises(TelepushError) as exc_info:
        client.send("hi", SendOptions(timeout_ms=100))
    elapsed = time.monotonic() - started

    assert exc_info.value.message == "Request timed out"
    # the full reply takes well over a second to arrive
    assert elapsed < 0.6


def test_trickling_reply_without_timeout_is_read_fully(trickle_bot_url):
    client = Telepush("token", 1, base_url=trickle_bot_url)

    assert client.send("hi").message_id == 1


def test_timeout_fires_within_margin(slow_bot_url):
    client = Telepush("token", 1, base_url=slow_bot_url)

    started = time.monotonic()
    with pytest.raises(TelepushError) as exc_info:
        client.send("hello", SendOptions(timeout_ms=10))
    elapsed = time.monotonic() - started

    assert exc_info.value.message == "Request timed out"
    assert exc_info.value.http_status is None
    assert elapsed < REPLY_DELAY_SECONDS


def test_default_timeout_applies(slow_bot_url):
    client = Telepush("token", 1, base_url=slow_bot_url, default_timeout_ms=10)

    with pytest.raises(TelepushError, match="Request timed out"):
        client.send("hello")


@pytest.mark.asyncio
async def test_timeout_does_not_affect_concurrent_send(slow_bot_url):
    client = Telepush("token", 1, base_url=slow_bot_url)

    timed_out, delivered = await asyncio.gather(
        client.send_async("first", SendOptions(timeout_ms=10)),
        client.send_async("second"),
        return_exceptions=True,
    )

    assert isinstance(timed_out, TelepushError)
    assert timed_out.message == "Request timed out"
    assert delivered.message_id == 1
    assert delivered.text == "second"


@pytest.mark.asyncio
async def test_send_async_returns_result(slow_bot_url):
    client = Telepush("token", 1, base_url=slow_bot_url, default_timeout_ms=5000)

    result = await client.send_async("hello")

    assert result.unix_date == 1700000000
