"""Live telemetry channel over a WebSocket.

A TelemetryChannel owns one aiohttp WebSocket connection to the backend's
progress endpoint, parses each frame into a ProgressUpdate and hands it to
``on_message``. Dropped connections are retried with exponential backoff
(see backoff.py) until the attempt cap is reached; after that the channel
stays down until reconnect() is called.

All work happens on the running asyncio event loop. Transport errors and
malformed frames are logged and never raised to the caller, since live
progress is advisory: task state can always be recovered with GET /tasks.

Example:
    store = TaskStore(client.list_tasks())
    channel = connect(progress_url("http://localhost:8080"), store.apply)
    ...
    await channel.aclose()
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import aiohttp

from ffweb.domain import ProgressUpdate, parse_progress
from ffweb.exceptions import SchemaError

from .backoff import BASE_DELAY_MS, MAX_DELAY_MS, MAX_RECONNECT_ATTEMPTS, backoff_delay

logger = logging.getLogger(__name__)

PROGRESS_PATH = "/api/ws/progress"

MessageCallback = Callable[[ProgressUpdate], Any]
ErrorCallback = Callable[[BaseException | None], Any]


def progress_url(origin: str) -> str:
    """Map an HTTP(S) origin to the progress WebSocket URL.

    ``https://host:port`` becomes ``wss://host:port/api/ws/progress``; any
    path on the origin is discarded.
    """
    parts = urlsplit(origin)
    scheme = {"https": "wss", "http": "ws"}.get(parts.scheme, parts.scheme)
    return urlunsplit((scheme, parts.netloc, PROGRESS_PATH, "", ""))


class TelemetryChannel:
    """Self-healing WebSocket subscription to task progress events.

    Args:
        url: WebSocket URL (see progress_url()).
        on_message: Called with each parsed ProgressUpdate.
        on_open: Called when a connection is established.
        on_close: Called when a connection ends or a connection attempt
            fails. ``on_close`` without a following ``on_open`` and
            ``exhausted`` being True is the terminal state.
        on_error: Called with the exception on transport errors.
        session: aiohttp session to use. When omitted the channel creates
            one and closes it in aclose().
        max_reconnect_attempts: Automatic reconnects before giving up.
        base_delay_ms: Backoff base delay.
        max_delay_ms: Backoff cap.
        heartbeat: Optional WebSocket ping interval in seconds.
    """

    def __init__(
        self,
        url: str,
        on_message: MessageCallback,
        on_open: Callable[[], Any] | None = None,
        on_close: Callable[[], Any] | None = None,
        on_error: ErrorCallback | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        max_reconnect_attempts: int = MAX_RECONNECT_ATTEMPTS,
        base_delay_ms: int = BASE_DELAY_MS,
        max_delay_ms: int = MAX_DELAY_MS,
        heartbeat: float | None = None,
    ) -> None:
        self.url = url
        self._on_message = on_message
        self._on_open = on_open
        self._on_close = on_close
        self._on_error = on_error
        self._session = session
        self._owns_session = session is None
        self._max_attempts = max_reconnect_attempts
        self._base_delay_ms = base_delay_ms
        self._max_delay_ms = max_delay_ms
        self._heartbeat = heartbeat

        self._attempts = 0
        self._exhausted = False
        self._stopped = False
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._ws: aiohttp.ClientWebSocketResponse | None = None

    @property
    def attempts(self) -> int:
        """Reconnect attempts made since the last successful open."""
        return self._attempts

    @property
    def exhausted(self) -> bool:
        """True once automatic reconnects have given up."""
        return self._exhausted

    @property
    def connected(self) -> bool:
        """True while a WebSocket connection is open."""
        return self._ws is not None and not self._ws.closed

    @property
    def reconnect_pending(self) -> bool:
        """True while a reconnect timer is scheduled."""
        return self._timer is not None

    def open(self) -> None:
        """Start connecting.

        No-op while a connection is open or in progress, and while a
        reconnect is scheduled. Must be called from a running event loop.
        """
        if self._timer is not None or self._has_live_task():
            return
        self._stopped = False
        self._spawn()

    def disconnect(self) -> None:
        """Cancel any pending reconnect and close the active connection.

        Idempotent and safe to call at any point, including during backoff.
        No further automatic attempts are made and ``on_close`` is not
        called for a connection closed this way.
        """
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in self._tasks:
            task.cancel()

    def reconnect(self) -> None:
        """Drop the current connection and connect again immediately.

        Resets the attempt counter, so a channel that gave up retries with a
        fresh backoff budget.
        """
        self.disconnect()
        self._stopped = False
        self._attempts = 0
        self._exhausted = False
        self._spawn()

    async def aclose(self) -> None:
        """Disconnect, wait for every connection task and release the session."""
        self.disconnect()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> TelemetryChannel:
        self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _has_live_task(self) -> bool:
        task = self._task
        return task is not None and not task.done() and not task.cancelling()

    def _spawn(self) -> None:
        # At most one connection task that is not being cancelled
        if self._has_live_task():
            logger.debug("Telemetry connection already active for %s", self.url)
            return
        task = asyncio.get_running_loop().create_task(self._run())
        self._task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _run(self) -> None:
        """Hold one connection until it ends, then schedule a reconnect."""
        session = self._get_session()
        ws: aiohttp.ClientWebSocketResponse | None = None
        try:
            async with session.ws_connect(self.url, heartbeat=self._heartbeat) as ws:
                self._ws = ws
                self._attempts = 0
                self._exhausted = False
                logger.info("Telemetry connected to %s", self.url)
                self._notify(self._on_open)

                async for msg in ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        self._dispatch(msg.data)
                    elif msg.type == aiohttp.WSMsgType.BINARY:
                        self._dispatch(msg.data.decode("utf-8", errors="replace"))
                    elif msg.type == aiohttp.WSMsgType.ERROR:
                        logger.warning("Telemetry socket error: %s", ws.exception())
                        self._notify(self._on_error, ws.exception())
        except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
            logger.warning("Telemetry connection to %s failed: %s", self.url, e)
            self._notify(self._on_error, e)
        finally:
            if self._ws is ws:
                self._ws = None

        logger.info("Telemetry disconnected from %s", self.url)
        self._notify(self._on_close)
        self._schedule_reconnect()

    def _dispatch(self, data: str) -> None:
        """Parse one frame and deliver it; malformed frames are dropped."""
        try:
            update = parse_progress(json.loads(data))
        except (json.JSONDecodeError, SchemaError) as e:
            logger.error("Failed to parse telemetry message: %s", e)
            return
        self._notify(self._on_message, update)

    def _notify(self, callback: Callable[..., Any] | None, *args: Any) -> None:
        """Invoke a user callback, logging (not raising) its failures."""
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Telemetry callback %r raised", callback)

    def _schedule_reconnect(self) -> None:
        if self._stopped:
            return
        if self._attempts >= self._max_attempts:
            self._exhausted = True
            logger.error(
                "Max reconnect attempts reached (%d), giving up on %s",
                self._max_attempts,
                self.url,
            )
            return

        self._attempts += 1
        delay_ms = backoff_delay(
            self._attempts, self._base_delay_ms, self._max_delay_ms
        )
        logger.info("Reconnecting in %dms (attempt %d)", delay_ms, self._attempts)
        self._timer = self._call_later(delay_ms / 1000, self._fire_reconnect)

    def _call_later(
        self, delay_seconds: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay_seconds, callback)

    def _fire_reconnect(self) -> None:
        self._timer = None
        if not self._stopped:
            self._spawn()


def connect(
    url: str,
    on_message: MessageCallback,
    on_open: Callable[[], Any] | None = None,
    on_close: Callable[[], Any] | None = None,
    on_error: ErrorCallback | None = None,
    **options: Any,
) -> TelemetryChannel:
    """Open a telemetry channel and return it.

    The returned channel exposes disconnect() and reconnect(); await
    aclose() to release resources. Must be called from a running loop.
    ``options`` are passed to TelemetryChannel.
    """
    channel = TelemetryChannel(url, on_message, on_open, on_close, on_error, **options)
    channel.open()
    return channel
