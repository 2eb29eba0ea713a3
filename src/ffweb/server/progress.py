"""WebSocket fan-out of task progress.

Endpoint:
    GET /api/ws/progress - one ProgressUpdate JSON object per text frame

Clients never send anything meaningful; incoming frames are ignored. A
socket whose send fails is dropped from the hub.
"""

from __future__ import annotations

import json
import logging

from aiohttp import WSCloseCode, WSMsgType, web

from ffweb.domain import ProgressUpdate, dump_progress

logger = logging.getLogger(__name__)

WS_HEARTBEAT_INTERVAL = 30.0  # seconds


class ProgressHub:
    """Set of connected progress sockets."""

    def __init__(self) -> None:
        self._sockets: set[web.WebSocketResponse] = set()

    def __len__(self) -> int:
        return len(self._sockets)

    async def handle(self, request: web.Request) -> web.WebSocketResponse:
        """Handle GET /api/ws/progress for the lifetime of one client."""
        ws = web.WebSocketResponse(heartbeat=WS_HEARTBEAT_INTERVAL)
        await ws.prepare(request)
        self._sockets.add(ws)
        logger.debug(
            "Progress client connected from %s (total: %d)",
            request.remote or "unknown",
            len(self._sockets),
        )

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    logger.warning("Progress socket error: %s", ws.exception())
        finally:
            self._sockets.discard(ws)
            logger.debug("Progress client disconnected (total: %d)", len(self._sockets))
        return ws

    async def broadcast(self, update: ProgressUpdate) -> int:
        """Send ``update`` to every connected client.

        Returns:
            Number of clients that received the frame.
        """
        payload = json.dumps(dump_progress(update))
        delivered = 0
        for ws in list(self._sockets):
            if ws.closed:
                self._sockets.discard(ws)
                continue
            try:
                await ws.send_str(payload)
                delivered += 1
            except ConnectionError as e:
                logger.debug("Dropping progress client: %s", e)
                self._sockets.discard(ws)
        return delivered

    async def close_all(self) -> None:
        """Close every socket; used on application shutdown."""
        for ws in list(self._sockets):
            await ws.close(code=WSCloseCode.GOING_AWAY, message=b"Server shutdown")
        self._sockets.clear()


HUB_KEY = web.AppKey("progress_hub", ProgressHub)
