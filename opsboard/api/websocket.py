"""
Dashboard WebSocket fan-out.

Every connected dashboard gets the whole board after each tick, plus
created/removed events from the REST routes.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import WebSocket
from loguru import logger

from opsboard.core.models import Task


class ConnectionManager:
    """Tracks open dashboard sockets and pushes board events to all of them."""

    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []

    @property
    def connection_count(self) -> int:
        return len(self.active_connections)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a dashboard socket and start including it in pushes."""
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"Dashboard connected ({self.connection_count} open)")

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
            logger.info(f"Dashboard disconnected ({self.connection_count} open)")

    async def handle_message(self, websocket: WebSocket, data: str) -> None:
        """
        Answer a client frame.

        Dashboards only ever send ``{"action": "ping"}`` keepalives; anything
        else is logged and ignored.
        """
        try:
            message = json.loads(data)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring non-JSON frame: {data!r}")
            return

        if isinstance(message, dict) and message.get("action") == "ping":
            await websocket.send_text(json.dumps({"type": "pong"}))
        else:
            logger.debug(f"Ignoring frame: {message!r}")

    async def broadcast(self, message: dict[str, Any]) -> None:
        """
        Send one event to every dashboard.

        Sockets that fail to receive are dropped after the send round.
        """
        data = json.dumps(message)
        stale = []
        for websocket in list(self.active_connections):
            try:
                await websocket.send_text(data)
            except Exception as e:
                logger.warning(f"Dropping dashboard after failed send: {e}")
                stale.append(websocket)

        for websocket in stale:
            self.disconnect(websocket)

    async def broadcast_tasks(self, tasks: list[Task]) -> None:
        """Push the post-tick board, newest task first."""
        await self.broadcast(
            {"type": "tasks_snapshot", "tasks": [task.model_dump(mode="json") for task in tasks]}
        )

    async def notify_task_created(self, task: Task) -> None:
        await self.broadcast({"type": "task_created", "task": task.model_dump(mode="json")})

    async def notify_task_removed(self, task_id: int) -> None:
        await self.broadcast({"type": "task_removed", "task_id": task_id})


ws_manager = ConnectionManager()
