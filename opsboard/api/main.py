"""
OPS Board Dashboard API.

FastAPI backend serving the task board, the planning chat and real-time
tick updates.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from opsboard import __version__
from opsboard.api.dependencies import get_board
from opsboard.api.websocket import ws_manager
from opsboard.core.config import get_settings
from opsboard.simulation.loop import SimulationLoop


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Start the simulation loop for the lifetime of the app.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    logger.info("Starting OPS Board API...")
    settings = get_settings()
    loop = SimulationLoop(
        get_board(),
        interval=settings.tick_interval,
        on_tick=ws_manager.broadcast_tasks,
    )
    app.state.simulation = loop
    loop.start()
    yield
    await loop.stop()
    logger.info("Shutting down OPS Board API...")


app = FastAPI(
    title="OPS Board API",
    description="Multi-LLM ops task dashboard",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


from opsboard.api.routes import chat, tasks  # noqa: E402

app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for real-time updates.

    Clients receive a ``tasks_snapshot`` after every tick plus
    ``task_created`` and ``task_removed`` events. The only frame a client
    sends is {"action": "ping"}.

    Args:
        websocket: The WebSocket connection.
    """
    await ws_manager.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            await ws_manager.handle_message(websocket, data)
    except WebSocketDisconnect:
        ws_manager.disconnect(websocket)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Health status and version.
    """
    return {"status": "healthy", "version": __version__}


@app.get("/api/ws-status")
async def ws_status() -> dict[str, int]:
    """
    Get WebSocket connection status.

    Returns:
        Number of active connections.
    """
    return {"active_connections": ws_manager.connection_count}


@app.get("/")
async def root() -> dict[str, str]:
    """Return API info."""
    return {
        "name": "OPS Board API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
