"""FastAPI application with CORS, lifespan, and routes."""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .api.routes import router
from .api.websocket import manager
from .engine.session import create_workspace, remove_workspace

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: populate the kind registry, then make it read-only
    from .nodes.demo import demo_graph
    from .nodes.registry import KindRegistry
    KindRegistry.freeze()

    loop = asyncio.get_running_loop()
    create_workspace(
        graph=demo_graph(),
        listener=manager.make_broadcast_callback(loop),
    )
    yield
    remove_workspace()


app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.websocket("/ws/workflow")
async def websocket_endpoint(websocket: WebSocket):
    await manager.connect(websocket)
    try:
        while True:
            # Keep connection alive; client messages are ignored
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)
