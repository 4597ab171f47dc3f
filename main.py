import asyncio
import logging
import random
import uuid
from contextlib import asynccontextmanager
from typing import Callable, List, Optional, Union

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from config import Settings
from models import ActionResult, Alert, ClientMessage, PurifyCommand, PurifyRequest, Region, TelemetrySnapshot
from services.alert_registry import AlertRegistry
from services.broadcast import ACTION_RESULT_EVENT, PURIFY_EVENT, BroadcastChannel
from services.event_handler import apply_purify_command, apply_purify_request
from services.region_store import RegionStore
from services.simulation import SimulationEngine
from utils.numeric import now_ms

logger = logging.getLogger(__name__)


async def run_simulation_loop(engine: SimulationEngine, channel: BroadcastChannel, interval: float) -> None:
    """Tick the engine and publish the result every ``interval`` seconds until cancelled."""
    while True:
        try:
            snapshot = engine.tick()
            await channel.publish(snapshot)
        except Exception:
            logger.exception("Simulation tick failed")
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    task = None
    if settings.simulation_enabled:
        task = asyncio.create_task(
            run_simulation_loop(app.state.engine, app.state.channel, settings.tick_interval)
        )
        logger.info("Simulation loop started, interval=%.2fs", settings.tick_interval)
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Simulation loop stopped after %d ticks", app.state.engine.ticks)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RegionStore] = None,
    registry: Optional[AlertRegistry] = None,
    rng: Optional[random.Random] = None,
    clock: Callable[[], int] = now_ms,
) -> FastAPI:
    # explicit None checks: an empty store or registry is falsy
    if settings is None:
        settings = Settings()
    if store is None:
        store = RegionStore.from_seed(settings.regions_path)
    if registry is None:
        registry = AlertRegistry()
    if rng is None:
        rng = random.Random(settings.seed)

    app = FastAPI(title="AquaSync", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.registry = registry
    app.state.engine = SimulationEngine(store, registry, rng=rng, clock=clock)
    app.state.channel = BroadcastChannel()

    @app.get("/api/regions")
    def get_regions(request: Request) -> List[Region]:
        return request.app.state.store.list()

    @app.get("/api/alerts")
    def get_alerts(request: Request) -> List[Alert]:
        return request.app.state.registry.list()

    @app.get("/api/telemetry")
    def get_telemetry(request: Request) -> TelemetrySnapshot:
        return request.app.state.engine.snapshot()

    @app.post("/api/regions/{region_id}/purify")
    def purify_region(region_id: str, request: Request, body: Optional[PurifyRequest] = None) -> Region:
        region = apply_purify_request(request.app.state.store, region_id, body)
        if region is None:
            raise HTTPException(status_code=404, detail="Region not found")
        return region

    @app.websocket("/ws")
    async def telemetry_stream(websocket: WebSocket):
        state = websocket.app.state
        client_id = uuid.uuid4().hex[:8]
        await state.channel.subscribe(websocket, state.engine.snapshot())
        logger.info("Client connected: %s (%d subscribers)", client_id, state.channel.subscriber_count)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                await handle_client_message(websocket, raw, client_id)
        except WebSocketDisconnect:
            pass
        finally:
            state.channel.unsubscribe(websocket)
            logger.info("Client disconnected: %s", client_id)

    return app


async def handle_client_message(websocket: WebSocket, raw: Union[str, bytes], client_id: str) -> None:
    """Handle one inbound frame. Text and binary frames both carry a JSON envelope."""
    state = websocket.app.state
    channel: BroadcastChannel = state.channel
    try:
        message = ClientMessage.model_validate_json(raw)
        if message.event != PURIFY_EVENT:
            logger.warning("Ignoring unknown event %r from %s", message.event, client_id)
            return
        command = PurifyCommand.model_validate(message.data or {})
    except ValidationError as exc:
        logger.warning("Malformed message from %s: %s", client_id, exc.errors()[:1])
        await channel.send_private(websocket, ACTION_RESULT_EVENT, ActionResult(ok=False, error="invalid message"))
        return

    region = apply_purify_command(state.store, command)
    if region is None:
        await channel.send_private(websocket, ACTION_RESULT_EVENT, ActionResult(ok=False, error="region not found"))
        return

    await channel.send_private(websocket, ACTION_RESULT_EVENT, ActionResult(ok=True, region=region))
    await channel.publish(state.engine.snapshot())


app = create_app()


def run() -> None:
    import uvicorn

    settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("AquaSync server running on http://localhost:%d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
