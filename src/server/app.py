from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
from typing import Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from escalator import Behavior, ConfigError, EscalatorConfig, FixedStepAccumulator, Simulation

logger = logging.getLogger(__name__)


class ConfigRequest(BaseModel):
    escalator_length: float = 20.0
    belt_speed: float = 0.5
    min_following_gap: float = 0.5
    strategy: str = "split_lanes"
    arrival_rate: float = 1.0
    walking_percentage: float = 40.0
    walk_speed_mean: float = 0.75
    walk_speed_std_dev: float = 0.15
    rng_seed: Optional[int] = None
    dt: float = 0.1
    arrival_process: str = "poisson"
    max_total_arrivals: Optional[int] = None
    min_walk_speed: float = 0.1
    throughput_window: float = 60.0
    history_interval: float = 5.0
    history_length: int = 20
    speed: float = Field(1.0, gt=0, description="Simulated seconds per real second")


class SpawnRequest(BaseModel):
    behavior: Optional[str] = None
    walk_speed: Optional[float] = None
    count: int = Field(1, ge=1, le=500)


class SimulationManager:
    def __init__(self, config: Optional[EscalatorConfig] = None, tick_interval: float = 0.05, speed: float = 1.0) -> None:
        self.simulation = Simulation(config or EscalatorConfig())
        self.tick_interval = tick_interval
        self.accumulator = FixedStepAccumulator(self.simulation.config.dt, speed=speed)
        self.running = False
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        last = time.monotonic()
        while True:
            await asyncio.sleep(self.tick_interval)
            now = time.monotonic()
            elapsed, last = now - last, now
            if not self.running:
                continue
            async with self._lock:
                self.simulation.run(self.accumulator.advance(elapsed))
                payload = self.current_state()
            await self.broadcast(payload)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        state = self.simulation.snapshot().to_dict()
        state["running"] = self.running
        state["config"] = self.simulation.config.to_dict()
        return state

    async def configure(self, request: ConfigRequest) -> dict:
        data = request.model_dump()
        speed = data.pop("speed")
        config = EscalatorConfig.from_dict(data)
        async with self._lock:
            self.running = False
            self.simulation.reset(config)
            self.accumulator = FixedStepAccumulator(config.dt, speed=speed)
            return self.current_state()

    async def set_running(self, running: bool) -> dict:
        async with self._lock:
            self.running = running
            self.accumulator.clear()
            logger.info("Simulation %s at t=%.2f", "started" if running else "paused", self.simulation.current_time)
            return self.current_state()

    async def reset(self) -> dict:
        async with self._lock:
            self.running = False
            self.accumulator.clear()
            self.simulation.reset()
            return self.current_state()

    async def step(self, count: int) -> dict:
        async with self._lock:
            self.simulation.run(count)
            return self.current_state()

    async def spawn(self, behavior: Optional[str], walk_speed: Optional[float], count: int) -> dict:
        async with self._lock:
            parsed = Behavior(behavior) if behavior else None
            spawned = [
                self.simulation.spawn_person(behavior=parsed, walk_speed=walk_speed).person_id
                for _ in range(count)
            ]
            state = self.current_state()
            state["spawned"] = spawned
            return state


manager = SimulationManager()
app = FastAPI(title="Escalator Flow Simulation API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/config")
async def set_config(request: ConfigRequest) -> dict:
    try:
        return await manager.configure(request)
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/control/start")
async def start_simulation() -> dict:
    return await manager.set_running(True)


@app.post("/control/pause")
async def pause_simulation() -> dict:
    return await manager.set_running(False)


@app.post("/control/reset")
async def reset_simulation() -> dict:
    return await manager.reset()


@app.post("/control/step")
async def step_simulation(count: int = 1) -> dict:
    if count < 1:
        raise HTTPException(status_code=400, detail="count must be at least 1")
    return await manager.step(count)


@app.post("/persons/spawn")
async def spawn_persons(request: SpawnRequest) -> dict:
    try:
        return await manager.spawn(request.behavior, request.walk_speed, request.count)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
