from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Sequence

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse, JSONResponse
import uvicorn

from ..sim.core.config import AppConfig, SimulationConfig
from ..sim.core.scenario import Scenario, scenario_from_config
from ..sim.types.snapshot import Frame
from ..sim.utils.math2d import _clamp_value

logger = logging.getLogger(__name__)

END_OF_STREAM = -1


def format_frames(frames: Sequence[Frame], digits: int) -> str:
    """Serialise frames as JSON with every coordinate fixed to ``digits`` decimals."""
    encoded_frames = []
    for frame in frames:
        coords = ",".join(f'{{"x":{c.x:.{digits}f},"y":{c.y:.{digits}f}}}' for c in frame)
        encoded_frames.append(f"[{coords}]")
    return f"[{','.join(encoded_frames)}]"


def parse_frame_request(message: str | bytes) -> int:
    """Read a frame count from a client message: decimal text, or one raw byte."""
    if isinstance(message, bytes):
        if not message:
            raise ValueError("empty frame request")
        return message[0]
    return int(message.strip())


class SimulationController:
    """One scenario and the lock that keeps it single-writer."""

    def __init__(self, config: AppConfig):
        self.config = config
        self.scenario: Scenario = scenario_from_config(config.simulation)
        self._lock = asyncio.Lock()

    async def reset(self) -> None:
        async with self._lock:
            self.scenario = scenario_from_config(self.config.simulation)

    async def frames(self, count: int) -> List[Frame]:
        """Evolve ``count`` ticks, collecting the frame after each one."""
        count = int(_clamp_value(count, 0, self.config.max_frame_request))
        frames: List[Frame] = []
        async with self._lock:
            scenario = self.scenario
            for _ in range(count):
                frames.append(scenario.next_frame())
                # let other streams and requests run between ticks
                await asyncio.sleep(0)
        return frames

    async def encoded_frames(self, count: int) -> str:
        return format_frames(await self.frames(count), self.config.frame_digits)

    def status(self) -> dict:
        scenario = self.scenario
        metrics = scenario.metrics
        return {
            "tick": scenario.tick,
            "time": scenario.time.total_seconds(),
            "population": scenario.state.population(),
            "metrics": asdict(metrics) if metrics is not None else None,
        }


class StreamRegistry:
    """Hands every frame stream its own scenario, built from the shared config."""

    def __init__(self, config: AppConfig):
        self.config = config
        self.streams: List[SimulationController] = []

    @property
    def clients(self) -> int:
        return len(self.streams)

    def configure(self, config: AppConfig) -> None:
        self.config = config

    def open(self) -> SimulationController:
        stream = SimulationController(self.config)
        self.streams.append(stream)
        return stream

    def close(self, stream: SimulationController) -> None:
        self.streams.remove(stream)

    async def reset(self) -> None:
        for stream in list(self.streams):
            await stream.reset()

    def status(self) -> dict:
        return {
            "clients": self.clients,
            "population": self.config.simulation.population,
            "streams": [stream.status() for stream in self.streams],
        }


app = FastAPI(title="Archetypal Agents")
registry = StreamRegistry(AppConfig())
static_dir = Path(__file__).parent / "static"


@app.get("/")
async def index() -> FileResponse:
    return FileResponse(static_dir / "index.html")


@app.get("/api/status")
async def status() -> JSONResponse:
    return JSONResponse(registry.status())


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await registry.reset()
    return JSONResponse({"streams": registry.clients})


@app.websocket("/tick")
async def stream_frames(websocket: WebSocket) -> None:
    await websocket.accept()
    stream = registry.open()
    logger.info("frame stream opened (%d clients)", registry.clients)
    try:
        await websocket.send_text(await stream.encoded_frames(stream.config.initial_frame_request))
        while True:
            message = await websocket.receive()
            if message.get("type") == "websocket.disconnect":
                return
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            try:
                count = parse_frame_request(raw)
            except ValueError:
                logger.warning("closing frame stream after malformed request %r", raw)
                break
            if count == END_OF_STREAM:
                break
            logger.debug("frame request for %d frames", count)
            await websocket.send_text(await stream.encoded_frames(count))
        await websocket.close()
    except WebSocketDisconnect:
        logger.info("client disconnected mid-stream")
    finally:
        registry.close(stream)
        logger.info("frame stream closed (%d clients)", registry.clients)


__all__ = ["app", "registry", "format_frames", "main", "parse_frame_request"]


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve archetypal agent frames over a websocket")
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--config", type=Path, default=None, help="YAML simulation config")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.config is not None:
        registry.configure(AppConfig(simulation=SimulationConfig.from_yaml(args.config)))
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
