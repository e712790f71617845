from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Literal, Optional
import asyncio, logging, websockets

logger = logging.getLogger(__name__)


class BlinkEvent(BaseModel):
    """Per-eye state snapshot taken at the instant a blink was detected."""
    model_config = ConfigDict(frozen=True)
    timestamp: float
    left_eye_open: bool
    right_eye_open: bool


class BlinkResult(BaseModel):
    model_config = ConfigDict(frozen=True)
    left_blink: bool = False
    right_blink: bool = False

    @computed_field
    @property
    def any_blink(self) -> bool:
        return self.left_blink or self.right_blink


class BlinkStats(BaseModel):
    model_config = ConfigDict(frozen=True)
    blink_rate: int = 0
    total_blinks: int = 0
    left_eye_blinks: int = 0
    right_eye_blinks: int = 0
    # configured constant; per-blink duration is not measured
    average_blink_duration: float = 0.0
    session_ms: float = 0.0
    symmetry: float = 0.0
    status: Literal["low", "slightly_low", "normal", "high"] = "low"


class FrameReport(BaseModel):
    """One line of the CLI's JSONL output."""
    ts: float
    type: Literal["blink", "stats", "no_face"]
    left_open_prob: Optional[float] = None
    right_open_prob: Optional[float] = None
    blink: Optional[BlinkResult] = None
    stats: Optional[BlinkStats] = None
    faces: int = Field(default=0, ge=0)


async def ws_broadcast(queue: "asyncio.Queue[str]", host="0.0.0.0", port=8765):
    clients = set()

    async def handler(websocket):
        clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            clients.discard(websocket)

    async def pump():
        while True:
            msg = await queue.get()
            if clients:
                websockets.broadcast(clients, msg)

    async with websockets.serve(handler, host, port):
        logger.info(f"Broadcasting on ws://{host}:{port}")
        await pump()
