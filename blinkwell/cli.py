from __future__ import annotations
import typer, json, asyncio, logging, sys
from contextlib import suppress
from enum import Enum
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, Optional
from .config import load_thresholds
from .errors import NotInitializedError
from .eye.tracker import BlinkTracker
from .runtime.events import FrameReport, ws_broadcast

app = typer.Typer(add_completion=False, help="blinkwell CLI: blink detection and blink-rate metrics")

log = logging.getLogger("blinkwell")


class LogLevel(str, Enum):
    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"
    critical = "CRITICAL"


@app.callback()
def setup(log_level: LogLevel = typer.Option(LogLevel.warning, case_sensitive=False, help="Logging level")):
    logging.basicConfig(level=log_level.value, format="%(message)s",
                        handlers=[RichHandler(console=Console(stderr=True), show_path=False)], force=True)


@app.command()
def thresholds(config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False)):
    """
    Print the effective thresholds as JSON.
    """
    typer.echo(load_thresholds(config).model_dump_json(indent=2))


@app.command()
def replay(samples: Path = typer.Argument(..., exists=True, dir_okay=False),
           config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False)):
    """
    Feed recorded {"t": ms, "left": p, "right": p} JSONL samples through a tracker.
    Prints each blink as a JSONL line, then the final stats.
    """
    th = load_thresholds(config)
    tracker: Optional[BlinkTracker] = None
    t = 0.0
    for n, line in enumerate(samples.read_text().splitlines(), 1):
        if not line.strip(): continue
        try:
            s = json.loads(line)
            t, left, right = float(s["t"]), float(s["left"]), float(s["right"])
        except (ValueError, KeyError, TypeError) as e:
            log.warning(f"line {n}: bad sample ({e}), skipped")
            continue
        if tracker is None:
            tracker = BlinkTracker(th, clock=lambda: t)
        res = tracker.observe(left, right, now=t)
        if res.any_blink:
            rep = FrameReport(ts=t, type="blink", left_open_prob=left, right_open_prob=right, blink=res, faces=1)
            typer.echo(rep.model_dump_json())
    if tracker is None:
        tracker = BlinkTracker(th, clock=lambda: 0.0)
    typer.echo(FrameReport(ts=t, type="stats", stats=tracker.stats(now=t)).model_dump_json())


async def monitor(service: Any, tracker: BlinkTracker, source: Iterable[Any],
                  emit: Callable[[FrameReport], Awaitable[None]], stats_every: float = 5.0):
    """Per-frame loop: (ts, image) -> faces -> tracker, emitting blink and periodic stats reports."""
    last_stats: Optional[float] = None
    try:
        for now, image in source:
            try:
                faces = service.detect_faces(image)
            except NotInitializedError as e:
                log.error(str(e)); break
            if faces:
                face = faces[0]
                res = tracker.process(face, now=now)
                if res.any_blink:
                    await emit(FrameReport(ts=now, type="blink", blink=res, faces=len(faces),
                                           left_open_prob=face.left_eye_open_probability,
                                           right_open_prob=face.right_eye_open_probability))
            if last_stats is None:
                last_stats = now
            elif now - last_stats >= stats_every * 1000:
                last_stats = now
                await emit(FrameReport(ts=now, type="stats" if faces else "no_face",
                                       stats=tracker.stats(now=now), faces=len(faces)))
            # let the broadcaster run between frames
            await asyncio.sleep(0)
    finally:
        service.dispose()


async def serve(producer: Awaitable[None], queue: "asyncio.Queue[str]", port: int):
    """Run producer alongside ws_broadcast; whichever fails first, its error propagates."""
    prod = asyncio.ensure_future(producer)
    bcast = asyncio.ensure_future(ws_broadcast(queue, "0.0.0.0", port))
    done, _ = await asyncio.wait({prod, bcast}, return_when=asyncio.FIRST_COMPLETED)
    first, other = (bcast, prod) if bcast in done else (prod, bcast)
    other.cancel()
    with suppress(asyncio.CancelledError):
        await other
    first.result()


@app.command()
def run(camera: str = typer.Option("0", help="Camera index or video path"), width: int = 640, height: int = 480,
        max_fps: Optional[float] = typer.Option(None, help="Drop frames above this rate"),
        config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False),
        ws: bool = typer.Option(False, help="Broadcast reports over WebSocket"),
        port: int = 8765, stats_every: float = typer.Option(5.0, help="Seconds between stats lines")):
    """
    Live loop: camera -> face detection -> blink tracking. Prints JSONL reports.
    """
    from .io.camera import frames
    from .detect.blazeface import BlazeFaceDetector
    from .detect.service import FaceDetectionService

    th = load_thresholds(config)
    service = FaceDetectionService(BlazeFaceDetector(), th)
    if not service.initialize():
        print(f"[red]Face detection unavailable:[/red] {service.init_error}")
        raise typer.Exit(code=1)
    tracker = BlinkTracker(th)
    queue: "asyncio.Queue[str]" = asyncio.Queue()

    async def emit(rep: FrameReport):
        line = rep.model_dump_json()
        typer.echo(line)
        if ws: await queue.put(line)

    source = frames(int(camera) if camera.isdigit() else camera, width, height, max_fps=max_fps)
    producer = monitor(service, tracker, source, emit, stats_every)
    try:
        asyncio.run(serve(producer, queue, port) if ws else producer)
    except OSError as e:
        print(f"[red]Stopped:[/red] {e}")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        print("[yellow]Stopped[/yellow]", file=sys.stderr)


if __name__ == "__main__":
    app()
