import os
import json
import asyncio
import argparse
from dataclasses import dataclass, field
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

# Architecture Imports
from sprintflow.core.schedule import schedule_to_dicts
from sprintflow.core.session_manager import SessionManager
from sprintflow.core.settings import SessionSettings
from sprintflow.custom_exceptions import EmptyScheduleError, SessionConflictError, SessionNotRunningError

from sprintflow.utils.logging_handler import setup_logger

from sprintflow.adapters.fastapi_adapters.helper_adapters import ConnectionManager, Notifier, TickBroadcaster

load_dotenv()

logger = setup_logger(__name__)


@dataclass
class Args:
    fastapi_host: str = field(default_factory=lambda: os.getenv("SPRINTFLOW_HOST", "0.0.0.0"))
    fastapi_port: int = field(default_factory=lambda: int(os.getenv("SPRINTFLOW_PORT", "8000")))
    localhost_only: bool = False
    tick_interval: float = 1.0
    preview: bool = False
    settings: Optional[SessionSettings] = None


# --- APP FACTORY ---
def create_app(args: Optional[Args] = None):
    args = args or Args()

    @asynccontextmanager
    async def lifespan(app: FastAPI):

        loop = asyncio.get_running_loop()

        manager = ConnectionManager(loop=loop)
        notifier = Notifier(manager)
        session_manager = SessionManager(notifier=notifier, loop=loop, tick_interval=args.tick_interval)
        session_manager.player.on_tick.add_listener(TickBroadcaster(manager))

        app.state.connection_manager = manager
        app.state.session_manager = session_manager

        yield

        # Cleanup
        session_manager.shutdown()

    app = FastAPI(title="sprintflow", lifespan=lifespan)

    @app.get("/api/settings/defaults")
    def default_settings():
        return SessionSettings().model_dump(by_alias=True)

    @app.post("/api/schedule")
    def preview_schedule(settings: SessionSettings):
        schedule = app.state.session_manager.preview(settings)
        return {"schedule": schedule_to_dicts(schedule)}

    @app.post("/api/session/start")
    def start_session(settings: SessionSettings):
        session_manager = app.state.session_manager
        try:
            status = session_manager.start(settings)
        except EmptyScheduleError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except SessionConflictError as e:
            raise HTTPException(status_code=409, detail=str(e))
        # Regenerated rather than read back from the player, which a later start may already own
        return {"schedule": schedule_to_dicts(session_manager.preview(settings)), "status": status}

    @app.post("/api/session/cancel")
    def cancel_session():
        try:
            status = app.state.session_manager.cancel()
        except SessionNotRunningError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return {"status": status}

    @app.get("/api/session/status")
    def session_status():
        return {"status": app.state.session_manager.status()}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        manager = app.state.connection_manager
        session_manager = app.state.session_manager

        await manager.connect(websocket)

        try:
            await websocket.send_text(json.dumps({"type": "status", "data": session_manager.status()}))

            while True:
                data = await websocket.receive_text()
                try:
                    msg = json.loads(data)
                except json.JSONDecodeError:
                    continue

                msg_type = msg.get("type")

                if msg_type == "cancel":
                    try:
                        session_manager.cancel()
                    except SessionNotRunningError as e:
                        await websocket.send_text(json.dumps({"type": "error", "data": str(e)}))
                elif msg_type == "status":
                    await websocket.send_text(json.dumps({"type": "status", "data": session_manager.status()}))
                else:
                    logger.warning(f"Ignoring websocket message of type {msg_type!r}")

        except WebSocketDisconnect:
            manager.disconnect(websocket)
        except Exception as e:
            logger.error(f"WS Error: {e}")
            manager.disconnect(websocket)

    return app


def print_schedule(settings: SessionSettings) -> None:
    schedule = SessionManager().preview(settings)
    for item in schedule:
        print(f"{item.time}  {item.event.value}")


def run_app(args: Args) -> None:
    if args.preview:
        print_schedule(args.settings or SessionSettings())
        return
    host = "127.0.0.1" if args.localhost_only else args.fastapi_host
    app = create_app(args)
    try:
        uvicorn.run(app, host=host, port=args.fastapi_port)
    except Exception as e:
        logger.error(f"error in run_app: {e}")


def build_parser() -> argparse.ArgumentParser:
    default_args = Args()
    defaults = SessionSettings()
    parser = argparse.ArgumentParser(description="Plan and run sprint work sessions.")
    parser.add_argument("--fastapi-host", type=str, default=default_args.fastapi_host)
    parser.add_argument("--fastapi-port", type=int, default=default_args.fastapi_port)
    parser.add_argument("--localhost-only", action="store_true")
    parser.add_argument("--tick-interval", type=float, default=default_args.tick_interval)
    parser.add_argument("--preview", action="store_true", help="Print the schedule and exit.")
    parser.add_argument("--session", type=str, default=defaults.session)
    parser.add_argument("--intention-setting", type=str, default=defaults.intention_setting)
    parser.add_argument("--sprint", type=str, default=defaults.sprint)
    parser.add_argument("--reflection", type=str, default=defaults.reflection)
    parser.add_argument("--regular-break", type=str, default=defaults.regular_break)
    parser.add_argument("--longer-break", type=str, default=defaults.longer_break)
    return parser


def parse_args(argv=None) -> Args:
    parser = build_parser()
    parsed = vars(parser.parse_args(argv))
    try:
        settings = SessionSettings(
            session=parsed.pop("session"),
            intention_setting=parsed.pop("intention_setting"),
            sprint=parsed.pop("sprint"),
            reflection=parsed.pop("reflection"),
            regular_break=parsed.pop("regular_break"),
            longer_break=parsed.pop("longer_break"),
        )
    except ValidationError as e:
        parser.error(str(e))
    return Args(settings=settings, **parsed)


def main() -> None:
    run_app(parse_args())

if __name__ == "__main__":
    logger.info("="*50)
    main()
