"""HTTP Server - FastAPI routes for the ready check, move and size requests"""

import logging
import threading
import time
from typing import Optional, Type, TypeVar

from fastapi import APIRouter, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import DecodeError, MoveError
from .models import Answer, MoveRequest, SizeRequest
from .mover import DirectoryMover

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8888
READY_MESSAGE = "Ready"

RequestModel = TypeVar("RequestModel", bound=BaseModel)

router = APIRouter()


class ServerConfig:
    """Everything the HTTP layer is built from"""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        mover: Optional[DirectoryMover] = None
    ):
        self.host = host
        self.port = port
        self.mover = mover or DirectoryMover()


def _respond(answer: Answer, status_code: int = 200) -> JSONResponse:
    return JSONResponse(answer.to_wire(), status_code=status_code)


async def _decode(request: Request, model: Type[RequestModel]) -> RequestModel:
    """Parse the JSON body into model, raising DecodeError"""
    raw = await request.body()
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise DecodeError("; ".join(err["msg"] for err in e.errors(include_url=False))) from e


@router.get("/")
async def ready():
    """Ready check"""
    return _respond(Answer(message=READY_MESSAGE))


@router.post("/")
async def move_directory(request: Request):
    """Move src to dst"""
    mover: DirectoryMover = request.app.state.mover
    try:
        params = await _decode(request, MoveRequest)
        answer = await run_in_threadpool(mover.move, params.source_path, params.destination_path)
    except MoveError as e:
        logger.warning("Move request failed: %s", e)
        return _respond(e.to_answer(), 400)
    return _respond(answer)


@router.post("/size")
async def directory_size(request: Request):
    """Total size of the files under src"""
    mover: DirectoryMover = request.app.state.mover
    try:
        params = await _decode(request, SizeRequest)
        answer = await run_in_threadpool(mover.size, params.source_path)
    except MoveError as e:
        logger.warning("Size request failed: %s", e)
        return _respond(e.to_answer(), 400)
    return _respond(answer)


async def _http_error(request: Request, exc: StarletteHTTPException):
    """Plain text 405 for any unsupported method on the move route"""
    if exc.status_code == 405 and request.url.path == "/":
        return PlainTextResponse("Method not allowed", status_code=405, headers=exc.headers)
    return await http_exception_handler(request, exc)


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    """Build the listener application"""
    config = config or ServerConfig()

    app = FastAPI(title="Archive Listener", docs_url=None, redoc_url=None)
    app.state.config = config
    app.state.mover = config.mover
    app.include_router(router)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    return app


def start_listener(server, timeout: float = 5.0) -> Optional[threading.Thread]:
    """
    Run a uvicorn server in a background thread.

    Returns the thread once the server reports started, None if it exits
    first (e.g. the port is taken) or does not start within timeout.
    """
    thread = threading.Thread(target=server.run, name="http-listener", daemon=True)
    thread.start()

    deadline = time.monotonic() + timeout
    while not server.started and thread.is_alive() and time.monotonic() < deadline:
        time.sleep(0.05)

    if not server.started:
        server.should_exit = True
        return None
    return thread
