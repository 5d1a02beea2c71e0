from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRouter
from loguru import logger

from gencomputer.runtime.execution.auth import check_agent_auth
from gencomputer.runtime.execution.invoker import AgentInvoker
from gencomputer.runtime.execution.usage import UsageAccumulator
from gencomputer.runtime.log import setup_logging
from gencomputer.runtime.models.agent import AuthStatus
from gencomputer.runtime.models.api import ErrorResponse
from gencomputer.runtime.settings import get_settings
from gencomputer.runtime.simulator.writer import ExperienceWriter
from gencomputer.runtime.store.base import InvalidPathError, WorkspaceFileNotFoundError
from gencomputer.runtime.store.local import LocalWorkspaceStore


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level, Path(settings.log_dir) / "runtime.log" if settings.debug_agent else None)

    logger.info("Generative Computer runtime starting (host={}, port={})", settings.host, settings.port)
    logger.info("Workspace: {} (agent_mode={})", settings.workspace_path, settings.agent_mode)

    # -- Workspace -------------------------------------------------------------
    store = LocalWorkspaceStore(settings.workspace_path)
    await store.ensure_defaults()
    _app.state.store = store

    # -- Agent -----------------------------------------------------------------
    usage = UsageAccumulator()
    _app.state.usage = usage
    _app.state.invoker = AgentInvoker(settings, usage)
    _app.state.writer = ExperienceWriter(store, settings.simulator_output)

    if settings.use_real_agent:
        auth = await check_agent_auth(settings)
        if auth.authenticated:
            logger.info("Agent CLI: {}", auth.message)
        else:
            logger.warning("Agent CLI not ready: {} -- commands will fall back to the simulator", auth.error)
    else:
        auth = AuthStatus(authenticated=False)
        logger.info("Real agent disabled -- using the smart simulator")
    _app.state.auth_status = auth

    if settings.debug_agent:
        logger.info("Agent debug logs: {}", settings.log_dir)

    yield

    # -- Shutdown --------------------------------------------------------------
    logger.info("Generative Computer runtime shutting down (agent_sessions={})", usage.sessions)


app = FastAPI(title="Generative Computer Runtime", lifespan=lifespan)

# The desktop dev server runs on a different origin.
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


# ---------------------------------------------------------------------------
# Domain errors -> {"success": false, "error": ...}
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(InvalidPathError)
async def invalid_path_handler(_request: Request, exc: InvalidPathError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(WorkspaceFileNotFoundError)
async def not_found_handler(_request: Request, exc: WorkspaceFileNotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


# ---------------------------------------------------------------------------
# API router -- all backend endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


from gencomputer.runtime.routers.commands import router as commands_router  # noqa: E402
from gencomputer.runtime.routers.files import router as files_router  # noqa: E402
from gencomputer.runtime.routers.markdown import router as markdown_router  # noqa: E402
from gencomputer.runtime.routers.status import router as status_router  # noqa: E402

api.include_router(status_router)
api.include_router(commands_router)
api.include_router(files_router)
api.include_router(markdown_router)

app.include_router(api)
