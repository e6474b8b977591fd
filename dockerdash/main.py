import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dockerdash.api import containers, images, system, volumes
from dockerdash.api.errors import register_exception_handlers
from dockerdash.core.config import Settings, get_settings
from dockerdash.core.logging import configure_logging
from dockerdash.domain.errors import DashboardError
from dockerdash.domain.ports import DaemonClient
from dockerdash.services.docker_client import DockerSDKClient

logger = logging.getLogger(__name__)


class DaemonStartupError(RuntimeError):
    """Raised at startup when the daemon is required but unreachable."""


async def verify_daemon(daemon: DaemonClient, required: bool) -> bool:
    """Ping the daemon once before serving.

    Returns whether it answered. When ``required`` is set an unreachable daemon
    aborts startup; otherwise the API runs degraded and every call reports
    the failure.
    """
    try:
        await daemon.ping()
        info = await daemon.version()
    except DashboardError as e:
        if required:
            logger.critical("[STARTUP] Docker daemon unreachable at %s: %s", daemon.socket_path, e.message)
            raise DaemonStartupError(e.message) from e
        logger.warning(
            "[STARTUP] Docker daemon unreachable at %s (%s); serving in degraded mode",
            daemon.socket_path,
            e.message,
        )
        return False
    logger.info(
        "[STARTUP] Connected to Docker daemon %s (API %s) at %s",
        info.get("Version"),
        info.get("ApiVersion"),
        daemon.socket_path,
    )
    return True


def create_app(
    settings: Optional[Settings] = None,
    daemon: Optional[DaemonClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    if daemon is None:
        daemon = DockerSDKClient(settings.DOCKER_SOCKET_PATH, timeout=settings.DOCKER_TIMEOUT)

    app = FastAPI(title="Docker Dashboard API")
    app.state.settings = settings
    app.state.daemon = daemon
    app.state.daemon_ready = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(containers.router)
    app.include_router(images.router)
    app.include_router(volumes.router)
    app.include_router(system.router)

    # ---------- Startup ----------

    @app.on_event("startup")
    async def startup_event():
        app.state.daemon_ready = await verify_daemon(app.state.daemon, settings.REQUIRE_DAEMON)

    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
