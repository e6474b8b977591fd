from dataclasses import asdict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dockerdash.api.deps import get_daemon, get_stats_collector
from dockerdash.domain.errors import DashboardError
from dockerdash.domain.ports import DaemonClient
from dockerdash.schemas.common import ErrorResponse, HealthResponse, StatsResponse
from dockerdash.services.stats_collector import StatsCollector

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/stats", response_model=StatsResponse, responses={503: {"model": ErrorResponse}})
async def aggregate_stats(collector: StatsCollector = Depends(get_stats_collector)):
    """CPU, memory and IO summed over all running containers."""
    snapshot = await collector.collect()
    return {"success": True, **asdict(snapshot)}


@router.get("/health", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
async def health(daemon: DaemonClient = Depends(get_daemon)):
    try:
        version = await daemon.version()
    except DashboardError as e:
        return JSONResponse(
            status_code=e.status_code if e.status_code == 503 else 502,
            content={
                "success": False,
                "connected": False,
                "socket": daemon.socket_path,
                "error": e.message,
            },
        )
    return {
        "success": True,
        "connected": True,
        "socket": daemon.socket_path,
        "version": {
            "version": version.get("Version"),
            "apiVersion": version.get("ApiVersion"),
            "os": version.get("Os"),
            "arch": version.get("Arch"),
        },
    }
