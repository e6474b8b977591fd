from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from dockerdash.api.deps import get_dispatcher, get_inventory, get_stats_collector
from dockerdash.api.errors import result_response
from dockerdash.schemas.common import ActionResponse, ErrorResponse, StatsResponse
from dockerdash.schemas.container import (
    ContainerDetailResponse,
    ContainerListResponse,
    ContainerLogsResponse,
)
from dockerdash.services.dispatcher import ActionDispatcher
from dockerdash.services.inventory_service import InventoryService
from dockerdash.services.stats_collector import StatsCollector

router = APIRouter(prefix="/api/containers", tags=["containers"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.get("", response_model=ContainerListResponse)
async def list_containers(
    all: bool = Query(True, description="Include stopped containers"),
    inventory: InventoryService = Depends(get_inventory),
):
    containers = await inventory.list_containers(all=all)
    return {
        "success": True,
        "total": len(containers),
        "containers": [asdict(c) for c in containers],
    }


@router.get("/{container_id}", response_model=ContainerDetailResponse, responses=ERROR_RESPONSES)
async def get_container(container_id: str, inventory: InventoryService = Depends(get_inventory)):
    container = await inventory.get_container(container_id)
    return {"success": True, "container": asdict(container)}


@router.get("/{container_id}/logs", response_model=ContainerLogsResponse, responses=ERROR_RESPONSES)
async def container_logs(
    container_id: str,
    tail: int = Query(100, description="Number of lines from the end of the log"),
    inventory: InventoryService = Depends(get_inventory),
):
    logs = await inventory.container_logs(container_id, tail=tail)
    return {"success": True, "logs": logs}


@router.get("/{container_id}/stats", response_model=StatsResponse, responses=ERROR_RESPONSES)
async def container_stats(container_id: str, collector: StatsCollector = Depends(get_stats_collector)):
    snapshot = await collector.container(container_id)
    return {"success": True, **asdict(snapshot)}


@router.post("/{container_id}/{action}", response_model=ActionResponse, responses=ERROR_RESPONSES)
async def container_action(
    container_id: str,
    action: str,
    force: bool = Query(False, description="Only used by the delete action"),
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.container_action(container_id, action, force=force)
    return result_response(result)


@router.delete("/{container_id}", response_model=ActionResponse, responses=ERROR_RESPONSES)
async def delete_container(
    container_id: str,
    force: bool = Query(False),
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.delete_container(container_id, force=force)
    return result_response(result)
