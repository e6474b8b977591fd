from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from dockerdash.api.deps import get_dispatcher, get_inventory
from dockerdash.api.errors import result_response
from dockerdash.schemas.common import ActionResponse, ErrorResponse
from dockerdash.schemas.volume import VolumeCreateRequest, VolumeCreateResponse, VolumeListResponse
from dockerdash.services.dispatcher import ActionDispatcher
from dockerdash.services.inventory_service import InventoryService

router = APIRouter(prefix="/api/volumes", tags=["volumes"])


@router.get("", response_model=VolumeListResponse)
async def list_volumes(inventory: InventoryService = Depends(get_inventory)):
    volumes = await inventory.list_volumes()
    return {"success": True, "total": len(volumes), "volumes": [asdict(v) for v in volumes]}


@router.post(
    "",
    response_model=VolumeCreateResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_volume(payload: VolumeCreateRequest, dispatcher: ActionDispatcher = Depends(get_dispatcher)):
    result = await dispatcher.create_volume(payload.name, driver=payload.driver, labels=payload.labels)
    return result_response(result)


@router.delete(
    "/{name}",
    response_model=ActionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    description="A volume still mounted by a container answers 409 with inUse=true.",
)
async def delete_volume(
    name: str,
    force: bool = Query(False),
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.delete_volume(name, force=force)
    return result_response(result)
