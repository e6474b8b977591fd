# dockerdash/api/images.py
import asyncio
import logging
from dataclasses import asdict
from typing import Awaitable

from fastapi import APIRouter, Depends, Query, Request

from dockerdash.api.deps import get_dispatcher, get_inventory
from dockerdash.api.errors import result_response
from dockerdash.domain.views import ActionResult
from dockerdash.schemas.common import ActionResponse, ErrorResponse
from dockerdash.schemas.image import ImageListResponse, ImagePullRequest
from dockerdash.services.dispatcher import ActionDispatcher
from dockerdash.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

DISCONNECT_POLL_INTERVAL = 0.5
# nginx convention for "client closed request"; never seen by the client
CLIENT_CLOSED_REQUEST = 499

router = APIRouter(prefix="/api/images", tags=["images"])


async def run_until_disconnect(
    request: Request,
    operation: Awaitable[ActionResult],
    poll_interval: float = DISCONNECT_POLL_INTERVAL,
) -> ActionResult:
    """Await ``operation``, cancelling it if the HTTP client goes away first."""
    task = asyncio.ensure_future(operation)
    while True:
        done, _ = await asyncio.wait({task}, timeout=poll_interval)
        if done:
            return task.result()
        if await request.is_disconnected():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("[PULL] client disconnected, pull cancelled")
            return ActionResult(
                success=False,
                error="Client disconnected, pull cancelled",
                status_code=CLIENT_CLOSED_REQUEST,
            )


# ---------------------------
# List images
# ---------------------------
@router.get("", response_model=ImageListResponse)
async def list_images(inventory: InventoryService = Depends(get_inventory)):
    images = await inventory.list_images()
    return {"success": True, "total": len(images), "images": [asdict(i) for i in images]}


# ---------------------------
# Pull an image
# ---------------------------
@router.post(
    "/pull",
    response_model=ActionResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Pull an image",
    description="Pulls repo[:tag] from its registry. The tag defaults to latest. "
    "The pull is cancelled if the client disconnects.",
)
async def pull_image(
    payload: ImagePullRequest,
    request: Request,
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
):
    result = await run_until_disconnect(request, dispatcher.pull_image(payload.image))
    return result_response(result)


# ---------------------------
# Delete an image
# ---------------------------
@router.delete(
    "/{image_id:path}",
    response_model=ActionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    description="Without force, an image used by a container answers 409 with inUse=true.",
)
async def delete_image(
    image_id: str,
    force: bool = Query(False),
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.delete_image(image_id, force=force)
    return result_response(result)
