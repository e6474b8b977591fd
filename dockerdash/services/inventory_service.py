import asyncio
import logging
from typing import Any, Dict, List, Optional

from dockerdash.domain.errors import DaemonError, InvalidInput
from dockerdash.domain.ports import DaemonClient
from dockerdash.domain.views import ContainerDetailView, ContainerView, ImageView, VolumeView
from dockerdash.services import normalizer

logger = logging.getLogger(__name__)

MAX_LOG_TAIL = 5000


class InventoryService:
    """Read side: fetch raw daemon state and return normalized views.

    Nothing is cached; each call re-reads the daemon.
    """

    def __init__(self, daemon: DaemonClient):
        self.daemon = daemon

    # -------------------------------
    # Containers
    # -------------------------------
    async def list_containers(self, all: bool = True) -> List[ContainerView]:
        records = await self.daemon.list_containers(all=all)
        details = await asyncio.gather(
            *(self._inspect_quietly(self.daemon.inspect_container, r.get("Id")) for r in records)
        )
        return [normalizer.normalize_container(r, d) for r, d in zip(records, details)]

    async def get_container(self, container_id: str) -> ContainerDetailView:
        details = await self.daemon.inspect_container(container_id)
        return normalizer.normalize_container_detail(details)

    async def container_logs(self, container_id: str, tail: int = 100) -> str:
        if tail < 1 or tail > MAX_LOG_TAIL:
            raise InvalidInput(f"tail must be between 1 and {MAX_LOG_TAIL}")
        return await self.daemon.container_logs(container_id, tail=tail)

    # -------------------------------
    # Images
    # -------------------------------
    async def list_images(self) -> List[ImageView]:
        records = await self.daemon.list_images()
        details = await asyncio.gather(
            *(self._inspect_quietly(self.daemon.inspect_image, r.get("Id")) for r in records)
        )
        return [normalizer.normalize_image(r, d) for r, d in zip(records, details)]

    # -------------------------------
    # Volumes
    # -------------------------------
    async def list_volumes(self) -> List[VolumeView]:
        records = await self.daemon.list_volumes()
        return [normalizer.normalize_volume(r) for r in records]

    # -------------------------------
    # Internal
    # -------------------------------
    @staticmethod
    async def _inspect_quietly(inspect, resource_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """Inspect enrichment is optional; the list record alone is still a valid view."""
        if not resource_id:
            return None
        try:
            return await inspect(resource_id)
        except DaemonError as e:
            logger.warning("[INSPECT] %s skipped: %s", resource_id[:12], e.message)
            return None
