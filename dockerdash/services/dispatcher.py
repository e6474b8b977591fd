import logging
from dataclasses import asdict
from typing import Dict, Optional

from dockerdash.domain.errors import DashboardError, InvalidInput
from dockerdash.domain.ports import DaemonClient
from dockerdash.domain.views import ActionResult
from dockerdash.services import normalizer

logger = logging.getLogger(__name__)

# verb -> (adapter method, success message)
CONTAINER_ACTIONS: Dict[str, tuple[str, str]] = {
    "start": ("start_container", "Container started"),
    "stop": ("stop_container", "Container stopped"),
    "pause": ("pause_container", "Container paused"),
    "unpause": ("unpause_container", "Container unpaused"),
    "restart": ("restart_container", "Container restarted"),
    "delete": ("remove_container", "Container deleted"),
}


class ActionDispatcher:
    """Runs exactly one mutating daemon call per request and reports an ActionResult.

    The current state is never checked first: the daemon decides whether the
    transition is valid and its answer is passed through.
    """

    def __init__(self, daemon: DaemonClient):
        self.daemon = daemon

    # -------------------------------
    # Containers
    # -------------------------------
    async def container_action(self, container_id: str, action: str, *, force: bool = False) -> ActionResult:
        try:
            if action not in CONTAINER_ACTIONS:
                raise InvalidInput(f"Invalid action: {action}")
            method, message = CONTAINER_ACTIONS[action]
            call = getattr(self.daemon, method)
            if action == "delete":
                await call(container_id, force=force)
            else:
                await call(container_id)
        except DashboardError as e:
            return self._failed(f"container {action} {container_id}", e)
        logger.info("[ACTION] container %s %s", action, container_id)
        return ActionResult.ok(message)

    async def delete_container(self, container_id: str, *, force: bool = False) -> ActionResult:
        return await self.container_action(container_id, "delete", force=force)

    # -------------------------------
    # Images
    # -------------------------------
    async def pull_image(self, reference: Optional[str]) -> ActionResult:
        try:
            if not reference or not reference.strip():
                raise InvalidInput("Image name is required")
            repository, tag = normalizer.split_reference(reference)
            await self.daemon.pull_image(repository, tag)
        except DashboardError as e:
            return self._failed(f"image pull {reference}", e)
        logger.info("[ACTION] image pulled %s", reference)
        return ActionResult.ok(f"Image {reference.strip()} pulled")

    async def delete_image(self, image_id: str, *, force: bool = False) -> ActionResult:
        try:
            await self.daemon.remove_image(image_id, force=force)
        except DashboardError as e:
            return self._failed(f"image delete {image_id}", e)
        logger.info("[ACTION] image deleted %s (force=%s)", image_id, force)
        return ActionResult.ok("Image deleted")

    # -------------------------------
    # Volumes
    # -------------------------------
    async def create_volume(
        self,
        name: Optional[str],
        *,
        driver: Optional[str] = None,
        labels: Optional[Dict[str, str]] = None,
    ) -> ActionResult:
        try:
            if not name or not name.strip():
                raise InvalidInput("Volume name is required")
            record = await self.daemon.create_volume(
                name.strip(), driver=driver or "local", labels=labels or None
            )
        except DashboardError as e:
            return self._failed(f"volume create {name}", e)
        logger.info("[ACTION] volume created %s", name)
        volume = normalizer.normalize_volume(record or {"Name": name.strip(), "Driver": driver or "local"})
        return ActionResult.ok("Volume created", volume=asdict(volume))

    async def delete_volume(self, name: str, *, force: bool = False) -> ActionResult:
        try:
            await self.daemon.remove_volume(name, force=force)
        except DashboardError as e:
            return self._failed(f"volume delete {name}", e)
        logger.info("[ACTION] volume deleted %s", name)
        return ActionResult.ok("Volume deleted")

    @staticmethod
    def _failed(what: str, error: DashboardError) -> ActionResult:
        logger.warning("[ACTION] %s failed: %s", what, error.message)
        return ActionResult.failed(error)
