from typing import Any, Dict, List, Optional, Protocol


class DaemonClient(Protocol):
    """Call surface over the daemon control API.

    Every method returns the daemon's raw records. Failures are raised as
    ``DaemonUnavailable`` or ``DaemonError`` (see ``dockerdash.domain.errors``).
    """

    # -------------------------------
    # Daemon
    # -------------------------------
    @property
    def connected(self) -> bool: ...

    @property
    def socket_path(self) -> str: ...

    async def ping(self) -> bool: ...

    async def version(self) -> Dict[str, Any]: ...

    # -------------------------------
    # Containers
    # -------------------------------
    async def list_containers(self, all: bool = True) -> List[Dict[str, Any]]:
        """Raw container list records (``Names``, ``State``, ``Ports``...)."""
        ...

    async def inspect_container(self, container_id: str) -> Dict[str, Any]: ...

    async def start_container(self, container_id: str) -> None: ...

    async def stop_container(self, container_id: str) -> None: ...

    async def pause_container(self, container_id: str) -> None: ...

    async def unpause_container(self, container_id: str) -> None: ...

    async def restart_container(self, container_id: str) -> None: ...

    async def remove_container(self, container_id: str, force: bool = False) -> None: ...

    async def container_logs(self, container_id: str, tail: int = 100) -> str: ...

    async def container_stats(self, container_id: str) -> Dict[str, Any]:
        """One non-streaming stats snapshot with ``cpu_stats`` and ``precpu_stats``."""
        ...

    # -------------------------------
    # Images
    # -------------------------------
    async def list_images(self) -> List[Dict[str, Any]]: ...

    async def inspect_image(self, image_id: str) -> Dict[str, Any]: ...

    async def pull_image(self, repository: str, tag: Optional[str]) -> None:
        """Pull until the progress stream ends. Cancelling the caller stops the pull."""
        ...

    async def remove_image(self, image_id: str, force: bool = False) -> None: ...

    # -------------------------------
    # Volumes
    # -------------------------------
    async def list_volumes(self) -> List[Dict[str, Any]]: ...

    async def create_volume(
        self,
        name: str,
        *,
        driver: str = "local",
        labels: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]: ...

    async def remove_volume(self, name: str, force: bool = False) -> None: ...
