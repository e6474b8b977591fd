import asyncio
import logging
import os
import stat
import threading
from typing import Any, Callable, Dict, List, Optional

import docker
from docker.errors import APIError, DockerException, NotFound as DockerNotFound
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import RequestException, Timeout as RequestsTimeout

from dockerdash.domain.errors import (
    DaemonError,
    DaemonUnavailable,
    NotFound,
    ResourceInUse,
)
from dockerdash.domain.ports import DaemonClient

logger = logging.getLogger(__name__)

# Substrings the daemon uses when a remove is refused because of a reference.
IN_USE_PATTERNS = ("in use", "being used", "is using", "must be forced", "must force", "referenced in multiple")


def classify_api_error(exc: APIError, kind: str = "") -> DaemonError:
    """Map an SDK ``APIError`` to the dashboard error taxonomy.

    ``kind`` is the resource family of the failed call (``container``,
    ``image``, ``volume``). Only image and volume removals can be in use.
    """
    status_code = getattr(exc, "status_code", None)
    message = getattr(exc, "explanation", None) or str(exc)
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")

    if isinstance(exc, DockerNotFound) or status_code == 404:
        return NotFound(message)

    if status_code == 409 and kind in ("image", "volume"):
        lowered = message.lower()
        if any(pattern in lowered for pattern in IN_USE_PATTERNS):
            return ResourceInUse(message)

    if status_code is None or status_code < 400:
        status_code = 500
    return DaemonError(message, status_code=status_code)


def check_socket(socket_path: str) -> None:
    """Raise ``DaemonUnavailable`` unless ``socket_path`` is an accessible unix socket."""
    if not os.path.exists(socket_path):
        raise DaemonUnavailable(f"Docker socket not found at {socket_path}")
    if not stat.S_ISSOCK(os.stat(socket_path).st_mode):
        raise DaemonUnavailable(f"{socket_path} is not a socket file")
    if not os.access(socket_path, os.R_OK | os.W_OK):
        raise DaemonUnavailable(f"Permission denied on Docker socket {socket_path}")


def _base_url(socket_path: str) -> str:
    if "://" in socket_path:
        return socket_path
    return f"unix://{socket_path}"


class DockerSDKClient(DaemonClient):
    """Daemon adapter over the Docker SDK's low-level ``APIClient``.

    The SDK client is built once. If that fails the adapter stays in a
    not-connected state and every call raises ``DaemonUnavailable``.
    """

    def __init__(
        self,
        socket_path: str,
        *,
        timeout: int = 30,
        client: Optional[docker.DockerClient] = None,
    ):
        self._socket_path = socket_path
        self.init_error: Optional[str] = None
        self.docker_client: Optional[docker.DockerClient] = client
        if client is None:
            self.docker_client = self._connect(timeout)

    def _connect(self, timeout: int) -> Optional[docker.DockerClient]:
        try:
            if not self._socket_path.startswith(("tcp://", "http://", "https://", "ssh://")):
                check_socket(self._socket_path.removeprefix("unix://"))
            return docker.DockerClient(base_url=_base_url(self._socket_path), timeout=timeout)
        except DaemonUnavailable as e:
            self.init_error = e.message
        except DockerException as e:
            self.init_error = f"Failed to connect to Docker daemon: {e}"
        logger.error("[DOCKER] %s", self.init_error)
        return None

    @property
    def connected(self) -> bool:
        return self.docker_client is not None

    @property
    def socket_path(self) -> str:
        return self._socket_path

    # -------------------------------
    # Call plumbing
    # -------------------------------
    def _api(self):
        if self.docker_client is None:
            raise DaemonUnavailable(self.init_error or "Docker client is not connected")
        return self.docker_client.api

    async def _run(self, kind: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except APIError as e:
            raise classify_api_error(e, kind) from e
        except RequestsTimeout as e:
            raise DaemonError(f"Docker daemon did not answer in time: {e}", status_code=504) from e
        except RequestsConnectionError as e:
            raise DaemonUnavailable(f"Docker daemon is unreachable: {e}") from e
        except RequestException as e:
            raise DaemonUnavailable(f"Docker daemon request failed: {e}") from e
        except DockerException as e:
            raise DaemonError(str(e)) from e

    async def _call(self, kind: str, method: str, *args, **kwargs) -> Any:
        return await self._run(kind, getattr(self._api(), method), *args, **kwargs)

    # -------------------------------
    # Daemon
    # -------------------------------
    async def ping(self) -> bool:
        return await self._call("daemon", "ping")

    async def version(self) -> Dict[str, Any]:
        return await self._call("daemon", "version")

    # -------------------------------
    # Containers
    # -------------------------------
    async def list_containers(self, all: bool = True) -> List[Dict[str, Any]]:
        return await self._call("container", "containers", all=all)

    async def inspect_container(self, container_id: str) -> Dict[str, Any]:
        return await self._call("container", "inspect_container", container_id)

    async def start_container(self, container_id: str) -> None:
        await self._call("container", "start", container_id)

    async def stop_container(self, container_id: str) -> None:
        await self._call("container", "stop", container_id)

    async def pause_container(self, container_id: str) -> None:
        await self._call("container", "pause", container_id)

    async def unpause_container(self, container_id: str) -> None:
        await self._call("container", "unpause", container_id)

    async def restart_container(self, container_id: str) -> None:
        await self._call("container", "restart", container_id)

    async def remove_container(self, container_id: str, force: bool = False) -> None:
        await self._call("container", "remove_container", container_id, force=force)

    async def container_logs(self, container_id: str, tail: int = 100) -> str:
        raw = await self._call(
            "container",
            "logs",
            container_id,
            stdout=True,
            stderr=True,
            timestamps=True,
            tail=tail,
        )
        if isinstance(raw, bytes):
            return raw.decode("utf-8", errors="replace")
        return raw

    async def container_stats(self, container_id: str) -> Dict[str, Any]:
        return await self._call("container", "stats", container_id, stream=False)

    # -------------------------------
    # Images
    # -------------------------------
    async def list_images(self) -> List[Dict[str, Any]]:
        return await self._call("image", "images")

    async def inspect_image(self, image_id: str) -> Dict[str, Any]:
        return await self._call("image", "inspect_image", image_id)

    async def pull_image(self, repository: str, tag: Optional[str]) -> None:
        api = self._api()
        stop = threading.Event()
        try:
            await self._run("image", self._drain_pull, api, repository, tag, stop)
        except asyncio.CancelledError:
            stop.set()
            logger.info("[PULL] %s cancelled", _reference(repository, tag))
            raise

    @staticmethod
    def _drain_pull(api, repository: str, tag: Optional[str], stop: threading.Event) -> None:
        """Consume the pull progress stream on a worker thread until it ends or ``stop`` is set."""
        ref = _reference(repository, tag)
        stream = api.pull(repository, tag=tag, stream=True, decode=True)
        try:
            for event in stream:
                if stop.is_set():
                    return
                if event.get("error"):
                    raise DaemonError(f"Failed to pull {ref}: {event['error']}")
                logger.debug("[PULL] %s %s %s", ref, event.get("id", ""), event.get("status", ""))
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()

    async def remove_image(self, image_id: str, force: bool = False) -> None:
        await self._call("image", "remove_image", image_id, force=force)

    # -------------------------------
    # Volumes
    # -------------------------------
    async def list_volumes(self) -> List[Dict[str, Any]]:
        response = await self._call("volume", "volumes")
        return (response or {}).get("Volumes") or []

    async def create_volume(
        self,
        name: str,
        *,
        driver: str = "local",
        labels: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        return await self._call("volume", "create_volume", name=name, driver=driver, labels=labels)

    async def remove_volume(self, name: str, force: bool = False) -> None:
        await self._call("volume", "remove_volume", name, force=force)


def _reference(repository: str, tag: Optional[str]) -> str:
    return f"{repository}:{tag}" if tag else repository
