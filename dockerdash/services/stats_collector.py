"""
Aggregate CPU, memory and block-IO usage over running containers.

Each snapshot returned by the daemon carries the current (``cpu_stats``) and
previous (``precpu_stats``) CPU accounting windows; utilization is derived
from their difference.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from dockerdash.domain.errors import DaemonError, NotFound
from dockerdash.domain.ports import DaemonClient
from dockerdash.domain.views import StatsSnapshot

logger = logging.getLogger(__name__)

MB = 1024 * 1024


def cpu_percent(stats: Dict[str, Any]) -> float:
    cpu_stats = stats.get("cpu_stats") or {}
    precpu_stats = stats.get("precpu_stats") or {}
    cpu_delta = (cpu_stats.get("cpu_usage") or {}).get("total_usage", 0) - (
        precpu_stats.get("cpu_usage") or {}
    ).get("total_usage", 0)
    system_delta = cpu_stats.get("system_cpu_usage", 0) - precpu_stats.get("system_cpu_usage", 0)
    if system_delta <= 0 or cpu_delta <= 0:
        return 0.0
    return cpu_delta / system_delta * 100.0


def memory_mb(stats: Dict[str, Any]) -> float:
    return (stats.get("memory_stats") or {}).get("usage", 0) / MB


def io_mb(stats: Dict[str, Any]) -> float:
    entries = (stats.get("blkio_stats") or {}).get("io_service_bytes_recursive") or []
    total = sum(
        entry.get("value", 0)
        for entry in entries
        if (entry.get("op") or "").lower() in ("read", "write")
    )
    return total / MB


def snapshot_from_stats(stats: Dict[str, Any]) -> StatsSnapshot:
    return StatsSnapshot(cpu=cpu_percent(stats), memory=memory_mb(stats), io=io_mb(stats))


def _rounded(snapshot: StatsSnapshot) -> StatsSnapshot:
    return StatsSnapshot(
        cpu=round(snapshot.cpu, 2),
        memory=round(snapshot.memory, 2),
        io=round(snapshot.io, 2),
    )


class StatsCollector:
    """Collects one non-streaming snapshot per running container and sums them."""

    def __init__(self, daemon: DaemonClient, timeout: float = 10.0):
        self.daemon = daemon
        self.timeout = timeout

    async def collect(self) -> StatsSnapshot:
        running = await self.daemon.list_containers(all=False)
        snapshots = await asyncio.gather(
            *(self._fetch(c.get("Id")) for c in running), return_exceptions=True
        )

        # every fetch has settled; report the first failure, if any
        for snapshot in snapshots:
            if isinstance(snapshot, BaseException):
                raise snapshot

        total = StatsSnapshot()
        for snapshot in snapshots:
            if snapshot is None:
                continue
            total.cpu += snapshot.cpu
            total.memory += snapshot.memory
            total.io += snapshot.io
        return _rounded(total)

    async def container(self, container_id: str) -> StatsSnapshot:
        stats = await self.daemon.container_stats(container_id)
        return _rounded(snapshot_from_stats(stats))

    async def _fetch(self, container_id: Optional[str]) -> Optional[StatsSnapshot]:
        """Snapshot for one container, or None if it went away since it was listed."""
        if not container_id:
            return None
        try:
            stats = await asyncio.wait_for(self.daemon.container_stats(container_id), self.timeout)
        except NotFound:
            logger.info("[STATS] container %s disappeared, skipped", container_id[:12])
            return None
        except DaemonError as e:
            if e.status_code != 409:
                raise
            logger.info("[STATS] container %s no longer running, skipped", container_id[:12])
            return None
        except asyncio.TimeoutError:
            logger.warning("[STATS] container %s timed out after %ss, skipped", container_id[:12], self.timeout)
            return None
        return snapshot_from_stats(stats)
