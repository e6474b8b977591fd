import asyncio

import pytest
from unittest.mock import AsyncMock

from dockerdash.domain.errors import DaemonError, NotFound
from dockerdash.services.stats_collector import StatsCollector, cpu_percent, io_mb

MB = 1024 * 1024


def make_stats(cpu=(200, 100), system=(2000, 1000), memory=50 * MB, read=3 * MB, write=1 * MB):
    return {
        "cpu_stats": {"cpu_usage": {"total_usage": cpu[0]}, "system_cpu_usage": system[0]},
        "precpu_stats": {"cpu_usage": {"total_usage": cpu[1]}, "system_cpu_usage": system[1]},
        "memory_stats": {"usage": memory},
        "blkio_stats": {
            "io_service_bytes_recursive": [
                {"major": 8, "minor": 0, "op": "read", "value": read},
                {"major": 8, "minor": 0, "op": "write", "value": write},
                {"major": 8, "minor": 0, "op": "total", "value": read + write},
            ]
        },
    }


def test_cpu_percent_from_deltas():
    assert cpu_percent(make_stats(cpu=(300, 100), system=(2000, 1000))) == pytest.approx(20.0)


def test_cpu_percent_zero_system_delta():
    # freshly started container: no previous window yet
    stats = make_stats(cpu=(300, 0), system=(1000, 1000))
    assert cpu_percent(stats) == 0.0


def test_io_counts_only_read_and_write():
    assert io_mb(make_stats(read=2 * MB, write=2 * MB)) == pytest.approx(4.0)


def test_io_without_blkio_entries():
    assert io_mb({"blkio_stats": {"io_service_bytes_recursive": None}}) == 0.0


@pytest.mark.asyncio
async def test_no_running_containers():
    daemon = AsyncMock()
    daemon.list_containers.return_value = []

    snapshot = await StatsCollector(daemon).collect()

    assert (snapshot.cpu, snapshot.memory, snapshot.io) == (0, 0, 0)
    daemon.container_stats.assert_not_awaited()
    daemon.list_containers.assert_awaited_once_with(all=False)


@pytest.mark.asyncio
async def test_sums_across_containers():
    daemon = AsyncMock()
    daemon.list_containers.return_value = [{"Id": "a" * 64}, {"Id": "b" * 64}]
    daemon.container_stats.side_effect = [
        make_stats(cpu=(200, 100), system=(2000, 1000), memory=10 * MB, read=MB, write=0),
        make_stats(cpu=(400, 100), system=(2000, 1000), memory=30 * MB, read=0, write=2 * MB),
    ]

    snapshot = await StatsCollector(daemon).collect()

    assert snapshot.cpu == pytest.approx(40.0)
    assert snapshot.memory == pytest.approx(40.0)
    assert snapshot.io == pytest.approx(3.0)


@pytest.mark.asyncio
async def test_vanished_container_is_skipped():
    daemon = AsyncMock()
    daemon.list_containers.return_value = [{"Id": "gone"}, {"Id": "alive"}]

    async def stats(container_id):
        if container_id == "gone":
            raise NotFound("No such container: gone")
        return make_stats(memory=8 * MB)

    daemon.container_stats.side_effect = stats

    snapshot = await StatsCollector(daemon).collect()

    assert snapshot.memory == pytest.approx(8.0)


@pytest.mark.asyncio
async def test_stopped_between_list_and_fetch_is_skipped():
    daemon = AsyncMock()
    daemon.list_containers.return_value = [{"Id": "stopped"}]
    daemon.container_stats.side_effect = DaemonError("container stopped is not running", status_code=409)

    snapshot = await StatsCollector(daemon).collect()

    assert snapshot.cpu == 0


@pytest.mark.asyncio
async def test_other_daemon_errors_propagate():
    daemon = AsyncMock()
    daemon.list_containers.return_value = [{"Id": "x"}]
    daemon.container_stats.side_effect = DaemonError("boom", status_code=500)

    with pytest.raises(DaemonError):
        await StatsCollector(daemon).collect()


@pytest.mark.asyncio
async def test_failed_aggregate_waits_for_every_fetch():
    daemon = AsyncMock()
    daemon.list_containers.return_value = [{"Id": "bad"}, {"Id": "slow"}]
    finished = []

    async def stats(container_id):
        if container_id == "bad":
            raise DaemonError("boom", status_code=500)
        await asyncio.sleep(0.05)
        finished.append(container_id)
        return make_stats()

    daemon.container_stats.side_effect = stats

    with pytest.raises(DaemonError, match="boom"):
        await StatsCollector(daemon).collect()
    assert finished == ["slow"]


@pytest.mark.asyncio
async def test_slow_container_is_skipped_after_timeout():
    daemon = AsyncMock()
    daemon.list_containers.return_value = [{"Id": "slow"}]

    async def stats(container_id):
        await asyncio.sleep(1)
        return make_stats()

    daemon.container_stats.side_effect = stats

    snapshot = await StatsCollector(daemon, timeout=0.01).collect()

    assert snapshot.memory == 0


@pytest.mark.asyncio
async def test_single_container_snapshot():
    daemon = AsyncMock()
    daemon.container_stats.return_value = make_stats(memory=int(1.5 * MB))

    snapshot = await StatsCollector(daemon).container("abc")

    assert snapshot.memory == 1.5
    assert snapshot.cpu == 10.0
