from fastapi import Depends, Request

from dockerdash.core.config import Settings
from dockerdash.domain.ports import DaemonClient
from dockerdash.services.dispatcher import ActionDispatcher
from dockerdash.services.inventory_service import InventoryService
from dockerdash.services.stats_collector import StatsCollector


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_daemon(request: Request) -> DaemonClient:
    return request.app.state.daemon


def get_inventory(daemon: DaemonClient = Depends(get_daemon)) -> InventoryService:
    return InventoryService(daemon)


def get_dispatcher(daemon: DaemonClient = Depends(get_daemon)) -> ActionDispatcher:
    return ActionDispatcher(daemon)


def get_stats_collector(
    daemon: DaemonClient = Depends(get_daemon),
    settings: Settings = Depends(get_settings),
) -> StatsCollector:
    return StatsCollector(daemon, timeout=settings.STATS_TIMEOUT)
