from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dockerdash.domain.errors import DashboardError


@dataclass
class PortBinding:
    internal: Optional[int]
    type: str = "tcp"
    external: Optional[int] = None
    ip: Optional[str] = None


@dataclass
class MountView:
    type: Optional[str] = None
    name: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    mode: Optional[str] = None
    rw: bool = True


@dataclass
class ContainerView:
    id: str
    name: str
    image: str
    state: str
    status: str
    created: Optional[str] = None
    exitCode: Optional[int] = None
    ports: List[PortBinding] = field(default_factory=list)
    mounts: List[MountView] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass
class ContainerDetailView(ContainerView):
    fullId: str = ""
    command: Optional[str] = None
    env: List[str] = field(default_factory=list)
    restartCount: int = 0
    startedAt: Optional[str] = None
    finishedAt: Optional[str] = None


@dataclass
class ImageView:
    id: str
    repository: str
    tag: str
    size: str
    created: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    digests: List[str] = field(default_factory=list)
    architecture: Optional[str] = None
    os: Optional[str] = None


@dataclass
class VolumeView:
    name: str
    driver: str = "local"
    mountpoint: Optional[str] = None
    created: Optional[str] = None
    size: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    scope: Optional[str] = None


@dataclass
class StatsSnapshot:
    cpu: float = 0.0
    memory: float = 0.0
    io: float = 0.0


@dataclass
class ActionResult:
    """Uniform outcome of a mutating operation.

    ``status_code`` is the HTTP-equivalent code and is not part of the payload.
    """

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    in_use: bool = False
    status_code: int = 200
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **extra: Any) -> "ActionResult":
        return cls(success=True, message=message, extra=extra)

    @classmethod
    def failed(cls, exc: DashboardError) -> "ActionResult":
        return cls(
            success=False,
            error=exc.message,
            in_use=exc.in_use,
            status_code=exc.status_code,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success}
        if self.success:
            payload["message"] = self.message
            payload.update(self.extra)
        else:
            payload["error"] = self.error
            if self.in_use:
                payload["inUse"] = True
        return payload
