from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PortSchema(BaseModel):
    internal: Optional[int] = None
    external: Optional[int] = None
    type: str = "tcp"
    ip: Optional[str] = None


class MountSchema(BaseModel):
    type: Optional[str] = None
    name: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    mode: Optional[str] = None
    rw: bool = True


class ContainerSchema(BaseModel):
    id: str
    name: str
    image: str
    state: str = Field(..., description="created, running, paused, exited, restarting, removing or dead")
    status: str
    created: Optional[str] = None
    exitCode: Optional[int] = None
    ports: List[PortSchema] = []
    mounts: List[MountSchema] = []
    labels: Dict[str, str] = {}

    class Config:
        json_schema_extra = {
            "example": {
                "id": "abcdef012345",
                "name": "web",
                "image": "nginx:latest",
                "state": "running",
                "status": "Up 2 hours",
                "created": "2024-01-01T00:00:00Z",
                "exitCode": 0,
                "ports": [{"internal": 80, "external": 8080, "type": "tcp", "ip": "0.0.0.0"}],
                "mounts": [],
                "labels": {},
            }
        }


class ContainerDetailSchema(ContainerSchema):
    fullId: str
    command: Optional[str] = None
    env: List[str] = []
    restartCount: int = 0
    startedAt: Optional[str] = None
    finishedAt: Optional[str] = None


class ContainerListResponse(BaseModel):
    success: bool = True
    total: int
    containers: List[ContainerSchema]


class ContainerDetailResponse(BaseModel):
    success: bool = True
    container: ContainerDetailSchema


class ContainerLogsResponse(BaseModel):
    success: bool = True
    logs: str
