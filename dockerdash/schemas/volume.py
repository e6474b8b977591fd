from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class VolumeSchema(BaseModel):
    name: str
    driver: str = "local"
    mountpoint: Optional[str] = None
    created: Optional[str] = None
    size: Optional[str] = None
    labels: Dict[str, str] = {}
    scope: Optional[str] = None


class VolumeListResponse(BaseModel):
    success: bool = True
    total: int
    volumes: List[VolumeSchema]


class VolumeCreateRequest(BaseModel):
    name: Optional[str] = Field(None, description="Volume name")
    driver: Optional[str] = Field(None, description="Volume driver, defaults to local")
    labels: Dict[str, str] = {}


class VolumeCreateResponse(BaseModel):
    success: bool = True
    message: str
    volume: VolumeSchema
