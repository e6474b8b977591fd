from typing import Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    inUse: Optional[bool] = None


class ActionResponse(BaseModel):
    success: bool = True
    message: str


class StatsResponse(BaseModel):
    success: bool = True
    cpu: float = Field(..., description="Summed CPU utilization in percent")
    memory: float = Field(..., description="Summed memory usage in MB")
    io: float = Field(..., description="Summed block IO read+write in MB")


class HealthResponse(BaseModel):
    success: bool
    connected: bool
    socket: str
    version: Optional[Dict[str, Optional[str]]] = None
    error: Optional[str] = None
