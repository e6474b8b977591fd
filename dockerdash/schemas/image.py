# dockerdash/schemas/image.py
from typing import List, Optional

from pydantic import BaseModel, Field


class ImageSchema(BaseModel):
    id: str
    repository: str
    tag: str
    size: str
    created: Optional[str] = None
    tags: List[str] = []
    digests: List[str] = []
    architecture: Optional[str] = None
    os: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "9a0b8c7d6e5f",
                "repository": "nginx",
                "tag": "latest",
                "size": "187.65 MB",
                "created": "2024-01-01T00:00:00Z",
                "tags": ["nginx:latest"],
                "digests": [],
                "architecture": "amd64",
                "os": "linux",
            }
        }


class ImageListResponse(BaseModel):
    success: bool = True
    total: int
    images: List[ImageSchema]


# ---------------------------
# Request bodies
# ---------------------------
class ImagePullRequest(BaseModel):
    image: Optional[str] = Field(None, description="Image reference, e.g. nginx or nginx:1.25")
