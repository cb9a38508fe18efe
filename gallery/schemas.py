"""
Pydantic schemas for the remote query protocol and the HTTP API.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

QueryAction = Literal["select", "insert", "update", "delete", "count"]


class QueryOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_by: Optional[str] = Field(default=None, alias="orderBy")
    order_direction: Optional[Literal["asc", "desc"]] = Field(
        default=None, alias="orderDirection"
    )
    limit: Optional[int] = Field(default=None, ge=1)


class QueryRequest(BaseModel):
    collection: str
    action: QueryAction
    filter: Optional[dict] = None
    data: Optional[Union[dict, list]] = None
    options: Optional[QueryOptions] = None

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class QueryResponse(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None


class ImageOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str
    title: str
    description: str = ""
    likes: int = Field(default=0, ge=0)
    is_default: bool = Field(default=False, alias="isDefault")
    uploaded_at: Optional[int] = Field(default=None, alias="uploadedAt")


class GalleryResponse(BaseModel):
    mode: Literal["remote", "local"]
    banner: Optional[str] = None
    images: list[ImageOut]
    liked: list[str]
    selected: Optional[ImageOut] = None
    is_uploading: bool = False
    upload_progress: int = 0
