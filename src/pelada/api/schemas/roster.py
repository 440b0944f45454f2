from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class PlayerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    level: Literal[1, 2]
    available_for_draft: bool = True


class PlayerUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    position: str | None = None
    level: Literal[1, 2] | None = None
    available_for_draft: bool | None = None


class BucketSummaryResponse(BaseModel):
    bucket: str
    total: int
    level1: int
    level2: int
    required: int
