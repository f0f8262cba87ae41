#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for request validation and response serialisation.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

PATH_PATTERN = r"^[A-Za-z0-9_.:\-]*$"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Pages
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PageSave(BaseModel):
    text: str = Field(..., max_length=10_000_000)
    user: Optional[str] = Field(default=None, max_length=64)
    # revision the edit was based on; None skips the conflict check
    revision: Optional[int] = Field(default=None, ge=0)
    force: bool = False


# -----------------------------------------------------------------------------

class PageResponse(BaseModel):
    site: str
    path: str
    title: Optional[str]
    revision: int
    source: str
    rendered: str
    links: list[str] = []
    images: list[str] = []


# -----------------------------------------------------------------------------

class PreviewRequest(BaseModel):
    page: str = Field(default="", max_length=512, pattern=PATH_PATTERN)
    text: str = Field(..., max_length=10_000_000)
    user: Optional[str] = Field(default=None, max_length=64)


class PreviewResponse(BaseModel):
    html: str
    title: Optional[str]
    links: list[str]
    images: list[str]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Overrides
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class OverrideCreate(BaseModel):
    source_page: str = Field(default="", max_length=512, pattern=PATH_PATTERN)
    source_namespace: str = Field(default="", max_length=512, pattern=PATH_PATTERN)
    source_target: str = Field(..., max_length=512, pattern=PATH_PATTERN)
    target_namespace: str = Field(default="", max_length=512, pattern=PATH_PATTERN)
    target_target: str = Field(..., max_length=512, pattern=PATH_PATTERN)

    @field_validator("source_target", "target_target")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("target must not be empty")
        return v


# -----------------------------------------------------------------------------

class OverrideResponse(BaseModel):
    id: str
    site: str
    source_page: str
    source_namespace: str
    source_target: str
    target_namespace: str
    target_target: str
    created_at: datetime

    model_config = {"from_attributes": True}
