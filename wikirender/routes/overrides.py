#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Overrides router
================
GET    /api/v1/overrides/links    — list link overrides of this site
POST   /api/v1/overrides/links    — add a link override
GET    /api/v1/overrides/media    — list media overrides of this site
POST   /api/v1/overrides/media    — add a media override

Adding an override marks the site's cached pages stale.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wikirender.core.database import get_db
from wikirender.models import LinkOverride, MediaOverride
from wikirender.schemas import OverrideCreate, OverrideResponse
from wikirender.services import overrides as override_svc
from wikirender.services import pages as page_svc
from wikirender.services.sites import site_for_host


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/overrides", tags=["overrides"])


def _site(request: Request) -> str:
    return site_for_host(request.url.hostname or "")


async def _add(request: Request, model, data: OverrideCreate, db: AsyncSession):
    site = _site(request)
    row = await override_svc.add_override(db, model, site, data)
    await page_svc.invalidate_cache(db, site)
    return row


# ── Links ─────────────────────────────────────────────────────────────────────

@router.get("/links", response_model=list[OverrideResponse])
async def list_link_overrides(
    request: Request,
    source_page: Optional[str] = Query(None, max_length=512),
    db: AsyncSession           = Depends(get_db),
):
    return await override_svc.list_overrides(db, LinkOverride, _site(request), source_page)


@router.post("/links", response_model=OverrideResponse, status_code=201)
async def add_link_override(request: Request, data: OverrideCreate, db: AsyncSession = Depends(get_db)):
    return await _add(request, LinkOverride, data, db)


# ── Media ─────────────────────────────────────────────────────────────────────

@router.get("/media", response_model=list[OverrideResponse])
async def list_media_overrides(
    request: Request,
    source_page: Optional[str] = Query(None, max_length=512),
    db: AsyncSession           = Depends(get_db),
):
    return await override_svc.list_overrides(db, MediaOverride, _site(request), source_page)


@router.post("/media", response_model=OverrideResponse, status_code=201)
async def add_media_override(request: Request, data: OverrideCreate, db: AsyncSession = Depends(get_db)):
    return await _add(request, MediaOverride, data, db)


# -----------------------------------------------------------------------------
