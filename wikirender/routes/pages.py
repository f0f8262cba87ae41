#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pages router
============
GET    /api/v1/pages                    — home page (rendered)
GET    /api/v1/pages/{path}             — page, current or ?revision=N
GET    /api/v1/pages/{path}/backlinks   — pages linking here
PUT    /api/v1/pages/{path}             — save new revision

The site is chosen from the request's host name.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wikirender.core.database import get_db
from wikirender.schemas import PageResponse, PageSave
from wikirender.schemas.schemas import PATH_PATTERN
from wikirender.services import pages as page_svc
from wikirender.services.render_service import RenderedPage, RenderService, get_render_service
from wikirender.services.sites import site_for_host


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/pages", tags=["pages"])


def _host(request: Request) -> str:
    return request.url.hostname or ""


def _page_response(page: RenderedPage) -> PageResponse:
    return PageResponse(
        site=page.site,
        path=page.path,
        title=page.title,
        revision=page.revision,
        source=page.source,
        rendered=page.rendered,
        links=page.links,
        images=page.images,
    )


async def _view(request, path, revision, user, db, service) -> PageResponse:
    host = _host(request)
    if revision is None:
        page = await service.get_rendered_page(db, host, path, user)
    else:
        page = await service.get_historical_rendered_page(db, host, path, revision, user)
    return _page_response(page)


# ── Read ──────────────────────────────────────────────────────────────────────

@router.get("", response_model=PageResponse)
async def get_home_page(
    request: Request,
    revision: Optional[int] = Query(None, ge=1),
    user: Optional[str]     = Query(None, max_length=64),
    db: AsyncSession        = Depends(get_db),
    service: RenderService  = Depends(get_render_service),
):
    return await _view(request, "", revision, user, db, service)


@router.get("/{path}", response_model=PageResponse)
async def get_page(
    request: Request,
    path: str               = Path(..., max_length=512, pattern=PATH_PATTERN),
    revision: Optional[int] = Query(None, ge=1),
    user: Optional[str]     = Query(None, max_length=64),
    db: AsyncSession        = Depends(get_db),
    service: RenderService  = Depends(get_render_service),
):
    return await _view(request, path, revision, user, db, service)


@router.get("/{path}/backlinks", response_model=list[str])
async def get_backlinks(
    request: Request,
    path: str        = Path(..., max_length=512, pattern=PATH_PATTERN),
    db: AsyncSession = Depends(get_db),
):
    return await page_svc.backlinks(db, site_for_host(_host(request)), path)


# ── Save ──────────────────────────────────────────────────────────────────────

@router.put("/{path}", response_model=PageResponse)
async def save_page(
    request: Request,
    data: PageSave,
    path: str              = Path(..., max_length=512, pattern=PATH_PATTERN),
    db: AsyncSession       = Depends(get_db),
    service: RenderService = Depends(get_render_service),
):
    page = await service.save_page(db, _host(request), path, data.text, data.user, data.revision, data.force)
    return _page_response(page)


# -----------------------------------------------------------------------------
