#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoint — live preview for the editor.

POST /api/v1/render  {"page": "...", "text": "...", "user": "..."}
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wikirender.core.database import get_db
from wikirender.schemas import PreviewRequest, PreviewResponse
from wikirender.services.render_service import RenderService, get_render_service


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/render", tags=["render"])


# -----------------------------------------------------------------------------

@router.post("", response_model=PreviewResponse)
async def render_preview(
    request: Request,
    data: PreviewRequest,
    db: AsyncSession       = Depends(get_db),
    service: RenderService = Depends(get_render_service),
):
    """Render unsaved markup as it would appear on *page*; nothing is stored."""
    page = await service.preview_page(db, request.url.hostname or "", data.page, data.text, data.user)
    return PreviewResponse(html=page.rendered, title=page.title, links=page.links, images=page.images)


# -----------------------------------------------------------------------------
