#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Override service
================
Storage for link and media override rows, and :class:`OverrideTable`, the
in-memory snapshot the renderer consults while walking a page.

A row with an empty ``source_page`` applies to every page of its site;
otherwise only to links on that page.  Rows come back in creation order so
that, for the same source target, the newest row wins.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Type, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wikirender.models import LinkOverride, MediaOverride
from wikirender.render import Override
from wikirender.schemas import OverrideCreate

log = logging.getLogger(__name__)

OverrideModel = Union[Type[LinkOverride], Type[MediaOverride]]


# -----------------------------------------------------------------------------

@dataclass
class OverrideTable:
    """Overrides of one site grouped by the page they apply to."""
    by_page: dict[str, list[Override]] = field(default_factory=dict)

    def get_overrides(self, site: str, source_path: str) -> Sequence[Override]:
        site_wide = self.by_page.get("", [])
        if not source_path:
            return site_wide
        return site_wide + self.by_page.get(source_path, [])


def _to_override(row) -> Override:
    return Override(row.source_namespace, row.source_target, row.target_namespace, row.target_target)


# -----------------------------------------------------------------------------

async def list_overrides(
    db: AsyncSession,
    model: OverrideModel,
    site: str,
    source_page: Optional[str] = None,
) -> list:
    stmt = select(model).where(model.site == site)
    if source_page is not None:
        stmt = stmt.where(model.source_page == source_page)
    result = await db.execute(stmt.order_by(model.created_at, model.id))
    return list(result.scalars().all())


async def add_override(db: AsyncSession, model: OverrideModel, site: str, data: OverrideCreate):
    row = model(site=site, **data.model_dump())
    db.add(row)
    await db.flush()
    log.info("Added %s on %s: %s:%s -> %s:%s", model.__tablename__, site,
             data.source_namespace, data.source_target, data.target_namespace, data.target_target)
    return row


async def load_override_table(db: AsyncSession, model: OverrideModel, site: str) -> OverrideTable:
    table = OverrideTable()
    for row in await list_overrides(db, model, site):
        table.by_page.setdefault(row.source_page, []).append(_to_override(row))
    return table


# -----------------------------------------------------------------------------
