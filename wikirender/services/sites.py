#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Host → site mapping.

Several host names may serve the same logical site; unknown hosts fall back
to ``Settings.default_site``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from wikirender.core.config import Settings, get_settings


# -----------------------------------------------------------------------------

def site_for_host(host: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    return settings.sites.get((host or "").lower(), settings.default_site)


# -----------------------------------------------------------------------------
