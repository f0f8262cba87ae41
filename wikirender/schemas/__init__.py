from wikirender.schemas.schemas import (
    PageSave, PageResponse,
    PreviewRequest, PreviewResponse,
    OverrideCreate, OverrideResponse,
)

__all__ = [
    "PageSave", "PageResponse",
    "PreviewRequest", "PreviewResponse",
    "OverrideCreate", "OverrideResponse",
]
