from .models import LinkOverride, MediaOverride, Page, PageCache, PageLink, PageRevision

__all__ = ["LinkOverride", "MediaOverride", "Page", "PageCache", "PageLink", "PageRevision"]
