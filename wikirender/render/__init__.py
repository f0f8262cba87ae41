"""Wiki markup rendering engine."""

from .collaborators import CacheEntry, Override
from .context import HeadingRecord, OverrideInstance, RenderContext, RenderResult, RenderStateKey
from .engine import WikiRenderer, error_fragment
from .exceptions import MalformedReferenceError, RenderError, UnrenderableNodeError, WikiParseError
from .parser import WikiParser
from .pipeline import PipelineResult, RenderPipeline

__all__ = [
    "CacheEntry",
    "HeadingRecord",
    "MalformedReferenceError",
    "Override",
    "OverrideInstance",
    "PipelineResult",
    "RenderContext",
    "RenderError",
    "RenderPipeline",
    "RenderResult",
    "RenderStateKey",
    "UnrenderableNodeError",
    "WikiParseError",
    "WikiParser",
    "WikiRenderer",
    "error_fragment",
]
