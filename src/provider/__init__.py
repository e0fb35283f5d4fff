"""Unified extraction entry points."""

from provider.unified import UnifiedProvider, content_hash

__all__ = ["UnifiedProvider", "content_hash"]
