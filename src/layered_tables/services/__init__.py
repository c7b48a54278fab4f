"""
Services module for layered temporary tables.

This module provides the overlay service, which builds registered overlays
and reads rows and provenance summaries from them.
"""

from .overlay_service import OverlayService, OverlaySummary

__all__ = [
    'OverlayService',
    'OverlaySummary'
]
