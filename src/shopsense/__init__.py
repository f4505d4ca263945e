"""
Shopsense - storefront analytics.

Example:
    >>> from shopsense import StorefrontTracker, TrackingSettings
    >>> tracker = StorefrontTracker(TrackingSettings(), storefront, meta_store)
"""

from shopsense.tracking import (
    RequestContext,
    StorefrontTracker,
    TrackingHooks,
    TrackingSettings,
)

__all__ = [
    "StorefrontTracker",
    "TrackingSettings",
    "TrackingHooks",
    "RequestContext",
]

__version__ = "0.1.0"
