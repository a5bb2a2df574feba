"""
Data package for the venue proximity core.
Provides venue catalog loading.
"""

from venue_proximity.data.loaders import VenueCatalogService, load_catalog

__all__ = ["VenueCatalogService", "load_catalog"]
