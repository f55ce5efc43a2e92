"""
Flavors Module - Presentation styles for generated pages.

The module-level `flavor_registry` is built from the built-in definitions and
the configured default flavor and allow-list.
"""

from urlverse.core.config import settings
from urlverse.ai.flavors.registry import Flavor, FlavorRegistry
from urlverse.ai.flavors.definitions import BUILTIN_FLAVORS, DEFAULT_FLAVOR_ID

flavor_registry = FlavorRegistry(
    BUILTIN_FLAVORS,
    default_id=settings.DEFAULT_FLAVOR,
    enabled_ids=settings.ENABLED_FLAVORS,
)

__all__ = [
    "Flavor",
    "FlavorRegistry",
    "BUILTIN_FLAVORS",
    "DEFAULT_FLAVOR_ID",
    "flavor_registry",
]
