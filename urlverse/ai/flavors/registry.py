"""
Flavor Registry - Immutable catalogue of prompt flavors.

A flavor is a named instruction template that controls the visual and tonal
style of generated pages. Flavor ids arrive from untrusted places (URL query,
cookies), so lookups never fail: unknown ids resolve to the default flavor.

Usage:
======
    from urlverse.ai.flavors import flavor_registry

    flavor = flavor_registry.get_by_id("retro")
    if flavor_registry.is_enabled("retro"):
        ...

    # Populate a selection UI
    options = flavor_registry.get_options()
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Tuple


logger = logging.getLogger("urlverse.ai.flavors")


# ---------------------------------------------------------------------------
# FLAVOR DEFINITION
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Flavor:
    """
    Definition of a prompt flavor.

    Attributes:
        id: Stable unique key (used in URLs and cookies)
        name: Human-readable name
        description: One-line description for selection UIs
        base_prompt: Full instruction template sent to the model
        examples: Example URL -> page interpretations
    """
    id: str
    name: str
    description: str
    base_prompt: str
    examples: Tuple[str, ...] = field(default_factory=tuple)

    def to_option(self) -> Dict[str, str]:
        """Lightweight projection without the prompt text."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }


# ---------------------------------------------------------------------------
# FLAVOR REGISTRY
# ---------------------------------------------------------------------------

class FlavorRegistry:
    """
    Read-only lookup table of flavors.

    The registry is built once from a static table and exposes no mutation
    API, so it can be shared between concurrent requests without locking.
    The allow-list of enabled flavors is kept separately from the catalogue,
    letting an operator disable a flavor without deleting its definition.
    """

    def __init__(
        self,
        flavors: Iterable[Flavor],
        default_id: str,
        enabled_ids: Optional[Iterable[str]] = None,
    ):
        """
        Build the registry.

        Args:
            flavors: Flavor definitions in registration order
            default_id: Id used for unknown or missing flavor ids
            enabled_ids: Allow-list of selectable ids (all flavors if None)

        Raises:
            ValueError: On duplicate ids or an unregistered default id
        """
        ordered: List[Flavor] = []
        by_id: Dict[str, Flavor] = {}
        for flavor in flavors:
            if flavor.id in by_id:
                raise ValueError(f"Duplicate flavor id: {flavor.id}")
            by_id[flavor.id] = flavor
            ordered.append(flavor)

        if default_id not in by_id:
            raise ValueError(f"Default flavor '{default_id}' is not registered")

        if enabled_ids is None:
            enabled = frozenset(by_id)
        else:
            enabled = frozenset(enabled_ids)
            unknown = enabled - set(by_id)
            if unknown:
                logger.warning(f"Ignoring unknown enabled flavors: {sorted(unknown)}")
            enabled = enabled & frozenset(by_id)

        self._flavors = MappingProxyType(by_id)
        self._ordered: Tuple[Flavor, ...] = tuple(ordered)
        self._default_id = default_id
        self._enabled = enabled

        logger.info(
            f"Flavor registry initialized with {len(self._ordered)} flavors "
            f"({len(self._enabled)} enabled, default={default_id})"
        )

    @property
    def default_id(self) -> str:
        return self._default_id

    @property
    def default(self) -> Flavor:
        return self._flavors[self._default_id]

    def get_by_id(self, flavor_id: Optional[str]) -> Flavor:
        """
        Look up a flavor, falling back to the default.

        Args:
            flavor_id: Requested id (may be None, empty or unknown)

        Returns:
            The registered flavor, or the default flavor
        """
        if flavor_id and flavor_id in self._flavors:
            return self._flavors[flavor_id]
        return self.default

    def get_all(self) -> Tuple[Flavor, ...]:
        """All flavors in registration order."""
        return self._ordered

    def is_enabled(self, flavor_id: Optional[str]) -> bool:
        """Check the allow-list."""
        return flavor_id in self._enabled

    def get_enabled(self) -> List[Flavor]:
        """Enabled flavors in registration order."""
        return [flavor for flavor in self._ordered if flavor.id in self._enabled]

    def get_options(self) -> List[Dict[str, str]]:
        """id/name/description of every enabled flavor."""
        return [flavor.to_option() for flavor in self.get_enabled()]

    def __contains__(self, flavor_id: object) -> bool:
        return flavor_id in self._flavors

    def __len__(self) -> int:
        return len(self._ordered)

    def __repr__(self) -> str:
        return f"FlavorRegistry(flavors={[f.id for f in self._ordered]}, default={self._default_id})"
