"""
Page Prompt - Assembles the prompt sent to the generation API.

    <flavor base prompt>

    URL: <query><parameter context>

Assembly is a pure string concatenation: no randomness, no timestamps, so
the same (query, params, flavor) always yields the same prompt.
"""

from typing import Optional

from urlverse.ai.flavors import Flavor, FlavorRegistry, flavor_registry


def build_prompt_with_flavor(query: str, parameter_context: str, flavor: Flavor) -> str:
    """Concatenate a flavor's base prompt, the URL and the parameter context."""
    return f"{flavor.base_prompt}\n\nURL: {query}{parameter_context}"


def build_base_prompt(
    flavor_id: Optional[str] = None,
    registry: FlavorRegistry = flavor_registry,
) -> str:
    """Base prompt of a flavor (default flavor for unknown ids)."""
    return registry.get_by_id(flavor_id).base_prompt


def assemble_prompt(
    query: str,
    parameter_context: str,
    flavor_id: Optional[str] = None,
    registry: FlavorRegistry = flavor_registry,
) -> str:
    """
    Build the full prompt for a page.

    Args:
        query: Slash-joined path segments, e.g. "blog/article-1"
        parameter_context: Output of build_parameter_context()
        flavor_id: Requested flavor (falls back to the default)
        registry: Flavor lookup table

    Returns:
        The prompt text
    """
    flavor = registry.get_by_id(flavor_id)
    return build_prompt_with_flavor(query, parameter_context, flavor)
