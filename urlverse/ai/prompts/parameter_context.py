"""
Parameter Context - Natural-language rendering of URL query parameters.

The block is appended to the prompt so the model tailors the page to the
parameters and creates internal links that the post-processor can decorate
with the same parameters.
"""

from typing import Mapping


PARAMETER_CONTEXT_HEADING = "Additional parameters for this page:"
PARAMETER_CONTEXT_DIRECTIVE = "Take these parameters into account when creating the page."
INTERNAL_LINKS_DIRECTIVE = (
    "IMPORTANT: Create realistic internal links (e.g. to other pages, categories, articles).\n"
    "The parameters are passed on to all internal links automatically."
)


def build_parameter_context(params: Mapping[str, str]) -> str:
    """
    Render query parameters as a prompt section.

    Args:
        params: Query parameters of the requested URL

    Returns:
        "" for no parameters, otherwise a block starting with two newlines.
        Keys are sorted, equal mappings always render identically.

    Example:
        >>> build_parameter_context({})
        ''
        >>> "- flavor: retro" in build_parameter_context({"flavor": "retro"})
        True
    """
    if not params:
        return ""

    lines = "\n".join(f"- {key}: {params[key]}" for key in sorted(params))

    return (
        f"\n\n{PARAMETER_CONTEXT_HEADING}\n"
        f"{lines}\n"
        f"{PARAMETER_CONTEXT_DIRECTIVE}\n\n"
        f"{INTERNAL_LINKS_DIRECTIVE}"
    )
