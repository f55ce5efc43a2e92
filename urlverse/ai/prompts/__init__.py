"""
Prompts Module - Prompt construction for page generation.

Keeping prompt assembly in one place makes it:
- Deterministic and testable
- Independent from the transport to the model
"""

from urlverse.ai.prompts.parameter_context import build_parameter_context
from urlverse.ai.prompts.page_prompt import (
    assemble_prompt,
    build_base_prompt,
    build_prompt_with_flavor,
)

__all__ = [
    "build_parameter_context",
    "assemble_prompt",
    "build_base_prompt",
    "build_prompt_with_flavor",
]
