"""
Pydantic schemas for the page generation JSON API.

These schemas define the contract of urlverse/routers/api.py.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from urlverse.ai.providers.base import GenerationErrorKind


# ============== FLAVORS ==============

class FlavorOption(BaseModel):
    """Selectable flavor (prompt text is never exposed)."""
    id: str
    name: str
    description: str


class FlavorListResponse(BaseModel):
    """Enabled flavors in display order."""
    default: str
    flavors: List[FlavorOption]


# ============== GENERATION ==============

class GenerateRequest(BaseModel):
    """Request to generate a page for a URL path."""
    path: str = Field(..., max_length=2048, description="URL path, e.g. /blog/article-1")
    params: Dict[str, str] = Field(default_factory=dict, description="Query parameters of the URL")
    flavor: Optional[str] = Field(None, max_length=64, description="Flavor id (default if omitted or unknown)")

    class Config:
        json_schema_extra = {
            "example": {
                "path": "/blog/article-1",
                "params": {"lang": "en"},
                "flavor": "retro",
            }
        }


class GenerateResponse(BaseModel):
    """Generated HTML or a classified error."""
    content: str = ""
    error: Optional[str] = None
    error_kind: Optional[GenerationErrorKind] = None
    credential_rejected: bool = False
    flavor: str


# ============== SETTINGS ==============

class ApiKeyUpdate(BaseModel):
    """Store a Gemini API key in the visitor's cookie."""
    api_key: str = Field(..., min_length=1, max_length=200)


class FlavorUpdate(BaseModel):
    """Remember a flavor in the visitor's cookie."""
    flavor: str = Field(..., min_length=1, max_length=64)


class SettingsResponse(BaseModel):
    """Acknowledgement of a settings change."""
    ok: bool = True
    message: str
