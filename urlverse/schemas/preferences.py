"""
Pydantic schema of the visitor preferences cookie.
"""

from typing import Literal, Optional

from pydantic import BaseModel


class UserPreferences(BaseModel):
    """Preferences stored as JSON in the preferences cookie."""
    theme: Literal["light", "dark", "auto"] = "auto"
    default_flavor: Optional[str] = None
