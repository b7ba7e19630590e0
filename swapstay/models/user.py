"""User model - students on both sides of a swap request."""

from typing import Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """Marketplace user."""
    user_id: str = Field(..., description="User ID (text)")
    full_name: str = Field(..., description="Full name")
    email: str = Field(..., description="University email address")
    university: str = Field(..., description="University the student attends")
    profile_picture: Optional[str] = Field(None, description="Avatar URL")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
