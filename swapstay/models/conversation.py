"""Conversation model - the message thread between two users."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class Conversation(BaseModel):
    """Two-person message thread."""
    conversation_id: str = Field(..., description="Conversation ID (text)")
    participants: list[str] = Field(..., description="Exactly two distinct user IDs")
    listing_id: Optional[str] = Field(None, description="Listing the thread started from")
    last_message: Optional[str] = None
    last_message_at: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("participants")
    @classmethod
    def _two_distinct_participants(cls, value: list[str]) -> list[str]:
        if len(value) != 2:
            raise ValueError("Conversation must have exactly 2 participants")
        if value[0] == value[1]:
            raise ValueError("Cannot create conversation with same user")
        return value

    def has_participants(self, user_a: str, user_b: str) -> bool:
        return {user_a, user_b} == set(self.participants)
