"""
User schemas - what user data is exposed in API responses (never the password).
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr


class UserOut(BaseModel):
    """
    Schema for user data in API responses.

    Used by POST /auth/register and GET /users/me.

    Example response:
    {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "family_id": "0b5d6f8e-3c1a-4c55-9a1e-6c2f5d3b8a71",
        "email": "sam@example.com",
        "display_name": "Sam",
        "is_active": true,
        "created_at": "2026-01-02T10:30:00Z"
    }
    """
    id: str
    family_id: str
    email: EmailStr
    display_name: str | None
    is_active: bool
    created_at: datetime

    class Config:
        # Lets routes return the User ORM object directly
        from_attributes = True


class UserUpdate(BaseModel):
    """Schema for PATCH /users/me."""
    display_name: str | None = None
