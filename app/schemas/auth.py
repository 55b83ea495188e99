"""
Auth schemas - request/response bodies for registration and login.
"""

from pydantic import BaseModel, EmailStr, Field


class UserRegister(BaseModel):
    """
    Schema for POST /auth/register.

    Registering creates the family as well as the first login for it.

    Example request body:
    {
        "email": "sam@example.com",
        "password": "correct-horse",
        "display_name": "Sam",
        "family_name": "The Parkers"
    }
    """
    email: EmailStr

    # password: Plaintext from the client, hashed before storing
    password: str = Field(..., min_length=6)

    display_name: str | None = None

    # family_name: Defaults to "<display_name>'s family" when omitted
    family_name: str | None = Field(None, max_length=100)


class UserLogin(BaseModel):
    """
    Schema for POST /auth/login.

    Example request body:
    {
        "email": "sam@example.com",
        "password": "correct-horse"
    }
    """
    email: EmailStr
    password: str


class Token(BaseModel):
    """
    Schema for POST /auth/login response.

    Clients send it back as: Authorization: Bearer <access_token>
    """
    access_token: str
    token_type: str = "bearer"
