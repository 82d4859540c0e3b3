# app/auth/schemas/login_schemas.py
"""
Login schema.

No token comes back: a 200 with a message is the whole success contract.
"""

from pydantic import BaseModel, Field

from app.auth.schemas.common_schemas import NormalizedEmail


class LoginRequest(BaseModel):
    email: NormalizedEmail = Field(..., description="Registered email address")
    password: str = Field(..., min_length=1, max_length=128, description="User password")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "user@example.com",
                "password": "StrongPass123!",
            }
        }
