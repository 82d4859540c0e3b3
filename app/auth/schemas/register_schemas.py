# app/auth/schemas/register_schemas.py
from pydantic import BaseModel, Field

from app.auth.schemas.common_schemas import NormalizedEmail


class RegisterRequest(BaseModel):
    """
    Incoming payload for POST /register

    Password length limits are enforced by the service from settings.
    """
    email: NormalizedEmail
    password: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "user@example.com",
                "password": "StrongPass123!",
            }
        }
