"""
Pydantic schemas for password-reset endpoints.

POST /forgot-password
    { "email": "string" }
POST /reset-password
    { "email": "string", "otp": "string", "newPassword": "string" }
"""
from pydantic import BaseModel, Field

from app.auth.schemas.common_schemas import NormalizedEmail


class ForgotPasswordRequest(BaseModel):
    email: NormalizedEmail = Field(..., description="Registered email address")


class ResetPasswordRequest(BaseModel):
    email: NormalizedEmail = Field(..., description="Email the OTP was sent to")
    otp: str = Field(..., min_length=1, description="6-digit code from the reset email")
    newPassword: str = Field(..., min_length=1, description="New password for the account")
