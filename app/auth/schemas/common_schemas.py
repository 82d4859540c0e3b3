# app/auth/schemas/common_schemas.py
from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr, Field


def _lowercase(value: str) -> str:
    return value.lower()


# Accounts are keyed case-insensitively: the whole address is lowercased
NormalizedEmail = Annotated[EmailStr, AfterValidator(_lowercase)]


class MessageOut(BaseModel):
    message: str = Field(..., json_schema_extra={"example": "Login successful"})


class ErrorOut(BaseModel):
    error: str = Field(..., json_schema_extra={"example": "User not found"})
