"""
Routes implementing the password-reset flow:

POST /forgot-password
POST /reset-password
"""
from fastapi import APIRouter, Depends, status

from app.auth.schemas.common_schemas import ErrorOut, MessageOut
from app.auth.schemas.password_reset_schemas import (
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from app.auth.services.auth_service import AuthService
from app.dependencies.services import get_auth_service

router = APIRouter(tags=["auth"])


@router.post(
    "/forgot-password",
    response_model=MessageOut,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
def forgot_password(
    payload: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Store a fresh OTP for the account and email it. The OTP itself is never
    part of the response.
    """
    service.request_password_reset(payload.email)
    return MessageOut(message="OTP sent to your email")


@router.post(
    "/reset-password",
    response_model=MessageOut,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorOut},
        404: {"model": ErrorOut},
        500: {"model": ErrorOut},
    },
)
def reset_password(
    payload: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Verify the OTP and replace the user's password.
    """
    service.reset_password(payload.email, payload.otp, payload.newPassword)
    return MessageOut(message="Password reset successful")
