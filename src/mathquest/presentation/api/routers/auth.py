"""Authentication router: sign-in, registration and credential recovery."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter

from mathquest.presentation.api.dependencies import (
    AuthService,
    DBSession,
    ResetService,
    VerificationService,
)
from mathquest.presentation.api.errors import unwrap
from mathquest.presentation.api.schemas import (
    ForgotPasswordRequest,
    JwtResponse,
    MessageResponse,
    ResetPasswordRequest,
    SignInRequest,
    SignupRequest,
)
from mathquest.presentation.api.validation import (
    validate_forgot_password,
    validate_reset_password,
    validate_sign_in,
    validate_sign_up,
    validated,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SignInBody = Annotated[SignInRequest, validated(SignInRequest, validate_sign_in)]
SignupBody = Annotated[SignupRequest, validated(SignupRequest, validate_sign_up)]
ForgotPasswordBody = Annotated[
    ForgotPasswordRequest,
    validated(ForgotPasswordRequest, validate_forgot_password),
]
ResetPasswordBody = Annotated[
    ResetPasswordRequest,
    validated(ResetPasswordRequest, validate_reset_password),
]

REGISTERED = "User registered successfully!"
REGISTERED_VERIFY = (
    "User registered successfully! Please check your email to verify your account."
)
RESET_REQUESTED = (
    "Instructions for resetting your password have been sent to your email."
)
PASSWORD_RESET = "Password has been reset successfully"


@router.post(
    "/signin",
    summary="Authenticate user",
    responses={
        200: {"description": "Sign-in successful"},
        400: {"description": "Missing username or password"},
        401: {"description": "Bad credentials or account not verified"},
    },
)
async def sign_in(
    body: SignInBody,
    auth_service: AuthService,
    session: DBSession,
) -> JwtResponse:
    """
    Authenticate with username (or email) and password.

    Returns a bearer token together with the user's identity and roles.
    """
    result = unwrap(await auth_service.sign_in(body.username, body.password))
    # Sign-in may have upgraded the stored password hash
    await session.commit()

    user = result.user
    return JwtResponse(
        token=result.token,
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        username=user.username,
        email=user.email,
        roles=result.principal.role_names,
    )


@router.post(
    "/signup",
    summary="Register a new user",
    responses={
        200: {"description": "User registered successfully"},
        400: {"description": "Invalid input, username or email taken"},
    },
)
async def sign_up(
    body: SignupBody,
    auth_service: AuthService,
    session: DBSession,
) -> MessageResponse:
    """
    Register a new account.

    ``role`` may be ``"teacher"`` or ``"admin"``; anything else, or no
    role at all, registers a student. When email verification is on, the
    account stays disabled until the emailed link is followed.
    """
    user = unwrap(
        await auth_service.sign_up(
            first_name=body.first_name,
            last_name=body.last_name,
            username=body.username,
            email=body.email,
            password=body.password,
            role=body.role,
        ),
    )
    await session.commit()

    logger.info("New user registered: %s", user.username)
    return MessageResponse(message=REGISTERED if user.enabled else REGISTERED_VERIFY)


@router.get(
    "/verify",
    summary="Verify email address",
    responses={
        200: {"description": "Account enabled"},
        400: {"description": "Missing or unknown token"},
    },
)
async def verify_email(
    verification_service: VerificationService,
    session: DBSession,
    token: Optional[str] = None,
) -> MessageResponse:
    """Enable the account an emailed verification token belongs to."""
    message = unwrap(await verification_service.verify(token))
    await session.commit()
    return MessageResponse(message=message)


@router.post(
    "/forgot-password",
    summary="Request password reset",
    responses={
        200: {"description": "If the email exists, a reset link has been sent"},
        400: {"description": "Missing or malformed email"},
    },
)
async def forgot_password(
    body: ForgotPasswordBody,
    reset_service: ResetService,
    session: DBSession,
) -> MessageResponse:
    """
    Email a reset link valid for one hour (configurable).

    The answer is the same whether or not the address belongs to an
    account.
    """
    await reset_service.request_reset(body.email)
    await session.commit()
    return MessageResponse(message=RESET_REQUESTED)


@router.post(
    "/reset-password",
    summary="Reset password with token",
    responses={
        200: {"description": "Password reset"},
        400: {"description": "Invalid, used or expired token, or bad password"},
    },
)
async def reset_password(
    body: ResetPasswordBody,
    reset_service: ResetService,
    session: DBSession,
) -> MessageResponse:
    unwrap(
        await reset_service.reset_password(
            token=body.token,
            new_password=body.new_password,
            confirm_password=body.confirm_password,
        ),
    )
    await session.commit()

    logger.info("Password reset completed")
    return MessageResponse(message=PASSWORD_RESET)
