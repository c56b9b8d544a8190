from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, Field

from authgate.core.modules.session.models import Session
from authgate.core.modules.user.models import UserRecord
from authgate.web.deps import AppDep, SessionDep, SessionRequiredDep
from authgate.web.openapi import ErrorResponse, ProviderErrorResponse

router = APIRouter(tags=["auth"])


class SignInRequest(BaseModel):
    """Email sign-in request."""

    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")


class SignUpRequest(BaseModel):
    """Email sign-up request."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")


@router.post(
    "/auth/sign-in/email",
    summary="Sign in with email",
    description="Sign in with email and password. On success the provider sets the session cookie.",
    operation_id="signInEmail",
    response_model=None,
    responses={
        200: {"description": "Signed in, session cookie set"},
        400: {"model": ProviderErrorResponse, "description": "Invalid email"},
        401: {"model": ProviderErrorResponse, "description": "Invalid email or password"},
    },
)
async def sign_in_email(data: SignInRequest, app: AppDep, request: Request) -> Response:
    return await app.sign_in_with_email(data.email, data.password, request.headers)


@router.post(
    "/auth/sign-up/email",
    summary="Sign up with email",
    description="Create an account with email, password and display name, then sign it in.",
    operation_id="signUpEmail",
    response_model=None,
    responses={
        200: {"description": "Account created, session cookie set"},
        400: {"model": ProviderErrorResponse, "description": "Invalid email or password"},
        422: {"model": ProviderErrorResponse, "description": "User already exists"},
    },
)
async def sign_up_email(data: SignUpRequest, app: AppDep, request: Request) -> Response:
    return await app.sign_up_with_email(data.name, data.email, data.password, request.headers)


@router.post(
    "/auth/sign-out",
    summary="Sign out",
    description="Invalidate the current session and clear the session cookie.",
    operation_id="signOut",
    response_model=None,
    responses={
        200: {"description": "Signed out"},
        400: {"model": ProviderErrorResponse, "description": "No session to sign out of"},
    },
)
async def sign_out(app: AppDep, request: Request) -> Response:
    return await app.sign_out(request.headers)


@router.get(
    "/auth/get-session",
    summary="Get current session",
    description="Return the current session and user, or null when not signed in.",
    operation_id="getSession",
)
async def get_session(session: SessionDep) -> Session | None:
    return session


@router.get(
    "/auth/me",
    summary="Get current user",
    description="Return the signed-in user.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_current_user(session: SessionRequiredDep) -> UserRecord:
    return session.user
