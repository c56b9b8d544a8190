from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from authgate.config import Config
from authgate.core.modules.auth.cookies import session_cookie_name

PUBLIC_ENDPOINTS = {
    ("POST", "/api/auth/sign-in/email"),
    ("POST", "/api/auth/sign-up/email"),
    ("GET", "/api/auth/get-session"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI, config: Config) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="AuthGate API",
            version="0.1.0",
            summary="Email and password authentication with session-gated routes",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": session_cookie_name(config),
                "description": "Session token set by sign-in or sign-up",
            },
        }

        # Apply security globally (will be overridden for public endpoints)
        openapi_schema["security"] = [{"SessionCookie": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Not logged in", "type": "authentication_error"},
            ]
        }
    }


class ProviderErrorResponse(BaseModel):
    """Error response produced by the auth provider."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"code": "INVALID_EMAIL_OR_PASSWORD", "message": "Invalid email or password"},
                {"code": "USER_ALREADY_EXISTS", "message": "User already exists. Use another email."},
            ]
        }
    }
