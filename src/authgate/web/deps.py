from typing import Annotated, cast

from fastapi import Depends, Request

from authgate.app import App
from authgate.core.modules.session.models import Session
from authgate.errors import AuthenticationError


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_session(request: Request, app: Annotated[App, Depends(get_app)]) -> Session | None:
    """Session accessor: authoritative session for the real inbound request headers."""
    return await app.get_session(request.headers)


async def require_session(session: Annotated[Session | None, Depends(get_session)]) -> Session:
    if session is None:
        raise AuthenticationError("Not logged in")
    return session


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionDep = Annotated[Session | None, Depends(get_session)]
SessionRequiredDep = Annotated[Session, Depends(require_session)]
