"""Minimal HTML pages demonstrating the guarded session flow."""

from html import escape

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from authgate.web.deps import SessionDep

router = APIRouter(tags=["pages"], include_in_schema=False)

HOME_PAGE = """<!doctype html>
<html>
  <head><title>AuthGate</title></head>
  <body>
    <main>
      <h1>AuthGate</h1>
      <p>Sign in with <code>POST /api/auth/sign-in/email</code>
      or create an account with <code>POST /api/auth/sign-up/email</code>.</p>
      <p><a href="/test">Protected page</a></p>
    </main>
  </body>
</html>
"""


def render_page(content: str) -> str:
    return f"<!doctype html>\n<html>\n  <body>\n    <div>{content}</div>\n  </body>\n</html>\n"


@router.get("/", response_class=HTMLResponse)
async def home() -> str:
    return HOME_PAGE


@router.get("/test", response_class=HTMLResponse)
async def test_page(session: SessionDep) -> str:
    # The route guard only saw a cookie, the session accessor decides what is shown
    if session is None:
        return render_page("Not logged in")
    return render_page(f"Logged in as {escape(session.user.email)}")
