"""Page-level guards: redirect to login, to unauthorized, or away from auth screens."""

import html
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from reelroom.api.auth import clear_session_cookie
from reelroom.api.deps import (
    SESSION_COOKIE,
    get_token_service,
    is_admin,
    resolve_session_user,
)
from reelroom.core.database import get_db
from reelroom.core.errors import PageRedirect
from reelroom.core.security import TokenService
from reelroom.models.users import User

router = APIRouter(tags=["pages"], include_in_schema=False)

LOGIN_PAGE = "/login"
LANDING_PAGE = "/dashboard"
UNAUTHORIZED_PAGE = "/unauthorized"


def _page(title: str, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    title = html.escape(title)
    return HTMLResponse(
        f"<!doctype html><html><head><title>{title}</title></head>"
        f"<body><h1>{title}</h1></body></html>",
        status_code=status_code,
    )


def _login_redirect(request: Request) -> PageRedirect:
    query = urlencode({"from": request.url.path})
    # A cookie that no longer resolves to a user is stale.
    return PageRedirect(
        f"{LOGIN_PAGE}?{query}", clear_session=SESSION_COOKIE in request.cookies
    )


def optional_page_user(
    request: Request,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> User | None:
    return resolve_session_user(request, db, tokens)


def require_page_user(
    request: Request,
    user: User | None = Depends(optional_page_user),
) -> User:
    if user is None:
        raise _login_redirect(request)
    return user


def require_page_admin(user: User = Depends(require_page_user)) -> User:
    if not is_admin(user):
        raise PageRedirect(UNAUTHORIZED_PAGE)
    return user


def redirect_if_authenticated(user: User | None = Depends(optional_page_user)) -> None:
    if user is not None:
        raise PageRedirect(LANDING_PAGE)


@router.get("/login", dependencies=[Depends(redirect_if_authenticated)])
def login_page():
    return _page("Sign in")


@router.get("/register", dependencies=[Depends(redirect_if_authenticated)])
def register_page():
    return _page("Register")


@router.get("/dashboard")
def dashboard_page(user: User = Depends(require_page_user)):
    return _page(f"Welcome, {user.username}")


@router.get("/admin")
def admin_page(_: User = Depends(require_page_admin)):
    return _page("Admin console")


@router.get("/unauthorized")
def unauthorized_page():
    return _page("Unauthorized", status.HTTP_403_FORBIDDEN)


@router.get("/logout")
def logout_page():
    resp = RedirectResponse(url=LOGIN_PAGE, status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(resp)
    return resp
