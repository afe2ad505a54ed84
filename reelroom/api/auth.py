from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from reelroom.api.deps import (
    SESSION_COOKIE,
    get_current_user,
    get_token_service,
    is_admin,
)
from reelroom.core.config import Settings, get_settings
from reelroom.core.database import get_db
from reelroom.core.errors import AuthenticationError
from reelroom.core.security import TokenService
from reelroom.models.users import User
from reelroom.schemas.auth import (
    AdminCheckOut,
    LoginIn,
    LoginOut,
    MessageOut,
    RegisterIn,
    SessionUserOut,
)
from reelroom.services import access_code_service, auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


def set_session_cookie(
    resp: Response, token: str, tokens: TokenService, settings: Settings
) -> None:
    resp.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=int(tokens.ttl.total_seconds()),
        path="/",
    )


def clear_session_cookie(resp: Response) -> None:
    resp.delete_cookie(key=SESSION_COOKIE, path="/")


@router.post("/login", response_model=LoginOut)
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
):
    result = auth_service.authenticate(db, tokens, payload.identifier, payload.password)
    if result is None:
        raise AuthenticationError("Invalid username or password")

    body = LoginOut(
        user=SessionUserOut(
            id=result.user.id,
            username=result.user.username,
            email=result.user.email,
            role=result.user.role.name,
            permissions=result.permissions,
        )
    )
    resp = JSONResponse(body.model_dump(mode="json"))
    resp.headers["Cache-Control"] = "no-store"
    set_session_cookie(resp, result.token, tokens, settings)
    return resp


@router.post("/logout", response_model=MessageOut)
def logout():
    resp = JSONResponse(
        MessageOut(message="Logged out successfully").model_dump(mode="json")
    )
    resp.headers["Cache-Control"] = "no-store"
    clear_session_cookie(resp)
    return resp


@router.post("/register", response_model=MessageOut)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    access_code_service.register_with_code(db, payload)
    return MessageOut(message="User registered successfully")


@router.get("/me", response_model=SessionUserOut)
def me(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return SessionUserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role.name,
        permissions=auth_service.load_permissions(db, user.role_id),
    )


@router.get("/check-admin", response_model=AdminCheckOut)
def check_admin(user: User = Depends(get_current_user)):
    return AdminCheckOut(is_admin=is_admin(user))
