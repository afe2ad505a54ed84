from collections.abc import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from reelroom.core.database import get_db
from reelroom.core.errors import AuthenticationError, AuthorizationError
from reelroom.core.security import SessionClaims, TokenService
from reelroom.models.users import User
from reelroom.services import auth_service

SESSION_COOKIE = "auth-token"
ADMIN_ROLE = "admin"


def get_token_service(request: Request) -> TokenService:
    tokens = getattr(request.app.state, "token_service", None)
    if tokens is None:
        raise RuntimeError("Token service is not configured on application state")
    return tokens


def read_session_claims(request: Request, tokens: TokenService) -> SessionClaims | None:
    raw_token = request.cookies.get(SESSION_COOKIE)
    if not raw_token:
        return None
    return tokens.verify(raw_token)


def resolve_session_user(
    request: Request, db: Session, tokens: TokenService
) -> User | None:
    """Load the cookie's user from the store; the token's role claim is ignored."""
    claims = read_session_claims(request, tokens)
    if claims is None:
        return None
    return auth_service.get_user_by_id(db, claims.user_id)


def get_session_claims(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> SessionClaims:
    if not request.cookies.get(SESSION_COOKIE):
        raise AuthenticationError()
    claims = read_session_claims(request, tokens)
    if claims is None:
        raise AuthenticationError("Invalid or expired session")
    return claims


def get_current_user(
    claims: SessionClaims = Depends(get_session_claims),
    db: Session = Depends(get_db),
) -> User:
    user = auth_service.get_user_by_id(db, claims.user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


def is_admin(user: User) -> bool:
    return user.role.name == ADMIN_ROLE


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not is_admin(user):
        raise AuthorizationError("The user is not an admin")
    return user


def require_permission(permission: str) -> Callable[..., User]:
    def _dependency(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        if permission not in auth_service.load_permissions(db, user.role_id):
            raise AuthorizationError(f"Missing permission: {permission}")
        return user

    return _dependency


def ensure_self(user: User, username: str) -> None:
    if user.username != username:
        raise AuthorizationError("You can only update your own profile")
