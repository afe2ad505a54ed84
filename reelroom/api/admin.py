from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from reelroom.api.deps import require_admin, require_permission
from reelroom.core.database import get_db
from reelroom.models.users import User
from reelroom.schemas.access_codes import AccessCodeOut
from reelroom.schemas.auth import MessageOut
from reelroom.schemas.users import AdminUserCreate, AdminUserCreated, AdminUserOut
from reelroom.services import access_code_service, user_service

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/codes", response_model=list[AccessCodeOut])
def list_access_codes(
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("manage_codes")),
):
    return [access_code_service.to_out(c) for c in access_code_service.list_codes(db)]


@router.post(
    "/codes",
    response_model=AccessCodeOut,
    status_code=status.HTTP_201_CREATED,
)
def generate_access_code(
    db: Session = Depends(get_db),
    admin: User = Depends(require_permission("manage_codes")),
):
    code = access_code_service.generate_code(db, admin)
    return access_code_service.to_out(code)


@router.delete("/codes/{code_id}", response_model=MessageOut)
def delete_access_code(
    code_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("manage_codes")),
):
    access_code_service.delete_code(db, code_id)
    return MessageOut(message="Access code deleted successfully")


@router.get("/users", response_model=list[AdminUserOut])
def list_users(
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("manage_users")),
):
    return [user_service.to_admin_out(u) for u in user_service.list_users(db)]


@router.post(
    "/users",
    response_model=AdminUserCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    payload: AdminUserCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("manage_users")),
):
    user = user_service.create_user_as_admin(db, payload)
    return AdminUserCreated(user_id=user.id)


@router.delete("/users/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_permission("manage_users")),
):
    user_service.delete_user(db, admin, user_id)
    return MessageOut(message="User and all associated data deleted successfully")
