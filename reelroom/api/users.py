from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from reelroom.api.deps import ensure_self, get_current_user
from reelroom.core.database import get_db
from reelroom.models.users import User
from reelroom.schemas.access_codes import AccessCodeVerifyIn
from reelroom.schemas.auth import MessageOut
from reelroom.schemas.users import ProfileUpdate, UserProfileOut
from reelroom.services import access_code_service, user_service

router = APIRouter(prefix="/api/users", tags=["users"])
codes_router = APIRouter(prefix="/api/access-codes", tags=["access-codes"])


@codes_router.post("/verify", response_model=MessageOut)
def verify_access_code(payload: AccessCodeVerifyIn, db: Session = Depends(get_db)):
    access_code_service.verify_code(db, payload.code)
    return MessageOut(message="Access code is valid")


@router.get("/{username}", response_model=UserProfileOut)
def get_profile(
    username: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return user_service.to_profile_out(user_service.get_by_username(db, username))


@router.put("/{username}", response_model=MessageOut)
def update_profile(
    username: str,
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_self(current_user, username)
    user_service.update_team(db, current_user, payload.team)
    return MessageOut(message="Team updated successfully")
