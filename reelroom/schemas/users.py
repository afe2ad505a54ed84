from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

# Surrounding whitespace is stripped before the length checks run.
Username = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)
]
TeamName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)
]


class AdminUserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: Username
    email: EmailStr
    password: str = Field(min_length=1)
    role: str = Field(default="user", min_length=1)
    team: TeamName | None = None
    use_demo_salt: bool = Field(default=False, alias="useDemoSalt")
    custom_salt: str | None = Field(default=None, alias="customSalt")


class AdminUserCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "User created successfully"
    user_id: int = Field(alias="userId")


class AdminUserOut(BaseModel):
    id: int
    username: str
    email: EmailStr
    role: str
    team: str | None
    created_at: datetime
    last_login: datetime | None


class UserProfileOut(BaseModel):
    id: int
    username: str
    role: str
    team: str | None
    created_at: datetime


class ProfileUpdate(BaseModel):
    team: TeamName
