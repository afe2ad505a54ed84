from typing import Annotated

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
)

from reelroom.schemas.users import TeamName, Username


class LoginIn(BaseModel):
    identifier: str = Field(
        min_length=1,
        validation_alias=AliasChoices("identifier", "username"),
    )
    password: str = Field(min_length=1)


class SessionUserOut(BaseModel):
    id: int
    username: str
    email: EmailStr
    role: str
    permissions: list[str]


class LoginOut(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: SessionUserOut


class RegisterIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: Username
    email: EmailStr
    password: str = Field(min_length=1)
    team: TeamName | None = None
    access_code: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1)
    ] = Field(alias="accessCode")


class AdminCheckOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_admin: bool = Field(alias="isAdmin")


class MessageOut(BaseModel):
    success: bool = True
    message: str
