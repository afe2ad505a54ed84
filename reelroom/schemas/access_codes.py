from datetime import datetime

from pydantic import BaseModel, Field


class AccessCodeVerifyIn(BaseModel):
    code: str = Field(min_length=1)


class AccessCodeOut(BaseModel):
    id: int
    code: str
    is_used: bool
    created_at: datetime
    used_at: datetime | None
    created_by: str | None
    used_by: str | None
