from datetime import datetime

from pydantic import BaseModel


class UserRead(BaseModel):
    id: int
    full_name: str
    email: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True


class RoleUpdate(BaseModel):
    role: str  # employee | supervisor | admin
