from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr

Role = Literal["user", "vendor", "admin"]


class UserCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    photo: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class UserOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    photo: Optional[str] = None
    address: Optional[str] = None
    role: str
    is_fraud: bool
    fraud_marked_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    photo: Optional[str] = None
    address: Optional[str] = None


class PhotoUpdate(BaseModel):
    photo: str


class RoleUpdate(BaseModel):
    role: Role
