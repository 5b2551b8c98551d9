from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime
from uuid import UUID


class UserLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserCreateByAdmin(UserCreate):
    is_admin: bool = False
    is_active: bool = True


class UserStatusUpdate(BaseModel):
    is_active: bool


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)

    @model_validator(mode="after")
    def new_password_differs(self):
        if self.new_password == self.current_password:
            raise ValueError("New password must be different from current password")
        return self


class User(UserBase):
    id: UUID
    is_active: bool
    is_admin: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserStatusResponse(User):
    self_deactivated: bool = False
    message: Optional[str] = None


class AuthResponse(BaseModel):
    """Returned by login and registration"""
    message: str
    user: User
    access_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str
