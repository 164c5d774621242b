from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from app.constants.roles import RoleName


class UserCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=100, description="Display name.")
    password: str = Field(..., min_length=6, max_length=128, description="Password must be between 6 and 128 characters.")
    email: EmailStr = Field(..., description="A valid email address.")


class AdminUserCreate(UserCreate):
    roles: Optional[List[RoleName]] = Field(None, description="Roles of the new account.")
    editable_collections: Optional[List[str]] = Field(None, description="Collections the account may edit.")
    visible_collections: Optional[List[str]] = Field(None, description="Collections the account may view.")


class UserResponse(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    roles: List[str]
    editable_collections: List[str]
    visible_collections: List[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100, description="Display name.")
    email: Optional[EmailStr] = Field(None, description="A valid email address.")
    password: Optional[str] = Field(None, min_length=6, max_length=128, description="Password must be between 6 and 128 characters.")


class UserAccessUpdate(BaseModel):
    roles: Optional[List[RoleName]] = None
    editable_collections: Optional[List[str]] = None
    visible_collections: Optional[List[str]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "roles": ["editor"],
                "editable_collections": ["posts", "media"],
                "visible_collections": ["pages"],
            }
        }
