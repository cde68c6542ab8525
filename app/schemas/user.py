from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional

class UserBase(BaseModel):
    """Base user schema with common fields."""
    full_name: str
    email: EmailStr

class UserCreate(UserBase):
    is_active: bool = True

class UserUpdate(BaseModel):
    """Schema for updating a user's profile."""
    full_name: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("full_name")
    def not_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Full name cannot be empty")
        return v
