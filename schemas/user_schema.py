from pydantic import BaseModel, EmailStr
from typing import Optional
from uuid import UUID
from datetime import datetime, date
from models.enums import UserRole, UserStatus, Gender

# --- Profile ---
class ProfileBase(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None

class ProfileResponse(ProfileBase):
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    referral_source: Optional[str] = None

    class Config:
        from_attributes = True

# --- Input ---
class UserCreate(BaseModel):
    username: str
    email: EmailStr
    password: str
    retype_password: str
    full_name: str
    phone: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    referral_source: Optional[str] = None

class UserProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None

# --- Output ---
class UserResponse(BaseModel):
    id: UUID
    username: str
    email: EmailStr
    role: UserRole
    status: UserStatus
    created_at: datetime
    assigned_teacher_id: Optional[UUID] = None
    profile: Optional[ProfileResponse] = None

    class Config:
        from_attributes = True

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole

class UserBrief(BaseModel):
    id: UUID
    username: str
    full_name: str
    email: str

class LinkedTeacher(UserBrief):
    notes: Optional[str] = None
    assigned_at: Optional[datetime] = None
