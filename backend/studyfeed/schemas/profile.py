from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProfileFields(BaseModel):
    display_name: Optional[str] = None
    bio: Optional[str] = None
    gender: Optional[str] = None
    birth_year: Optional[str] = None
    birthday: Optional[str] = None
    prefecture: Optional[str] = None
    grade: Optional[str] = None
    high_school: Optional[str] = None
    university: Optional[str] = None
    follower_message: Optional[str] = None


class ProfileUpdate(ProfileFields):
    """Patch for the signed-in user's profile.

    Blank strings are stored as null.
    """

    model_config = ConfigDict(extra="ignore")


class ProfileRead(ProfileFields):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TargetSchoolCreate(BaseModel):
    school_name: str
    faculty: Optional[str] = None


class TargetSchoolUpdate(TargetSchoolCreate):
    pass


class TargetSchoolRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school_name: str
    faculty: Optional[str] = None


class MyProfile(BaseModel):
    profile: ProfileRead
    target_schools: list[TargetSchoolRead]
    follower_count: int
    following_count: int


class PublicProfile(BaseModel):
    id: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    follower_count: int = 0
    following_count: int = 0


class UserSearchResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
