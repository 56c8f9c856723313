"""
Alkitu Site - Profile Schemas
Partial profile updates, username changes and photo metadata
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from alkitu.schemas.projects import Url

PHONE_PATTERN = r'^[\+]?[(]?[0-9]{1,4}[)]?[-\s\.]?[(]?[0-9]{1,4}[)]?[-\s\.]?[0-9]{1,9}$'
USERNAME_PATTERN = r'^[a-z0-9_-]+$'


class ProfileUrl(BaseModel):
    urlName: str = Field(min_length=1, max_length=50)
    url: Url = Field(max_length=500)
    display_order: int = Field(ge=0)
    is_public: bool = False


class ProfileRole(BaseModel):
    role: str = Field(min_length=1, max_length=100)
    display_order: int = Field(ge=0)
    is_public: bool = False


class ProfilePhoneNumber(BaseModel):
    type: Literal['work', 'personal']
    number: str = Field(min_length=1, max_length=20, pattern=PHONE_PATTERN)
    is_public: bool = False


class ProfileEmail(BaseModel):
    type: Literal['work', 'personal']
    email: EmailStr
    is_public: bool = False


class ProfileSkill(BaseModel):
    skill: str = Field(min_length=1, max_length=100)
    display_order: int = Field(ge=0)
    is_public: bool = True


class ProfileLanguage(BaseModel):
    language: str = Field(min_length=1, max_length=100)
    proficiency: Literal['native', 'fluent', 'intermediate', 'basic']
    display_order: int = Field(ge=0)
    is_public: bool = True


class ProfileAddress(BaseModel):
    type: Literal['office', 'home']
    address: str = Field(min_length=1, max_length=300)
    is_public: bool = False


class UpdateProfile(BaseModel):
    """Every field optional; apply with model_dump(exclude_unset=True)"""
    model_config = ConfigDict(str_strip_whitespace=True)

    photo_url: Optional[Url] = None
    banner_url: Optional[Url] = None

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    first_name_is_public: Optional[bool] = None
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name_is_public: Optional[bool] = None
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    pronouns: Optional[str] = Field(default=None, min_length=1, max_length=50)
    pronouns_is_public: Optional[bool] = None
    date_of_birth: Optional[str] = Field(default=None, pattern=r'^\d{4}-\d{2}-\d{2}$')
    date_of_birth_is_public: Optional[bool] = None

    bio: Optional[str] = None
    bio_is_public: Optional[bool] = None

    job_title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    job_title_is_public: Optional[bool] = None
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    department_is_public: Optional[bool] = None

    location: Optional[str] = Field(default=None, min_length=1, max_length=100)
    location_is_public: Optional[bool] = None
    remote_work: Optional[bool] = None
    timezone: Optional[str] = Field(default=None, min_length=1)

    urls: Optional[List[ProfileUrl]] = Field(default=None, max_length=10)
    roles: Optional[List[ProfileRole]] = Field(default=None, max_length=5)
    phone_numbers: Optional[List[ProfilePhoneNumber]] = Field(default=None, max_length=3)
    emails: Optional[List[ProfileEmail]] = Field(default=None, max_length=3)
    hard_skills: Optional[List[ProfileSkill]] = None
    soft_skills: Optional[List[ProfileSkill]] = None
    languages: Optional[List[ProfileLanguage]] = Field(default=None, max_length=10)
    addresses: Optional[List[ProfileAddress]] = Field(default=None, max_length=5)

    language_preference: Optional[str] = Field(default=None, min_length=2, max_length=2)
    theme_preference: Optional[Literal['light', 'dark', 'system']] = None
    profile_color: Optional[str] = Field(default=None, pattern=r'^#[0-9A-Fa-f]{6}$')
    profile_visibility: Optional[Literal['public', 'private', 'team_only']] = None
    show_activity_status: Optional[bool] = None


class UpdateUsername(BaseModel):
    username: str = Field(min_length=3, max_length=30, pattern=USERNAME_PATTERN)


class PhotoDelete(BaseModel):
    url: Url
