"""
Database Schemas for the Portfolio CMS

Each Pydantic model = one MongoDB collection (lowercased class name).
Request-only models live next to the collection they feed.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
GITHUB_URL_RE = re.compile(r"^https?://(www\.)?github\.com/.+")
HTTP_URL_RE = re.compile(r"^https?://")


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email")
    return value


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Mongo hands back naive UTC datetimes; keep stored values comparable
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ====
# Auth
# ====
class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str
    password: str

    normalize_email = field_validator("email")(_check_email)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one number")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=1)

    normalize_email = field_validator("email")(_check_email)


class AuthResponse(BaseModel):
    token: str
    user: Dict[str, Any]


class UserRoleUpdate(BaseModel):
    is_admin: bool


# =============
# Admin profile
# =============
class SocialLinks(BaseModel):
    github: str = ""
    linkedin: str = ""
    twitter: str = ""
    facebook: str = ""
    instagram: str = ""
    youtube: str = ""
    behance: str = ""
    gmail: str = ""
    whatsapp: str = ""


class ValueItem(BaseModel):
    icon: str = ""
    title: str = ""
    description: str = ""


class User(BaseModel):
    name: str
    email: str
    password_hash: str
    is_admin: bool = False
    profile_image: Optional[str] = None
    title: str = ""
    location: str = ""
    bio: str = ""
    interests: List[str] = []
    values: List[ValueItem] = []
    years_of_experience: int = Field(default=0, ge=0)
    happy_clients: int = Field(default=0, ge=0)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    theme: Dict[str, Any] = {}
    cv_url: str = ""
    last_login: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    title: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    interests: Optional[List[str]] = None
    social_links: Optional[SocialLinks] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, min_length=6)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v) if v else v


class AdminProfileUpdate(ProfileUpdate):
    values: Optional[List[ValueItem]] = None
    years_of_experience: Optional[int] = Field(default=None, ge=0)
    happy_clients: Optional[int] = Field(default=None, ge=0)


class ThemeSettings(BaseModel):
    preset: Literal["girls", "boys", "professional", "custom"] = "custom"
    primary: Optional[str] = None
    secondary: Optional[str] = None
    heading_h1: Optional[str] = None
    heading_h2: Optional[str] = None
    text_body: Optional[str] = None
    primary_hover: Optional[str] = None
    accent: Optional[str] = None
    button_bg: Optional[str] = None
    button_text: Optional[str] = None
    button_hover_bg: Optional[str] = None
    card_bg: Optional[str] = None
    card_border: Optional[str] = None
    sidebar_bg: Optional[str] = None
    sidebar_text: Optional[str] = None
    sidebar_active_bg: Optional[str] = None
    sidebar_active_text: Optional[str] = None
    sidebar_hover_bg: Optional[str] = None
    sidebar_hover_text: Optional[str] = None

    @field_validator("*")
    @classmethod
    def check_hex(cls, v, info):
        if info.field_name == "preset" or v is None:
            return v
        if not HEX_COLOR_RE.match(v):
            raise ValueError(f"{info.field_name} must be a hex colour like #4F46E5")
        return v


# =======
# Content
# =======
class Category(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    icon: str = Field(..., min_length=1)
    order: int = Field(default=0, ge=0)
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class Skill(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    category: str  # category id
    level: int = Field(..., ge=1, le=10)
    icon: str = Field(..., min_length=1)
    order: int = Field(default=0, ge=0)
    is_active: bool = True


class Experience(BaseModel):
    company: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    start_date: datetime
    end_date: Optional[datetime] = None
    current: bool = False
    description: str = Field(..., min_length=1)
    technologies: List[str] = []
    order: int = 0
    is_active: bool = True

    normalize_dates = field_validator("start_date", "end_date")(_naive_utc)

    @model_validator(mode="after")
    def check_end_date(self):
        if not self.current and self.end_date is None:
            raise ValueError("Please provide an end date for past experiences")
        return self


class ExperienceUpdate(BaseModel):
    company: Optional[str] = None
    position: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    current: Optional[bool] = None
    description: Optional[str] = None
    technologies: Optional[List[str]] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class Project(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    technologies: List[str] = []
    features: List[str] = []
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    category: str  # category id
    order: int = Field(default=0, ge=0)
    is_active: bool = True
    start_date: datetime
    end_date: datetime

    normalize_dates = field_validator("start_date", "end_date")(_naive_utc)

    @field_validator("github_url")
    @classmethod
    def check_github_url(cls, v: Optional[str]) -> Optional[str]:
        if v and not GITHUB_URL_RE.match(v):
            raise ValueError("Invalid GitHub URL format")
        return v or None

    @field_validator("live_url")
    @classmethod
    def check_live_url(cls, v: Optional[str]) -> Optional[str]:
        if v and not HTTP_URL_RE.match(v):
            raise ValueError("Invalid URL format")
        return v or None

    @model_validator(mode="after")
    def check_date_range(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class Client(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    logo: str = Field(..., min_length=1)
    website: Optional[str] = None
    order: int = Field(default=0, ge=0)
    is_active: bool = True


class Message(BaseModel):
    """Contact form submission (collection: "message")"""

    name: str = Field(..., min_length=1)
    email: str
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=10)
    is_read: bool = False

    normalize_email = field_validator("email")(_check_email)

    @field_validator("name", "subject", "message", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class Analytics(BaseModel):
    type: Literal["pageView", "contactSubmission", "resumeDownload", "projectView", "skillView"]
    visitor_id: str
    user_id: Optional[str] = None
    is_admin: bool = False
    ip: Optional[str] = None
    country: str = "Unknown"
    city: str = "Unknown"
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    path: str
    time_spent: float = Field(default=0, ge=0)
    metadata: Dict[str, Any] = {}


# ========
# Ordering
# ========
class ReorderItem(BaseModel):
    id: str
    order: int = Field(..., ge=0)


class MoveRequest(BaseModel):
    id: str
    to_index: int = Field(..., ge=0)
