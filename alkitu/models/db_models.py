"""
Alkitu Site - SQLAlchemy Database Models
PostgreSQL-backed models for production deployment
"""
from datetime import datetime, timezone
from typing import Optional, List
import uuid
import secrets

from sqlalchemy import String, Text, Integer, Float, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from werkzeug.security import generate_password_hash, check_password_hash

from alkitu.database import db


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in every DateTime column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


def new_token() -> str:
    """64 hex characters, used for newsletter verification/unsubscribe links"""
    return secrets.token_hex(32)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# ============================================
# Auth + Admin Users
# ============================================

class AdminRole:
    ADMIN = 'admin'
    SUPER_ADMIN = 'super_admin'

    ALL = (ADMIN, SUPER_ADMIN)


class DBAuthUser(db.Model):
    """Login identity; JWT tokens carry its id"""
    __tablename__ = 'auth_users'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __init__(self, email: str, password: str, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id') or new_id()
        self.email = email.strip().lower()
        self.set_password(password)
        self.is_active = True
        self.created_at = utcnow()

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at)
        }


class DBAdminUser(db.Model):
    """Row whose presence grants admin access to the matching auth identity"""
    __tablename__ = 'admin_users'

    id: Mapped[str] = mapped_column(String(36), ForeignKey('auth_users.id', ondelete='CASCADE'), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default=AdminRole.ADMIN)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'full_name': self.full_name,
            'role': self.role,
            'last_login_at': _iso(self.last_login_at),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# ============================================
# Profiles
# ============================================

# Scalar profile fields that carry their own <field>_is_public flag
PRIVATE_PROFILE_FIELDS = (
    'first_name', 'last_name', 'pronouns', 'date_of_birth',
    'bio', 'job_title', 'department', 'location',
)

# JSON array fields whose items carry is_public
PROFILE_LIST_FIELDS = (
    'urls', 'roles', 'phone_numbers', 'emails',
    'hard_skills', 'soft_skills', 'languages', 'addresses',
)


class DBUserProfile(db.Model):
    """Public/professional profile of an admin user"""
    __tablename__ = 'user_profiles'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('admin_users.id', ondelete='CASCADE'), unique=True, index=True)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, index=True)

    photo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    banner_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    first_name_is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name_is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    pronouns: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    pronouns_is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    date_of_birth: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # YYYY-MM-DD
    date_of_birth_is_public: Mapped[bool] = mapped_column(Boolean, default=False)

    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bio_is_public: Mapped[bool] = mapped_column(Boolean, default=False)

    job_title: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    job_title_is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    department_is_public: Mapped[bool] = mapped_column(Boolean, default=False)

    location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    location_is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    remote_work: Mapped[bool] = mapped_column(Boolean, default=False)
    timezone: Mapped[str] = mapped_column(String(64), default='America/New_York')

    urls: Mapped[list] = mapped_column(JSON, default=list)
    roles: Mapped[list] = mapped_column(JSON, default=list)
    phone_numbers: Mapped[list] = mapped_column(JSON, default=list)
    emails: Mapped[list] = mapped_column(JSON, default=list)
    hard_skills: Mapped[list] = mapped_column(JSON, default=list)
    soft_skills: Mapped[list] = mapped_column(JSON, default=list)
    languages: Mapped[list] = mapped_column(JSON, default=list)
    addresses: Mapped[list] = mapped_column(JSON, default=list)

    language_preference: Mapped[str] = mapped_column(String(2), default='es')
    theme_preference: Mapped[str] = mapped_column(String(10), default='system')
    profile_color: Mapped[str] = mapped_column(String(7), default='#00BB31')
    profile_visibility: Mapped[str] = mapped_column(String(20), default='public')
    show_activity_status: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    admin: Mapped["DBAdminUser"] = relationship("DBAdminUser")

    def to_dict(self) -> dict:
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'username': self.username,
            'photo_url': self.photo_url,
            'banner_url': self.banner_url,
            'display_name': self.display_name,
            'remote_work': self.remote_work,
            'timezone': self.timezone,
            'language_preference': self.language_preference,
            'theme_preference': self.theme_preference,
            'profile_color': self.profile_color,
            'profile_visibility': self.profile_visibility,
            'show_activity_status': self.show_activity_status,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        for field in PRIVATE_PROFILE_FIELDS:
            data[field] = getattr(self, field)
            data[f'{field}_is_public'] = getattr(self, f'{field}_is_public')
        for field in PROFILE_LIST_FIELDS:
            data[field] = list(getattr(self, field) or [])
        return data

    def to_public_dict(self) -> dict:
        """Only what the owner marked public"""
        data = {
            'username': self.username,
            'photo_url': self.photo_url,
            'banner_url': self.banner_url,
            'display_name': self.display_name,
            'remote_work': self.remote_work or False,
            'timezone': self.timezone or 'America/New_York',
            'profile_color': self.profile_color or '#00BB31',
            'theme_preference': self.theme_preference or 'system',
        }
        for field in PRIVATE_PROFILE_FIELDS:
            data[field] = getattr(self, field) if getattr(self, f'{field}_is_public') else None
        for field in PROFILE_LIST_FIELDS:
            data[field] = [item for item in (getattr(self, field) or []) if item.get('is_public')]
        return data


# ============================================
# Projects + Categories
# ============================================

class DBCategory(db.Model):
    """Project category with bilingual name"""
    __tablename__ = 'categories'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name_en: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name_es: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    project_links: Mapped[List["DBProjectCategory"]] = relationship(
        "DBProjectCategory", back_populates="category"
    )

    def to_dict(self, include_count: bool = False) -> dict:
        data = {
            'id': self.id,
            'name_en': self.name_en,
            'name_es': self.name_es,
            'slug': self.slug,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        if include_count:
            data['project_count'] = len(self.project_links)
        return data

    def to_summary(self) -> dict:
        return {'id': self.id, 'name_en': self.name_en, 'name_es': self.name_es, 'slug': self.slug}


class DBProject(db.Model):
    """Portfolio project"""
    __tablename__ = 'projects'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    legacy_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)

    title_en: Mapped[str] = mapped_column(String(300), nullable=False)
    title_es: Mapped[str] = mapped_column(String(300), nullable=False)
    description_en: Mapped[str] = mapped_column(Text, nullable=False)
    description_es: Mapped[str] = mapped_column(Text, nullable=False)
    about_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    about_es: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    image: Mapped[str] = mapped_column(String(500), nullable=False)
    gallery: Mapped[list] = mapped_column(JSON, default=list)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    urls: Mapped[list] = mapped_column(JSON, default=list)  # [{name, url, active?, fallback?}]

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    category_links: Mapped[List["DBProjectCategory"]] = relationship(
        "DBProjectCategory", back_populates="project", cascade="all, delete-orphan"
    )

    @property
    def categories(self) -> List[DBCategory]:
        return [link.category for link in self.category_links if link.category is not None]

    def localized(self, locale: str, field: str):
        """title/description/about in the requested locale"""
        suffix = 'es' if locale == 'es' else 'en'
        return getattr(self, f'{field}_{suffix}')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'legacy_id': self.legacy_id,
            'slug': self.slug,
            'title_en': self.title_en,
            'title_es': self.title_es,
            'description_en': self.description_en,
            'description_es': self.description_es,
            'about_en': self.about_en,
            'about_es': self.about_es,
            'image': self.image,
            'gallery': self.gallery or [],
            'tags': self.tags or [],
            'urls': self.urls or [],
            'is_active': self.is_active,
            'display_order': self.display_order,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
            'categories': [c.to_summary() for c in self.categories]
        }


class DBProjectCategory(db.Model):
    """Join row between a project and a category"""
    __tablename__ = 'project_categories'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(String(36), ForeignKey('projects.id', ondelete='CASCADE'), index=True)
    category_id: Mapped[str] = mapped_column(String(36), ForeignKey('categories.id'), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    project: Mapped["DBProject"] = relationship("DBProject", back_populates="category_links")
    category: Mapped["DBCategory"] = relationship("DBCategory", back_populates="project_links")


# ============================================
# Contact
# ============================================

class ContactStatus:
    PENDING = 'pending'
    READ = 'read'
    REPLIED = 'replied'
    ARCHIVED = 'archived'

    ALL = (PENDING, READ, REPLIED, ARCHIVED)


class DBContactSubmission(db.Model):
    """Message sent through the public contact form"""
    __tablename__ = 'contact_submissions'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    locale: Mapped[str] = mapped_column(String(2), default='es')
    status: Mapped[str] = mapped_column(String(20), default=ContactStatus.PENDING, index=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    form_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'subject': self.subject,
            'message': self.message,
            'locale': self.locale,
            'status': self.status,
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'form_url': self.form_url,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class DBEmailSettings(db.Model):
    """Recipients of the contact form notification"""
    __tablename__ = 'email_settings'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    from_email: Mapped[str] = mapped_column(String(255), nullable=False)
    to_emails: Mapped[list] = mapped_column(JSON, default=list)
    cc_emails: Mapped[list] = mapped_column(JSON, default=list)
    bcc_emails: Mapped[list] = mapped_column(JSON, default=list)
    email_domain: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'from_email': self.from_email,
            'to_emails': self.to_emails or [],
            'cc_emails': self.cc_emails or [],
            'bcc_emails': self.bcc_emails or [],
            'email_domain': self.email_domain,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# ============================================
# Newsletter
# ============================================

class SubscriberStatus:
    PENDING = 'pending'
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    UNSUBSCRIBED = 'unsubscribed'

    ALL = (PENDING, ACTIVE, INACTIVE, UNSUBSCRIBED)


class DBNewsletterSubscriber(db.Model):
    """Double opt-in newsletter subscription"""
    __tablename__ = 'newsletter_subscribers'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    locale: Mapped[str] = mapped_column(String(2), default='es')
    status: Mapped[str] = mapped_column(String(20), default=SubscriberStatus.PENDING, index=True)
    verification_token: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True, index=True)
    unsubscribe_token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, default=new_token, index=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    unsubscribed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'locale': self.locale,
            'status': self.status,
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'verified_at': _iso(self.verified_at),
            'unsubscribed_at': _iso(self.unsubscribed_at),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# ============================================
# Analytics
# ============================================

class DBVisitorSession(db.Model):
    """Anonymous visitor session correlated by the fingerprint cookie"""
    __tablename__ = 'sessions'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_fingerprint: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    region: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    last_activity_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    page_views: Mapped[List["DBPageView"]] = relationship(
        "DBPageView", back_populates="session", cascade="all, delete-orphan"
    )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'session_fingerprint': self.session_fingerprint,
            'started_at': _iso(self.started_at),
            'last_activity_at': _iso(self.last_activity_at)
        }


class DBPageView(db.Model):
    """Single page visit inside a session"""
    __tablename__ = 'page_views'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_id: Mapped[str] = mapped_column(String(36), ForeignKey('sessions.id', ondelete='CASCADE'), index=True)
    page_path: Mapped[str] = mapped_column(String(500), nullable=False)
    locale: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    referrer: Mapped[str] = mapped_column(String(500), default='')
    entry_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    exit_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    time_on_page_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    session: Mapped["DBVisitorSession"] = relationship("DBVisitorSession", back_populates="page_views")

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'session_id': self.session_id,
            'page_path': self.page_path,
            'locale': self.locale,
            'referrer': self.referrer,
            'entry_time': _iso(self.entry_time),
            'exit_time': _iso(self.exit_time),
            'time_on_page_seconds': self.time_on_page_seconds
        }
