"""
Alkitu Site - Public Form Schemas
Contact form and newsletter subscription payloads
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Locale = Literal['es', 'en']


def _email_length(value):
    if isinstance(value, str):
        value = value.strip()
        if not 5 <= len(value) <= 255:
            raise ValueError('Email must be between 5 and 255 characters')
    return value


class ContactForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    subject: str = Field(min_length=5, max_length=200)
    message: str = Field(min_length=10, max_length=2000)
    locale: Locale = 'es'

    @field_validator('email', mode='before')
    @classmethod
    def check_email(cls, value):
        return _email_length(value)


class NewsletterSubscribe(BaseModel):
    email: EmailStr
    locale: Locale

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value):
        value = _email_length(value)
        return value.lower() if isinstance(value, str) else value


class NewsletterUnsubscribe(BaseModel):
    exitTime: Optional[datetime] = None


class ContactStatusUpdate(BaseModel):
    status: Literal['pending', 'read', 'replied', 'archived']


class EmailSettingsUpdate(BaseModel):
    from_email: EmailStr
    to_emails: List[EmailStr] = Field(min_length=1)
    cc_emails: List[EmailStr] = Field(default_factory=list)
    bcc_emails: List[EmailStr] = Field(default_factory=list)
    email_domain: Optional[str] = Field(default=None, max_length=255)
