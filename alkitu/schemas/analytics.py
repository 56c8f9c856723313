"""
Alkitu Site - Analytics Schemas
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, RootModel

UUID_PATTERN = r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$'


class TrackPageView(BaseModel):
    action: Literal['page_view']
    sessionFingerprint: str = Field(min_length=1, max_length=128)
    pagePath: str = Field(min_length=1, max_length=500)
    locale: str = Field(min_length=2, max_length=5)
    referrer: str = Field(default='', max_length=500)


class TrackPageExit(BaseModel):
    action: Literal['page_exit']
    sessionFingerprint: str = Field(min_length=1, max_length=128)
    pageViewId: str = Field(pattern=UUID_PATTERN)
    timeOnPage: int = Field(ge=0)


class TrackEvent(RootModel):
    root: Annotated[Union[TrackPageView, TrackPageExit], Field(discriminator='action')]


class SessionUpsert(BaseModel):
    sessionFingerprint: str = Field(min_length=1, max_length=128)


class PageViewCreate(BaseModel):
    sessionId: str = Field(pattern=UUID_PATTERN)
    pagePath: str = Field(min_length=1, max_length=500)
    locale: str = Field(min_length=2, max_length=5)
    referrer: str = Field(default='', max_length=500)


class PageViewUpdate(BaseModel):
    timeOnPage: Optional[int] = Field(default=None, ge=0)
