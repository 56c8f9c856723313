"""
Alkitu Site - Project and Category Schemas
"""
from typing import Annotated, List, Literal, Optional
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

SLUG_PATTERN = r'^[a-z0-9-]+$'


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError('Must be a valid URL')
    return value


Url = Annotated[str, AfterValidator(_check_url)]


class ProjectUrl(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    url: Url
    active: Optional[bool] = None
    fallback: Optional[str] = None


class CreateProject(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    slug: str = Field(min_length=1, max_length=200, pattern=SLUG_PATTERN)
    title_en: str = Field(min_length=1, max_length=300)
    title_es: str = Field(min_length=1, max_length=300)
    description_en: str = Field(min_length=1)
    description_es: str = Field(min_length=1)
    about_en: Optional[str] = None
    about_es: Optional[str] = None
    image: Url
    gallery: List[Url] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    urls: List[ProjectUrl] = Field(default_factory=list)
    is_active: bool = True
    display_order: int = 0
    category_ids: List[str] = Field(min_length=1)


class UpdateProject(BaseModel):
    """Partial update; only fields present in the body are applied"""
    model_config = ConfigDict(str_strip_whitespace=True)

    slug: Optional[str] = Field(default=None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    title_en: Optional[str] = Field(default=None, min_length=1, max_length=300)
    title_es: Optional[str] = Field(default=None, min_length=1, max_length=300)
    description_en: Optional[str] = Field(default=None, min_length=1)
    description_es: Optional[str] = Field(default=None, min_length=1)
    about_en: Optional[str] = None
    about_es: Optional[str] = None
    image: Optional[Url] = None
    gallery: Optional[List[Url]] = None
    tags: Optional[List[str]] = None
    urls: Optional[List[ProjectUrl]] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None
    category_ids: Optional[List[str]] = None


class ProjectQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    category_id: Optional[str] = None
    is_active: Optional[bool] = None
    search: Optional[str] = None
    sort_by: Literal['created_at', 'updated_at', 'display_order', 'title_en', 'title_es'] = 'display_order'
    sort_order: Literal['asc', 'desc'] = 'asc'


class PublicProjectQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    category_slug: Optional[str] = None
    search: Optional[str] = None


class CreateCategory(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name_en: str = Field(min_length=1, max_length=100)
    name_es: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=120, pattern=SLUG_PATTERN)


class UpdateCategory(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name_en: Optional[str] = Field(default=None, min_length=1, max_length=100)
    name_es: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=120, pattern=SLUG_PATTERN)
