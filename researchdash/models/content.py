"""Generic content entries (articles, videos, datasets...) tracked in Notion."""

from typing import List, Optional

from pydantic import Field

from researchdash.models.common import ApiModel

DEFAULT_CONTENT_STATUS = "To Review"


class ContentItem(ApiModel):
    id: str
    title: str = "Untitled"
    url: Optional[str] = None
    type: Optional[str] = None
    source: Optional[str] = None
    status: Optional[str] = None
    date_added: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    notion_url: Optional[str] = None


class ContentFilters(ApiModel):
    types: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    statuses: List[str] = Field(default_factory=list)


class ContentResponse(ApiModel):
    items: List[ContentItem] = Field(default_factory=list)
    filters: ContentFilters = Field(default_factory=ContentFilters)


class ContentCreateRequest(ApiModel):
    title: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    source: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
