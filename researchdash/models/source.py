"""External data source models (`GET/POST/DELETE sources`)."""

from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from researchdash.models.common import ApiModel, blank_to_none

AuthMethod = Literal["None", "API Key", "OAuth", "Token"]

SOURCE_CATEGORIES: List[str] = [
    "Government",
    "Academic",
    "Finance",
    "Health",
    "Weather",
    "Geographic",
    "Social",
    "Scientific",
]
AUTH_METHODS: List[str] = ["None", "API Key", "OAuth", "Token"]


class Source(ApiModel):
    id: str
    name: str = "Untitled"
    description: Optional[str] = None
    category: Optional[str] = None
    url: Optional[str] = None
    docs_url: Optional[str] = None
    auth: str = "None"
    rate_limit: Optional[str] = None
    formats: List[str] = Field(default_factory=list)
    is_free: bool = False
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    notion_url: Optional[str] = None


class SourceFilters(ApiModel):
    categories: List[str] = Field(default_factory=list)
    auth_methods: List[str] = Field(default_factory=list)


class SourcesResponse(ApiModel):
    items: List[Source] = Field(default_factory=list)
    filters: SourceFilters = Field(default_factory=SourceFilters)


class SourceCreateRequest(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    url: Optional[str] = None
    docs_url: Optional[str] = None
    auth: Optional[AuthMethod] = None
    rate_limit: Optional[str] = None
    formats: List[str] = Field(default_factory=list)
    # Written as true when omitted
    is_free: Optional[bool] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("auth", mode="before")
    @classmethod
    def blank_auth_is_unset(cls, value: Any) -> Any:
        return blank_to_none(value)
