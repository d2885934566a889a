"""Research areas and feed keywords: named toggles stored in Notion."""

from typing import Any, List, Optional

from pydantic import Field

from researchdash.models.common import ApiModel


class Area(ApiModel):
    id: str
    name: str
    active: bool = True


class AreasResponse(ApiModel):
    areas: List[Area] = Field(default_factory=list)


class FeedKeyword(Area):
    # Topic database mapped to this keyword's name, if any
    database_id: Optional[str] = None


class KeywordsResponse(ApiModel):
    keywords: List[FeedKeyword] = Field(default_factory=list)


class ToggleCreateRequest(ApiModel):
    name: Optional[str] = None


class ToggleUpdateRequest(ApiModel):
    id: Optional[str] = None
    name: Optional[str] = None
    # Only a JSON boolean is written; anything else is ignored
    active: Optional[Any] = None
