"""
Assumption (hypothesis) models.

`Assumption` is the flattened Notion record returned by `GET assumptions`.
Status and confidence are plain strings on the way out, since the Notion
select may hold options this service does not know about; on the way in they
are restricted to the known values.
"""

from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from researchdash.models.common import ApiModel, blank_to_none

AssumptionStatus = Literal["Pending", "Testing", "Validated", "Invalidated"]
Confidence = Literal["Low", "Medium", "High"]

ASSUMPTION_STATUSES: List[str] = ["Pending", "Testing", "Validated", "Invalidated"]
CONFIDENCE_LEVELS: List[str] = ["Low", "Medium", "High"]


class Assumption(ApiModel):
    id: str
    title: str = "Untitled"
    description: Optional[str] = None
    status: str = "Pending"
    confidence: str = "Medium"
    evidence: Optional[str] = None
    created_at: Optional[str] = None
    notion_url: Optional[str] = None


class AssumptionFilters(ApiModel):
    statuses: List[str] = Field(default_factory=list)
    confidences: List[str] = Field(default_factory=list)


class AssumptionsResponse(ApiModel):
    items: List[Assumption] = Field(default_factory=list)
    filters: AssumptionFilters = Field(default_factory=AssumptionFilters)


class AssumptionCreateRequest(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[AssumptionStatus] = None
    confidence: Optional[Confidence] = None
    evidence: Optional[str] = None

    @field_validator("status", "confidence", mode="before")
    @classmethod
    def blank_choice_is_unset(cls, value: Any) -> Any:
        return blank_to_none(value)


class AssumptionUpdateRequest(ApiModel):
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[AssumptionStatus] = None
    confidence: Optional[Confidence] = None
    evidence: Optional[str] = None

    @field_validator("status", "confidence", mode="before")
    @classmethod
    def blank_choice_clears(cls, value: Any) -> Any:
        return blank_to_none(value)
