import logging
from typing import Any, Dict, List, Mapping, Optional

from researchdash.core.exceptions import (
    InvalidRequestError,
    NotConfiguredError,
    NotFoundError,
    NotionAPIError,
    UpstreamError,
)
from researchdash.models.area import FeedKeyword
from researchdash.models.paper import TopicPaper
from researchdash.repositories import notion_properties as props
from researchdash.repositories.notion_repo import NotionRepository
from researchdash.services.area_service import ACTIVE_PROPERTY, AreaService

logger = logging.getLogger(__name__)


class KeywordService(AreaService):
    """Feed keywords: the same shape as areas, plus the topic database mapped to each name."""

    resource_label = "Keywords database"
    item_label = "keyword"
    name_required_message = "Topic name is required"

    def __init__(
        self,
        notion_repo: NotionRepository,
        database_id: Optional[str],
        topic_databases: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(notion_repo, database_id)
        self.topic_databases = dict(topic_databases or {})

    def _flatten(self, page: Dict[str, Any]) -> FeedKeyword:
        properties = page.get("properties") or {}
        name = props.find_title(properties) or "Untitled"
        return FeedKeyword(
            id=page.get("id", ""),
            name=name,
            active=props.read_checkbox(properties, ACTIVE_PROPERTY, default=True),
            database_id=self.topic_databases.get(name),
        )

    async def list_keywords(self) -> List[FeedKeyword]:
        return await self.list_areas()  # type: ignore[return-value]


class TopicFeedService:
    """Papers stored in one Notion database per topic."""

    def __init__(self, notion_repo: NotionRepository, topic_databases: Mapping[str, str]):
        self.notion_repo = notion_repo
        self.topic_databases = dict(topic_databases)

    @staticmethod
    def _flatten(page: Dict[str, Any]) -> TopicPaper:
        properties = page.get("properties") or {}
        return TopicPaper(
            id=page.get("id", ""),
            title=props.find_title(properties),
            description=props.read_text(properties, "Description")
            or props.read_text(properties, "Content"),
            authors=props.read_text(properties, "Authors"),
            pdf_link=props.read_text(properties, "pdf Link")
            or props.read_text(properties, "pdfLink"),
            subject=props.read_text(properties, "Subject"),
            notion_url=page.get("url"),
            created_at=page.get("created_time"),
        )

    async def list_papers(self, topic: Optional[str]) -> List[TopicPaper]:
        if not topic or not topic.strip():
            raise InvalidRequestError("Topic is required")
        database_id = self.topic_databases.get(topic)
        if not database_id:
            raise NotFoundError("Unknown topic")
        if not self.notion_repo.is_configured():
            raise NotConfiguredError("Notion not configured")

        try:
            pages = await self.notion_repo.query_pages(database_id)
        except NotionAPIError as e:
            logger.error(f"Failed to fetch papers for topic '{topic}': {e}")
            raise UpstreamError("Failed to fetch papers", detail=str(e)) from e

        papers = [self._flatten(page) for page in pages]
        return [paper for paper in papers if paper.title]
