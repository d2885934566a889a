"""
论文相关 Pydantic 模型 (Paper Models)

功能 (Function):
定义 ResearchDash 中出现的三种论文记录以及保存论文的请求体：
1. `ArxivPaper`: arXiv 搜索结果，由 `researchdash.parsing.arxiv_feed` 生成。
2. `AreaPaper`: n8n 工作流按研究领域返回的候选论文。
3. `SavedPaper` / `TopicPaper`: 存放在 Notion 数据库中的论文。
4. `SavePaperRequest`: `POST saved` 的请求体。

交互 (Interaction):
- 被导入 (Imported by): `researchdash.parsing.arxiv_feed`、`researchdash.services.paper_service`、
  `researchdash.services.saved_paper_service`、`researchdash.services.feed_service` 以及对应的 API 端点。
"""

from typing import List, Optional, Union

from pydantic import Field, field_validator

from researchdash.models.common import ApiModel


class ArxivPaper(ApiModel):
    id: str
    title: str
    summary: str = ""
    authors: List[str] = Field(default_factory=list)
    published: str = ""
    updated: str = ""
    link: str = ""
    # "" when the entry carries no PDF link
    pdf_link: str = ""
    categories: List[str] = Field(default_factory=list)


class PaperSearchResponse(ApiModel):
    papers: List[ArxivPaper] = Field(default_factory=list)


class AreaPaper(ApiModel):
    """A candidate paper delivered by the n8n workflow. `authors` is free text."""

    id: str
    title: str
    authors: str = ""
    description: str = ""
    date: str = ""
    pdf_link: str = ""


class AreaPapersResponse(ApiModel):
    papers: List[AreaPaper] = Field(default_factory=list)


class SavedPaper(ApiModel):
    id: str
    title: str
    authors: str = ""
    description: str = ""
    pdf_link: str = ""
    date: str = ""


class SavedPapersResponse(ApiModel):
    papers: List[SavedPaper] = Field(default_factory=list)


class SavePaperRequest(ApiModel):
    """
    Body of `POST saved`.

    Accepts a paper in any of the shapes the dashboard shows: an arXiv result
    (list of authors, `summary`, `published`) or an n8n / saved record (free-text
    authors, `description`, `date`). Only `title` is required, and that check is
    made by the service so the caller gets a 400 rather than a 422.
    """

    title: Optional[str] = None
    authors: Optional[Union[str, List[str]]] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    pdf_link: Optional[str] = None
    date: Optional[str] = None
    published: Optional[str] = None

    @field_validator("authors", mode="after")
    @classmethod
    def join_author_list(cls, value: Optional[Union[str, List[str]]]) -> Optional[str]:
        if isinstance(value, list):
            return ", ".join(name.strip() for name in value if name and name.strip())
        return value

    def author_text(self) -> str:
        return self.authors or ""  # type: ignore[return-value]

    def description_text(self) -> str:
        return self.description or self.summary or ""

    def date_text(self) -> str:
        return self.date or self.published or ""


class TopicPaper(ApiModel):
    """A paper from a per-topic Notion database."""

    id: str
    title: str
    description: str = ""
    authors: str = ""
    pdf_link: str = ""
    subject: str = ""
    notion_url: Optional[str] = None
    created_at: Optional[str] = None


class TopicPapersResponse(ApiModel):
    papers: List[TopicPaper] = Field(default_factory=list)
