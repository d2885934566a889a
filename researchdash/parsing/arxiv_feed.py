"""
arXiv Atom feed -> paper records.

The search API answers with an Atom document. Each `<entry>` becomes one
`ArxivPaper`, in document order. Parsing is delegated to `feedparser`, which
copes with entities, attribute order and namespaced elements; this module only
decides which fields to pick.

This function never raises: an unparseable document yields an empty list and
an entry that cannot be read is skipped.
"""

import logging
from typing import Any, Dict, List, Optional

import feedparser

from researchdash.models.paper import ArxivPaper

logger = logging.getLogger(__name__)


def collapse_whitespace(text: Optional[str]) -> str:
    """Joins runs of whitespace (including newlines) into single spaces."""
    if not text:
        return ""
    return " ".join(text.split())


def extract_arxiv_id(raw_id: str) -> str:
    """
    `http://arxiv.org/abs/2401.01234v2` -> `2401.01234v2`.

    Old-style ids keep their archive prefix (`abs/hep-th/9901001v1` ->
    `hep-th/9901001v1`). Without `/abs/` the last path segment is used, and
    an id without any path is returned unchanged.
    """
    raw_id = raw_id.strip()
    if "/abs/" in raw_id:
        tail = raw_id.split("/abs/", 1)[1].strip("/")
        if tail:
            return tail
    segments = [s for s in raw_id.split("/") if s]
    if len(segments) > 1:
        return segments[-1]
    return raw_id


def _pick_links(links: List[Dict[str, Any]]) -> Dict[str, str]:
    """Finds the landing-page link and the PDF link among an entry's links."""
    abstract_link = ""
    pdf_link = ""
    for link in links:
        href = link.get("href") or ""
        if not href:
            continue
        title = link.get("title")
        if not abstract_link and (not title or title == "alternate"):
            abstract_link = href
        if not pdf_link and title == "pdf":
            pdf_link = href
    return {"link": abstract_link, "pdf_link": pdf_link}


def parse_entry(entry: Dict[str, Any]) -> Optional[ArxivPaper]:
    """Converts one feedparser entry. Returns None for an entry with neither id nor title."""
    raw_id = entry.get("id") or ""
    title = collapse_whitespace(entry.get("title"))
    if not raw_id and not title:
        return None

    links = _pick_links(entry.get("links") or [])
    return ArxivPaper(
        id=extract_arxiv_id(raw_id) if raw_id else "",
        title=title,
        summary=collapse_whitespace(entry.get("summary")),
        authors=[
            author.get("name")
            for author in entry.get("authors") or []
            if author.get("name")
        ],
        published=entry.get("published") or "",
        updated=entry.get("updated") or "",
        link=links["link"] or raw_id,
        pdf_link=links["pdf_link"],
        categories=[
            tag.get("term") for tag in entry.get("tags") or [] if tag.get("term")
        ],
    )


def parse_arxiv_feed(xml_text: str) -> List[ArxivPaper]:
    """Parses an arXiv Atom response into paper records, in document order."""
    if not xml_text:
        return []

    try:
        feed = feedparser.parse(xml_text)
    except Exception as e:
        logger.error(f"Could not parse arXiv feed: {e}")
        return []

    if feed.get("bozo"):
        logger.warning(
            f"arXiv feed was not well-formed, continuing with what parsed: {feed.get('bozo_exception')}"
        )

    papers: List[ArxivPaper] = []
    for index, entry in enumerate(feed.get("entries") or []):
        try:
            paper = parse_entry(entry)
        except Exception as e:
            logger.warning(f"Skipping arXiv entry #{index}: {e}")
            continue
        if paper is not None:
            papers.append(paper)

    logger.debug(f"Parsed {len(papers)} arXiv entries")
    return papers
