# -*- coding: utf-8 -*-
"""
文件目的：测试 arXiv Atom 响应到 `ArxivPaper` 列表的转换 (`researchdash.parsing.arxiv_feed`)。

覆盖：字段提取（id、标题与摘要的空白折叠、作者顺序、链接、分类）、
缺省值（无作者、无 PDF 链接、无 alternate 链接）、文档顺序，以及非法输入时返回空列表而不抛异常。
"""

from typing import List, Optional

import pytest

from researchdash.parsing.arxiv_feed import (
    collapse_whitespace,
    extract_arxiv_id,
    parse_arxiv_feed,
)


def make_entry(
    arxiv_id: str,
    title: str,
    authors: Optional[List[str]] = None,
    with_pdf: bool = True,
    with_alternate: bool = True,
    categories: Optional[List[str]] = None,
    summary: str = "An abstract.",
) -> str:
    authors_xml = "".join(
        f"<author><name>{name}</name></author>" for name in (authors or [])
    )
    links = ""
    if with_alternate:
        links += f'<link href="http://arxiv.org/abs/{arxiv_id}" rel="alternate" type="text/html"/>'
    if with_pdf:
        links += f'<link title="pdf" href="http://arxiv.org/pdf/{arxiv_id}" rel="related" type="application/pdf"/>'
    categories_xml = "".join(
        f'<category term="{term}" scheme="http://arxiv.org/schemas/atom"/>'
        for term in (categories or [])
    )
    return f"""
  <entry>
    <id>http://arxiv.org/abs/{arxiv_id}</id>
    <updated>2026-01-15T18:00:00Z</updated>
    <published>2026-01-14T12:30:00Z</published>
    <title>{title}</title>
    <summary>{summary}</summary>
    {authors_xml}
    {links}
    {categories_xml}
  </entry>"""


def make_feed(*entries: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<feed xmlns="http://www.w3.org/2005/Atom">\n'
        "  <title>ArXiv Query: search_query=all:transformers</title>\n"
        "  <id>http://arxiv.org/api/query-id</id>\n"
        "  <updated>2026-01-16T00:00:00-05:00</updated>\n"
        + "".join(entries)
        + "\n</feed>\n"
    )


def test_parses_all_fields() -> None:
    feed = make_feed(
        make_entry(
            "2401.00001v2",
            "Attention\n      Is   All You Need",
            authors=["Ashish Vaswani", "Noam Shazeer"],
            categories=["cs.CL", "cs.LG"],
            summary="  The dominant sequence\n transduction models...  ",
        )
    )

    papers = parse_arxiv_feed(feed)

    assert len(papers) == 1
    paper = papers[0]
    assert paper.id == "2401.00001v2"
    assert paper.title == "Attention Is All You Need"
    assert paper.summary == "The dominant sequence transduction models..."
    assert paper.authors == ["Ashish Vaswani", "Noam Shazeer"]
    assert paper.published == "2026-01-14T12:30:00Z"
    assert paper.updated == "2026-01-15T18:00:00Z"
    assert paper.link == "http://arxiv.org/abs/2401.00001v2"
    assert paper.pdf_link == "http://arxiv.org/pdf/2401.00001v2"
    assert paper.categories == ["cs.CL", "cs.LG"]


def test_keeps_document_order() -> None:
    ids = ["2401.00005v1", "2401.00003v1", "2401.00004v1", "2401.00001v1", "2401.00002v1"]
    feed = make_feed(*(make_entry(i, f"Paper {i}", authors=["A"]) for i in ids))

    papers = parse_arxiv_feed(feed)

    assert [p.id for p in papers] == ids
    assert all(p.title for p in papers)


def test_entry_without_authors_has_empty_list() -> None:
    papers = parse_arxiv_feed(make_feed(make_entry("2401.00001v1", "No authors")))

    assert papers[0].authors == []


def test_entry_without_pdf_link_has_empty_pdf_link() -> None:
    papers = parse_arxiv_feed(
        make_feed(make_entry("2401.00001v1", "No PDF", authors=["A"], with_pdf=False))
    )

    assert papers[0].pdf_link == ""


def test_link_falls_back_to_raw_id() -> None:
    papers = parse_arxiv_feed(
        make_feed(make_entry("2401.00001v1", "No alternate", with_alternate=False))
    )

    assert papers[0].link == "http://arxiv.org/abs/2401.00001v1"
    assert papers[0].pdf_link == "http://arxiv.org/pdf/2401.00001v1"


def test_feed_without_entries() -> None:
    assert parse_arxiv_feed(make_feed()) == []


@pytest.mark.parametrize("text", ["", "not xml at all", "<html><body>503</body></html>"])
def test_garbage_yields_empty_list(text: str) -> None:
    assert parse_arxiv_feed(text) == []


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("http://arxiv.org/abs/2401.01234v2", "2401.01234v2"),
        ("http://arxiv.org/abs/hep-th/9901001v1", "hep-th/9901001v1"),
        ("https://example.org/papers/xyz-42/", "xyz-42"),
        ("2401.01234", "2401.01234"),
    ],
)
def test_extract_arxiv_id(raw: str, expected: str) -> None:
    assert extract_arxiv_id(raw) == expected


def test_collapse_whitespace() -> None:
    assert collapse_whitespace("  a\n\tb   c ") == "a b c"
    assert collapse_whitespace(None) == ""
