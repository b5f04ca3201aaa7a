"""
Substring search over the law corpus.

An article matches when the query occurs, case-insensitively, in its title
or in its content. Results come back in corpus order (law, section, article)
without any scoring, each carrying highlight flags for both fields.
"""

import logging
from typing import Optional

from ..corpus import CorpusStore
from ..models import Article, Highlights, Law, SearchResult, Section


logger = logging.getLogger(__name__)


def is_blank(query: Optional[str]) -> bool:
    """True for None, empty, or whitespace-only queries (full-width spaces included)."""
    return query is None or query.strip() == ""


def match_article(article: Article, term: str) -> Highlights:
    """Compute highlight flags for an already lowercased search term."""
    return Highlights(
        title=term in article.title.lower(),
        content=term in article.content.lower(),
    )


def _to_result(law: Law, section: Section, article: Article, highlights: Highlights) -> SearchResult:
    return SearchResult(
        law_id=law.id,
        law_name=law.name,
        section_id=section.id,
        section_title=section.title,
        article_id=article.id,
        article_number=article.number,
        article_title=article.title,
        article_content=article.content,
        highlights=highlights,
    )


class SearchEngine:
    """Pure query engine bound to a corpus store.

    The same instance serves the HTTP search endpoint and the chat tool, so
    both paths return identical results for identical inputs.
    """

    def __init__(self, store: CorpusStore):
        self.store = store

    def search(self, query: Optional[str], law_id: Optional[str] = None) -> list[SearchResult]:
        """Search article titles and contents.

        Args:
            query: Substring to look for. Blank queries return no results.
            law_id: Restrict the scan to this law (unknown ids give no results)

        Returns:
            Matching articles in corpus traversal order
        """
        if is_blank(query):
            return []

        # Only the blank check trims; the term itself is matched as given.
        term = query.lower()
        results = []

        for law, section, article in self.store.iter_articles(law_id):
            highlights = match_article(article, term)
            if highlights.title or highlights.content:
                results.append(_to_result(law, section, article, highlights))

        logger.debug(f"[SEARCH] q={query!r} lawId={law_id!r} -> {len(results)} results")
        return results
