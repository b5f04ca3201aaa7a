"""
Search result models.

A SearchResult is produced per matching article. It denormalizes the owning
law and section so the presentation layer never walks the corpus itself.
"""

from dataclasses import dataclass

from .law import ArticleNumber


@dataclass(frozen=True)
class Highlights:
    """Which article fields contained the query."""
    title: bool
    content: bool

    def to_dict(self) -> dict:
        return {"title": self.title, "content": self.content}


@dataclass(frozen=True)
class SearchResult:
    """Represents a single matching article with its law and section context."""
    law_id: str
    law_name: str
    section_id: str
    section_title: str
    article_id: str
    article_number: ArticleNumber
    article_title: str
    article_content: str
    highlights: Highlights

    def get_citation(self) -> str:
        """Generate a citation string, e.g. '企業会計原則 第一 一般原則 三'."""
        parts = [self.law_name, self.section_title]
        if self.article_number != "":
            parts.append(str(self.article_number))
        return " ".join(p for p in parts if p)

    def to_dict(self) -> dict:
        """Serialize using the camelCase keys of the HTTP and tool contracts."""
        return {
            "lawId": self.law_id,
            "lawName": self.law_name,
            "sectionId": self.section_id,
            "sectionTitle": self.section_title,
            "articleId": self.article_id,
            "articleNumber": self.article_number,
            "articleTitle": self.article_title,
            "articleContent": self.article_content,
            "highlights": self.highlights.to_dict(),
        }
