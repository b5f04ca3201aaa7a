"""
Core law corpus data models.

This module defines the hierarchical structure of the corpus:
- Law: A complete law or accounting standard
- Section: A section (chapter) within a law
- Article: A single article within a section

All models are frozen; the corpus never changes after it is loaded.
"""

from dataclasses import dataclass, field
from typing import Union


ArticleNumber = Union[str, int]


def _text(value) -> str:
    """Read an optional text field, treating null as empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def _sequence(value, name: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"'{name}' must be a list, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Article:
    """Represents a single article within a section."""
    id: str
    number: ArticleNumber
    title: str
    content: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Article":
        number = data.get("number", "")
        if number is None:
            number = ""
        if isinstance(number, bool) or not isinstance(number, (str, int)):
            raise TypeError(f"article number must be a string or int, got {number!r}")
        return cls(
            id=str(data["id"]),
            number=number,
            title=_text(data.get("title")),
            content=_text(data.get("content")),
        )


@dataclass(frozen=True)
class Section:
    """Represents a section within a law."""
    id: str
    title: str
    articles: tuple[Article, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "articles": [a.to_dict() for a in self.articles],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Section":
        return cls(
            id=str(data["id"]),
            title=_text(data.get("title")),
            articles=tuple(
                Article.from_dict(a) for a in _sequence(data.get("articles"), "articles")
            ),
        )


@dataclass(frozen=True)
class Law:
    """Represents a complete law with its sections."""
    id: str
    name: str
    category: str
    sections: tuple[Section, ...] = field(default_factory=tuple)

    def summary(self) -> "LawSummary":
        return LawSummary(id=self.id, name=self.name, category=self.category)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "sections": [s.to_dict() for s in self.sections],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Law":
        return cls(
            id=str(data["id"]),
            name=_text(data["name"]),
            category=_text(data.get("category")),
            sections=tuple(
                Section.from_dict(s) for s in _sequence(data["sections"], "sections")
            ),
        )


@dataclass(frozen=True)
class LawSummary:
    """Listing projection of a law (no sections)."""
    id: str
    name: str
    category: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "category": self.category}
