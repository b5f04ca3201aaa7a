"""
Corpus Store.

Loads the law corpus from a single JSON document with a top-level `laws`
array and serves read-only lookups over it. The store is built once at
startup and passed to the search engine, the tool adapter and the HTTP layer.
"""

import json
import logging
from pathlib import Path
from typing import Iterator, Optional, Union

from .errors import CorpusLoadError, NotFoundError
from .models import Article, Law, LawSummary, Section


logger = logging.getLogger(__name__)


class CorpusStore:
    """In-memory, immutable collection of laws."""

    def __init__(self, laws: tuple[Law, ...]):
        self._laws = tuple(laws)
        self._by_id: dict[str, Law] = {}
        for law in self._laws:
            if law.id in self._by_id:
                raise CorpusLoadError(f"Duplicate law id: {law.id!r}")
            self._by_id[law.id] = law

    @classmethod
    def load(cls, source: Union[str, Path]) -> "CorpusStore":
        """Load the corpus from a JSON file."""
        path = Path(source)
        logger.info(f"[CORPUS] Loading laws from {path}")

        if not path.is_file():
            raise CorpusLoadError(f"Corpus file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise CorpusLoadError(f"Could not read corpus file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise CorpusLoadError(f"Corpus file {path} is not valid JSON: {e}") from e

        store = cls.from_dict(data)
        stats = store.stats()
        logger.info(
            f"[CORPUS] Loaded {stats['laws']} laws, "
            f"{stats['sections']} sections, {stats['articles']} articles"
        )
        return store

    @classmethod
    def from_dict(cls, data: dict) -> "CorpusStore":
        """Build a store from an already parsed corpus document."""
        if not isinstance(data, dict) or "laws" not in data:
            raise CorpusLoadError("Corpus must be an object with a top-level 'laws' array")
        if not isinstance(data["laws"], list):
            raise CorpusLoadError("Corpus 'laws' must be an array")

        laws = []
        for index, raw in enumerate(data["laws"]):
            try:
                laws.append(Law.from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise CorpusLoadError(f"Malformed law at index {index}: {e!r}") from e

        return cls(tuple(laws))

    def list_laws(self) -> list[LawSummary]:
        """List all laws in corpus order."""
        return [law.summary() for law in self._laws]

    def get_law(self, law_id: str) -> Law:
        """Get a law with all its sections and articles."""
        law = self._by_id.get(law_id)
        if law is None:
            raise NotFoundError(f"Law not found: {law_id}")
        return law

    def iter_articles(
        self, law_id: Optional[str] = None
    ) -> Iterator[tuple[Law, Section, Article]]:
        """Walk articles in law, section, article order.

        With `law_id`, only that law is walked; an unknown id yields nothing.
        """
        if law_id is not None:
            law = self._by_id.get(law_id)
            laws: tuple[Law, ...] = (law,) if law is not None else ()
        else:
            laws = self._laws

        for law in laws:
            for section in law.sections:
                for article in section.articles:
                    yield law, section, article

    def stats(self) -> dict:
        sections = sum(len(law.sections) for law in self._laws)
        articles = sum(len(s.articles) for law in self._laws for s in law.sections)
        return {"laws": len(self._laws), "sections": sections, "articles": articles}

    def __len__(self) -> int:
        return len(self._laws)

    def __contains__(self, law_id: object) -> bool:
        return law_id in self._by_id
