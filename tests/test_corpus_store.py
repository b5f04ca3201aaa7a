"""
Tests for the Corpus Store.

Covers loading (including every CorpusLoadError path), listing, lookup,
traversal order and immutability.

Run with: pytest tests/test_corpus_store.py -v
"""

import dataclasses
from pathlib import Path

import pytest

from lawsearch.corpus import CorpusStore
from lawsearch.errors import CorpusLoadError, NotFoundError


class TestCorpusLoading:
    """Test loading the corpus from JSON."""

    def test_load_from_file(self, corpus_file):
        """Should load every law from a well-formed file."""
        store = CorpusStore.load(corpus_file)

        assert len(store) == 3
        assert [law.id for law in store.list_laws()] == [
            "acct-principles", "consumption-tax", "reserves"
        ]

    def test_load_bundled_dataset(self):
        """The dataset shipped in data/ should load."""
        path = Path(__file__).parent.parent / "data" / "laws.json"
        store = CorpusStore.load(path)

        assert "acct-principles" in store
        assert store.stats()["articles"] > 0

    def test_missing_file(self, tmp_path):
        """Should raise CorpusLoadError for a missing file."""
        with pytest.raises(CorpusLoadError, match="not found"):
            CorpusStore.load(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        """Should raise CorpusLoadError for invalid JSON."""
        path = tmp_path / "laws.json"
        path.write_text("{ laws: ", encoding="utf-8")

        with pytest.raises(CorpusLoadError, match="not valid JSON"):
            CorpusStore.load(path)

    def test_missing_laws_key(self):
        with pytest.raises(CorpusLoadError):
            CorpusStore.from_dict({"statutes": []})

    def test_laws_not_a_list(self):
        with pytest.raises(CorpusLoadError):
            CorpusStore.from_dict({"laws": {"id": "x"}})

    def test_law_missing_sections(self):
        """A law without sections does not match the Law shape."""
        with pytest.raises(CorpusLoadError, match="index 0"):
            CorpusStore.from_dict({"laws": [{"id": "a", "name": "A", "category": "c"}]})

    def test_article_missing_id(self):
        data = {"laws": [{
            "id": "a", "name": "A", "category": "c",
            "sections": [{"id": "s", "title": "S", "articles": [{"title": "t"}]}],
        }]}
        with pytest.raises(CorpusLoadError):
            CorpusStore.from_dict(data)

    def test_section_articles_wrong_type(self):
        data = {"laws": [{
            "id": "a", "name": "A", "category": "c",
            "sections": [{"id": "s", "title": "S", "articles": "none"}],
        }]}
        with pytest.raises(CorpusLoadError):
            CorpusStore.from_dict(data)

    def test_duplicate_law_ids(self):
        """Law ids must be unique across the corpus."""
        law = {"id": "dup", "name": "A", "category": "c", "sections": []}
        with pytest.raises(CorpusLoadError, match="Duplicate"):
            CorpusStore.from_dict({"laws": [law, dict(law)]})

    def test_optional_article_fields_default_to_empty(self):
        """Missing title/content/number read as empty strings."""
        data = {"laws": [{
            "id": "a", "name": "A", "category": "c",
            "sections": [{"id": "s", "title": "S", "articles": [{"id": "x"}]}],
        }]}
        article = CorpusStore.from_dict(data).get_law("a").sections[0].articles[0]

        assert article.title == ""
        assert article.content == ""
        assert article.number == ""

    def test_integer_article_number_preserved(self, store):
        article = store.get_law("acct-principles").sections[0].articles[0]
        assert article.number == 1


class TestCorpusLookup:
    """Test listing and lookup."""

    def test_list_laws_fields(self, store):
        first = store.list_laws()[0]
        assert first.to_dict() == {
            "id": "acct-principles",
            "name": "企業会計原則",
            "category": "会計基準",
        }

    def test_get_law_round_trip(self, store):
        """Every listed law can be fetched and matches its listing entry."""
        for summary in store.list_laws():
            law = store.get_law(summary.id)
            assert law.id == summary.id
            assert law.name == summary.name

    def test_get_unknown_law(self, store):
        with pytest.raises(NotFoundError):
            store.get_law("no-such-law")

    def test_law_to_dict_nests_articles(self, store):
        data = store.get_law("acct-principles").to_dict()

        assert data["sections"][1]["articles"][0]["id"] == "ap-bs-5"
        assert set(data["sections"][0]["articles"][0]) == {"id", "number", "title", "content"}

    def test_stats(self, store):
        assert store.stats() == {"laws": 3, "sections": 4, "articles": 18}


class TestCorpusTraversal:
    """Test article traversal order and scoping."""

    def test_traversal_order(self, store):
        ids = [article.id for _, _, article in store.iter_articles()]
        assert ids[:6] == ["ap-1", "ap-4", "ap-bs-5", "ct-57-2", "ct-57-4", "ct-ifrs"]
        assert ids[-1] == "reserves-12"

    def test_scoped_traversal(self, store):
        laws = {law.id for law, _, _ in store.iter_articles("consumption-tax")}
        assert laws == {"consumption-tax"}

    def test_unknown_scope_yields_nothing(self, store):
        assert list(store.iter_articles("missing")) == []


class TestImmutability:
    """The corpus cannot be changed after load."""

    def test_law_is_frozen(self, store):
        law = store.get_law("acct-principles")
        with pytest.raises(dataclasses.FrozenInstanceError):
            law.name = "changed"

    def test_sections_are_tuples(self, store):
        law = store.get_law("acct-principles")
        assert isinstance(law.sections, tuple)
        assert isinstance(law.sections[0].articles, tuple)

    def test_source_dict_changes_do_not_leak(self, corpus_dict):
        store = CorpusStore.from_dict(corpus_dict)
        corpus_dict["laws"][0]["name"] = "changed"

        assert store.get_law("acct-principles").name == "企業会計原則"
