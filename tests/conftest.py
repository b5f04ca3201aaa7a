"""
Shared fixtures: a small in-memory corpus, the search stack built on it,
and a scripted chat model for driving the orchestrator without a network.
"""

import json
import threading
import time

import pytest

from lawsearch.corpus import CorpusStore
from lawsearch.retrieval import SearchEngine, SearchTool


RESERVE_ARTICLE_COUNT = 12


def _corpus_dict() -> dict:
    reserves = [
        {
            "id": f"reserves-{i}",
            "number": i,
            "title": f"第{i}項",
            "content": f"引当金の計上に関する規定その{i}。",
        }
        for i in range(1, RESERVE_ARTICLE_COUNT + 1)
    ]
    return {
        "laws": [
            {
                "id": "acct-principles",
                "name": "企業会計原則",
                "category": "会計基準",
                "sections": [
                    {
                        "id": "ap-general",
                        "title": "第一 一般原則",
                        "articles": [
                            {
                                "id": "ap-1",
                                "number": 1,
                                "title": "真実性の原則",
                                "content": "企業会計は、企業の財政状態及び経営成績に関して、真実な報告を提供するものでなければならない。",
                            },
                            {
                                "id": "ap-4",
                                "number": 4,
                                "title": "明瞭性の原則",
                                "content": "企業会計は、財務諸表によって、利害関係者に対し必要な会計事実を明瞭に表示しなければならない。",
                            },
                        ],
                    },
                    {
                        "id": "ap-bs",
                        "title": "第三 貸借対照表原則",
                        "articles": [
                            {
                                "id": "ap-bs-5",
                                "number": 5,
                                "title": "資産の貸借対照表価額",
                                "content": "減価償却の方法には、定額法、定率法等がある。有形固定資産はその取得原価を各事業年度に配分しなければならない。",
                            },
                        ],
                    },
                ],
            },
            {
                "id": "consumption-tax",
                "name": "消費税法",
                "category": "税法",
                "sections": [
                    {
                        "id": "ct-misc",
                        "title": "第五章 雑則",
                        "articles": [
                            {
                                "id": "ct-57-2",
                                "number": "第五十七条の二",
                                "title": "インボイス発行事業者の登録",
                                "content": "適格請求書発行事業者の登録を受けようとする事業者は、申請書を提出しなければならない。",
                            },
                            {
                                "id": "ct-57-4",
                                "number": "第五十七条の四",
                                "title": "適格請求書の交付",
                                "content": "取引の相手方から求められたときは、インボイスを交付しなければならない。",
                            },
                            {
                                "id": "ct-ifrs",
                                "number": "附則",
                                "title": "IFRS Note",
                                "content": "Entities applying ifrs shall disclose the effect.",
                            },
                        ],
                    },
                ],
            },
            {
                "id": "reserves",
                "name": "引当金基準",
                "category": "会計基準",
                "sections": [
                    {"id": "reserves-main", "title": "本則", "articles": reserves},
                ],
            },
        ]
    }


@pytest.fixture
def corpus_dict():
    """Raw corpus document as it would appear in laws.json."""
    return _corpus_dict()


@pytest.fixture
def corpus_file(tmp_path, corpus_dict):
    path = tmp_path / "laws.json"
    path.write_text(json.dumps(corpus_dict, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def store(corpus_dict):
    return CorpusStore.from_dict(corpus_dict)


@pytest.fixture
def engine(store):
    return SearchEngine(store)


@pytest.fixture
def search_tool(engine):
    return SearchTool(engine)


class ScriptedChatModel:
    """Chat model that replays a fixed list of turns.

    Each scripted item is a ModelTurn, an exception instance (raised), or a
    number of seconds to sleep before returning the next item.
    """

    def __init__(self, turns):
        self.turns = list(turns)
        self.calls = []
        self._lock = threading.Lock()

    def send_turn(self, transcript, tools, system_instruction):
        with self._lock:
            self.calls.append({
                "transcript": list(transcript),
                "tools": list(tools),
                "system_instruction": system_instruction,
            })
            if not self.turns:
                raise AssertionError("ScriptedChatModel ran out of turns")
            turn = self.turns.pop(0)

        if isinstance(turn, (int, float)):
            time.sleep(turn)
            with self._lock:
                turn = self.turns.pop(0)
        if isinstance(turn, Exception):
            raise turn
        return turn


@pytest.fixture
def scripted_model():
    """Factory: scripted_model(turn1, turn2, ...)."""
    return lambda *turns: ScriptedChatModel(turns)
