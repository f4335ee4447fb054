"""Tests for src/realm_rpg/rag/indexer.py."""
from __future__ import annotations

import pytest

from realm_rpg.models.action import IndexUpdate
from realm_rpg.rag.indexer import ENTITY_COLLECTION, Indexer


class FakeStore:
    """Records calls in place of the ChromaDB-backed store."""

    def __init__(self, documents: list[str] | None = None):
        self.upserts: list[dict] = []
        self.queries: list[dict] = []
        self.documents = documents or []

    def upsert_documents(self, collection_name, documents, metadatas, ids):
        self.upserts.append({
            "collection": collection_name,
            "documents": documents,
            "metadatas": metadatas,
            "ids": ids,
        })

    def query(self, collection_name, query_texts, n_results=5, where=None):
        self.queries.append({"collection": collection_name, "texts": query_texts, "n": n_results, "where": where})
        return {"documents": [self.documents], "ids": [[]]}


@pytest.fixture
def store():
    return FakeStore(documents=["NPC: Elder Mo", "Faction: Blood Sect"])


class TestApplyUpdates:
    def test_last_update_wins(self, store):
        indexer = Indexer(store)
        written = indexer.apply_updates([
            IndexUpdate(id="elder_mo", type="npc", content="first"),
            IndexUpdate(id="blood_sect", type="faction", content="sect"),
            IndexUpdate(id="elder_mo", type="npc", content="second"),
        ])
        assert written == 2
        call = store.upserts[0]
        assert call["collection"] == ENTITY_COLLECTION
        assert call["ids"] == ["npc:elder_mo", "faction:blood_sect"]
        assert call["documents"] == ["second", "sect"]
        assert call["metadatas"][0] == {"entity_type": "npc", "entity_id": "elder_mo"}

    def test_same_id_different_type_kept_apart(self, store):
        written = Indexer(store).apply_updates([
            IndexUpdate(id="jade", type="item", content="a"),
            IndexUpdate(id="jade", type="location", content="b"),
        ])
        assert written == 2

    def test_empty_batch(self, store):
        assert Indexer(store).apply_updates([]) == 0
        assert store.upserts == []


class TestSearch:
    def test_returns_first_result_list(self, store):
        assert Indexer(store).search("sect elders") == ["NPC: Elder Mo", "Faction: Blood Sect"]
        assert store.queries[0]["where"] is None

    def test_filter_by_type(self, store):
        Indexer(store, collection="lore").search("sect", n_results=2, entity_type="faction")
        query = store.queries[0]
        assert (query["collection"], query["n"], query["where"]) == ("lore", 2, {"entity_type": "faction"})

    def test_empty_result(self):
        assert Indexer(FakeStore()).search("anything") == []
