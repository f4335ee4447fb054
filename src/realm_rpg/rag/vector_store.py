from __future__ import annotations

from pathlib import Path
from typing import Any

import chromadb


class VectorStore:
    """ChromaDB wrapper managing namespaced collections for game knowledge.

    Documents are embedded by the collection's default embedding function.
    """

    def __init__(
        self,
        persist_dir: str = "data/chromadb",
        collection_prefix: str = "realm_rpg",
    ) -> None:
        self.persist_dir = persist_dir
        self.collection_prefix = collection_prefix
        Path(persist_dir).mkdir(parents=True, exist_ok=True)
        self.client = chromadb.PersistentClient(path=persist_dir)
        self._collections: dict[str, chromadb.Collection] = {}

    def get_collection(self, name: str) -> chromadb.Collection:
        """Return (or lazily create) a namespaced ChromaDB collection."""
        full_name = f"{self.collection_prefix}_{name}"
        if full_name not in self._collections:
            self._collections[full_name] = self.client.get_or_create_collection(
                name=full_name,
                metadata={"hnsw:space": "cosine"},
            )
        return self._collections[full_name]

    def upsert_documents(
        self,
        collection_name: str,
        documents: list[str],
        metadatas: list[dict[str, Any]],
        ids: list[str],
    ) -> None:
        """Insert or replace documents by id."""
        self.get_collection(collection_name).upsert(
            documents=documents,
            metadatas=metadatas,
            ids=ids,
        )

    def query(
        self,
        collection_name: str,
        query_texts: list[str],
        n_results: int = 5,
        where: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Semantic search against a collection."""
        collection = self.get_collection(collection_name)
        kwargs: dict[str, Any] = {
            "query_texts": query_texts,
            "n_results": n_results,
        }
        if where:
            kwargs["where"] = where
        return collection.query(**kwargs)

    def count(self, collection_name: str) -> int:
        """Return the number of documents in a collection."""
        return self.get_collection(collection_name).count()
