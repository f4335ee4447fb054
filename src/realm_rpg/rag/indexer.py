from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from realm_rpg.models.action import IndexUpdate

if TYPE_CHECKING:
    from realm_rpg.rag.vector_store import VectorStore

logger = logging.getLogger(__name__)

ENTITY_COLLECTION = "entities"


class Indexer:
    """Upserts entity index updates into the vector store."""

    def __init__(self, vector_store: VectorStore, collection: str = ENTITY_COLLECTION) -> None:
        self.store = vector_store
        self.collection = collection

    @staticmethod
    def document_id(update: IndexUpdate) -> str:
        return f"{update.type}:{update.id}"

    def apply_updates(self, updates: list[IndexUpdate]) -> int:
        """Upsert a batch of updates; the last update per id wins.

        Returns the number of documents written.
        """
        latest: dict[str, IndexUpdate] = {}
        for update in updates:
            latest[self.document_id(update)] = update
        if not latest:
            return 0

        ids = list(latest)
        documents = [u.content for u in latest.values()]
        metadatas: list[dict[str, Any]] = [
            {"entity_type": u.type, "entity_id": u.id} for u in latest.values()
        ]
        self.store.upsert_documents(self.collection, documents, metadatas, ids)
        logger.info("Indexed %d entity document(s).", len(ids))
        return len(ids)

    def search(self, text: str, n_results: int = 5, entity_type: str | None = None) -> list[str]:
        """Return the documents most relevant to *text*."""
        where = {"entity_type": entity_type} if entity_type else None
        result = self.store.query(self.collection, [text], n_results=n_results, where=where)
        documents = result.get("documents") or [[]]
        return list(documents[0])
