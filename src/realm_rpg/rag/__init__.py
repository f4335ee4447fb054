from __future__ import annotations

from realm_rpg.rag.indexer import Indexer

__all__ = [
    "Indexer",
]
