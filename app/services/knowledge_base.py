"""In-memory retrieval over the static site content.

Entries are split into overlapping character chunks, embedded once at
construction, and searched by brute-force cosine similarity. The corpus is a
few dozen chunks, so a single matrix product per query is enough.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from app.adapters.embeddings import AbstractEmbedder, HashingEmbedder
from app.core.config import KnowledgeBaseSettings, settings
from app.services.knowledge_corpus import DEFAULT_ENTRIES, KnowledgeEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KnowledgeChunk:
    content: str
    source: str
    type: str
    language: str
    title: str


@dataclass(frozen=True)
class KnowledgeMatch:
    chunk: KnowledgeChunk
    score: float


def split_text(text: str, chunk_size: int = 1000, overlap: int = 200) -> list[str]:
    """Split ``text`` into windows of at most ``chunk_size`` characters.

    Consecutive windows share ``overlap`` characters. A window is cut back to
    the last space inside it, and the next one starts on a word boundary,
    when there is a space to use.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    if not 0 <= overlap < chunk_size:
        raise ValueError("overlap must be >= 0 and smaller than chunk_size")

    text = text.strip()
    if len(text) <= chunk_size:
        return [text] if text else []

    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        if end < len(text):
            space = text.rfind(" ", start + overlap + 1, end)
            if space != -1:
                end = space
        chunks.append(text[start:end].strip())
        if end >= len(text):
            break
        start = end - overlap
        if text[start - 1] != " ":
            boundary = text.find(" ", start, end)
            if boundary != -1:
                start = boundary + 1
    return [chunk for chunk in chunks if chunk]


class KnowledgeBase:
    def __init__(
        self,
        entries: Iterable[KnowledgeEntry],
        embedder: AbstractEmbedder,
        *,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        self._embedder = embedder
        self._chunks: list[KnowledgeChunk] = [
            KnowledgeChunk(
                content=piece,
                source=entry.source,
                type=entry.type,
                language=entry.language,
                title=entry.title,
            )
            for entry in entries
            for piece in split_text(entry.text, chunk_size, chunk_overlap)
        ]
        self._languages = np.array([chunk.language for chunk in self._chunks], dtype=str)
        self._matrix = (
            embedder.embed([chunk.content for chunk in self._chunks])
            if self._chunks
            else np.zeros((0, embedder.dim), dtype=np.float32)
        )
        logger.info("knowledge_base.loaded", extra={"chunks": len(self._chunks)})

    @classmethod
    def from_settings(
        cls,
        kb_settings: KnowledgeBaseSettings | None = None,
        entries: Iterable[KnowledgeEntry] = DEFAULT_ENTRIES,
    ) -> KnowledgeBase:
        cfg = kb_settings or settings.kb
        return cls(
            entries,
            HashingEmbedder(cfg.embedding_dim),
            chunk_size=cfg.chunk_size,
            chunk_overlap=cfg.chunk_overlap,
        )

    def __len__(self) -> int:
        return len(self._chunks)

    def search(
        self,
        query: str,
        language: str,
        *,
        k: int = 3,
        min_score: float = 0.0,
    ) -> list[KnowledgeMatch]:
        """Best ``k`` chunks in ``language`` scoring at least ``min_score``.

        Results are ordered by descending cosine similarity; ties keep corpus
        order. A query with no indexable words matches nothing.
        """
        if k < 1 or not query.strip():
            return []

        candidates = np.flatnonzero(self._languages == language)
        if candidates.size == 0:
            return []

        query_vector = self._embedder.embed([query])[0]
        if not query_vector.any():
            return []

        scores = self._matrix[candidates] @ query_vector
        order = np.argsort(-scores, kind="stable")[:k]

        return [
            KnowledgeMatch(chunk=self._chunks[candidates[i]], score=float(scores[i]))
            for i in order
            if scores[i] >= min_score
        ]
