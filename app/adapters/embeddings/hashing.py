"""Feature-hashing embedder.

Unigrams and bigrams of accent-folded, lowercased words (stopwords removed)
are hashed into a fixed number of signed buckets. Deterministic across
processes and needs no model download, which suits a corpus of a few dozen
marketing paragraphs.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata

import numpy as np

from app.adapters.embeddings.base import AbstractEmbedder

_WORD_RE = re.compile(r"[a-z0-9]+")

STOPWORDS: frozenset[str] = frozenset(
    {
        # en
        "a", "an", "and", "are", "as", "at", "be", "by", "can", "do", "does",
        "for", "from", "how", "i", "in", "is", "it", "me", "my", "of", "on",
        "or", "our", "the", "to", "we", "what", "which", "who", "with", "you",
        "your",
        # es
        "al", "como", "con", "cual", "de", "del", "el", "en", "es", "la",
        "las", "lo", "los", "me", "mi", "nuestro", "nuestra", "o", "para",
        "por", "que", "se", "su", "sus", "tu", "un", "una", "vuestro",
        "vuestra", "y",
    }
)


def fold(text: str) -> str:
    """Lowercase and strip accents ("¿Cuál?" -> "¿cual?")."""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def tokenize(text: str) -> list[str]:
    return [
        word
        for word in _WORD_RE.findall(fold(text))
        if len(word) > 1 and word not in STOPWORDS
    ]


def features(text: str) -> list[str]:
    words = tokenize(text)
    return words + [f"{a} {b}" for a, b in zip(words, words[1:])]


class HashingEmbedder(AbstractEmbedder):
    def __init__(self, dim: int = 4096) -> None:
        if dim < 1:
            raise ValueError("dim must be >= 1")
        self.dim = dim

    def _bucket(self, feature: str) -> tuple[int, float]:
        digest = hashlib.blake2b(feature.encode("utf-8"), digest_size=8).digest()
        value = int.from_bytes(digest, "little")
        sign = -1.0 if value >> 63 else 1.0
        return value % self.dim, sign

    def embed(self, texts: list[str]) -> np.ndarray:
        matrix = np.zeros((len(texts), self.dim), dtype=np.float32)
        for row, text in enumerate(texts):
            for feature in features(text):
                index, sign = self._bucket(feature)
                matrix[row, index] += sign

        norms = np.linalg.norm(matrix, axis=1, keepdims=True)
        np.divide(matrix, norms, out=matrix, where=norms > 0)
        return matrix
