"""Text embedding adapters for the knowledge base."""

from app.adapters.embeddings.base import AbstractEmbedder
from app.adapters.embeddings.hashing import HashingEmbedder

__all__ = ["AbstractEmbedder", "HashingEmbedder"]
