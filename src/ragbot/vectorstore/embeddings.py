from __future__ import annotations

import hashlib
from typing import List

from langchain_core.embeddings import Embeddings

from ragbot.config import config


class HashEmbedding(Embeddings):
    """Deterministic, lightweight embedding used for tests or when no model is present.

    It turns SHA256 digests into small float vectors, so identical texts always
    land on identical vectors.
    """

    def __init__(self, dim: int = 32):
        if not 0 < dim <= 32:
            raise ValueError("dim must be between 1 and 32")
        self.dim = dim

    def _embed(self, text: str) -> List[float]:
        h = hashlib.sha256(text.encode("utf-8")).digest()
        return [((b % 127) - 63) / 63.0 for b in h[: self.dim]]

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        return [self._embed(t) for t in texts]

    def embed_query(self, text: str) -> List[float]:
        return self._embed(text)


def get_embedder() -> Embeddings:
    """Create the embedding function used by the vector memory.

    Returns OllamaEmbeddings for the configured model, or HashEmbedding when
    RAGBOT_EMBEDDINGS=hash.
    """
    if config.embedding_backend == "hash":
        return HashEmbedding()

    from langchain_ollama import OllamaEmbeddings

    return OllamaEmbeddings(model=config.ollama_embed_model, base_url=config.ollama_base_url)
