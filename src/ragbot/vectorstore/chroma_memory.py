from __future__ import annotations

import asyncio
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import ModuleType
from typing import Any, AsyncIterator, Dict, Optional

from langchain_core.embeddings import Embeddings

chromadb: ModuleType | None = None
try:
    import chromadb as _chromadb

    chromadb = _chromadb
except Exception:  # pragma: no cover - chromadb is optional for tests
    chromadb = None


@dataclass(frozen=True)
class MemoryRecord:
    """A stored (collection, text, id) triple. `id` is also the indexed text."""

    collection: str
    text: str
    id: str


@dataclass(frozen=True)
class MemorySearchResult:
    record: MemoryRecord
    # Chroma distance, lower is more similar
    score: float


class ChromaMemoryStore:
    """Semantic text memory over Chroma with async-friendly methods (runs blocking calls in a threadpool).

    Each memory collection maps to one Chroma collection. The record id is the
    embedded text and the record text rides along in the metadata, so a search
    for a key finds records whose key is semantically close to it.

    Behavior:
    - If `server_url` is provided, uses the remote HTTP client.
    - Else if `persist_directory` is provided, uses a persistent in-process client.
    - Else uses an in-memory ephemeral client.
    """

    def __init__(
        self,
        embedding_function: Embeddings,
        client: Optional[Any] = None,
        persist_directory: Optional[str] = None,
        server_url: Optional[str] = None,
        search_limit: int = 4,
    ):
        if chromadb is None:
            raise ImportError("chromadb is not installed")

        if client is None:
            # Precedence: explicit server_url (remote HTTP client) > persistent
            # local directory > ephemeral in-memory client.
            if server_url:
                from urllib.parse import urlparse

                parsed = urlparse(server_url)
                host = parsed.hostname or "localhost"
                port = parsed.port or (443 if parsed.scheme == "https" else 8000)
                ssl = parsed.scheme == "https"
                client = chromadb.HttpClient(host=host, port=port, ssl=ssl)
            elif persist_directory:
                client = chromadb.PersistentClient(path=persist_directory)
            else:
                client = chromadb.EphemeralClient()

        self.client = client
        self.embedding_function = embedding_function
        self.search_limit = search_limit
        self._collections: Dict[str, Any] = {}
        self._collections_lock = threading.Lock()
        # Operations are short-lived, so a small pool is enough.
        self._executor = ThreadPoolExecutor(max_workers=2)

    def _get_collection(self, name: str):
        """Return the LangChain Chroma wrapper for `name`, creating it on first use.

        Runs inside the threadpool: creating a collection is a network call for remote clients.
        """
        from langchain_chroma import Chroma

        with self._collections_lock:
            store = self._collections.get(name)
            if store is None:
                store = Chroma(collection_name=name, embedding_function=self.embedding_function, client=self.client)
                self._collections[name] = store
            return store

    async def search(self, collection: str, query: str, limit: Optional[int] = None) -> AsyncIterator[MemorySearchResult]:
        """Yield records from `collection` most similar to `query`, most similar first."""
        loop = asyncio.get_running_loop()
        k = limit or self.search_limit

        def _query():
            return self._get_collection(collection).similarity_search_with_score(query, k=k)

        pairs = await loop.run_in_executor(self._executor, _query)
        for doc, score in pairs:
            metadata = doc.metadata or {}
            record = MemoryRecord(
                collection=collection,
                text=metadata.get("text", ""),
                id=metadata.get("id", doc.page_content),
            )
            yield MemorySearchResult(record=record, score=float(score))

    async def save(self, collection: str, text: str, id: str) -> str:
        """Append a record to `collection`, indexed by `id`. Returns the Chroma row id."""
        loop = asyncio.get_running_loop()
        # Append-only: saving an existing id adds another row
        row_id = uuid.uuid4().hex

        def _add():
            self._get_collection(collection).add_texts(texts=[id], metadatas=[{"text": text, "id": id}], ids=[row_id])

        await loop.run_in_executor(self._executor, _add)
        return row_id

    def close(self) -> None:
        self._executor.shutdown(wait=False)


def build_memory_store(embedding_function: Optional[Embeddings] = None) -> ChromaMemoryStore:
    """Create the memory store from the global configuration."""
    from ragbot.config import config
    from ragbot.vectorstore.embeddings import get_embedder

    return ChromaMemoryStore(
        embedding_function=embedding_function or get_embedder(),
        persist_directory=config.chroma_persist_directory,
        server_url=config.chroma_server_url or None,
    )
