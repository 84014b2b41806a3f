"""ChromaDB vector store for blueprint chunks."""

import asyncio
import json
import logging
import uuid
from datetime import datetime

import chromadb
from chromadb.config import Settings as ChromaSettings
from chromadb.errors import ChromaError

from blueprint_intel.models.chunk import ChunkInput
from blueprint_intel.models.enums import BlueprintSection
from blueprint_intel.vectorstore.base import (
    MATCH_BLUEPRINT_CHUNKS,
    RPCError,
    RPCResult,
    VectorStore,
)

logger = logging.getLogger(__name__)

COLLECTION_NAME = "blueprint_chunks"


def chunk_id_for(blueprint_id: str, section: str, field_path: str) -> str:
    """Stable id for a chunk's natural key, so re-indexing overwrites in place."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"blueprint-chunk:{blueprint_id}/{section}/{field_path}"))


class ChromaStore(VectorStore):
    """ChromaDB-backed store serving the ``match_blueprint_chunks`` RPC.

    Manages a single collection ('blueprint_chunks') with cosine distance.
    Chunk metadata is flattened into Chroma metadata; the untransformed
    original value is kept as JSON text.
    """

    def __init__(self, path: str = "./data/chroma"):
        if path == ":memory:":
            self._client = chromadb.Client()
        else:
            self._client = chromadb.PersistentClient(
                path=path,
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        self._collection = self._client.get_or_create_collection(
            name=COLLECTION_NAME,
            metadata={"hnsw:space": "cosine"},
        )

    def upsert_chunks(self, chunks: list[ChunkInput], embeddings: list[list[float]]) -> int:
        """Insert or replace chunks by their (blueprint, section, field path) key.

        Returns the number of chunks written.
        """
        if not chunks:
            return 0
        if len(chunks) != len(embeddings):
            raise ValueError(
                f"got {len(chunks)} chunks but {len(embeddings)} embeddings"
            )

        now = datetime.now().isoformat()
        ids = []
        documents = []
        metadatas = []
        for chunk in chunks:
            ids.append(chunk_id_for(*chunk.key))
            documents.append(chunk.content)
            metadatas.append({
                "blueprint_id": chunk.blueprint_id,
                "section": chunk.section.value,
                "field_path": chunk.field_path,
                "content_type": chunk.content_type.value,
                "section_title": chunk.metadata.section_title,
                "field_description": chunk.metadata.field_description,
                "is_editable": chunk.metadata.is_editable,
                "original_value": json.dumps(chunk.metadata.original_value),
                "updated_at": now,
            })

        self._collection.upsert(
            ids=ids,
            embeddings=embeddings,
            documents=documents,
            metadatas=metadatas,
        )
        return len(ids)

    def delete_chunks(self, blueprint_id: str, section: BlueprintSection | None = None) -> None:
        """Delete a blueprint's chunks, optionally only those of one section."""
        self._collection.delete(where=self._where(blueprint_id, section))

    def chunk_ids(self, blueprint_id: str, section: BlueprintSection | None = None) -> set[str]:
        """Return the ids stored for a blueprint, optionally only one section."""
        results = self._collection.get(where=self._where(blueprint_id, section), include=[])
        return set(results["ids"])

    def delete_ids(self, ids: set[str] | list[str]) -> None:
        if ids:
            self._collection.delete(ids=list(ids))

    def count_chunks(self, blueprint_id: str) -> int:
        results = self._collection.get(where=self._where(blueprint_id), include=[])
        return len(results["ids"])

    def has_chunks(self, blueprint_id: str) -> bool:
        results = self._collection.get(where=self._where(blueprint_id), limit=1, include=[])
        return len(results["ids"]) > 0

    @property
    def count(self) -> int:
        """Return the number of chunks in the collection."""
        return self._collection.count()

    async def rpc(self, name: str, params: dict) -> RPCResult:
        if name != MATCH_BLUEPRINT_CHUNKS:
            return RPCResult(error=RPCError(message=f"Unknown function: {name}"))

        try:
            rows = await asyncio.to_thread(
                self.match_blueprint_chunks,
                params["query_embedding"],
                params["p_blueprint_id"],
                params.get("match_threshold", 0.7),
                params.get("match_count", 5),
                params.get("section_filter"),
            )
        except KeyError as exc:
            return RPCResult(error=RPCError(message=f"Missing parameter: {exc.args[0]}"))
        except (ChromaError, ValueError) as exc:
            logger.error("match_blueprint_chunks failed: %s", exc)
            return RPCResult(error=RPCError(message=str(exc)))
        return RPCResult(data=rows)

    def match_blueprint_chunks(
        self,
        query_embedding: list[float],
        blueprint_id: str,
        match_threshold: float = 0.7,
        match_count: int = 5,
        section_filter: str | None = None,
    ) -> list[dict]:
        """Rows above the similarity threshold, most similar first.

        Similarity is ``1 - cosine distance``.
        """
        section = BlueprintSection(section_filter) if section_filter else None
        where = self._where(blueprint_id, section)

        # Chroma rejects n_results larger than the filtered candidate set
        available = len(self._collection.get(where=where, include=[])["ids"])
        if available == 0 or match_count <= 0:
            return []

        results = self._collection.query(
            query_embeddings=[query_embedding],
            n_results=min(match_count, available),
            where=where,
            include=["documents", "metadatas", "distances"],
        )

        rows = []
        if results["ids"] and results["ids"][0]:
            for i, chunk_id in enumerate(results["ids"][0]):
                similarity = 1.0 - results["distances"][0][i]
                if similarity <= match_threshold:
                    continue
                metadata = results["metadatas"][0][i] or {}
                rows.append({
                    "id": chunk_id,
                    "section": metadata.get("section", ""),
                    "field_path": metadata.get("field_path", ""),
                    "content": results["documents"][0][i] or "",
                    "content_type": metadata.get("content_type", "string"),
                    "metadata": {
                        "sectionTitle": metadata.get("section_title", ""),
                        "fieldDescription": metadata.get("field_description", ""),
                        "isEditable": bool(metadata.get("is_editable", False)),
                        "originalValue": json.loads(metadata.get("original_value") or "null"),
                    },
                    "similarity": similarity,
                })

        rows.sort(key=lambda r: r["similarity"], reverse=True)
        return rows

    @staticmethod
    def _where(blueprint_id: str, section: BlueprintSection | None = None) -> dict:
        if section is None:
            return {"blueprint_id": blueprint_id}
        return {"$and": [
            {"blueprint_id": blueprint_id},
            {"section": section.value},
        ]}
