"""Similarity retrieval of blueprint chunks and prompt context rendering."""

import logging
from dataclasses import dataclass, field

from blueprint_intel.embedding.provider import EmbeddingProvider
from blueprint_intel.models.chunk import BlueprintChunk, ChunkMetadata
from blueprint_intel.models.enums import BlueprintSection
from blueprint_intel.vectorstore.base import MATCH_BLUEPRINT_CHUNKS, VectorStore

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.7
DEFAULT_MATCH_COUNT = 5

# Rough embedding price: $0.02 per 1M tokens at ~4 chars per token
EMBEDDING_COST_PER_TOKEN = 0.00002

NO_CONTEXT_MESSAGE = "No relevant context found in the blueprint."


class RetrievalError(RuntimeError):
    """The vector store rejected or failed a similarity search."""


@dataclass
class RetrievalResult:
    chunks: list[BlueprintChunk] = field(default_factory=list)
    embedding_cost: float = 0.0


def estimate_embedding_cost(query: str) -> float:
    """Approximate cost of embedding ``query``, for usage accounting only."""
    return EMBEDDING_COST_PER_TOKEN * (len(query) / 4)


def chunk_from_row(row: dict, blueprint_id: str) -> BlueprintChunk:
    """Map a snake_case ``match_blueprint_chunks`` row to a BlueprintChunk.

    The store does not echo embeddings back, so ``embedding`` is always empty.
    Raises ``KeyError`` or ``ValueError`` for a row with a missing field, an
    unknown section or content type, or an empty field path.
    """
    metadata = row.get("metadata") or {}
    similarity = row.get("similarity")
    return BlueprintChunk(
        id=str(row.get("id", "")),
        blueprint_id=blueprint_id,
        section=BlueprintSection(row["section"]),
        field_path=row["field_path"],
        content=row.get("content") or "",
        content_type=row.get("content_type") or "string",
        metadata=ChunkMetadata(
            section_title=metadata.get("sectionTitle", ""),
            field_description=metadata.get("fieldDescription", ""),
            is_editable=bool(metadata.get("isEditable", False)),
            original_value=metadata.get("originalValue"),
        ),
        embedding=[],
        similarity=float(similarity) if similarity is not None else None,
    )


def build_context_from_chunks(chunks: list[BlueprintChunk]) -> str:
    """Render chunks as a numbered, citation-style block for an LLM prompt."""
    if not chunks:
        return NO_CONTEXT_MESSAGE

    entries = []
    for i, chunk in enumerate(chunks, 1):
        relevance = ""
        if chunk.similarity:
            relevance = f" (relevance: {chunk.similarity * 100:.0f}%)"
        entries.append(
            f"[{i}] {chunk.metadata.section_title} - "
            f"{chunk.metadata.field_description}{relevance}:\n{chunk.content}"
        )
    return "\n\n".join(entries)


class BlueprintRetriever:
    """Embeds a query and runs the store's similarity RPC for one blueprint."""

    def __init__(self, store: VectorStore, embedding_provider: EmbeddingProvider):
        self._store = store
        self._embedding_provider = embedding_provider

    async def retrieve(
        self,
        blueprint_id: str,
        query: str,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
        match_count: int = DEFAULT_MATCH_COUNT,
        section_filter: BlueprintSection | None = None,
    ) -> RetrievalResult:
        """Return the chunks of ``blueprint_id`` most similar to ``query``.

        An empty result is a valid outcome, not an error.

        Raises:
            RetrievalError: If the store reports an error for the search or
                returns a row that does not map to a chunk.
        """
        query_embedding = await self._embedding_provider.aembed_query(query)

        response = await self._store.rpc(MATCH_BLUEPRINT_CHUNKS, {
            "query_embedding": query_embedding,
            "p_blueprint_id": blueprint_id,
            "match_threshold": match_threshold,
            "match_count": match_count,
            "section_filter": section_filter.value if section_filter else None,
        })

        if response.error is not None:
            raise RetrievalError(f"Retrieval failed: {response.error.message}")

        try:
            chunks = [chunk_from_row(row, blueprint_id) for row in response.data or []]
        except (KeyError, ValueError) as exc:
            logger.error("Malformed match_blueprint_chunks row for %s: %s", blueprint_id, exc)
            raise RetrievalError(f"Retrieval failed: malformed result row ({exc})") from exc

        logger.info(
            "Retrieved %d chunks for blueprint %s (threshold=%.2f, section=%s)",
            len(chunks), blueprint_id, match_threshold,
            section_filter.value if section_filter else "all",
        )
        return RetrievalResult(
            chunks=chunks,
            embedding_cost=estimate_embedding_cost(query),
        )
