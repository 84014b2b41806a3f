"""Indexing pipeline orchestrator.

Wires together: chunker → embedding → chroma_store, and applies confirmed
edits back onto a blueprint before its section is re-chunked.
"""

import copy
import json
import logging
from pathlib import Path

from blueprint_intel.agent.edit_agent import set_value_at_path
from blueprint_intel.embedding.provider import EmbeddingProvider
from blueprint_intel.ingestion.chunker import chunk_blueprint, chunk_section
from blueprint_intel.models.answer import EditResult
from blueprint_intel.models.blueprint import StrategicBlueprint
from blueprint_intel.models.enums import BlueprintSection
from blueprint_intel.vectorstore.chroma_store import ChromaStore, chunk_id_for

logger = logging.getLogger(__name__)


def load_blueprint(path: str | Path) -> StrategicBlueprint:
    """Read a blueprint JSON document from disk.

    Raises:
        ValueError: If the file does not hold a JSON object.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a blueprint object")
    return data


def _prune_stale(
    store: ChromaStore,
    blueprint_id: str,
    keep_ids: set[str],
    section: BlueprintSection | None = None,
) -> int:
    """Delete stored chunks whose natural key no longer exists. Returns count removed."""
    stale = store.chunk_ids(blueprint_id, section) - keep_ids
    store.delete_ids(stale)
    return len(stale)


def index_blueprint(
    blueprint_id: str,
    blueprint: StrategicBlueprint,
    store: ChromaStore,
    embedding_provider: EmbeddingProvider,
    replace: bool = True,
) -> dict:
    """Chunk, embed and store a whole blueprint.

    Steps:
    1. Chunk every section
    2. Embed chunk contents in one batch
    3. Upsert into ChromaDB
    4. Optionally drop stored chunks the new chunk set no longer has

    Stored chunks are only touched once embedding has succeeded, so a failed
    re-index leaves the previous index in place.

    Returns a summary dict with counts.
    """
    chunks = chunk_blueprint(blueprint_id, blueprint)
    sections = sorted({c.section.value for c in chunks})

    stored = 0
    if chunks:
        embeddings = embedding_provider.embed([c.content for c in chunks])
        stored = store.upsert_chunks(chunks, embeddings)
    else:
        logger.warning("No chunks produced for blueprint %s", blueprint_id)

    if replace:
        keep_ids = {chunk_id_for(*c.key) for c in chunks}
        removed = _prune_stale(store, blueprint_id, keep_ids)
        if removed:
            logger.info("Removed %d stale chunks for blueprint %s", removed, blueprint_id)

    logger.info(
        "Indexed blueprint %s: %d chunks across %d sections",
        blueprint_id, stored, len(sections),
    )
    return {"blueprint_id": blueprint_id, "chunks_stored": stored, "sections": sections}


def rechunk_section(
    blueprint_id: str,
    section: BlueprintSection,
    blueprint: StrategicBlueprint,
    store: ChromaStore,
    embedding_provider: EmbeddingProvider,
) -> int:
    """Replace one section's chunks after its data changed. Returns chunks stored."""
    chunks = chunk_section(blueprint_id, section, blueprint.get(section.value))

    stored = 0
    if chunks:
        embeddings = embedding_provider.embed([c.content for c in chunks])
        stored = store.upsert_chunks(chunks, embeddings)

    keep_ids = {chunk_id_for(*c.key) for c in chunks}
    _prune_stale(store, blueprint_id, keep_ids, section)
    logger.info("Re-chunked %s/%s: %d chunks", blueprint_id, section.value, stored)
    return stored


def apply_confirmed_edit(blueprint: StrategicBlueprint, edit: EditResult) -> StrategicBlueprint:
    """Return a copy of ``blueprint`` with a confirmed edit applied.

    Raises:
        KeyError: If the edit's section or field path does not exist.
    """
    updated = copy.deepcopy(blueprint)
    section_data = updated.get(edit.section.value)
    if not isinstance(section_data, dict):
        raise KeyError(edit.section.value)

    set_value_at_path(section_data, edit.field_path, edit.new_value)
    logger.info("Applied edit to %s.%s", edit.section.value, edit.field_path)
    return updated
