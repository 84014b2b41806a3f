"""Blueprint chunk data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from blueprint_intel.models.enums import BlueprintSection, ContentType


@dataclass
class ChunkMetadata:
    """Descriptive metadata carried alongside every chunk."""

    section_title: str
    field_description: str
    is_editable: bool
    original_value: Any = None

    def to_dict(self) -> dict:
        return {
            "sectionTitle": self.section_title,
            "fieldDescription": self.field_description,
            "isEditable": self.is_editable,
            "originalValue": self.original_value,
        }


@dataclass
class ChunkInput:
    """A semantic unit of a blueprint, ready for embedding but not yet stored."""

    blueprint_id: str
    section: BlueprintSection
    field_path: str
    content: str
    content_type: ContentType
    metadata: ChunkMetadata

    def __post_init__(self):
        if not isinstance(self.section, BlueprintSection):
            self.section = BlueprintSection(self.section)
        if not isinstance(self.content_type, ContentType):
            self.content_type = ContentType(self.content_type)
        if not self.field_path:
            raise ValueError("field_path must not be empty")

    @property
    def key(self) -> tuple[str, str, str]:
        """Natural identity of the chunk, independent of the storage id."""
        return (self.blueprint_id, self.section.value, self.field_path)


@dataclass
class BlueprintChunk(ChunkInput):
    """A stored chunk, optionally annotated with query-time similarity."""

    id: str = ""
    embedding: list[float] = field(default_factory=list)
    similarity: float | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
