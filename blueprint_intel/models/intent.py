"""Chat intent data models.

A ChatIntent is one of five frozen variants. Each variant carries its tag as a
class-level ``type`` so pattern matching and routing never depend on optional
fields of a shared shape.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Union

from blueprint_intel.llm.usage import Usage
from blueprint_intel.models.enums import BlueprintSection, IntentType


@dataclass(frozen=True)
class QuestionIntent:
    type: ClassVar[IntentType] = IntentType.QUESTION

    topic: str
    sections: tuple[BlueprintSection, ...] = ()

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "topic": self.topic,
            "sections": [s.value for s in self.sections],
        }


@dataclass(frozen=True)
class EditIntent:
    type: ClassVar[IntentType] = IntentType.EDIT

    section: BlueprintSection
    field: str = ""
    desired_change: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "section": self.section.value,
            "field": self.field,
            "desiredChange": self.desired_change,
        }


@dataclass(frozen=True)
class ExplainIntent:
    type: ClassVar[IntentType] = IntentType.EXPLAIN

    section: BlueprintSection
    field: str = ""
    what_to_explain: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "section": self.section.value,
            "field": self.field,
            "whatToExplain": self.what_to_explain,
        }


@dataclass(frozen=True)
class RegenerateIntent:
    type: ClassVar[IntentType] = IntentType.REGENERATE

    section: BlueprintSection
    instructions: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "section": self.section.value,
            "instructions": self.instructions,
        }


@dataclass(frozen=True)
class GeneralIntent:
    type: ClassVar[IntentType] = IntentType.GENERAL

    topic: str = "conversation"

    def to_dict(self) -> dict:
        return {"type": self.type.value, "topic": self.topic}


ChatIntent = Union[QuestionIntent, EditIntent, ExplainIntent, RegenerateIntent, GeneralIntent]


@dataclass
class IntentClassificationResult:
    """Classified intent plus the cost of classifying it."""

    intent: ChatIntent
    usage: Usage = field(default_factory=Usage)
    cost: float = 0.0
