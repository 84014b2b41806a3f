"""Token usage accounting for chat completions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Usage:
    """Token counts reported for one or more model calls."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    @classmethod
    def from_metadata(cls, usage_metadata: dict | None) -> "Usage":
        """Build from LangChain's ``AIMessage.usage_metadata`` (may be missing)."""
        if not usage_metadata:
            return cls()
        prompt = int(usage_metadata.get("input_tokens", 0) or 0)
        completion = int(usage_metadata.get("output_tokens", 0) or 0)
        total = int(usage_metadata.get("total_tokens", 0) or 0) or prompt + completion
        return cls(prompt_tokens=prompt, completion_tokens=completion, total_tokens=total)
