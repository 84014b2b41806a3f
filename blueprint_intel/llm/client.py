"""Chat gateway: one awaited model call per request, with usage and cost.

Two call shapes are exposed. ``chat`` returns free text; ``chat_json``
additionally extracts and parses a JSON object from the reply. Neither
retries: callers get exactly one model round-trip per call.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from blueprint_intel.llm.config import get_llm
from blueprint_intel.llm.usage import Usage
from config.settings import get_settings

logger = logging.getLogger(__name__)

# Approximate USD per 1M tokens (input, output), for usage reporting only
MODEL_COSTS = {
    "claude-sonnet-4-5-20250929": {"input": 3.0, "output": 15.0},
    "gemini-2.0-flash": {"input": 0.075, "output": 0.30},
    "gemini-2.5-flash": {"input": 0.30, "output": 2.50},
}
DEFAULT_MODEL_COST = {"input": 1.0, "output": 1.0}


class JSONResponseError(ValueError):
    """The model reply did not contain a parseable JSON object."""


@dataclass
class ChatResponse:
    content: str
    usage: Usage = field(default_factory=Usage)
    cost: float = 0.0


@dataclass
class JSONChatResponse:
    data: dict[str, Any]
    usage: Usage = field(default_factory=Usage)
    cost: float = 0.0


def estimate_cost(model: str, usage: Usage) -> float:
    costs = MODEL_COSTS.get(model, DEFAULT_MODEL_COST)
    input_cost = (usage.prompt_tokens / 1_000_000) * costs["input"]
    output_cost = (usage.completion_tokens / 1_000_000) * costs["output"]
    return input_cost + output_cost


def to_langchain_messages(messages: list[dict]) -> list[BaseMessage]:
    """Convert ``{"role", "content"}`` dicts into LangChain message objects."""
    converted = []
    for message in messages:
        role = message.get("role")
        content = message.get("content", "")
        if role == "system":
            converted.append(SystemMessage(content=content))
        elif role == "assistant":
            converted.append(AIMessage(content=content))
        else:
            converted.append(HumanMessage(content=content))
    return converted


def trailing_history(chat_history: list[dict] | None, window: int) -> list[dict]:
    """Return the most recent ``window`` user/assistant turns, oldest first."""
    if not chat_history or window <= 0:
        return []
    turns = [
        {"role": m["role"], "content": m.get("content", "")}
        for m in chat_history
        if m.get("role") in ("user", "assistant")
    ]
    return turns[-window:]


def _message_text(response: BaseMessage) -> str:
    content = response.content
    if isinstance(content, str):
        return content
    # Some providers return a list of content blocks
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def _extract_balanced(text: str, open_char: str, close_char: str) -> str | None:
    """Return the prefix of ``text`` up to the bracket that closes its first char."""
    depth = 0
    in_string = False
    escaped = False
    for i, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return text[: i + 1]
    return None


def extract_json(content: str) -> str | None:
    """Find a JSON object in a model reply.

    Tries, in order: the whole reply, the reply with markdown code fences
    stripped, and a balanced-brace scan from the first ``{``.
    """
    if not content or not isinstance(content, str):
        return None

    candidates = [content.strip()]

    # Strip markdown code fences if present (LLMs often wrap JSON in ```json ... ```)
    fenced = re.search(r"```(?:json)?\s*([\s\S]*?)```", content)
    if fenced:
        candidates.append(fenced.group(1).strip())

    for text in candidates:
        try:
            json.loads(text)
            return text
        except json.JSONDecodeError:
            pass

    for text in candidates:
        start = text.find("{")
        if start == -1:
            continue
        balanced = _extract_balanced(text[start:], "{", "}")
        if balanced is None:
            continue
        try:
            json.loads(balanced)
            return balanced
        except json.JSONDecodeError:
            continue
    return None


def parse_json_object(content: str) -> dict | None:
    """Parse a JSON object out of a model reply; None if there is none."""
    text = extract_json(content)
    if text is None:
        return None
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        return None
    return parsed


async def chat(
    messages: list[dict],
    temperature: float = 0.3,
    max_tokens: int = 1024,
    json_mode: bool = False,
) -> ChatResponse:
    """Send one chat completion and return its text, usage and cost."""
    llm = get_llm(temperature=temperature, max_tokens=max_tokens, json_mode=json_mode)
    response = await llm.ainvoke(to_langchain_messages(messages))

    usage = Usage.from_metadata(getattr(response, "usage_metadata", None))
    model = get_settings().blueprint_llm_model
    return ChatResponse(
        content=_message_text(response),
        usage=usage,
        cost=estimate_cost(model, usage),
    )


async def chat_json(
    messages: list[dict],
    temperature: float = 0.2,
    max_tokens: int = 2048,
) -> JSONChatResponse:
    """Send one JSON-mode chat completion and return the parsed object.

    Raises:
        JSONResponseError: If no JSON object can be extracted from the reply.
    """
    response = await chat(
        messages,
        temperature=temperature,
        max_tokens=max_tokens,
        json_mode=True,
    )
    data = parse_json_object(response.content)
    if data is None:
        logger.warning("Model reply contained no JSON object: %.200s", response.content)
        raise JSONResponseError("Model response did not contain a valid JSON object")
    return JSONChatResponse(data=data, usage=response.usage, cost=response.cost)
