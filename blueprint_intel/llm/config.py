"""LLM provider configuration using LangChain abstractions."""

from langchain_core.language_models.chat_models import BaseChatModel

from config.settings import get_settings


def get_llm(
    temperature: float = 0,
    max_tokens: int = 1024,
    json_mode: bool = False,
) -> BaseChatModel:
    """Create and return the configured LLM instance.

    Uses LangChain's BaseChatModel abstraction for LLM-agnostic access.
    Default: Anthropic Claude via langchain-anthropic. Anthropic has no
    native JSON mode, so structured calls there rely on the prompt; Gemini
    is switched to a JSON response MIME type.
    """
    settings = get_settings()
    provider = settings.blueprint_llm_provider.lower()

    if provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=settings.blueprint_llm_model,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=settings.anthropic_api_key,
        )
    elif provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        kwargs = {}
        if json_mode:
            kwargs["response_mime_type"] = "application/json"
        return ChatGoogleGenerativeAI(
            model=settings.blueprint_llm_model,
            temperature=temperature,
            max_output_tokens=max_tokens,
            **kwargs,
        )
    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. "
            "Supported: 'anthropic', 'google'"
        )
