"""LLM provider abstraction and the instructor-backed implementation.

Every model call goes through ``complete_async`` with a pydantic output
schema. Free-text generation uses the ``TextCompletion`` schema so that
planning and generation share one code path.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from foreman.llm.providers import MockConfig, provider_config_from_settings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from foreman.core.config import LLMSettings
    from foreman.llm.providers import ProviderConfig


class ChatMessage(BaseModel):
    """A chat message."""

    role: str = Field(description="Message role: system, user, or assistant")
    content: str = Field(description="Message content")


class TextCompletion(BaseModel):
    """Output schema for free-text generation."""

    content: str = Field(description="The complete answer as plain text")


class CompletionResult(BaseModel):
    """Result of an LLM completion."""

    content: Any = Field(description="The completion content (structured or text)")
    raw_response: dict[str, Any] | None = Field(
        default=None, description="Raw response from provider"
    )
    usage: dict[str, int] | None = Field(default=None, description="Token usage statistics")
    model: str | None = Field(default=None, description="Model used for completion")


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol for LLM providers."""

    @abstractmethod
    async def complete_async(
        self,
        messages: Sequence[ChatMessage],
        output_schema: type[BaseModel],
        *,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResult:
        """Generate a completion asynchronously.

        Args:
            messages: Conversation history.
            output_schema: Pydantic model for structured output.
            system_prompt: Optional system prompt.
            max_tokens: Optional response size ceiling for this call.

        Returns:
            Completion result with structured content.
        """
        ...


class InstructorProvider:
    """LLM provider using instructor over the Anthropic or OpenAI SDKs.

    The async client is created on first use and reused afterwards.
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        max_retries: int = 1,
    ) -> None:
        """Initialize with a provider config.

        Args:
            config: Provider configuration (model, credentials).
            max_tokens: Default response ceiling when a call doesn't pass one.
            temperature: Sampling temperature.
            max_retries: Validation retries performed by instructor itself.
        """
        self._config = config
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._max_retries = max_retries
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = self._config.create_async_client()
        return self._client

    def _build_messages(
        self,
        messages: Sequence[ChatMessage],
        system_prompt: str | None,
    ) -> list[dict[str, str]]:
        """Build message list for API call."""
        result: list[dict[str, str]] = []

        if system_prompt:
            result.append({"role": "system", "content": system_prompt})

        for msg in messages:
            result.append({"role": msg.role, "content": msg.content})

        return result

    async def complete_async(
        self,
        messages: Sequence[ChatMessage],
        output_schema: type[BaseModel],
        *,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResult:
        """Generate a structured completion via instructor."""
        response = await self._get_client().chat.completions.create(
            model=self._config.model,
            messages=self._build_messages(messages, system_prompt),
            response_model=output_schema,
            max_tokens=max_tokens or self._max_tokens,
            temperature=self._temperature,
            max_retries=self._max_retries,
        )

        return CompletionResult(
            content=response,
            model=self._config.model,
        )


def create_provider(settings: LLMSettings) -> LLMProvider:
    """Factory function to create an LLM provider from settings.

    Args:
        settings: LLM settings.

    Returns:
        An LLM provider instance.

    Raises:
        ValueError: If provider type is not supported.
    """
    config = provider_config_from_settings(settings)

    if isinstance(config, MockConfig):
        from foreman.llm.mock import ScriptedProvider

        return ScriptedProvider.from_config(config)

    return InstructorProvider(
        config,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        max_retries=settings.max_retries,
    )
