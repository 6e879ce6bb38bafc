"""LLM integration.

Provider configuration, the instructor-backed provider used against real
models, and a scripted mock provider for tests and exploration.
"""

from foreman.llm.client import (
    ChatMessage,
    CompletionResult,
    InstructorProvider,
    LLMProvider,
    TextCompletion,
    create_provider,
)
from foreman.llm.mock import RecordedCall, ScriptedProvider
from foreman.llm.providers import (
    AnthropicConfig,
    MockConfig,
    OpenAIConfig,
    ProviderConfig,
    provider_config_from_settings,
)

__all__ = [
    "AnthropicConfig",
    "ChatMessage",
    "CompletionResult",
    "InstructorProvider",
    "LLMProvider",
    "MockConfig",
    "OpenAIConfig",
    "ProviderConfig",
    "RecordedCall",
    "ScriptedProvider",
    "TextCompletion",
    "create_provider",
    "provider_config_from_settings",
]
