"""Mock LLM provider for testing and exploration.

Provides several mock behaviors:
- Scripted: Returns predefined responses in sequence
- Pattern: Matches prompt patterns to responses
- Echo: Reflects the prompt back with optional transformation

Structured schemas are filled by parsing the response text as JSON, so a
scripted plan goes through the same validation a real model's would.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from foreman.llm.client import CompletionResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pydantic import BaseModel

    from foreman.llm.client import ChatMessage
    from foreman.llm.providers import MockConfig


@dataclass(frozen=True)
class RecordedCall:
    """One call made against a ScriptedProvider."""

    prompt: str
    output_schema: type[BaseModel]
    system_prompt: str | None
    max_tokens: int | None


@dataclass
class ScriptedProvider:
    """A mock provider that doesn't call any LLM API.

    Responses may be exception instances; those are raised instead of
    returned, which lets tests simulate transport failures.
    """

    mode: str = "scripted"
    """Mode: 'scripted', 'pattern', 'echo'."""

    responses: list[str | BaseException] = field(default_factory=list)
    """Canned responses for 'scripted' mode. Cycles when exhausted."""

    patterns: dict[str, str | BaseException] = field(default_factory=dict)
    """Pattern -> response mapping for 'pattern' mode."""

    echo_template: str = "I received: {input}"
    """Template for 'echo' mode. {input} is replaced with the prompt."""

    calls: list[RecordedCall] = field(default_factory=list)

    _response_index: int = field(default=0, repr=False)

    @classmethod
    def from_config(cls, config: MockConfig) -> ScriptedProvider:
        """Create a provider from a MockConfig."""
        if config.echo or not config.responses:
            return cls(mode="echo")
        return cls(mode="scripted", responses=list(config.responses))

    def _generate_response(self, prompt: str) -> str | BaseException:
        """Pick the response for a prompt based on mode."""
        if self.mode == "echo":
            return self.echo_template.format(input=prompt)

        if self.mode == "scripted":
            if not self.responses:
                return f"[No scripted responses configured. Input was: {prompt}]"
            response = self.responses[self._response_index % len(self.responses)]
            self._response_index += 1
            return response

        if self.mode == "pattern":
            for pattern, response in self.patterns.items():
                if re.search(pattern, prompt, re.IGNORECASE):
                    return response
            return f"[No pattern matched. Input was: {prompt}]"

        return f"[Unknown mode: {self.mode}. Input was: {prompt}]"

    def _build_output(self, output_schema: type[BaseModel], response: str) -> BaseModel:
        """Fit a response string into the output schema.

        Single-field text schemas are filled directly; anything else must be
        valid JSON for the schema and raises pydantic's ValidationError if not.
        """
        output_fields = output_schema.model_fields
        if len(output_fields) == 1:
            for name in ("content", "response", "message"):
                if name in output_fields:
                    return output_schema(**{name: response})
        return output_schema.model_validate_json(response)

    async def complete_async(
        self,
        messages: Sequence[ChatMessage],
        output_schema: type[BaseModel],
        *,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResult:
        """Generate a mock completion."""
        prompt = "\n".join(msg.content for msg in messages if msg.role == "user")
        self.calls.append(
            RecordedCall(
                prompt=prompt,
                output_schema=output_schema,
                system_prompt=system_prompt,
                max_tokens=max_tokens,
            )
        )

        response = self._generate_response(prompt)
        if isinstance(response, BaseException):
            raise response

        content: Any = self._build_output(output_schema, response)
        return CompletionResult(
            content=content,
            raw_response={"mock": True, "text": response},
            usage={"prompt_tokens": 0, "completion_tokens": 0},
            model="mock",
        )
