"""Completion provider protocol.

Defines the interface for a chat-completion LLM API.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CompletionProvider(Protocol):
    """Protocol for chat-completion services."""

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send a single non-streaming completion request.

        Args:
            messages: Chat messages ({"role", "content"})
            temperature: Sampling temperature
            max_tokens: Token budget for the answer

        Returns:
            The text of the first choice

        Raises:
            ConfigurationError: If the API key is missing
            UpstreamError: On timeout, network or HTTP failure
        """
        ...

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        ...
