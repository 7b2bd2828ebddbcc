"""Groq chat-completion provider.

Groq exposes an OpenAI-compatible API at https://api.groq.com/openai/v1.
Requests are single, non-streaming chat completions.
"""

import httpx

from movie_gateway.config import Settings
from movie_gateway.errors import ConfigurationError, UpstreamError


class GroqCompletionProvider:
    """Groq implementation of the CompletionProvider protocol.

    This class satisfies the CompletionProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = GroqCompletionProvider.create(settings)
        text = await provider.complete(
            [{"role": "user", "content": "Name three heist movies"}],
            temperature=0.7,
            max_tokens=150,
        )
        ```
    """

    def __init__(
        self,
        api_key: str | None,
        model_name: str = "llama-3.1-8b-instant",
        base_url: str = "https://api.groq.com/openai/v1",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Groq provider.

        Args:
            api_key: Groq API key. May be None; calls then fail fast.
            model_name: Chat model identifier.
            base_url: OpenAI-compatible API root.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key
        self._model_name = model_name
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GroqCompletionProvider":
        """Factory method to create GroqCompletionProvider from settings."""
        return cls(
            api_key=settings.groq_api_key,
            model_name=settings.groq_model,
            base_url=settings.groq_base_url,
            timeout=settings.groq_timeout,
            transport=transport,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    @property
    def model_name(self) -> str:
        return self._model_name

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send one chat completion and return the first choice's text.

        Raises:
            ConfigurationError: If GROQ_API_KEY is not configured
            UpstreamError: On timeout, network error, HTTP failure or an
                answer without choices
        """
        if not self._api_key:
            raise ConfigurationError("GROQ_API_KEY_MISSING", "GROQ_API_KEY is not configured")

        payload = {
            "model": self._model_name,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            response = await self.client.post(
                f"{self._base_url}/chat/completions",
                json=payload,
                headers=headers,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Groq request timed out after {self._timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Groq API error: status {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Groq API error: {e}") from e
        except ValueError as e:
            raise UpstreamError("Groq returned invalid JSON") from e

        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError(f"Unexpected Groq response format: {str(data)[:200]}") from e

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
