"""OpenAI API connector for note enrichment.

Thin async wrapper around the OpenAI Python SDK providing:
- Chat completions with optional JSON response format
- OpenTelemetry spans carrying model and token usage
- Token cost estimation for logging
"""

from enum import Enum
from typing import Any

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion
from opentelemetry import trace

tracer = trace.get_tracer(__name__)


class OpenAIModel(str, Enum):
    """Chat models the enrichment prompts are tuned for."""

    GPT_35_TURBO = "gpt-3.5-turbo"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4O = "gpt-4o"


# Prices per 1M tokens (input, output)
PRICING: dict[OpenAIModel, tuple[float, float]] = {
    OpenAIModel.GPT_35_TURBO: (0.50, 1.50),
    OpenAIModel.GPT_4O_MINI: (0.15, 0.60),
    OpenAIModel.GPT_4O: (2.50, 10.00),
}


class OpenAIConnector:
    """Async OpenAI chat client.

    One instance is meant to live for the whole process and be shared by
    concurrent requests.

    Example:
        >>> async with OpenAIConnector(api_key="sk-...") as connector:
        ...     response = await connector.chat_completion(
        ...         messages=[{"role": "user", "content": "Summarize this note"}],
        ...     )
        ...     print(response.choices[0].message.content)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 2,
    ):
        """Initialize OpenAI connector.

        Args:
            api_key: OpenAI API key (falls back to OPENAI_API_KEY env var)
            base_url: Optional custom base URL (for proxies or compatible APIs)
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.close()

    @tracer.start_as_current_span("openai.chat_completion")
    async def chat_completion(
        self,
        messages: list[dict[str, Any]],
        model: OpenAIModel | str = OpenAIModel.GPT_35_TURBO,
        temperature: float | None = None,
        max_tokens: int | None = None,
        response_format: dict[str, str] | None = None,
        user: str | None = None,
        **kwargs: Any,
    ) -> ChatCompletion:
        """Create a (non-streaming) chat completion.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model to use for completion
            temperature: Sampling temperature (0-2)
            max_tokens: Maximum tokens to generate
            response_format: Response format (e.g., {"type": "json_object"})
            user: Unique user identifier for abuse monitoring
            **kwargs: Additional parameters to pass to the API

        Returns:
            ChatCompletion object
        """
        span = trace.get_current_span()
        span.set_attribute("openai.model", str(model))
        span.set_attribute("openai.message_count", len(messages))

        params: dict[str, Any] = {
            "model": model,
            "messages": messages,
            **kwargs,
        }

        if temperature is not None:
            params["temperature"] = temperature
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        if response_format is not None:
            params["response_format"] = response_format
        if user is not None:
            params["user"] = user

        try:
            response = await self.client.chat.completions.create(**params)

            if response.usage:
                span.set_attribute("openai.prompt_tokens", response.usage.prompt_tokens)
                span.set_attribute("openai.completion_tokens", response.usage.completion_tokens)
                span.set_attribute("openai.total_tokens", response.usage.total_tokens)

            return response
        except Exception as e:
            span.record_exception(e)
            raise

    def estimate_cost(
        self,
        model: OpenAIModel | str,
        prompt_tokens: int,
        completion_tokens: int = 0,
    ) -> float:
        """Estimate cost in USD for a completion.

        Versioned model names (e.g. "gpt-4o-mini-2024-07-18") are priced by
        their longest matching prefix. Unknown models use gpt-4o-mini rates.
        """
        model_str = model.value if isinstance(model, OpenAIModel) else model

        by_length = sorted(PRICING.items(), key=lambda item: len(item[0].value), reverse=True)
        input_price, output_price = PRICING[OpenAIModel.GPT_4O_MINI]
        for model_key, prices in by_length:
            if model_str.startswith(model_key.value):
                input_price, output_price = prices
                break

        return (prompt_tokens / 1_000_000) * input_price + (
            completion_tokens / 1_000_000
        ) * output_price
