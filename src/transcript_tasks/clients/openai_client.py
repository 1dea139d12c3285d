"""
OpenAI client wrapper for the transcript task pipeline.

Handles:
- Single-turn chat completions used as a text classifier
- Retry logic with exponential backoff
"""

import os

from openai import AsyncOpenAI
from tenacity import retry, stop_after_attempt, wait_exponential

from ..config import config


class OpenAIClient:
    """
    Async OpenAI chat client.

    Configuration via environment variables:
    - OPENAI_API_KEY: Required API key
    - OPENAI_CHAT_MODEL: Chat model (default: gpt-4.1-mini)
    - OPENAI_MAX_TOKENS: Response token cap (default: 4096)
    """

    def __init__(
        self,
        api_key: str | None = None,
        chat_model: str | None = None,
        max_tokens: int | None = None,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            chat_model: Model for chat completions (defaults to OPENAI_CHAT_MODEL or gpt-4.1-mini)
            max_tokens: Maximum tokens per response (defaults to OPENAI_MAX_TOKENS or 4096)
        """
        self.api_key = api_key or os.getenv('OPENAI_API_KEY')
        if not self.api_key:
            raise ValueError('OPENAI_API_KEY environment variable is required')

        self.chat_model = chat_model or config.OPENAI_CHAT_MODEL
        self.max_tokens = max_tokens or config.OPENAI_MAX_TOKENS

        self._client = AsyncOpenAI(api_key=self.api_key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
    )
    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> str:
        """
        Get a chat completion response.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Override the default chat model
            temperature: Sampling temperature (0.0 for deterministic)
            max_tokens: Maximum tokens in response

        Returns:
            The assistant's response text
        """
        response = await self._client.chat.completions.create(
            model=model or self.chat_model,
            messages=messages,  # type: ignore
            temperature=temperature,
            max_tokens=max_tokens or self.max_tokens,
        )
        return response.choices[0].message.content or ''

    async def classify(self, system_prompt: str, text: str) -> str:
        """
        Run a single-turn completion: fixed instruction plus one user message.

        Args:
            system_prompt: Instruction describing the expected output
            text: User content to classify

        Returns:
            Raw model response text
        """
        return await self.chat_completion(
            messages=[
                {'role': 'system', 'content': system_prompt},
                {'role': 'user', 'content': text},
            ]
        )

    async def close(self):
        """Close the client connection."""
        await self._client.close()
