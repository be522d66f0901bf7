"""Anthropic API client used as an opaque text-completion source."""
import asyncio
import logging

from anthropic import AsyncAnthropic

from .config import settings

logger = logging.getLogger(__name__)


class APIClient:
    """Wrapper around Anthropic API with retry and timeout handling."""

    def __init__(self, model: str | None = None, max_retries: int = 3, api_key: str | None = None):
        api_key = api_key or settings.api_key
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable is required")
        self.client = AsyncAnthropic(api_key=api_key)
        self.model = model or settings.model
        self.max_retries = max_retries

    async def call(self, prompt: str, max_tokens: int = 2048, timeout: float = 60.0) -> str:
        """Send one prompt and return the completion text unparsed."""
        for attempt in range(self.max_retries):
            try:
                response = await asyncio.wait_for(
                    self.client.messages.create(
                        model=self.model,
                        max_tokens=max_tokens,
                        messages=[{"role": "user", "content": prompt}]
                    ),
                    timeout=timeout
                )
                return response.content[0].text.strip()

            except Exception as e:
                if attempt < self.max_retries - 1:
                    logger.warning("Completion attempt %d failed: %s", attempt + 1, e)
                    await asyncio.sleep(2 ** attempt)
                    continue
                raise
