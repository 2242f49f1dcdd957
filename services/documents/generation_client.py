"""
Generation Client

Thin wrapper around the OpenAI Chat Completions API used to turn a document
prompt into document text. One API call per invocation: no model fallback
chain and no retry here, callers own any retry policy.

Usage:
    from services.documents.generation_client import get_generation_client

    client = get_generation_client()
    text = client.complete(system_prompt="You are...", user_prompt="Generate...")
"""

import logging
from typing import Optional

import openai
from flask import current_app

from .exceptions import EmptyResponse, UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 2048


class GenerationClient:
    """
    Client for the external text generation service.

    Error messages and log lines only carry status codes and the model name.
    Provider error bodies are never propagated because they can echo
    fragments of the API key.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: Optional[float] = None,
        client=None
    ):
        if not api_key and client is None:
            logger.error("OpenAI API key is not configured!")
            raise UpstreamUnavailable("Text generation service is not configured")
        self.model = model
        self.max_tokens = max_tokens
        self._client = client or openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Generate text for a single user prompt.

        Args:
            system_prompt: The system instructions for the model
            user_prompt: The document generation request

        Returns:
            Text of the first choice whose content is non-blank. Choices
            without text (refusals, tool calls, empty strings) are skipped,
            so a later choice can answer when choices[0] is empty.

        Raises:
            UpstreamUnavailable: Service unreachable or non-success status
            EmptyResponse: Successful reply without any text
        """
        logger.info(f"Requesting document generation from {self.model}")
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt}
                ]
            )
        except openai.APIStatusError as e:
            logger.error(f"Generation request to {self.model} failed with status {e.status_code}")
            raise UpstreamUnavailable(
                f"Text generation service returned status {e.status_code}",
                status_code=e.status_code
            ) from None
        except openai.APIConnectionError as e:
            # Covers APITimeoutError
            logger.error(f"Generation request to {self.model} failed: {type(e).__name__}")
            raise UpstreamUnavailable("Text generation service is unreachable") from None
        except openai.APIError as e:
            logger.error(f"Generation request to {self.model} failed: {type(e).__name__}")
            raise UpstreamUnavailable("Text generation service returned an invalid reply") from None

        for choice in response.choices or []:
            message = getattr(choice, 'message', None)
            text = getattr(message, 'content', None)
            if isinstance(text, str) and text.strip():
                logger.info(f"SUCCESS: Generated {len(text)} characters with {self.model}")
                return text

        logger.error(f"Generation reply from {self.model} contained no text")
        raise EmptyResponse("No text response from the generation service")


def get_generation_client() -> GenerationClient:
    """Build a client from the current app's configuration."""
    config = current_app.config
    return GenerationClient(
        api_key=config.get('OPENAI_API_KEY'),
        model=config.get('GENERATION_MODEL', DEFAULT_MODEL),
        max_tokens=config.get('GENERATION_MAX_TOKENS', DEFAULT_MAX_TOKENS),
        timeout=config.get('GENERATION_TIMEOUT')
    )
