"""
Reasoning service client.

Thin wrapper around the Anthropic Messages API. Every failure at this
boundary - timeouts, connection errors, API errors - is converted into
UpstreamUnavailable so the engine can decide whether to fall back.
"""

import os
import logging
from typing import Optional

import anthropic

from infrastructure.errors import UpstreamUnavailable

logger = logging.getLogger('fpl_analyzer.llm')

DEFAULT_MODEL = "claude-opus-4-20250514"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TIMEOUT_SECONDS = 60.0


class ReasoningClient:
    """
    Sends one prompt, returns the reply text.

    Uses the Anthropic client's own timeout so a slow call is abandoned
    instead of blocking the run indefinitely.
    """

    def __init__(self, api_key: str = None, model: str = DEFAULT_MODEL,
                 max_tokens: int = DEFAULT_MAX_TOKENS,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 max_retries: int = 2,
                 client: Optional[anthropic.Anthropic] = None):
        """
        Initialize the client.

        Args:
            api_key: Anthropic API key (or reads from ANTHROPIC_API_KEY env var)
            model: Model to use
            max_tokens: Reply token limit
            timeout: Seconds before a request is abandoned
            max_retries: Retries the SDK makes on transient errors
            client: Pre-built Anthropic client (tests)
        """
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout

        if client is not None:
            self.client = client
        else:
            api_key = api_key or os.getenv('ANTHROPIC_API_KEY')
            if not api_key:
                raise UpstreamUnavailable("No Anthropic API key configured")
            self.client = anthropic.Anthropic(
                api_key=api_key, timeout=timeout, max_retries=max_retries
            )

        logger.info(f"ReasoningClient: Using {self.model} (timeout {self.timeout}s)")

    def complete(self, prompt: str) -> str:
        """
        Send the prompt and return the reply text.

        Raises:
            UpstreamUnavailable: on timeout, connection failure or API error
        """
        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{
                    "role": "user",
                    "content": prompt
                }]
            )
        except anthropic.APITimeoutError as e:
            logger.error(f"ReasoningClient: Request timed out after {self.timeout}s")
            raise UpstreamUnavailable(f"Reasoning service timed out: {e}", timed_out=True) from e
        except anthropic.APIConnectionError as e:
            logger.error(f"ReasoningClient: Connection failed: {e}")
            raise UpstreamUnavailable(f"Reasoning service unreachable: {e}") from e
        except anthropic.APIStatusError as e:
            logger.error(f"ReasoningClient: API error {e.status_code}: {e}")
            raise UpstreamUnavailable(f"Reasoning service error ({e.status_code}): {e}") from e
        except anthropic.APIError as e:
            logger.error(f"ReasoningClient: API error: {e}")
            raise UpstreamUnavailable(f"Reasoning service error: {e}") from e

        text = ''.join(
            block.text for block in message.content if getattr(block, 'type', None) == 'text'
        )
        logger.info(f"ReasoningClient: Received {len(text)} character reply")
        return text
