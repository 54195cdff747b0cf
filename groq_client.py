# groq_client.py — Groq chat-completions adapter (OpenAI-compatible endpoint)
import logging
from typing import Dict, List, Optional

import requests

import config

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """Completion call failed. str(err) carries the status code and response text."""

    def __init__(self, description: str, status_code: Optional[int] = None):
        super().__init__(description)
        self.status_code = status_code


class GroqClient:
    """
    Callable backend: ``client(messages) -> str``.
    Model, temperature and token limit are fixed per client.
    """

    def __init__(self,
                 api_key: Optional[str] = None,
                 model: str = config.MODEL_NAME,
                 temperature: float = config.TEMPERATURE,
                 max_tokens: int = config.MAX_TOKENS,
                 url: str = config.GROQ_URL,
                 timeout: float = config.REQUEST_TIMEOUT):
        self.api_key = api_key or config.GROQ_API_KEY
        if not self.api_key:
            raise RuntimeError("Set GROQ_API_KEY in your .env")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.url = url
        self.timeout = timeout
        self.headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    def payload(self, messages: List[Dict[str, str]]) -> Dict:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def complete(self, messages: List[Dict[str, str]]) -> str:
        try:
            r = requests.post(self.url, headers=self.headers, json=self.payload(messages), timeout=self.timeout)
        except requests.RequestException as e:
            raise BackendError(f"Groq request failed: {e}") from e

        if r.status_code >= 400:
            raise BackendError(f"Groq error {r.status_code}: {r.text}", status_code=r.status_code)

        try:
            content = r.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise BackendError(f"Groq returned an unexpected body: {r.text[:200]}") from e
        logger.debug("Groq completion: %d chars", len(content or ""))
        return content or ""

    __call__ = complete
