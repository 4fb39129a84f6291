"""LLM client wrapper around litellm.

Used by the AI fallback parser; any model litellm supports can be selected.
"""

from litellm import completion

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class LlmClient:
    """Wrapper for LLM API calls via litellm."""

    def __init__(self, model: str | None = None, temperature: float = 0.0):
        self.model = model or DEFAULT_MODEL
        self.temperature = temperature

    def call(self, system: str, user: str) -> str:
        """Send a system+user message and return the response text ("" if empty)."""
        response = completion(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=self.temperature,
        )
        return response.choices[0].message.content or ""
