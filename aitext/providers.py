from __future__ import annotations

import logging
from typing import Dict, List, Protocol

from . import config
from .errors import ProviderError

logger = logging.getLogger(__name__)


# ---------- Interface ----------
class TextProvider(Protocol):
    async def generate(self, prompt: str) -> str: ...


# ---------- Stub (offline/dev) ----------
class StubProvider:
    def __init__(self, prefix: str = "[stub]"):
        self.prefix = prefix
        self.calls: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.calls.append(prompt)
        return f"{self.prefix} {prompt.strip()}"


# ---------- OpenAI / Azure OpenAI chat ----------
class ChatProvider:
    """Chat-completions provider that keeps one process-wide conversation.

    Each call sends the system prompt, the accumulated user/assistant turns and
    the new prompt. A turn is only remembered once the call succeeded.
    """

    def __init__(self, client, model: str, *, system_prompt: str = config.SYSTEM_PROMPT,
                 max_turns: int = config.CONVERSATION_MAX_TURNS,
                 temperature: float = 0.7, frequency_penalty: float = 0.3,
                 presence_penalty: float = 0.3):
        self.client = client
        self.model = model
        self.system_prompt = system_prompt
        self.max_turns = max_turns
        self.temperature = temperature
        self.frequency_penalty = frequency_penalty
        self.presence_penalty = presence_penalty
        self.history: List[Dict[str, str]] = []

    def build_messages(self, prompt: str) -> List[Dict[str, str]]:
        return (
            [{"role": "system", "content": self.system_prompt}]
            + self.history
            + [{"role": "user", "content": prompt}]
        )

    async def generate(self, prompt: str) -> str:
        import openai

        messages = self.build_messages(prompt)
        logger.debug("sending %d messages to %s", len(messages), self.model)
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                frequency_penalty=self.frequency_penalty,
                presence_penalty=self.presence_penalty,
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"{type(e).__name__}: {e}") from e

        choices = getattr(resp, "choices", None) or []
        text = (choices[0].message.content or "").strip() if choices else ""
        if not text:
            raise ProviderError("malformed response: no completion text returned")

        self.history.append({"role": "user", "content": prompt})
        self.history.append({"role": "assistant", "content": text})
        if self.max_turns > 0 and len(self.history) > 2 * self.max_turns:
            self.history = self.history[-2 * self.max_turns:]
        return text


# ---------- Factory ----------
def get_provider(name: str = config.PROVIDER) -> TextProvider:
    if name == "stub":
        return StubProvider()
    if name == "azure":
        from openai import AsyncAzureOpenAI

        missing = [k for k, v in {
            "AZURE_OPENAI_ENDPOINT": config.AZURE_OPENAI_ENDPOINT,
            "AZURE_OPENAI_API_KEY": config.AZURE_OPENAI_API_KEY,
            "AZURE_OPENAI_DEPLOYMENT": config.AZURE_OPENAI_DEPLOYMENT,
        }.items() if not v]
        if missing:
            raise RuntimeError(f"{', '.join(missing)} environment variable(s) required for PROVIDER=azure")
        client = AsyncAzureOpenAI(
            api_key=config.AZURE_OPENAI_API_KEY,
            azure_endpoint=config.AZURE_OPENAI_ENDPOINT,
            api_version=config.AZURE_OPENAI_API_VERSION,
        )
        return ChatProvider(client, config.AZURE_OPENAI_DEPLOYMENT)
    if name == "openai":
        from openai import AsyncOpenAI

        if not config.OPENAI_API_KEY:
            raise RuntimeError("OPENAI_API_KEY not set")
        return ChatProvider(AsyncOpenAI(api_key=config.OPENAI_API_KEY), config.OPENAI_MODEL)
    raise ValueError(f"Unknown PROVIDER: {name!r}. Valid options: azure, openai, stub")
