from __future__ import annotations
from typing import Optional
import logging
import httpx

from projectgen.config import Settings
from projectgen.errors import GenerationError

log = logging.getLogger("projectgen.providers")

class LLMProvider:
    """Text-generation service: prompt in, markdown out."""
    name: str = "base"

    async def generate(self, prompt: str) -> str:
        raise NotImplementedError

class DummyLLM(LLMProvider):
    """Offline generator so the whole flow works without an API key."""
    name = "dummy"

    async def generate(self, prompt: str) -> str:
        topic = next((ln[2:].strip() for ln in prompt.splitlines() if ln.startswith("# ")), "") or "Проект"
        sections = [line.strip() for line in prompt.splitlines() if line.startswith("## ") or line.startswith("### ")]
        body = [f"# {topic}", ""]
        for heading in sections:
            body.append(heading)
            body.append("")
            if heading.startswith("## Список литературы"):
                body.append("1. Учебник по предмету, базовый уровень.")
                body.append("2. Энциклопедия для школьников.")
            else:
                body.append(f"Текст раздела «{heading.lstrip('# ')}» по теме «{topic}».")
            body.append("")
        return "\n".join(body)

class OpenRouterLLM(LLMProvider):
    name = "openrouter"

    def __init__(self, api_key: str, model: str, base_url: str = "https://openrouter.ai/api/v1",
                 timeout: float = 120.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise GenerationError("OPENROUTER_API_KEY is not configured")
        payload = {"model": self.model, "messages": [{"role": "user", "content": prompt}]}
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
                r.raise_for_status()
                data = r.json()
        except httpx.TimeoutException as e:
            raise GenerationError("AI request timed out") from e
        except httpx.HTTPStatusError as e:
            raise GenerationError(f"AI service returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise GenerationError(f"AI request failed: {e}") from e
        except ValueError as e:
            raise GenerationError("AI service returned invalid JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError("Malformed response from AI") from e
        log.info("OpenRouter model=%s returned %d chars", self.model, len(content or ""))
        return content or ""

def get_provider(settings: Settings, provider_name: Optional[str] = None) -> LLMProvider:
    name = (provider_name or settings.llm_provider or "openrouter").strip().lower()
    if name == "dummy":
        return DummyLLM()
    if name == "openrouter":
        return OpenRouterLLM(
            api_key=settings.openrouter_api_key,
            model=settings.openrouter_model,
            base_url=settings.openrouter_base_url,
            timeout=settings.llm_timeout_s,
        )
    raise ValueError(f"Unknown LLM provider: {name}")
