"""AI client abstraction: protocol + provider-specific implementations.

Every client is asked for a single JSON object; the caller validates it.

Provider endpoints:
- Gemini:    POST {base}/v1beta/models/{model}:generateContent  (base: https://generativelanguage.googleapis.com)
- OpenAI:    POST {base}/v1/chat/completions  (base: https://api.openai.com)
- Anthropic: POST {base}/v1/messages         (base: https://api.anthropic.com), uses x-api-key + anthropic-version
- Ollama:    POST {base}/api/chat             (base: http://localhost:11434), native API
"""

from __future__ import annotations

from typing import Protocol

import httpx

PROVIDER_BASE_URLS: dict[str, str] = {
    "gemini": "https://generativelanguage.googleapis.com",
    "openai": "https://api.openai.com",
    "anthropic": "https://api.anthropic.com",
    "ollama": "http://localhost:11434",
}

DEFAULT_MODELS: dict[str, str] = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
    "ollama": "llama3.1",
}

ANTHROPIC_API_VERSION = "2023-06-01"
TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 1024


class AIClient(Protocol):
    """Minimal contract for a JSON-producing chat-completion client."""

    async def complete(self, *, system_prompt: str, user_prompt: str) -> str: ...


class _HTTPClient:
    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _post(self, url: str, *, headers: dict[str, str], payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            return await client.post(url, headers=headers, json=payload)


class GeminiClient(_HTTPClient):
    """Google Generative Language API with JSON response mime type."""

    async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["x-goog-api-key"] = self._api_key
        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_OUTPUT_TOKENS,
            },
        }
        url = f"{self._base_url}/v1beta/models/{self._model}:generateContent"
        resp = await self._post(url, headers=headers, payload=payload)
        resp.raise_for_status()
        candidates = resp.json().get("candidates") or []
        if not candidates:
            raise ValueError("No candidates in Gemini response")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(p["text"] for p in parts if isinstance(p, dict) and "text" in p)
        if not text:
            raise ValueError("No text content in Gemini response")
        return text


class AnthropicClient(_HTTPClient):
    """Uses Anthropic Messages API: POST /v1/messages (not OpenAI-compatible)."""

    async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        headers = {
            "Content-Type": "application/json",
            "anthropic-version": ANTHROPIC_API_VERSION,
        }
        if self._api_key:
            headers["x-api-key"] = self._api_key
        payload = {
            "model": self._model,
            "max_tokens": MAX_OUTPUT_TOKENS,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        resp = await self._post(f"{self._base_url}/v1/messages", headers=headers, payload=payload)
        resp.raise_for_status()
        content_blocks = resp.json().get("content") or []
        parts = [
            b["text"]
            for b in content_blocks
            if isinstance(b, dict) and b.get("type") == "text" and "text" in b
        ]
        if not parts:
            raise ValueError("No text content in Anthropic response")
        return "".join(parts)


class OllamaClient(_HTTPClient):
    """Uses Ollama native /api/chat with format=json."""

    async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "format": "json",
            "stream": False,
            "options": {"temperature": TEMPERATURE, "num_predict": MAX_OUTPUT_TOKENS},
        }
        resp = await self._post(
            f"{self._base_url}/api/chat",
            headers={"Content-Type": "application/json"},
            payload=payload,
        )
        if resp.status_code >= 400:
            raise ValueError(_ollama_error_detail(resp, self._model))
        content = (resp.json().get("message") or {}).get("content")
        if content is None:
            raise ValueError("No content in Ollama response")
        return content if isinstance(content, str) else str(content)


def _ollama_error_detail(resp: httpx.Response, model: str) -> str:
    """Turn Ollama error response into a clear message (e.g. model not found)."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    err = body.get("error") if isinstance(body, dict) else None
    if err and "not found" in str(err).lower():
        return f"Model '{model}' not found. Pull it with: ollama pull {model}"
    if err:
        return str(err)
    return f"Ollama returned {resp.status_code}: {resp.text[:200] if resp.text else 'unknown error'}"


class OpenAIClient(_HTTPClient):
    """Calls any OpenAI-compatible /v1/chat/completions endpoint in JSON mode."""

    async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "response_format": {"type": "json_object"},
            "temperature": TEMPERATURE,
            "max_tokens": MAX_OUTPUT_TOKENS,
        }
        resp = await self._post(
            f"{self._base_url}/v1/chat/completions", headers=headers, payload=payload
        )
        resp.raise_for_status()
        return self._extract_content(resp.json())

    @staticmethod
    def _extract_content(data: dict) -> str:
        """Pull text content from an OpenAI-style chat completion response.

        Raises ValueError when the payload is missing choices or content
        (e.g. content_filter finish_reason).
        """
        choices = data.get("choices") or [{}]
        content = choices[0].get("message", {}).get("content")
        if content is None:
            raise ValueError("No content in AI response")
        return content if isinstance(content, str) else str(content)


def build_ai_client(
    *,
    provider: str,
    api_key: str | None,
    model: str | None,
    base_url: str | None,
    timeout: float = 60.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AIClient:
    """Factory: resolve provider settings into a concrete AIClient."""
    p = (provider or "gemini").lower()
    resolved_url = (
        base_url.rstrip("/") if base_url else PROVIDER_BASE_URLS.get(p, PROVIDER_BASE_URLS["openai"])
    )
    kwargs = {
        "api_key": api_key,
        "model": model or DEFAULT_MODELS.get(p, DEFAULT_MODELS["openai"]),
        "base_url": resolved_url,
        "timeout": timeout,
        "transport": transport,
    }
    if p == "gemini":
        return GeminiClient(**kwargs)
    if p == "ollama":
        return OllamaClient(**kwargs)
    if p == "anthropic":
        return AnthropicClient(**kwargs)
    return OpenAIClient(**kwargs)
