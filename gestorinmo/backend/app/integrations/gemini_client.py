# backend/app/integrations/gemini_client.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..config import settings


class GeminiError(RuntimeError):
    pass


class GeminiNotConfigured(GeminiError):
    pass


@dataclass
class GeminiConfig:
    """
    Google Generative Language REST API:
      POST {base_url}/models/{model}:generateContent
    """
    api_key: Optional[str] = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash"
    timeout_seconds: float = 60.0

    @classmethod
    def from_settings(cls) -> "GeminiConfig":
        return cls(
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            model=settings.gemini_model,
            timeout_seconds=float(settings.gemini_timeout_seconds),
        )


def _reply_text(data: dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    return "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict))


class GeminiClient:
    """
    Single-shot generateContent calls. No retries, no streaming.
    """

    def __init__(self, cfg: Optional[GeminiConfig] = None, *, transport: Optional[httpx.BaseTransport] = None):
        self.cfg = cfg or GeminiConfig.from_settings()
        self._transport = transport

    def enabled(self) -> bool:
        return bool(self.cfg.api_key)

    def _endpoint(self) -> str:
        return f"{self.cfg.base_url.rstrip('/')}/models/{self.cfg.model}:generateContent"

    def _generate(self, parts: list[dict[str, Any]]) -> str:
        if not self.cfg.api_key:
            raise GeminiNotConfigured("gemini_api_key not set")

        payload = {"contents": [{"parts": parts}]}
        headers = {"x-goog-api-key": self.cfg.api_key}

        try:
            with httpx.Client(timeout=self.cfg.timeout_seconds, transport=self._transport) as client:
                r = client.post(self._endpoint(), json=payload, headers=headers)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPError as e:
            raise GeminiError(f"generateContent failed: {e}") from e
        except ValueError as e:
            raise GeminiError(f"generateContent returned non-JSON body: {e}") from e

        return _reply_text(data if isinstance(data, dict) else {})

    def generate_text(self, prompt: str) -> str:
        return self._generate([{"text": prompt}])

    def generate_with_image(self, prompt: str, *, image_b64: str, mime_type: str = "image/jpeg") -> str:
        return self._generate(
            [
                {"text": prompt},
                {"inline_data": {"mime_type": mime_type, "data": image_b64}},
            ]
        )
