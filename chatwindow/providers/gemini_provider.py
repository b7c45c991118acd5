from __future__ import annotations

from typing import Any

from google import genai
from google.genai import types

from .base import Provider, ProviderResponse


def _as_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    return ""


def _append_part(out: list[dict[str, Any]], *, role: str, text: str) -> None:
    if out and out[-1]["role"] == role:
        out[-1]["parts"].append({"text": text})
        return
    out.append({"role": role, "parts": [{"text": text}]})


def _to_gemini_contents(messages: list[dict[str, Any]]) -> tuple[str, list[dict[str, Any]]]:
    system_parts: list[str] = []
    out: list[dict[str, Any]] = []

    for msg in messages:
        role = msg.get("role")
        text = _as_text(msg.get("content"))
        if role == "system":
            if text:
                system_parts.append(text)
            continue
        if role == "assistant":
            _append_part(out, role="model", text=text)
            continue
        _append_part(out, role="user", text=text)

    return "\n\n".join(system_parts), out


class GeminiProvider(Provider):
    def __init__(self, *, api_key: str | None = None) -> None:
        self._api_key = api_key
        self._client: genai.Client | None = None

    @property
    def name(self) -> str:
        return "gemini"

    def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        api_key: str | None = None,
    ) -> ProviderResponse:
        system, contents = _to_gemini_contents(messages)
        config = types.GenerateContentConfig(system_instruction=system) if system else None
        response = self._client_for(api_key).models.generate_content(
            model=model,
            contents=contents,
            config=config,
        )
        return ProviderResponse(
            text=getattr(response, "text", None) or "",
            usage=_extract_gemini_usage(getattr(response, "usage_metadata", None)),
        )

    def _client_for(self, api_key: str | None) -> genai.Client:
        if api_key is not None and api_key != self._api_key:
            return genai.Client(api_key=api_key)
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client


def _extract_gemini_usage(usage: Any) -> dict[str, int] | None:
    if usage is None:
        return None
    input_tokens = int(getattr(usage, "prompt_token_count", 0) or 0)
    output_tokens = int(getattr(usage, "candidates_token_count", 0) or 0)
    total_tokens = int(getattr(usage, "total_token_count", 0) or (input_tokens + output_tokens))
    return {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": total_tokens,
    }
