from __future__ import annotations

from typing import Any

from openai import OpenAI

from .base import Provider, ProviderResponse


class OpenAIProvider(Provider):
    def __init__(self, *, api_key: str | None = None, base_url: str | None = None) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._client: OpenAI | None = None

    @property
    def name(self) -> str:
        return "openai"

    def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        api_key: str | None = None,
    ) -> ProviderResponse:
        client = self._client_for(api_key)
        response = client.chat.completions.create(model=model, messages=messages)
        choices = getattr(response, "choices", None) or []
        text = ""
        if choices:
            text = getattr(choices[0].message, "content", None) or ""
        return ProviderResponse(
            text=text,
            usage=_extract_openai_usage(getattr(response, "usage", None)),
        )

    def _client_for(self, api_key: str | None) -> OpenAI:
        if api_key is not None and api_key != self._api_key:
            return OpenAI(api_key=api_key, base_url=self._base_url)
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key, base_url=self._base_url)
        return self._client


def _extract_openai_usage(usage: Any) -> dict[str, int] | None:
    if usage is None:
        return None
    input_tokens = int(getattr(usage, "prompt_tokens", 0) or 0)
    output_tokens = int(getattr(usage, "completion_tokens", 0) or 0)
    total_tokens = int(getattr(usage, "total_tokens", input_tokens + output_tokens) or (input_tokens + output_tokens))
    return {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": total_tokens,
    }
