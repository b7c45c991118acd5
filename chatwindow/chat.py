"""
Chat dispatch: prune a conversation to the model's window and send it to the
provider that serves the model.

Storage and auth stay with the caller; this only needs the message history,
the model choice and (optionally) the caller's own API key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from .config import Settings, api_key_env_var, resolve_api_key
from .context_manager import ContextWindowManager
from .errors import ChatWindowError, InvalidInputError, ProviderError
from .message import Message, to_dicts
from .models import estimate_cost, find_model
from .providers import GeminiProvider, OpenAIProvider, Provider
from .token_counter import TokenCounter

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "gemini")


@dataclass
class ChatReply:
    text: str
    provider: str
    model: str
    sent_count: int
    dropped_count: int
    usage: dict[str, int] | None = None
    cost_usd: float = 0.0


class ChatService:
    def __init__(
        self,
        *,
        provider: str | None = None,
        model: str | None = None,
        manager: ContextWindowManager | None = None,
        providers: Mapping[str, Provider] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings if settings is not None else Settings.from_env()
        self.model = (model or self.settings.model).strip()
        self.provider_name = self._resolve_provider(provider)
        self.manager = manager if manager is not None else ContextWindowManager(
            counter=TokenCounter.for_mode(self.settings.tokenizer),
            response_reserve=self.settings.response_reserve,
        )
        self._providers: dict[str, Provider] = dict(providers) if providers else {}

    def reply(
        self,
        messages: Sequence[Message],
        *,
        user_api_key: str | None = None,
        response_reserve: int | None = None,
        max_tokens_override: int | None = None,
    ) -> ChatReply:
        if not messages:
            raise InvalidInputError("Cannot request a reply for an empty conversation")

        api_key = resolve_api_key(self.provider_name, user_api_key)
        if api_key is None:
            env_name = api_key_env_var(self.provider_name)
            raise ProviderError(
                f"No API key configured for {self.provider_name}. Please set the {env_name} environment variable.",
                details={"provider": self.provider_name, "model": self.model},
            )

        pruned = self.manager.prune(
            messages,
            self.model,
            response_reserve=response_reserve,
            max_tokens_override=max_tokens_override,
        )
        if all(m.is_system for m in pruned):
            limit = self.manager.effective_limit(
                self.model,
                response_reserve=response_reserve,
                max_tokens_override=max_tokens_override,
            )
            raise InvalidInputError(
                f"No user or assistant message fits the {limit}-token budget for {self.model}",
                details={"provider": self.provider_name, "model": self.model, "effective_limit": limit},
            )
        dropped = len(messages) - len(pruned)
        if dropped:
            logger.info(
                "Dropped %d of %d messages to fit %s/%s",
                dropped,
                len(messages),
                self.provider_name,
                self.model,
            )

        try:
            response = self._provider().complete(
                model=self.model,
                messages=to_dicts(pruned),
                api_key=api_key,
            )
        except ChatWindowError:
            raise
        except Exception as exc:
            logger.error("AI API error from %s/%s: %s", self.provider_name, self.model, exc)
            raise ProviderError(
                f"AI provider error: {str(exc) or 'Unknown error'}",
                details={"provider": self.provider_name, "model": self.model},
                original_error=exc,
            ) from exc

        usage = response.usage
        cost = 0.0
        if usage:
            cost = estimate_cost(self.model, usage.get("input_tokens", 0), usage.get("output_tokens", 0))
        return ChatReply(
            text=response.text,
            provider=self.provider_name,
            model=self.model,
            sent_count=len(pruned),
            dropped_count=dropped,
            usage=usage,
            cost_usd=cost,
        )

    def remaining_tokens(self, messages: Sequence[Message]) -> int:
        return self.manager.remaining_tokens(messages, self.model)

    def would_exceed_limit(self, messages: Sequence[Message], candidate_content: str) -> bool:
        return self.manager.would_exceed_limit(messages, candidate_content, self.model)

    def _resolve_provider(self, requested: str | None) -> str:
        profile = find_model(self.model)
        name = (requested or (profile.provider if profile else self.settings.provider)).strip().lower()
        if name not in SUPPORTED_PROVIDERS:
            raise InvalidInputError(f"Unsupported provider: {name}", details={"provider": name})
        if profile is not None and profile.provider != name:
            raise InvalidInputError(
                f"Model {self.model} is served by {profile.provider}, not {name}",
                details={"provider": name, "model": self.model},
            )
        return name

    def _provider(self) -> Provider:
        provider = self._providers.get(self.provider_name)
        if provider is None:
            provider = self._create_provider(self.provider_name)
            self._providers[self.provider_name] = provider
        return provider

    def _create_provider(self, provider: str) -> Provider:
        if provider == "gemini":
            return GeminiProvider()
        return OpenAIProvider(base_url=self.settings.openai_base_url)
