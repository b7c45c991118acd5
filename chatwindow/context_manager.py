from __future__ import annotations

from typing import Sequence

from .config import DEFAULT_RESPONSE_RESERVE, env_int
from .errors import ConfigurationError
from .message import Message
from .models import context_window
from .token_counter import PRIMING_OVERHEAD_TOKENS, TokenCounter


class ContextWindowManager:
    """
    Fits a conversation into a model's context window:
    - budget = context window - response reserve (or an explicit override)
    - system messages are always kept
    - conversational turns are kept newest-first until one no longer fits;
      everything older than that is dropped
    """

    def __init__(
        self,
        *,
        counter: TokenCounter | None = None,
        response_reserve: int = DEFAULT_RESPONSE_RESERVE,
    ) -> None:
        if response_reserve < 0:
            raise ConfigurationError(
                f"response_reserve must be >= 0, got {response_reserve}",
                details={"response_reserve": response_reserve},
            )
        self.counter = counter if counter is not None else TokenCounter()
        self.response_reserve = response_reserve

    @classmethod
    def from_env(cls) -> "ContextWindowManager":
        reserve = env_int("CHAT_RESPONSE_RESERVE", DEFAULT_RESPONSE_RESERVE, minimum=0)
        return cls(counter=TokenCounter.from_env(), response_reserve=reserve)

    def effective_limit(
        self,
        model_id: str,
        *,
        response_reserve: int | None = None,
        max_tokens_override: int | None = None,
    ) -> int:
        reserve = self.response_reserve if response_reserve is None else response_reserve
        if reserve < 0:
            raise ConfigurationError(
                f"response_reserve must be >= 0, got {reserve}",
                details={"response_reserve": reserve},
            )
        if max_tokens_override is not None:
            limit = max_tokens_override
        else:
            limit = context_window(model_id) - reserve
        if limit <= 0:
            raise ConfigurationError(
                f"Effective token limit for {model_id!r} is {limit}; nothing can be sent",
                details={
                    "model": model_id,
                    "context_window": context_window(model_id),
                    "response_reserve": reserve,
                    "max_tokens_override": max_tokens_override,
                    "effective_limit": limit,
                },
            )
        return limit

    def prune(
        self,
        messages: Sequence[Message],
        model_id: str,
        *,
        response_reserve: int | None = None,
        max_tokens_override: int | None = None,
    ) -> Sequence[Message]:
        """
        Return the messages to send. Within budget, `messages` itself comes
        back untouched. System messages are never dropped, so a budget smaller
        than the system messages alone yields just those, over the limit.
        """
        limit = self.effective_limit(
            model_id,
            response_reserve=response_reserve,
            max_tokens_override=max_tokens_override,
        )
        if self.counter.count_messages_tokens(messages, model_id) <= limit:
            return messages

        system_messages = [m for m in messages if m.is_system]
        conversation = [(i, m) for i, m in enumerate(messages) if not m.is_system]

        # Each message is priced as if sent alone, so `running` never falls
        # below count_messages_tokens() of the output.
        running = self.counter.count_messages_tokens(system_messages, model_id) or PRIMING_OVERHEAD_TOKENS
        selected: set[int] = set()
        for index, message in reversed(conversation):
            cost = self.counter.count_messages_tokens([message], model_id)
            if running + cost > limit:
                break
            selected.add(index)
            running += cost

        return [m for i, m in enumerate(messages) if m.is_system or i in selected]

    def remaining_tokens(self, messages: Sequence[Message], model_id: str) -> int:
        used = self.counter.count_messages_tokens(messages, model_id)
        return max(0, context_window(model_id) - used - self.response_reserve)

    def would_exceed_limit(self, messages: Sequence[Message], candidate_content: str, model_id: str) -> bool:
        candidate = Message(role="user", content=candidate_content or "")
        total = self.counter.count_messages_tokens([*messages, candidate], model_id)
        return total + self.response_reserve > context_window(model_id)


_DEFAULT_MANAGER = ContextWindowManager()


def prune_messages(
    messages: Sequence[Message],
    model_id: str,
    response_reserve: int = DEFAULT_RESPONSE_RESERVE,
    max_tokens_override: int | None = None,
) -> Sequence[Message]:
    return _DEFAULT_MANAGER.prune(
        messages,
        model_id,
        response_reserve=response_reserve,
        max_tokens_override=max_tokens_override,
    )


def remaining_tokens(messages: Sequence[Message], model_id: str) -> int:
    return _DEFAULT_MANAGER.remaining_tokens(messages, model_id)


def would_exceed_limit(messages: Sequence[Message], candidate_content: str, model_id: str) -> bool:
    return _DEFAULT_MANAGER.would_exceed_limit(messages, candidate_content, model_id)
