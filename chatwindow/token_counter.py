"""
Token counting for context limits.

Counting is pluggable per tokenizer family. The default everywhere is a
character heuristic (no extra dependency, ~4 chars per token, rounded up);
OpenAI families can opt into exact BPE counts through tiktoken.

Counts are deterministic for a given (text, model) but not exactly additive:
counting two texts separately and summing may exceed the count of their
concatenation by up to one token per split, since each part is rounded up
on its own.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Protocol

import tiktoken

from .config import env_choice
from .message import Message
from .models import TOKENIZER_CL100K, TOKENIZER_O200K, find_model

CHARS_PER_TOKEN = 4
# Role/delimiter framing per message, as in the OpenAI chat format.
MESSAGE_OVERHEAD_TOKENS = 4
# Reply priming, paid once per non-empty request.
PRIMING_OVERHEAD_TOKENS = 3

TIKTOKEN_FAMILIES = (TOKENIZER_O200K, TOKENIZER_CL100K)


class TokenEstimator(Protocol):
    def count(self, text: str) -> int: ...


class CharRatioEstimator:
    def __init__(self, chars_per_token: int = CHARS_PER_TOKEN) -> None:
        self.chars_per_token = max(1, int(chars_per_token))

    def count(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / self.chars_per_token)


class TiktokenEstimator:
    """
    Exact BPE counts for one tiktoken encoding.

    The encoding is loaded once here and never mutated afterwards, so a single
    instance can be shared between threads.
    """

    def __init__(self, encoding_name: str) -> None:
        self.encoding_name = encoding_name
        self._encoding = tiktoken.get_encoding(encoding_name)

    def count(self, text: str) -> int:
        if not text:
            return 0
        # Special-token markers inside user text are just text here.
        return len(self._encoding.encode(text, disallowed_special=()))


class TokenCounter:
    """
    Maps a model to an estimator through the registry's tokenizer family.

    Unknown models, and families without a registered estimator, use the
    fallback. Counting never raises.
    """

    def __init__(
        self,
        *,
        estimators: Mapping[str, TokenEstimator] | None = None,
        fallback: TokenEstimator | None = None,
    ) -> None:
        self._estimators: dict[str, TokenEstimator] = dict(estimators) if estimators else {}
        self._fallback: TokenEstimator = fallback if fallback is not None else CharRatioEstimator()

    @classmethod
    def from_env(cls) -> "TokenCounter":
        return cls.for_mode(env_choice("CHAT_TOKENIZER", ("heuristic", "tiktoken"), default="heuristic"))

    @classmethod
    def for_mode(cls, mode: str) -> "TokenCounter":
        """`tiktoken` gives OpenAI families exact counts; anything else is all-heuristic."""
        if (mode or "").strip().lower() == "tiktoken":
            return cls(estimators={family: TiktokenEstimator(family) for family in TIKTOKEN_FAMILIES})
        return cls()

    def estimator_for(self, model_id: str) -> TokenEstimator:
        profile = find_model(model_id)
        if profile is None:
            return self._fallback
        return self._estimators.get(profile.tokenizer, self._fallback)

    def count_tokens(self, text: str, model_id: str) -> int:
        if not isinstance(text, str) or not text:
            return 0
        return max(0, int(self.estimator_for(model_id).count(text)))

    def message_tokens(self, message: Message, model_id: str) -> int:
        """Content tokens plus the per-message framing overhead."""
        return self.count_tokens(message.content, model_id) + MESSAGE_OVERHEAD_TOKENS

    def count_messages_tokens(self, messages: Iterable[Message], model_id: str) -> int:
        """
        Total prompt cost of a message list.

        Empty input costs 0; anything else pays the priming overhead once on
        top of each message's cost.
        """
        total = 0
        seen = False
        for message in messages:
            seen = True
            total += self.message_tokens(message, model_id)
        if not seen:
            return 0
        return total + PRIMING_OVERHEAD_TOKENS


_DEFAULT_COUNTER = TokenCounter()


def count_tokens(text: str, model_id: str) -> int:
    return _DEFAULT_COUNTER.count_tokens(text, model_id)


def count_messages_tokens(messages: Iterable[Message], model_id: str) -> int:
    return _DEFAULT_COUNTER.count_messages_tokens(messages, model_id)
