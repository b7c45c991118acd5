"""
Static model registry.

Provider differences that matter for budgeting are a handful of numbers, so
the registry is plain data: provider name -> tuple of ModelProfile.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

Provider = Literal["openai", "gemini"]

DEFAULT_CONTEXT_WINDOW = 4096
DEFAULT_PROVIDER: Provider = "openai"
DEFAULT_MODEL = "gpt-4o-mini"

# Tokenizer family keys understood by TokenCounter.
TOKENIZER_O200K = "o200k_base"
TOKENIZER_CL100K = "cl100k_base"
TOKENIZER_HEURISTIC = "heuristic"


@dataclass(frozen=True)
class TokenCost:
    input: float
    output: float


@dataclass(frozen=True)
class ModelProfile:
    model_id: str
    name: str
    provider: Provider
    context_window: int
    supports_streaming: bool
    cost_per_1k_tokens: TokenCost
    tokenizer: str = TOKENIZER_HEURISTIC


def _openai(model_id: str, name: str, window: int, cost_in: float, cost_out: float, tokenizer: str) -> ModelProfile:
    return ModelProfile(
        model_id=model_id,
        name=name,
        provider="openai",
        context_window=window,
        supports_streaming=True,
        cost_per_1k_tokens=TokenCost(input=cost_in, output=cost_out),
        tokenizer=tokenizer,
    )


def _gemini(model_id: str, name: str, cost_in: float, cost_out: float) -> ModelProfile:
    return ModelProfile(
        model_id=model_id,
        name=name,
        provider="gemini",
        context_window=1_000_000,
        supports_streaming=True,
        cost_per_1k_tokens=TokenCost(input=cost_in, output=cost_out),
        tokenizer=TOKENIZER_HEURISTIC,
    )


PROVIDER_MODELS: Mapping[str, tuple[ModelProfile, ...]] = MappingProxyType(
    {
        "openai": (
            _openai("gpt-4o", "GPT-4o", 128_000, 0.005, 0.015, TOKENIZER_O200K),
            _openai("gpt-4o-mini", "GPT-4o Mini", 128_000, 0.00015, 0.0006, TOKENIZER_O200K),
            _openai("gpt-4-turbo", "GPT-4 Turbo", 128_000, 0.01, 0.03, TOKENIZER_CL100K),
            _openai("gpt-4", "GPT-4", 8192, 0.03, 0.06, TOKENIZER_CL100K),
            _openai("gpt-3.5-turbo", "GPT-3.5 Turbo", 16_385, 0.0005, 0.0015, TOKENIZER_CL100K),
        ),
        "gemini": (
            _gemini("gemini-2.0-flash", "Gemini 2.0 Flash", 0.0, 0.0),
            _gemini("gemini-2.5-flash-lite", "Gemini 2.5 Flash Lite", 0.0, 0.0),
            _gemini("gemini-1.5-pro", "Gemini 1.5 Pro", 0.00125, 0.005),
            _gemini("gemini-1.5-flash", "Gemini 1.5 Flash", 0.000075, 0.0003),
        ),
    }
)

_BY_ID: Mapping[str, ModelProfile] = MappingProxyType(
    {profile.model_id: profile for models in PROVIDER_MODELS.values() for profile in models}
)


def find_model(model_id: str) -> ModelProfile | None:
    return _BY_ID.get((model_id or "").strip())


def models_for_provider(provider: str) -> tuple[ModelProfile, ...]:
    return PROVIDER_MODELS.get((provider or "").strip().lower(), ())


def all_models() -> tuple[ModelProfile, ...]:
    return tuple(_BY_ID.values())


def context_window(model_id: str) -> int:
    """Context window for a model; unknown ids get the conservative default."""
    profile = find_model(model_id)
    if profile is None:
        return DEFAULT_CONTEXT_WINDOW
    return profile.context_window


def estimate_cost(model_id: str, input_tokens: int, output_tokens: int) -> float:
    """USD cost of a request; 0.0 when the model has no pricing entry."""
    profile = find_model(model_id)
    if profile is None:
        return 0.0
    cost = profile.cost_per_1k_tokens
    return (max(0, input_tokens) * cost.input + max(0, output_tokens) * cost.output) / 1000.0
