from .base import Provider, ProviderResponse
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider

__all__ = [
    "GeminiProvider",
    "OpenAIProvider",
    "Provider",
    "ProviderResponse",
]
