from .context_manager import ContextWindowManager, prune_messages, remaining_tokens, would_exceed_limit
from .errors import ConfigurationError, ErrorCode, InvalidInputError, ProviderError
from .message import Message
from .models import ModelProfile, context_window, find_model, models_for_provider
from .token_counter import TokenCounter, count_messages_tokens, count_tokens

__all__ = [
    "ConfigurationError",
    "ContextWindowManager",
    "ErrorCode",
    "InvalidInputError",
    "Message",
    "ModelProfile",
    "ProviderError",
    "TokenCounter",
    "context_window",
    "count_messages_tokens",
    "count_tokens",
    "find_model",
    "models_for_provider",
    "prune_messages",
    "remaining_tokens",
    "would_exceed_limit",
]
