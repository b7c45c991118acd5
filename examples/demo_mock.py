from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

import sys

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chatwindow.chat import ChatService
from chatwindow.config import Settings
from chatwindow.message import Message
from chatwindow.models import context_window
from chatwindow.providers.base import ProviderResponse


class EchoProvider:
    """Replies with how much of the conversation actually reached it."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "echo"

    def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        api_key: str | None = None,
    ) -> ProviderResponse:
        self.calls.append({"model": model, "messages": messages})
        return ProviderResponse(text=f"received {len(messages)} messages")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ChatWindow offline pruning demo")
    parser.add_argument("--model", default="gpt-4")
    parser.add_argument("--turns", type=int, default=50)
    parser.add_argument("--turn-chars", type=int, default=800)
    parser.add_argument("--reserve", type=int, default=1000)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    os.environ.setdefault("OPENAI_API_KEY", "demo-key")
    os.environ.setdefault("GEMINI_API_KEY", "demo-key")

    settings = Settings.from_env()
    settings.response_reserve = args.reserve
    echo = EchoProvider()
    service = ChatService(model=args.model, settings=settings, providers={"openai": echo, "gemini": echo})

    history = [Message(role="system", content="You are a concise assistant.")]
    for i in range(args.turns):
        role = "user" if i % 2 == 0 else "assistant"
        history.append(Message(role=role, content=f"turn {i}: " + "lorem " * (args.turn_chars // 6)))

    print("=== ChatWindow Mock Demo ===")
    print(f"model: {args.model} (window {context_window(args.model)} tokens, reserve {args.reserve})")
    print(f"history: {len(history)} messages")
    reply = service.reply(history)
    sent = echo.calls[-1]["messages"]
    print(f"reply: {reply.text}")
    print(f"dropped: {reply.dropped_count} oldest messages")
    print(f"first kept turn: {sent[1]['content'][:12]!r}")
    print(f"tokens left after this history: {service.remaining_tokens(history)}")


if __name__ == "__main__":
    main()
