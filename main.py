"""
ChatWindow CLI entry point.

Usage:
  1. Copy .env.example to .env and fill in provider API keys.
  2. pip install -e .
  3. python main.py --model gpt-4o-mini
     python main.py --provider gemini --model gemini-2.0-flash

Type your message and press Enter. History is pruned to the model's context
window before every request. Type "exit" or "quit" to leave.
Type "/reset" to clear conversation history, "/budget" to show the tokens left.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Load .env from the project root
from dotenv import load_dotenv

_env_path = Path(__file__).parent / ".env"
load_dotenv(_env_path)

from chatwindow.chat import ChatService  # noqa: E402
from chatwindow.config import Settings  # noqa: E402
from chatwindow.context_manager import ContextWindowManager  # noqa: E402
from chatwindow.errors import ChatWindowError  # noqa: E402
from chatwindow.message import Message  # noqa: E402
from chatwindow.token_counter import TokenCounter  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ChatWindow context-managed chat CLI")
    parser.add_argument("--provider", choices=["openai", "gemini"], default=None)
    parser.add_argument("--model", default=None)
    parser.add_argument("--reserve", type=int, default=None, help="Tokens held back for the reply")
    parser.add_argument("--system", default=None, help="Optional system prompt kept on every request")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        manager = ContextWindowManager(
            counter=TokenCounter.for_mode(settings.tokenizer),
            response_reserve=args.reserve if args.reserve is not None else settings.response_reserve,
        )
        service = ChatService(provider=args.provider, model=args.model, manager=manager, settings=settings)
    except ChatWindowError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        raise SystemExit(2)

    base: list[Message] = [Message(role="system", content=args.system)] if args.system else []
    history: list[Message] = list(base)

    print("ChatWindow - context-managed chat")
    print(f"provider/model: {service.provider_name}/{service.model}")
    print(f"tokens available: {service.remaining_tokens(history)}")
    print('Type your message (or "exit" to quit, "/reset" to clear history, "/budget" for tokens left).')
    print("-" * 60)

    while True:
        try:
            user_input = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if not user_input:
            continue
        if user_input.lower() in ("exit", "quit"):
            print("Bye!")
            break
        if user_input == "/reset":
            history = list(base)
            print("[history reset]")
            continue
        if user_input == "/budget":
            print(f"[{service.remaining_tokens(history)} tokens available]")
            continue

        if service.would_exceed_limit(history, user_input):
            print("[older messages will be dropped to fit the context window]")
        candidate = [*history, Message(role="user", content=user_input)]
        try:
            reply = service.reply(candidate)
        except ChatWindowError as exc:
            print(f"[error] {exc}", file=sys.stderr)
            continue

        history = [*candidate, Message(role="assistant", content=reply.text)]
        print(f"\n{reply.text}")
        if reply.dropped_count:
            print(f"[{reply.dropped_count} older messages not sent]")


if __name__ == "__main__":
    main()
