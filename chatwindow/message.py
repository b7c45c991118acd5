"""
Chat message value type.

Messages travel as immutable values with a canonical structure:
  - Message(role="system", content="...")
  - Message(role="user", content="...")
  - Message(role="assistant", content="...")
Provider SDKs want plain {"role", "content"} dicts; use to_dict/from_dict at
that boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal

Role = Literal["system", "user", "assistant"]

ROLES: frozenset[str] = frozenset({"system", "user", "assistant"})


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unsupported message role: {self.role!r}")
        if not isinstance(self.content, str):
            raise ValueError("Message content must be a string")

    @property
    def is_system(self) -> bool:
        return self.role == "system"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        role = str(data.get("role", "")).strip().lower()
        content = data.get("content")
        return cls(role=role, content=content if isinstance(content, str) else "")  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


def to_dicts(messages: Iterable[Message]) -> list[dict[str, str]]:
    return [m.to_dict() for m in messages]
