"""Types shared between requests and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ServiceSecrets = list[tuple[str, str]]
QueryPairs = list[tuple[str, str]]


@dataclass
class FunctionCall:
    """Name and JSON-encoded arguments of a function the model wants called."""

    arguments: str = ""
    name: str = ""


@dataclass
class Message:
    """A single chat message."""

    role: str = ""
    content: str = ""
    name: str = ""
    function_call: FunctionCall = field(default_factory=FunctionCall)

    def to_dict(self) -> dict[str, Any]:
        """Return the message as a JSON-ready dict, leaving out empty optional fields."""
        result: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name:
            result["name"] = self.name
        if self.function_call.name:
            result["function_call"] = {
                "name": self.function_call.name,
                "arguments": self.function_call.arguments,
            }
        return result


@dataclass
class OpenAIAuth:
    """Credentials sent with every request."""

    api_key: str = ""
    organization_id: str = ""

    def is_empty(self) -> bool:
        """True when either the key or the organization is missing."""
        return not self.api_key or not self.organization_id