"""Command and validation result models."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationOutcome:
    """Outcome of a descriptor-level business rule check."""

    valid: bool
    reason: str = ""

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def fail(cls, reason: str) -> "ValidationOutcome":
        return cls(valid=False, reason=reason)


@dataclass(frozen=True)
class CommandResult:
    """
    Uniform response of every command.

    Failures always carry a human-readable message; payload is only set by
    commands that return data (list).
    """

    success: bool
    message: str = ""
    payload: Any | None = None

    @classmethod
    def ok(cls, message: str = "", payload: Any | None = None) -> "CommandResult":
        return cls(success=True, message=message, payload=payload)

    @classmethod
    def fail(cls, message: str) -> "CommandResult":
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the JSON wire form.

        Payload items that know how to serialize themselves (descriptors)
        are converted with their own to_dict().
        """
        payload = self.payload
        if isinstance(payload, (list, tuple)):
            payload = [
                item.to_dict() if hasattr(item, "to_dict") else item
                for item in payload
            ]
        elif hasattr(payload, "to_dict"):
            payload = payload.to_dict()
        return {"success": self.success, "message": self.message, "payload": payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommandResult":
        return cls(
            success=bool(data.get("success", False)),
            message=data.get("message", ""),
            payload=data.get("payload"),
        )
