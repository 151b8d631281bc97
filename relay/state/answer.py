"""Versioned answer record (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AnswerRecord:
    value: str | None = None
    version: int = 0

    def is_newer_than(self, cached_version: int) -> bool:
        # Single staleness rule shared by push consumption and pull reconciliation.
        return self.version > cached_version

    def as_payload(self) -> dict[str, object]:
        return {"value": self.value, "version": self.version}

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> AnswerRecord:
        value = payload.get("value")
        version = payload.get("version")
        return cls(
            value=value if isinstance(value, str) else None,
            version=version if isinstance(version, int) and not isinstance(version, bool) else 0,
        )


__all__ = ["AnswerRecord"]
