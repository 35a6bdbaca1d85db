"""Progress payloads for tracked backend operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProgressUpdate:
    processed: int
    total: int
    message: str = ""
    current_path: str | None = None

    @classmethod
    def from_json(cls, data) -> ProgressUpdate:
        if not isinstance(data, dict):
            return cls(processed=0, total=0, message=str(data or ""))
        return cls(
            processed=int(data.get("processed") or 0),
            total=int(data.get("total") or 0),
            message=str(data.get("message") or ""),
            current_path=data.get("current_path"),
        )

    @classmethod
    def starting(cls, total: int, message: str = "Starting...") -> ProgressUpdate:
        return cls(processed=0, total=max(0, int(total)), message=message)

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 0.0
        return max(0.0, min(1.0, self.processed / self.total))

    @property
    def percent(self) -> int:
        return round(self.fraction * 100)

    def label(self) -> str:
        return f"{self.processed} / {self.total}"
