from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` range of UTF-8 byte offsets into the parsed source."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span range {self.start}..{self.end}")

    @classmethod
    def at(cls, pos: int) -> Span:
        """Empty span sitting at ``pos``."""
        return cls(pos, pos)

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, other: Span) -> bool:
        return self.start <= other.start and other.end <= self.end

    def cover(self, other: Span) -> Span:
        return Span(min(self.start, other.start), max(self.end, other.end))

    def slice(self, source: str) -> str:
        """Text covered by the span; ``source`` is the text it was parsed from."""
        return source.encode("utf-8")[self.start:self.end].decode("utf-8")

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"
