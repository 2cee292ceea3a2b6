from __future__ import annotations

from dataclasses import dataclass, field

BUSY_MESSAGE = "La operación anterior todavía está en curso"


@dataclass
class ActionGuard:
    """Per-control in-flight flags; a second trigger while busy is refused."""

    in_flight: set[str] = field(default_factory=set)

    def begin(self, operation: str) -> bool:
        if operation in self.in_flight:
            return False
        self.in_flight.add(operation)
        return True

    def end(self, operation: str) -> None:
        self.in_flight.discard(operation)

    def is_busy(self, operation: str) -> bool:
        return operation in self.in_flight
