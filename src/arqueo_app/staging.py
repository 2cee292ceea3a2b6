from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from arqueo_client_sdk import PendingMovement, ValidationIssue, validate_pending_movement

from arqueo_app.formatting import format_currency


@dataclass(frozen=True)
class StagedEntry:
    key: int
    movement: PendingMovement


@dataclass(frozen=True)
class StageResult:
    ok: bool
    issues: list[ValidationIssue]
    entry: StagedEntry | None = None


@dataclass
class StagingBuffer:
    """Ordered movements entered but not yet persisted.

    The buffer is the only source of the pending list; ``render`` is a pure
    projection of it, so the two cannot drift apart.
    """

    _entries: list[StagedEntry] = field(default_factory=list)
    _next_key: int = 1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def add(self, payload: PendingMovement | Mapping[str, Any]) -> StageResult:
        raw = payload.model_dump() if isinstance(payload, PendingMovement) else dict(payload)
        check = validate_pending_movement(raw)
        if not check.ok or check.movement is None:
            return StageResult(ok=False, issues=check.issues)
        entry = StagedEntry(key=self._next_key, movement=check.movement)
        self._next_key += 1
        self._entries.append(entry)
        return StageResult(ok=True, issues=[], entry=entry)

    def remove(self, index: int) -> PendingMovement:
        if index < 0 or index >= len(self._entries):
            raise IndexError(f"No pending movement at position {index}")
        return self._entries.pop(index).movement

    def remove_key(self, key: int) -> PendingMovement:
        for position, entry in enumerate(self._entries):
            if entry.key == key:
                return self.remove(position)
        raise KeyError(f"No pending movement with key {key}")

    def entries(self) -> tuple[StagedEntry, ...]:
        return tuple(self._entries)

    def to_batch(self) -> list[PendingMovement]:
        return [entry.movement for entry in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    def render(self) -> list[dict[str, Any]]:
        rows = []
        for index, entry in enumerate(self._entries):
            movement = entry.movement
            rows.append(
                {
                    "index": index,
                    "key": entry.key,
                    "fecha": movement.fecha.isoformat() if movement.fecha else None,
                    "amount": format_currency(movement.amount),
                    "movement_type": movement.movement_type.value,
                    "shift": movement.shift,
                    "concept_id": movement.concept_id,
                    "created_by": movement.created_by,
                    "details": movement.details,
                }
            )
        return rows
