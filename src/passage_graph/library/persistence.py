"""Persistence hooks that passages and stories save through."""

from dataclasses import dataclass, field
from typing import Any, Protocol

from passage_graph.observability import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class SaveOptions:
    """Flags passed along with every save."""

    touch_parent: bool = True
    no_validation: bool = False
    no_dupe_validation: bool = False


class PersistenceHook(Protocol):
    """Receives attribute deltas and reports whether they were stored.

    Implementations assign ``record.id`` the first time a record is saved.
    """

    def save(self, record: Any, delta: dict[str, Any], options: SaveOptions) -> bool: ...


@dataclass
class SaveRecord:
    """One save seen by MemoryPersistence."""

    kind: str  # passage, story
    record_id: int
    delta: dict[str, Any]


@dataclass
class MemoryPersistence:
    """Keeps saves in memory and hands out sequential ids per record kind."""

    fail: bool = False
    saves: list[SaveRecord] = field(default_factory=list)
    _next_ids: dict[str, int] = field(default_factory=dict)

    def save(self, record: Any, delta: dict[str, Any], options: SaveOptions) -> bool:
        kind = type(record).__name__.lower()

        if self.fail:
            log.debug("save_rejected", kind=kind, delta=sorted(delta))
            return False

        if record.id is None:
            record.id = self._next_ids.get(kind, 0) + 1
            self._next_ids[kind] = record.id

        self.saves.append(SaveRecord(kind=kind, record_id=record.id, delta=dict(delta)))
        return True

    def saves_for(self, record: Any) -> list[dict[str, Any]]:
        """Return the deltas saved for a record, oldest first."""
        kind = type(record).__name__.lower()
        return [s.delta for s in self.saves if s.kind == kind and s.record_id == record.id]
