"""Snake and ladder registry with guarded chain resolution."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from snakes_ladders.errors import (
    ChainLimitExceeded,
    CommandResult,
    DuplicateStart,
    EngineError,
    InvalidShortcut,
)

if TYPE_CHECKING:
    from snakes_ladders.board import BoardTopology

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHAIN_LENGTH = 10


class ShortcutKind(enum.Enum):
    LADDER = "ladder"
    SNAKE = "snake"


@dataclass(frozen=True)
class ShortcutEntry:
    start_square: int
    end_square: int
    kind: ShortcutKind

    @classmethod
    def ladder(cls, start: int, end: int) -> ShortcutEntry:
        return cls(start, end, ShortcutKind.LADDER)

    @classmethod
    def snake(cls, start: int, end: int) -> ShortcutEntry:
        return cls(start, end, ShortcutKind.SNAKE)

    @property
    def is_ladder(self) -> bool:
        return self.kind is ShortcutKind.LADDER

    def is_valid(self) -> bool:
        """Ladders must go up, snakes must go down."""
        if self.is_ladder:
            return self.end_square > self.start_square
        return self.end_square < self.start_square

    def describe(self) -> str:
        return f"{self.kind.value.capitalize()} {self.start_square}→{self.end_square}"


@dataclass
class ChainResult:
    """Where a chain of shortcuts ends up, and how it got there."""

    final_square: int
    hops: list[ShortcutEntry] = field(default_factory=list)
    warning: ChainLimitExceeded | None = None

    @property
    def truncated(self) -> bool:
        return self.warning is not None


class ShortcutTable:
    """Lookup of start square → shortcut, built once from validated entries."""

    def __init__(
        self,
        max_chain_length: int = DEFAULT_MAX_CHAIN_LENGTH,
        board: BoardTopology | None = None,
    ):
        self.max_chain_length = max_chain_length
        self.board = board
        self._by_start: dict[int, ShortcutEntry] = {}
        self.rejected: list[tuple[ShortcutEntry, EngineError]] = []

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[ShortcutEntry],
        max_chain_length: int = DEFAULT_MAX_CHAIN_LENGTH,
        board: BoardTopology | None = None,
    ) -> ShortcutTable:
        table = cls(max_chain_length=max_chain_length, board=board)
        for entry in entries:
            table.register(entry)
        logger.info(
            "Shortcut table built: %d valid entries, %d rejected",
            len(table), len(table.rejected),
        )
        return table

    # ── Registration ────────────────────────────────────────────────

    def register(self, entry: ShortcutEntry) -> CommandResult:
        error = self._check(entry)
        if error is not None:
            self.rejected.append((entry, error))
            logger.warning("Rejected shortcut: %s", error)
            return CommandResult.failure(error)
        self._by_start[entry.start_square] = entry
        return CommandResult()

    def _check(self, entry: ShortcutEntry) -> EngineError | None:
        if not entry.is_valid():
            direction = "go up" if entry.is_ladder else "go down"
            return InvalidShortcut(
                f"Invalid {entry.describe()}: a {entry.kind.value} must {direction}.",
                entry=entry,
            )
        if self.board is not None:
            error = self.board.validate_shortcut(entry)
            if error is not None:
                return error
        existing = self._by_start.get(entry.start_square)
        if existing is not None:
            return DuplicateStart(
                f"Square {entry.start_square} already has {existing.describe()}; "
                f"skipping {entry.describe()}.",
                entry=entry, existing=existing,
            )
        return None

    def clear(self) -> None:
        self._by_start.clear()
        self.rejected.clear()

    # ── Queries ─────────────────────────────────────────────────────

    def lookup(self, square: int) -> ShortcutEntry | None:
        return self._by_start.get(square)

    def entries(self) -> list[ShortcutEntry]:
        return sorted(self._by_start.values(), key=lambda e: e.start_square)

    def ladders(self) -> list[ShortcutEntry]:
        return [e for e in self.entries() if e.is_ladder]

    def snakes(self) -> list[ShortcutEntry]:
        return [e for e in self.entries() if not e.is_ladder]

    def __len__(self) -> int:
        return len(self._by_start)

    def __contains__(self, square: object) -> bool:
        return square in self._by_start

    def resolve_chain(self, square: int, avoid: int | None = None) -> ChainResult:
        """Follow shortcuts from *square* until none applies.

        Stops at the first square without an entry, on a self-loop, or
        once ``max_chain_length`` hops were taken. Hitting the limit is
        reported as a ``ChainLimitExceeded`` warning and the chain ends on
        the last square it reached. A hop that would land on *avoid* is
        not taken.
        """
        current = square
        hops: list[ShortcutEntry] = []

        while True:
            entry = self.lookup(current)
            if entry is None or entry.end_square in (current, avoid):
                return ChainResult(final_square=current, hops=hops)
            if len(hops) >= self.max_chain_length:
                warning = ChainLimitExceeded(
                    f"Shortcut chain from square {square} exceeded "
                    f"{self.max_chain_length} hops; stopping on {current}.",
                    start=square, final=current,
                )
                logger.warning("%s", warning)
                return ChainResult(final_square=current, hops=hops, warning=warning)
            hops.append(entry)
            current = entry.end_square
