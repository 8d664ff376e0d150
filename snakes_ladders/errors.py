"""Error taxonomy and the result value every engine command returns.

Errors are exception classes so they carry a type and a code, but the
engine hands them back inside a :class:`CommandResult` instead of raising
them across a turn boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from snakes_ladders.rules import RollOutcome
    from snakes_ladders.shortcuts import ChainResult


class EngineError(Exception):
    """Base class for everything the engine reports."""

    code: str = "ENGINE_ERROR"

    def __init__(self, message: str = "", **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}" if self.message else self.code


# ── Configuration errors ─────────────────────────────────────────────

class ConfigurationError(EngineError):
    code = "CONFIGURATION_ERROR"


class InvalidConfiguration(ConfigurationError, ValueError):
    code = "INVALID_CONFIGURATION"


class InvalidShortcut(ConfigurationError):
    code = "INVALID_SHORTCUT"


class DuplicateStart(ConfigurationError):
    code = "DUPLICATE_START"


class NotReady(ConfigurationError):
    code = "NOT_READY"


# ── Sequencing errors ────────────────────────────────────────────────

class SequencingError(EngineError):
    code = "SEQUENCING_ERROR"


class NotAwaitingRoll(SequencingError):
    code = "NOT_AWAITING_ROLL"


class MoveInProgress(SequencingError):
    code = "MOVE_IN_PROGRESS"


class RollAlreadyPending(SequencingError):
    code = "ROLL_ALREADY_PENDING"


class InvalidDiceValue(SequencingError):
    code = "INVALID_DICE_VALUE"


class NoActivePlayers(SequencingError):
    code = "NO_ACTIVE_PLAYERS"


class GameAlreadyStarted(SequencingError):
    code = "GAME_ALREADY_STARTED"


class UnexpectedArrival(SequencingError):
    code = "UNEXPECTED_ARRIVAL"


class StaleArrival(SequencingError):
    """An arrival or dice callback issued before the last reset."""

    code = "STALE_ARRIVAL"


# ── Safety-limit warnings ────────────────────────────────────────────

class EngineWarning(EngineError):
    """Recovered condition; reported, never fatal."""

    code = "ENGINE_WARNING"


class ChainLimitExceeded(EngineWarning):
    code = "CHAIN_LIMIT_EXCEEDED"


# ── Result value ─────────────────────────────────────────────────────

@dataclass
class CommandResult:
    """What happened when a command was issued to the engine."""

    ok: bool = True
    error: EngineError | None = None
    outcome: RollOutcome | None = None
    chain: ChainResult | None = None
    warnings: list[EngineWarning] = field(default_factory=list)

    @classmethod
    def failure(cls, error: EngineError) -> CommandResult:
        return cls(ok=False, error=error)

    @property
    def message(self) -> str:
        return self.error.message if self.error is not None else ""
