"""Error taxonomy for battle operations.

Battles raise these; the manager turns them into failed ``BattleResult``
values so nothing in the core ever escapes to the caller as an exception.
"""

from typing import Optional

from autoduel.models.results import ErrorKind, RejectReason


class BattleError(Exception):
    """Base class for rejected battle operations."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, reason: RejectReason, message: Optional[str] = None) -> None:
        self.reason = reason
        self.message = message or reason.describe()
        super().__init__(self.message)


class ValidationError(BattleError):
    """Malformed input: unknown action, non-participant, self-battle."""

    kind = ErrorKind.VALIDATION


class StateConflictError(BattleError):
    """Operation conflicts with current registry or battle state."""

    kind = ErrorKind.STATE_CONFLICT


class NotFoundError(BattleError):
    """Identity is not present in the character catalog."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, identities: list[str]) -> None:
        self.identities = identities
        super().__init__(
            RejectReason.UNKNOWN_CHARACTER,
            f"{RejectReason.UNKNOWN_CHARACTER.describe()}: {', '.join(identities)}",
        )
