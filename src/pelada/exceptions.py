"""Error taxonomy shared by the draft, stats and persistence layers."""

from __future__ import annotations

from typing import Mapping


class PeladaError(Exception):
    """Base class for all errors raised by pelada."""


class UnknownRole(PeladaError, ValueError):
    def __init__(self, label: str):
        super().__init__(f"Unknown position label {label!r}")
        self.label = label


class InsufficientPlayers(PeladaError):
    """Raised when a role bucket cannot fill even one team."""

    def __init__(self, shortfall: Mapping[str, int]):
        details = ", ".join(f"{bucket}: missing {missing}" for bucket, missing in shortfall.items())
        super().__init__(f"Not enough available players to form a team ({details})")
        self.shortfall = dict(shortfall)


class NoTeamsFormable(PeladaError):
    def __init__(self) -> None:
        super().__init__("No complete team can be formed with the available players")


class SwapError(PeladaError):
    """Base class for rejected swaps."""


class RoleMismatch(SwapError):
    def __init__(self, first: str, second: str):
        super().__init__(f"Only players of the same position can be swapped ({first} vs {second})")
        self.first = first
        self.second = second


class BothReserve(SwapError):
    def __init__(self) -> None:
        super().__init__("Cannot swap two reserve players")


class NoOpSwap(SwapError):
    """Both selections reference the same player; nothing to do."""

    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id} selected twice; swap skipped")
        self.player_id = player_id


class InvalidSelection(SwapError):
    def __init__(self, message: str):
        super().__init__(message)


class RecordNotFound(PeladaError, KeyError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id

    def __str__(self) -> str:
        return str(self.args[0])


class PersistenceFailure(PeladaError):
    """Wraps any storage I/O failure."""


class TeamInvariantError(PeladaError, AssertionError):
    """A drafted team lost sync between its flat list and role sub-lists."""


__all__ = [
    "PeladaError",
    "UnknownRole",
    "InsufficientPlayers",
    "NoTeamsFormable",
    "SwapError",
    "RoleMismatch",
    "BothReserve",
    "NoOpSwap",
    "InvalidSelection",
    "RecordNotFound",
    "PersistenceFailure",
    "TeamInvariantError",
]
