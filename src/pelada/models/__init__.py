"""Domain models for the roster, drafted teams, games and derived stats."""

from .game import EventKind, Game, GameEvent
from .player import Player
from .stats import GoalkeeperStats, PlayerStats, RankedEntry
from .team import BUCKET_FIELDS, DraftedTeam, ReservePool

__all__ = [
    "BUCKET_FIELDS",
    "DraftedTeam",
    "EventKind",
    "Game",
    "GameEvent",
    "GoalkeeperStats",
    "Player",
    "PlayerStats",
    "RankedEntry",
    "ReservePool",
]
