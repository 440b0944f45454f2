"""Recorded matches and the events attached to them."""

from __future__ import annotations

from datetime import date as Date
from enum import Enum
from typing import List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class EventKind(str, Enum):
    GOAL = "goal"
    ASSIST = "assist"
    OWN_GOAL = "own_goal"
    GOAL_CONCEDED = "goal_conceded"


class GameEvent(BaseModel):
    """One player event; ``player_name`` is a snapshot that survives roster deletes."""

    player_id: str = Field(..., min_length=1)
    player_name: str
    kind: EventKind
    minute: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class Game(BaseModel):
    game_id: str = Field(..., min_length=1)
    date: Date
    home_team: str
    away_team: str
    home_goals: int = Field(default=0, ge=0)
    away_goals: int = Field(default=0, ge=0)
    events: List[GameEvent] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def total_goals(self) -> int:
        return self.home_goals + self.away_goals

    def participant_ids(self) -> set[str]:
        return {event.player_id for event in self.events}
