"""Canonical player model shared by the roster, draft and stats layers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pelada.config import RoleBucket, classify_position


class Player(BaseModel):
    """Roster entry with cumulative counters maintained from recorded games."""

    player_id: str = Field(..., min_length=1)
    name: str
    position: str
    level: Literal[1, 2]
    goals: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    games_played: int = Field(default=0, ge=0)
    available_for_draft: bool = True

    model_config = ConfigDict(frozen=True)

    @property
    def bucket(self) -> RoleBucket:
        return classify_position(self.position)

    @property
    def total_points(self) -> int:
        return self.goals + self.assists
