"""Derived statistics rows; never persisted."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, computed_field
from pydantic.config import ConfigDict


class PlayerStats(BaseModel):
    player_id: str
    name: str
    goals: int = 0
    assists: int = 0
    games_played: int = 0

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_points(self) -> int:
        return self.goals + self.assists


class GoalkeeperStats(BaseModel):
    player_id: str
    name: str
    games_played: int = 0
    goals_conceded: int = 0
    goals: int = 0

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average(self) -> Optional[float]:
        if self.games_played == 0:
            return None
        return self.goals_conceded / self.games_played

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average_display(self) -> str:
        average = self.average
        return "0.00" if average is None else f"{average:.2f}"


class RankedEntry(BaseModel):
    """Row of a leaderboard; tied values share ``rank``."""

    rank: int
    value: Optional[float]
    stats: Union[PlayerStats, GoalkeeperStats]

    model_config = ConfigDict(frozen=True)
