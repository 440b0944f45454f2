from __future__ import annotations

from pydantic import BaseModel, Field

from pelada.models import DraftedTeam


class DraftRequest(BaseModel):
    seed: int | None = None


class SwapSide(BaseModel):
    player_id: str = Field(..., min_length=1)
    team_index: int | None = Field(default=None, ge=0)


class SwapRequest(BaseModel):
    first: SwapSide
    second: SwapSide


class SwapResponse(BaseModel):
    changed: bool
    message: str
    teams: list[DraftedTeam]
