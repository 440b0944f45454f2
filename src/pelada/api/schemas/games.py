from __future__ import annotations

from datetime import date as Date

from pydantic import BaseModel, Field

from pelada.models import EventKind


class GameEventRequest(BaseModel):
    player_id: str = Field(..., min_length=1)
    kind: EventKind
    minute: int = Field(default=0, ge=0)


class GameRequest(BaseModel):
    date: Date
    home_team: str = Field(..., min_length=1)
    away_team: str = Field(..., min_length=1)
    events: list[GameEventRequest] = Field(default_factory=list)


class VoiceParseRequest(BaseModel):
    text: str
