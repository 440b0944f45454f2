"""REST API for the pelada club manager."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date as Date
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response

from pelada.api.schemas import (
    BucketSummaryResponse,
    DraftRequest,
    GameRequest,
    PlayerCreateRequest,
    PlayerUpdateRequest,
    SwapRequest,
    SwapResponse,
    VoiceParseRequest,
)
from pelada.club import ClubService, EventEntry
from pelada.config_loader import ClubProfile
from pelada.exceptions import (
    BothReserve,
    InsufficientPlayers,
    InvalidSelection,
    NoTeamsFormable,
    PeladaError,
    PersistenceFailure,
    RecordNotFound,
    RoleMismatch,
    UnknownRole,
)
from pelada.export import ExportError, export_sheet_to_csv, find_sheet
from pelada.ingest import VoiceCommand, parse_voice_command
from pelada.models import DraftedTeam, Game, GoalkeeperStats, Player, PlayerStats, RankedEntry, ReservePool
from pelada.persistence import ClubStore


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, RecordNotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InsufficientPlayers):
        return HTTPException(status_code=409, detail={"message": str(exc), "shortfall": exc.shortfall})
    if isinstance(exc, NoTeamsFormable):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, PersistenceFailure):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, (UnknownRole, RoleMismatch, BothReserve, InvalidSelection, ValueError)):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def _events(payload: GameRequest) -> list[EventEntry]:
    return [EventEntry(event.player_id, event.kind, event.minute) for event in payload.events]


def create_app(db_path: Path | str | None = None, *, profile: ClubProfile | None = None) -> FastAPI:
    app = FastAPI(title="pelada club manager")
    club = ClubService(ClubStore(db_path), profile=profile)
    app.state.club = club

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # -- players -----------------------------------------------------------

    @app.get("/players", response_model=list[Player])
    async def list_players():
        return club.list_players()

    @app.post("/players", response_model=Player, status_code=201)
    async def add_player(payload: PlayerCreateRequest):
        try:
            return club.add_player(
                payload.name,
                payload.position,
                payload.level,
                available_for_draft=payload.available_for_draft,
            )
        except (PeladaError, ValueError) as exc:
            raise _http_error(exc) from exc

    @app.get("/players/summary", response_model=list[BucketSummaryResponse])
    async def players_summary():
        return [
            BucketSummaryResponse(**{**asdict(summary), "bucket": summary.bucket.value})
            for summary in club.position_summary()
        ]

    @app.post("/players/reset-stats")
    async def reset_stats() -> dict[str, str]:
        try:
            club.reset_all_statistics()
        except PeladaError as exc:
            raise _http_error(exc) from exc
        return {"status": "ok"}

    @app.patch("/players/{player_id}", response_model=Player)
    async def update_player(player_id: str, payload: PlayerUpdateRequest):
        try:
            return club.update_player(player_id, **payload.model_dump(exclude_none=True))
        except (PeladaError, ValueError) as exc:
            raise _http_error(exc) from exc

    @app.delete("/players/{player_id}", status_code=204)
    async def delete_player(player_id: str):
        try:
            club.remove_player(player_id)
        except PeladaError as exc:
            raise _http_error(exc) from exc
        return Response(status_code=204)

    # -- teams -------------------------------------------------------------

    @app.post("/teams/draft", response_model=list[DraftedTeam])
    async def draft_teams(payload: DraftRequest | None = None):
        seed = payload.seed if payload is not None else None
        try:
            return club.draft_teams(seed=seed)
        except PeladaError as exc:
            raise _http_error(exc) from exc

    @app.get("/teams", response_model=list[DraftedTeam])
    async def list_teams():
        return club.list_teams()

    @app.delete("/teams", status_code=204)
    async def clear_teams():
        club.clear_teams()
        return Response(status_code=204)

    @app.get("/teams/reserves", response_model=ReservePool)
    async def reserves():
        return club.reserve_pool()

    @app.post("/teams/swap", response_model=SwapResponse)
    async def swap(payload: SwapRequest):
        try:
            result = club.swap(
                payload.first.player_id,
                payload.first.team_index,
                payload.second.player_id,
                payload.second.team_index,
            )
        except PeladaError as exc:
            raise _http_error(exc) from exc
        return SwapResponse(changed=result.changed, message=result.message, teams=result.teams)

    # -- games -------------------------------------------------------------

    @app.get("/games", response_model=list[Game])
    async def list_games(date: Date | None = Query(None)):
        return club.list_games(date)

    @app.post("/games", response_model=Game, status_code=201)
    async def record_game(payload: GameRequest):
        try:
            return club.record_game(payload.date, payload.home_team, payload.away_team, _events(payload))
        except (PeladaError, ValueError) as exc:
            raise _http_error(exc) from exc

    @app.get("/games/dates")
    async def list_game_dates() -> list[str]:
        return [day.isoformat() for day in club.game_dates()]

    @app.put("/games/{game_id}", response_model=Game)
    async def update_game(game_id: str, payload: GameRequest):
        try:
            return club.update_game(
                game_id,
                date=payload.date,
                home_team=payload.home_team,
                away_team=payload.away_team,
                events=_events(payload),
            )
        except (PeladaError, ValueError) as exc:
            raise _http_error(exc) from exc

    # -- stats -------------------------------------------------------------

    @app.get("/stats/players", response_model=list[PlayerStats])
    async def player_stats(date: Date | None = Query(None)):
        return club.player_stats(date)

    @app.get("/stats/scorers", response_model=list[RankedEntry])
    async def scorers(date: Date | None = Query(None)):
        return club.scorers(date)

    @app.get("/stats/assists", response_model=list[RankedEntry])
    async def assisters(date: Date | None = Query(None)):
        return club.assisters(date)

    @app.get("/stats/goalkeepers")
    async def goalkeepers(date: Date | None = Query(None)) -> list[dict[str, Any]]:
        return [
            {
                "rank": entry.rank,
                **entry.stats.model_dump(),
            }
            for entry in club.goalkeeper_ranking(date)
            if isinstance(entry.stats, GoalkeeperStats)
        ]

    @app.get("/export/{sheet}.csv")
    async def export_csv(sheet: str):
        try:
            selected = find_sheet(club.export_sheets(), sheet)
        except ExportError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return Response(
            content=export_sheet_to_csv(selected),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={selected.slug}.csv"},
        )

    # -- voice -------------------------------------------------------------

    @app.post("/voice/parse", response_model=VoiceCommand)
    async def voice_parse(payload: VoiceParseRequest):
        return parse_voice_command(payload.text, club.list_players())

    return app


__all__ = ["create_app"]
