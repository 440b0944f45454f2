"""Spreadsheet-style export: named sheets of rows, written out as CSV."""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass, field
from datetime import date as Date
from io import StringIO
from pathlib import Path
from typing import Dict, List, Sequence

from pelada.draft.service import team_lookup
from pelada.models import DraftedTeam, Game, GoalkeeperStats, PlayerStats
from pelada.stats.ranking import DEFAULT_TOP_N, goalkeeper_ranking, points_table, top_assisters, top_scorers


NO_TEAM = "No team"


class ExportError(RuntimeError):
    """Raised when a requested sheet does not exist."""


@dataclass(frozen=True)
class ExportSheet:
    name: str
    headers: tuple[str, ...]
    rows: List[tuple] = field(default_factory=list)

    @property
    def slug(self) -> str:
        return re.sub(r"[^a-z0-9]+", "-", self.name.lower()).strip("-")


def _general_sheet(stats: Sequence[PlayerStats], lookup: Dict[str, str]) -> ExportSheet:
    return ExportSheet(
        name="Player Stats",
        headers=("Rank", "Player", "Team", "Games", "Goals", "Assists", "Points"),
        rows=[
            (
                entry.rank,
                entry.stats.name,
                lookup.get(entry.stats.player_id, NO_TEAM),
                entry.stats.games_played,
                entry.stats.goals,
                entry.stats.assists,
                entry.stats.total_points,
            )
            for entry in points_table(stats)
        ],
    )


def _leader_sheet(name: str, metric: str, entries) -> ExportSheet:
    return ExportSheet(
        name=name,
        headers=("Rank", "Player", metric),
        rows=[(entry.rank, entry.stats.name, int(entry.value)) for entry in entries],
    )


def _goalkeeper_sheet(rows: Sequence[GoalkeeperStats]) -> ExportSheet:
    return ExportSheet(
        name="Goalkeepers",
        headers=("Rank", "Goalkeeper", "Games", "Goals Conceded", "Average"),
        rows=[
            (
                entry.rank,
                entry.stats.name,
                entry.stats.games_played,
                entry.stats.goals_conceded,
                entry.stats.average_display,
            )
            for entry in goalkeeper_ranking(rows)
        ],
    )


def _history_sheet(games: Sequence[Game]) -> ExportSheet:
    ordered = sorted(games, key=lambda game: game.date, reverse=True)
    return ExportSheet(
        name="Game History",
        headers=("Date", "Home", "Away", "Result", "Events"),
        rows=[
            (
                game.date.isoformat(),
                game.home_team,
                game.away_team,
                f"{game.home_goals} x {game.away_goals}",
                len(game.events),
            )
            for game in ordered
        ],
    )


def _teams_sheet(teams: Sequence[DraftedTeam]) -> ExportSheet:
    return ExportSheet(
        name="Teams",
        headers=("Team", "Players", "Level 1", "Level 2", "Members"),
        rows=[
            (
                team.name,
                len(team.players),
                team.level1_count,
                team.level2_count,
                ", ".join(player.name for player in team.players),
            )
            for team in teams
        ],
    )


def build_export_sheets(
    stats: Sequence[PlayerStats],
    games: Sequence[Game],
    goalkeepers: Sequence[GoalkeeperStats],
    teams: Sequence[DraftedTeam],
    *,
    top_n: int = DEFAULT_TOP_N,
) -> List[ExportSheet]:
    """Assemble every export sheet from pre-computed stats, games and teams."""

    lookup = team_lookup(teams)
    return [
        _general_sheet(stats, lookup),
        _leader_sheet("Top Scorers", "Goals", top_scorers(stats, limit=top_n)),
        _leader_sheet("Top Assists", "Assists", top_assisters(stats, limit=top_n)),
        _goalkeeper_sheet(goalkeepers),
        _history_sheet(games),
        _teams_sheet(teams),
    ]


def find_sheet(sheets: Sequence[ExportSheet], key: str) -> ExportSheet:
    for sheet in sheets:
        if key in {sheet.slug, sheet.name}:
            return sheet
    raise ExportError(f"Unknown sheet {key!r}; expected one of {[s.slug for s in sheets]}")


def export_sheet_to_csv(sheet: ExportSheet) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(sheet.headers)
    for row in sheet.rows:
        writer.writerow(row)
    return buffer.getvalue()


def export_sheets_to_dir(
    sheets: Sequence[ExportSheet],
    directory: Path,
    *,
    stamp: Date | None = None,
) -> List[Path]:
    """Write one CSV per sheet, named ``<slug>_<date>.csv``."""

    directory.mkdir(parents=True, exist_ok=True)
    suffix = (stamp or Date.today()).isoformat()
    written: List[Path] = []
    for sheet in sheets:
        path = directory / f"{sheet.slug}_{suffix}.csv"
        path.write_text(export_sheet_to_csv(sheet), encoding="utf-8", newline="")
        written.append(path)
    return written


__all__ = [
    "ExportError",
    "ExportSheet",
    "build_export_sheets",
    "export_sheet_to_csv",
    "export_sheets_to_dir",
    "find_sheet",
]
