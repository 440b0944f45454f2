"""Command-line interface for managing the roster, drafts and games."""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date as Date
from pathlib import Path

from pelada.club import ClubService, EventEntry
from pelada.config_loader import ClubProfile
from pelada.exceptions import PeladaError
from pelada.export import export_sheets_to_dir
from pelada.models import DraftedTeam
from pelada.persistence import ClubStore


def _team_index(value: str) -> int | None:
    if value.lower() in {"reserve", "r", "-"}:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected a team index or 'reserve', got {value!r}") from exc


def _event(value: str) -> EventEntry:
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise argparse.ArgumentTypeError(f"Invalid event '{value}', expected player_id:kind[:minute]")
    minute = int(parts[2]) if len(parts) == 3 else 0
    return EventEntry(parts[0], parts[1], minute)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage a pelada roster, team drafts and match stats")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path (default: PELADA_DB_PATH or pelada.sqlite)")
    parser.add_argument("--load-profile", type=Path, default=None, help="Load club profile JSON")
    parser.add_argument("--save-profile", type=Path, default=None, help="Save the effective club profile JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log INFO messages")
    sub = parser.add_subparsers(dest="command", required=True)

    players = sub.add_parser("players", help="List the roster")
    players.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    add = sub.add_parser("add-player", help="Add a player to the roster")
    add.add_argument("name")
    add.add_argument("position", help="Position label, e.g. Goleiro or Zagueiro")
    add.add_argument("level", type=int, choices=(1, 2))
    add.add_argument("--unavailable", action="store_true", help="Exclude the player from drafts")

    remove = sub.add_parser("remove-player", help="Remove a player from the roster")
    remove.add_argument("player_id")

    sub.add_parser("summary", help="Available players per position")
    sub.add_parser("reset-stats", help="Zero every player's counters")
    sub.add_parser("recount", help="Rebuild player counters from the game history")

    draft = sub.add_parser("draft", help="Draft a new batch of teams")
    draft.add_argument("--seed", type=int, default=None, help="Seed for a reproducible draft")

    sub.add_parser("teams", help="Show the drafted teams and the reserve pool")

    swap = sub.add_parser("swap", help="Swap two same-position players")
    swap.add_argument("first_player")
    swap.add_argument("first_team", type=_team_index, help="Team index or 'reserve'")
    swap.add_argument("second_player")
    swap.add_argument("second_team", type=_team_index, help="Team index or 'reserve'")

    game = sub.add_parser("record-game", help="Record a game between two drafted teams")
    game.add_argument("home_team")
    game.add_argument("away_team")
    game.add_argument("--date", type=Date.fromisoformat, default=None, help="Game date (YYYY-MM-DD, default today)")
    game.add_argument(
        "--event",
        type=_event,
        action="append",
        default=[],
        help="Game event as player_id:kind[:minute]; kind is goal, assist, own_goal or goal_conceded",
    )

    stats = sub.add_parser("stats", help="Show the points table and leaderboards")
    stats.add_argument("--date", type=Date.fromisoformat, default=None, help="Limit to games on this date")

    export = sub.add_parser("export", help="Write every export sheet as CSV")
    export.add_argument("directory", type=Path)
    return parser.parse_args(argv)


def _print_team(team: DraftedTeam) -> None:
    print(f"{team.name} (level 1: {team.level1_count}, level 2: {team.level2_count})")
    for player in team.players:
        print(f"  {player.position:<16} {player.name} [L{player.level}] {player.player_id}")


def _run(args: argparse.Namespace, club: ClubService) -> None:
    command = args.command
    if command == "players":
        players = club.list_players()
        if args.json:
            print(json.dumps([player.model_dump() for player in players], indent=2))
            return
        for player in players:
            status = "" if player.available_for_draft else " (unavailable)"
            print(
                f"{player.player_id}  {player.name:<20} {player.position:<16} L{player.level} "
                f"G{player.goals} A{player.assists} J{player.games_played}{status}"
            )
    elif command == "add-player":
        player = club.add_player(args.name, args.position, args.level, available_for_draft=not args.unavailable)
        print(f"Added {player.name} ({player.player_id})")
    elif command == "remove-player":
        club.remove_player(args.player_id)
        print(f"Removed {args.player_id}")
    elif command == "summary":
        for row in club.position_summary():
            print(f"{row.bucket.value:<22} {row.total:>3} (L1 {row.level1}, L2 {row.level2}) need {row.required}/team")
    elif command == "reset-stats":
        club.reset_all_statistics()
        print("Statistics reset")
    elif command == "recount":
        players = club.recount_statistics()
        print(f"Recounted {len(players)} players")
    elif command == "draft":
        teams = club.draft_teams(seed=args.seed)
        for team in teams:
            _print_team(team)
        reserves = club.reserve_pool().all_players()
        print(f"{len(reserves)} players in reserve")
    elif command == "teams":
        for team in club.list_teams():
            _print_team(team)
        reserves = club.reserve_pool().all_players()
        if reserves:
            print("Reserves")
            for player in reserves:
                print(f"  {player.position:<16} {player.name} [L{player.level}] {player.player_id}")
    elif command == "swap":
        result = club.swap(args.first_player, args.first_team, args.second_player, args.second_team)
        print(result.message)
    elif command == "record-game":
        game = club.record_game(args.date or Date.today(), args.home_team, args.away_team, args.event)
        print(f"{game.date.isoformat()}: {game.home_team} {game.home_goals} x {game.away_goals} {game.away_team}")
    elif command == "stats":
        print("Scorers")
        for entry in club.scorers(args.date):
            print(f"  {entry.rank:>2}. {entry.stats.name} {int(entry.value)}")
        print("Assists")
        for entry in club.assisters(args.date):
            print(f"  {entry.rank:>2}. {entry.stats.name} {int(entry.value)}")
        print("Goalkeepers")
        for entry in club.goalkeeper_ranking(args.date):
            print(
                f"  {entry.rank:>2}. {entry.stats.name} {entry.stats.average_display} "
                f"({entry.stats.goals_conceded} in {entry.stats.games_played})"
            )
    elif command == "export":
        for path in export_sheets_to_dir(club.export_sheets(), args.directory):
            print(f"Wrote {path}")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    profile = ClubProfile.load(args.load_profile) if args.load_profile else ClubProfile()
    profile = profile.with_env()
    if args.save_profile:
        profile.save(args.save_profile)
        print(f"Saved club profile to {args.save_profile}")

    club = ClubService(ClubStore(args.db), profile=profile)
    try:
        _run(args, club)
    except (PeladaError, ValueError) as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
