"""Fold recorded game events into per-player and per-goalkeeper totals.

Two derivation paths share the same event rules:

* cumulative: :func:`apply_game_to_players` bumps the stored Player counters
  once per recorded game and :func:`apply_game_edit` shifts them by the
  difference when a game is edited;
* replay: :func:`replay_player_stats` recomputes totals from any subset of
  games, which is how date-scoped leaderboards are built.

Rules: a ``goal`` event adds one goal, an ``assist`` adds one assist, and
every distinct player appearing in a game's events (any kind) is credited one
game played. Own goals and conceded goals only count as participation.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date as Date
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from pelada.config import RoleBucket, classify_position
from pelada.draft.service import team_lookup
from pelada.exceptions import UnknownRole
from pelada.models import DraftedTeam, EventKind, Game, GameEvent, GoalkeeperStats, Player, PlayerStats


@dataclass
class _Tally:
    name: str
    goals: int = 0
    assists: int = 0
    games_played: int = 0


@dataclass
class _Fold:
    tallies: Dict[str, _Tally] = field(default_factory=dict)

    def add_game(self, events: Sequence[GameEvent]) -> None:
        seen: set[str] = set()
        for event in events:
            tally = self.tallies.setdefault(event.player_id, _Tally(name=event.player_name))
            if event.kind is EventKind.GOAL:
                tally.goals += 1
            elif event.kind is EventKind.ASSIST:
                tally.assists += 1
            if event.player_id not in seen:
                seen.add(event.player_id)
                tally.games_played += 1


def _fold_games(games: Iterable[Game]) -> Dict[str, _Tally]:
    fold = _Fold()
    for game in games:
        fold.add_game(game.events)
    return fold.tallies


def _shift_counters(players: Sequence[Player], deltas: Dict[str, Tuple[int, int, int]]) -> List[Player]:
    updated: List[Player] = []
    for player in players:
        delta = deltas.get(player.player_id)
        if delta is None or delta == (0, 0, 0):
            updated.append(player)
            continue
        goals, assists, games_played = delta
        updated.append(
            player.model_copy(
                update={
                    "goals": max(0, player.goals + goals),
                    "assists": max(0, player.assists + assists),
                    "games_played": max(0, player.games_played + games_played),
                }
            )
        )
    return updated


def apply_game_to_players(players: Sequence[Player], game: Game) -> List[Player]:
    """Return players with counters advanced by one recorded game.

    Players who did not appear in the game are returned unchanged.
    """

    tallies = _fold_games([game])
    return _shift_counters(
        players,
        {pid: (tally.goals, tally.assists, tally.games_played) for pid, tally in tallies.items()},
    )


def apply_game_edit(players: Sequence[Player], previous: Game, replacement: Game) -> List[Player]:
    """Shift counters by the difference between an edited game and its old version.

    Only the per-player change (new minus old) is applied, floored at zero, so
    an unchanged edit is a no-op even after counters were reset.
    """

    old = _fold_games([previous])
    new = _fold_games([replacement])
    empty = _Tally(name="")
    deltas: Dict[str, Tuple[int, int, int]] = {}
    for player_id in set(old) | set(new):
        before = old.get(player_id, empty)
        after = new.get(player_id, empty)
        deltas[player_id] = (
            after.goals - before.goals,
            after.assists - before.assists,
            after.games_played - before.games_played,
        )
    return _shift_counters(players, deltas)


def rebuild_player_counters(players: Sequence[Player], games: Iterable[Game]) -> List[Player]:
    """Recompute every player's counters from scratch over ``games``."""

    tallies = _fold_games(games)
    rebuilt: List[Player] = []
    for player in players:
        tally = tallies.get(player.player_id) or _Tally(name=player.name)
        rebuilt.append(
            player.model_copy(
                update={
                    "goals": tally.goals,
                    "assists": tally.assists,
                    "games_played": tally.games_played,
                }
            )
        )
    return rebuilt


def _sorted_stats(rows: Iterable[PlayerStats]) -> List[PlayerStats]:
    return sorted(rows, key=lambda row: (-row.total_points, -row.goals, row.name))


def player_stats_from_counters(players: Iterable[Player]) -> List[PlayerStats]:
    """Leaderboard rows built from the stored cumulative counters."""

    return _sorted_stats(
        PlayerStats(
            player_id=player.player_id,
            name=player.name,
            goals=player.goals,
            assists=player.assists,
            games_played=player.games_played,
        )
        for player in players
    )


def replay_player_stats(
    players: Iterable[Player],
    games: Iterable[Game],
    *,
    include_idle: bool = True,
) -> List[PlayerStats]:
    """Leaderboard rows recomputed from raw events of ``games``.

    Roster players without events get zero rows unless ``include_idle`` is
    False. Event players no longer on the roster keep their name snapshot.
    """

    tallies = _fold_games(games)
    rows: List[PlayerStats] = []
    seen: set[str] = set()
    for player in players:
        seen.add(player.player_id)
        tally = tallies.get(player.player_id)
        if tally is None and not include_idle:
            continue
        tally = tally or _Tally(name=player.name)
        rows.append(
            PlayerStats(
                player_id=player.player_id,
                name=player.name,
                goals=tally.goals,
                assists=tally.assists,
                games_played=tally.games_played,
            )
        )
    for player_id, tally in tallies.items():
        if player_id in seen:
            continue
        rows.append(
            PlayerStats(
                player_id=player_id,
                name=tally.name,
                goals=tally.goals,
                assists=tally.assists,
                games_played=tally.games_played,
            )
        )
    return _sorted_stats(rows)


def games_on(games: Iterable[Game], day: Date) -> List[Game]:
    return [game for game in games if game.date == day]


def game_dates(games: Iterable[Game]) -> List[Date]:
    """Distinct game dates, newest first."""

    return sorted({game.date for game in games}, reverse=True)


def derive_score(
    events: Iterable[GameEvent],
    home_team: str,
    away_team: str,
    teams: Sequence[DraftedTeam] | Mapping[str, str],
) -> Tuple[int, int]:
    """Compute (home_goals, away_goals) from events and drafted team membership.

    A goal counts for the scorer's team; an own goal counts for the opposing
    team. Conceded-goal events never affect the score, and events from players
    outside both named teams are ignored.
    """

    lookup = teams if isinstance(teams, Mapping) else team_lookup(teams)
    home = 0
    away = 0
    for event in events:
        team = lookup.get(event.player_id)
        if event.kind is EventKind.GOAL:
            if team == home_team:
                home += 1
            elif team == away_team:
                away += 1
        elif event.kind is EventKind.OWN_GOAL:
            if team == away_team:
                home += 1
            elif team == home_team:
                away += 1
    return home, away


def _is_goalkeeper(player: Player) -> bool:
    try:
        return classify_position(player.position) is RoleBucket.GOALKEEPER
    except UnknownRole:
        return False


def goalkeeper_stats(
    players: Iterable[Player],
    games: Iterable[Game],
) -> List[GoalkeeperStats]:
    """Conceded-goal tallies for every goalkeeper on the roster.

    For each game a goalkeeper appears in, the goalkeeper concedes every goal
    of the game minus the goals they scored personally (floored at zero).
    """

    game_list = list(games)
    rows: List[GoalkeeperStats] = []
    for player in players:
        if not _is_goalkeeper(player):
            continue
        played = 0
        conceded = 0
        scored = 0
        for game in game_list:
            if player.player_id not in game.participant_ids():
                continue
            kinds = Counter(e.kind for e in game.events if e.player_id == player.player_id)
            own = kinds[EventKind.GOAL]
            played += 1
            scored += own
            conceded += max(0, game.total_goals - own)
        rows.append(
            GoalkeeperStats(
                player_id=player.player_id,
                name=player.name,
                games_played=played,
                goals_conceded=conceded,
                goals=scored,
            )
        )
    return rows


__all__ = [
    "apply_game_edit",
    "apply_game_to_players",
    "derive_score",
    "game_dates",
    "games_on",
    "goalkeeper_stats",
    "player_stats_from_counters",
    "rebuild_player_counters",
    "replay_player_stats",
]
