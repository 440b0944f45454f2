"""Club service: glue between the store and the pure draft/stats functions."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from datetime import date as Date
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence
from uuid import uuid4

from pelada.config import classify_position
from pelada.config_loader import ClubProfile
from pelada.draft import (
    BucketSummary,
    Selection,
    generate_teams,
    level_spread,
    position_summary,
    reserve_pool,
    swap_players,
)
from pelada.exceptions import InvalidSelection, NoOpSwap, RecordNotFound
from pelada.export import ExportSheet, build_export_sheets
from pelada.models import DraftedTeam, EventKind, Game, GameEvent, GoalkeeperStats, Player, PlayerStats, RankedEntry, ReservePool
from pelada.persistence import ClubStore
from pelada.stats import (
    apply_game_edit,
    apply_game_to_players,
    derive_score,
    game_dates,
    games_on,
    goalkeeper_ranking,
    goalkeeper_stats,
    player_stats_from_counters,
    rebuild_player_counters,
    replay_player_stats,
    top_assisters,
    top_scorers,
)


logger = logging.getLogger(__name__)


class EventEntry(NamedTuple):
    player_id: str
    kind: EventKind | str
    minute: int = 0


@dataclass(frozen=True)
class SwapResult:
    teams: List[DraftedTeam]
    changed: bool
    message: str


class ClubService:
    """Roster, draft, swap and game workflows on top of a :class:`ClubStore`.

    Drafts, swaps, clears and game writes hold one lock for their whole
    read-modify-write.
    """

    def __init__(self, store: ClubStore, *, profile: ClubProfile | None = None):
        self.store = store
        self.profile = profile or ClubProfile().with_env()
        self._lock = threading.Lock()

    # -- roster ------------------------------------------------------------

    def list_players(self) -> List[Player]:
        return self.store.list_players()

    def get_player(self, player_id: str) -> Player:
        player = self.store.get_player(player_id)
        if player is None:
            raise RecordNotFound("Player", player_id)
        return player

    def add_player(
        self,
        name: str,
        position: str,
        level: int,
        *,
        available_for_draft: bool = True,
    ) -> Player:
        position = position.strip()
        classify_position(position)
        player = self.store.create_player(
            name=name.strip(),
            position=position,
            level=level,
            available_for_draft=available_for_draft,
        )
        logger.info("Added player %s (%s, level %s)", player.name, player.position, player.level)
        return player

    def update_player(self, player_id: str, **fields: Any) -> Player:
        if "position" in fields and fields["position"] is not None:
            fields["position"] = fields["position"].strip()
            classify_position(fields["position"])
        fields = {key: value for key, value in fields.items() if value is not None}
        return self.store.update_player(player_id, **fields)

    def remove_player(self, player_id: str) -> None:
        self.store.delete_player(player_id)
        logger.info("Removed player %s", player_id)

    def reset_all_statistics(self) -> None:
        with self._lock:
            self.store.reset_all_statistics()
        logger.info("Reset statistics for every player")

    def position_summary(self) -> List[BucketSummary]:
        return position_summary(self.store.list_players())

    # -- teams -------------------------------------------------------------

    def draft_teams(self, seed: Optional[int] = None) -> List[DraftedTeam]:
        """Draft a new batch and replace the stored one.

        On any error the previously stored batch is left as it was.
        """

        seed = seed if seed is not None else self.profile.draft_seed
        with self._lock:
            teams = generate_teams(
                self.store.list_players(),
                rng=random.Random(seed),
                name_prefix=self.profile.team_name_prefix,
            )
            for team in teams:
                team.check_invariants()
            self.store.replace_teams(teams)
        logger.info("Stored %s drafted teams; level spread %s", len(teams), level_spread(teams))
        return teams

    def list_teams(self) -> List[DraftedTeam]:
        return self.store.list_teams()

    def clear_teams(self) -> None:
        with self._lock:
            self.store.clear_teams()
        logger.info("Cleared drafted teams")

    def reserve_pool(self) -> ReservePool:
        return reserve_pool(self.store.list_players(), self.store.list_teams())

    def _selection(
        self,
        teams: Sequence[DraftedTeam],
        roster: Dict[str, Player],
        player_id: str,
        team_index: Optional[int],
    ) -> Selection:
        if team_index is None:
            player = roster.get(player_id)
            if player is None:
                raise RecordNotFound("Player", player_id)
            return Selection(player=player)
        if team_index < 0 or team_index >= len(teams):
            raise InvalidSelection(f"Team index {team_index} out of range")
        for player in teams[team_index].players:
            if player.player_id == player_id:
                return Selection(player=player, team_index=team_index)
        raise InvalidSelection(f"Player {player_id} is not on {teams[team_index].name}")

    def swap(
        self,
        first_player_id: str,
        first_team: Optional[int],
        second_player_id: str,
        second_team: Optional[int],
    ) -> SwapResult:
        """Swap two players; a ``None`` team index means the reserve pool."""

        with self._lock:
            teams = self.store.list_teams()
            roster = {player.player_id: player for player in self.store.list_players()}
            first = self._selection(teams, roster, first_player_id, first_team)
            second = self._selection(teams, roster, second_player_id, second_team)
            for selection in (first, second):
                if selection.is_reserve and not selection.player.available_for_draft:
                    raise InvalidSelection(f"{selection.player.name} is not available for draft")
            try:
                updated = swap_players(teams, first, second)
            except NoOpSwap as exc:
                logger.info("Swap skipped: %s", exc)
                return SwapResult(teams=list(teams), changed=False, message=str(exc))
            for team in updated:
                team.check_invariants()
            self.store.replace_teams(updated)
        return SwapResult(
            teams=updated,
            changed=True,
            message=f"Swapped {first.player.name} and {second.player.name}",
        )

    # -- games -------------------------------------------------------------

    def build_events(
        self,
        entries: Iterable[EventEntry],
        *,
        known_names: Optional[Dict[str, str]] = None,
    ) -> List[GameEvent]:
        """Resolve event entries into events carrying a player-name snapshot."""

        names = dict(known_names or {})
        names.update({player.player_id: player.name for player in self.store.list_players()})
        events: List[GameEvent] = []
        for entry in entries:
            entry = EventEntry(*entry)
            if entry.player_id not in names:
                raise RecordNotFound("Player", entry.player_id)
            events.append(
                GameEvent(
                    player_id=entry.player_id,
                    player_name=names[entry.player_id],
                    kind=EventKind(entry.kind),
                    minute=entry.minute,
                )
            )
        return events

    def record_game(
        self,
        date: Date,
        home_team: str,
        away_team: str,
        events: Iterable[EventEntry],
    ) -> Game:
        """Store a game with its derived score and bump player counters atomically."""

        if home_team == away_team:
            raise ValueError("Home and away teams must differ")
        with self._lock:
            game_events = self.build_events(events)
            home_goals, away_goals = derive_score(game_events, home_team, away_team, self.store.list_teams())
            game = Game(
                game_id=uuid4().hex,
                date=date,
                home_team=home_team,
                away_team=away_team,
                home_goals=home_goals,
                away_goals=away_goals,
                events=game_events,
            )
            counters = apply_game_to_players(self.store.list_players(), game)
            stored = self.store.create_game(
                date=game.date,
                home_team=game.home_team,
                away_team=game.away_team,
                home_goals=game.home_goals,
                away_goals=game.away_goals,
                events=game.events,
                player_counters=counters,
                game_id=game.game_id,
            )
        logger.info(
            "Recorded game %s: %s %s x %s %s (%s events)",
            stored.date.isoformat(),
            home_team,
            home_goals,
            away_goals,
            away_team,
            len(game_events),
        )
        return stored

    def update_game(
        self,
        game_id: str,
        *,
        date: Date,
        home_team: str,
        away_team: str,
        events: Iterable[EventEntry],
    ) -> Game:
        """Replace a game's events, re-derive its score and re-count its players.

        Stored counters move only by the difference between the old and new
        events, so counters reset since the game stay reset.
        """

        if home_team == away_team:
            raise ValueError("Home and away teams must differ")
        with self._lock:
            previous = self.store.get_game(game_id)
            if previous is None:
                raise RecordNotFound("Game", game_id)
            snapshot = {event.player_id: event.player_name for event in previous.events}
            game_events = self.build_events(events, known_names=snapshot)
            home_goals, away_goals = derive_score(game_events, home_team, away_team, self.store.list_teams())
            replacement = Game(
                game_id=game_id,
                date=date,
                home_team=home_team,
                away_team=away_team,
                home_goals=home_goals,
                away_goals=away_goals,
                events=game_events,
            )
            counters = apply_game_edit(self.store.list_players(), previous, replacement)
            stored = self.store.update_game(
                game_id,
                date=date,
                home_team=home_team,
                away_team=away_team,
                home_goals=home_goals,
                away_goals=away_goals,
                events=game_events,
                player_counters=counters,
            )
        logger.info("Updated game %s (%s x %s)", game_id, home_goals, away_goals)
        return stored

    def list_games(self, day: Optional[Date] = None) -> List[Game]:
        games = self.store.list_games()
        return games_on(games, day) if day is not None else games

    def game_dates(self) -> List[Date]:
        return game_dates(self.store.list_games())

    def recount_statistics(self) -> List[Player]:
        """Rebuild every stored counter from the full game history."""

        with self._lock:
            rebuilt = rebuild_player_counters(self.store.list_players(), self.store.list_games())
            self.store.save_players(rebuilt)
        logger.info("Recounted statistics for %s players", len(rebuilt))
        return rebuilt

    # -- stats -------------------------------------------------------------

    def player_stats(self, day: Optional[Date] = None) -> List[PlayerStats]:
        """Cumulative counters, or a replay of one day's games when ``day`` is set."""

        players = self.store.list_players()
        if day is None:
            return player_stats_from_counters(players)
        return replay_player_stats(players, self.list_games(day), include_idle=False)

    def scorers(self, day: Optional[Date] = None) -> List[RankedEntry]:
        return top_scorers(self.player_stats(day), limit=self.profile.top_n)

    def assisters(self, day: Optional[Date] = None) -> List[RankedEntry]:
        return top_assisters(self.player_stats(day), limit=self.profile.top_n)

    def goalkeeper_stats(self, day: Optional[Date] = None) -> List[GoalkeeperStats]:
        return goalkeeper_stats(self.store.list_players(), self.list_games(day))

    def goalkeeper_ranking(self, day: Optional[Date] = None) -> List[RankedEntry]:
        return goalkeeper_ranking(self.goalkeeper_stats(day))

    def export_sheets(self) -> List[ExportSheet]:
        return build_export_sheets(
            self.player_stats(),
            self.store.list_games(),
            self.goalkeeper_stats(),
            self.store.list_teams(),
            top_n=self.profile.top_n,
        )


__all__ = ["ClubService", "EventEntry", "SwapResult"]
