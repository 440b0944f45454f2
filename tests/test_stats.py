from datetime import date

import pytest

from pelada.models import EventKind, Game, GameEvent, GoalkeeperStats, Player, PlayerStats
from pelada.stats import (
    apply_game_edit,
    apply_game_to_players,
    derive_score,
    game_dates,
    games_on,
    goalkeeper_ranking,
    goalkeeper_stats,
    player_stats_from_counters,
    rank_entries,
    rebuild_player_counters,
    replay_player_stats,
    top_scorers,
)


ROSTER = [
    Player(player_id="p1", name="Ana", position="Pivo", level=1),
    Player(player_id="p2", name="Bia", position="Volante", level=2),
    Player(player_id="p3", name="Caio", position="Zagueiro", level=1),
    Player(player_id="gk1", name="Duda", position="Goleiro", level=2),
    Player(player_id="gk2", name="Edu", position="Goleiro", level=1),
]

TEAMS = {"p1": "Team A", "p2": "Team A", "p3": "Team A", "gk1": "Team A", "gk2": "Team B"}


def _event(player_id: str, kind: EventKind) -> GameEvent:
    name = next(p.name for p in ROSTER if p.player_id == player_id)
    return GameEvent(player_id=player_id, player_name=name, kind=kind)


def _game(game_id: str, day: date, events: list[GameEvent]) -> Game:
    home, away = derive_score(events, "Team A", "Team B", TEAMS)
    return Game(
        game_id=game_id,
        date=day,
        home_team="Team A",
        away_team="Team B",
        home_goals=home,
        away_goals=away,
        events=events,
    )


def test_own_goal_counts_for_opponent():
    events = [
        _event("p1", EventKind.GOAL),
        _event("p2", EventKind.ASSIST),
        _event("p3", EventKind.OWN_GOAL),
    ]
    assert derive_score(events, "Team A", "Team B", TEAMS) == (1, 1)


def test_goal_conceded_does_not_change_score():
    events = [_event("gk2", EventKind.GOAL_CONCEDED), _event("p1", EventKind.GOAL)]
    assert derive_score(events, "Team A", "Team B", TEAMS) == (1, 0)


def test_events_from_other_teams_are_ignored():
    events = [GameEvent(player_id="zz", player_name="Guest", kind=EventKind.GOAL)]
    assert derive_score(events, "Team A", "Team B", TEAMS) == (0, 0)


def _games() -> list[Game]:
    return [
        _game(
            "g1",
            date(2024, 5, 4),
            [
                _event("p1", EventKind.GOAL),
                _event("p1", EventKind.GOAL),
                _event("p2", EventKind.ASSIST),
                _event("gk1", EventKind.GOAL),
            ],
        ),
        _game(
            "g2",
            date(2024, 5, 11),
            [
                _event("p3", EventKind.OWN_GOAL),
                _event("p2", EventKind.GOAL),
                _event("p1", EventKind.ASSIST),
                _event("gk1", EventKind.GOAL_CONCEDED),
            ],
        ),
    ]


def test_cumulative_counters_match_replay():
    players = ROSTER
    for game in _games():
        players = apply_game_to_players(players, game)

    cumulative = {row.player_id: row for row in player_stats_from_counters(players)}
    replayed = {row.player_id: row for row in replay_player_stats(ROSTER, _games())}
    assert cumulative == replayed
    assert cumulative["p1"].goals == 2
    assert cumulative["p1"].assists == 1
    assert cumulative["p1"].games_played == 2
    assert cumulative["p3"].games_played == 1
    assert cumulative["p3"].goals == 0


def test_rebuild_matches_cumulative():
    players = ROSTER
    for game in _games():
        players = apply_game_to_players(players, game)
    assert rebuild_player_counters(ROSTER, _games()) == players


def test_unchanged_edit_leaves_counters():
    game = _games()[0]
    applied = apply_game_to_players(ROSTER, game)
    assert apply_game_edit(applied, game, game) == applied
    assert apply_game_edit(ROSTER, game, game) == ROSTER


def test_edit_applies_only_the_difference():
    previous = _games()[0]
    replacement = previous.model_copy(
        update={"events": [_event("p1", EventKind.GOAL), _event("p3", EventKind.ASSIST)]}
    )
    applied = apply_game_to_players(ROSTER, previous)
    edited = {p.player_id: p for p in apply_game_edit(applied, previous, replacement)}

    assert (edited["p1"].goals, edited["p1"].games_played) == (1, 1)
    assert (edited["p2"].assists, edited["p2"].games_played) == (0, 0)
    assert (edited["gk1"].goals, edited["gk1"].games_played) == (0, 0)
    assert (edited["p3"].assists, edited["p3"].games_played) == (1, 1)
    assert edited == {p.player_id: p for p in rebuild_player_counters(ROSTER, [replacement])}


def test_replay_keeps_removed_players_by_snapshot_name():
    roster = [p for p in ROSTER if p.player_id != "p1"]
    rows = {row.player_id: row for row in replay_player_stats(roster, _games())}
    assert rows["p1"].name == "Ana"
    assert rows["p1"].goals == 2


def test_replay_can_skip_idle_players():
    rows = replay_player_stats(ROSTER, _games()[:1], include_idle=False)
    assert {row.player_id for row in rows} == {"p1", "p2", "gk1"}


def test_games_on_and_dates():
    games = _games()
    assert [g.game_id for g in games_on(games, date(2024, 5, 11))] == ["g2"]
    assert game_dates(games) == [date(2024, 5, 11), date(2024, 5, 4)]


def test_dense_ranking_shares_ranks():
    rows = [
        PlayerStats(player_id=str(i), name=name, goals=goals)
        for i, (name, goals) in enumerate([("A", 5), ("B", 5), ("C", 3), ("D", 1)])
    ]
    ranked = rank_entries(rows, lambda row: row.goals)
    assert [entry.rank for entry in ranked] == [1, 1, 3, 4]
    assert [entry.stats.name for entry in ranked] == ["A", "B", "C", "D"]


def test_top_scorers_skip_zero_and_limit():
    rows = [
        PlayerStats(player_id="1", name="A", goals=2),
        PlayerStats(player_id="2", name="B", goals=0),
        PlayerStats(player_id="3", name="C", goals=1),
    ]
    ranked = top_scorers(rows, limit=1)
    assert [entry.stats.name for entry in ranked] == ["A"]
    assert len(top_scorers(rows)) == 2


def test_goalkeeper_conceded_excludes_own_goals():
    rows = {row.player_id: row for row in goalkeeper_stats(ROSTER, _games())}

    # g1: 3 goals, one scored by gk1; g2: 2 goals.
    assert rows["gk1"].games_played == 2
    assert rows["gk1"].goals == 1
    assert rows["gk1"].goals_conceded == 4
    assert rows["gk1"].average == pytest.approx(2.0)
    assert rows["gk1"].average_display == "2.00"
    assert rows["gk2"].games_played == 0
    assert rows["gk2"].average_display == "0.00"
    assert "p1" not in rows


def test_goalkeeper_ranking_puts_idle_keepers_last():
    rows = [
        GoalkeeperStats(player_id="a", name="Idle", games_played=0),
        GoalkeeperStats(player_id="b", name="Leaky", games_played=2, goals_conceded=6),
        GoalkeeperStats(player_id="c", name="Wall", games_played=3, goals_conceded=3),
    ]
    ranked = goalkeeper_ranking(rows)
    assert [entry.stats.name for entry in ranked] == ["Wall", "Leaky", "Idle"]
    assert [entry.rank for entry in ranked] == [1, 2, 3]
