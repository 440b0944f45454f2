from datetime import date
from pathlib import Path

import pytest

from pelada.exceptions import PersistenceFailure, RecordNotFound
from pelada.models import DraftedTeam, EventKind, GameEvent, Player
from pelada.persistence import ClubStore


def _store(tmp_path: Path) -> ClubStore:
    return ClubStore(tmp_path / "club.sqlite")


def test_player_crud(tmp_path: Path):
    store = _store(tmp_path)
    created = store.create_player(name="Rafa", position="Zagueiro", level=1)

    assert store.get_player(created.player_id) == created
    updated = store.update_player(created.player_id, level=2, available_for_draft=False)
    assert updated.level == 2
    assert store.list_players() == [updated]

    store.delete_player(created.player_id)
    assert store.list_players() == []


def test_missing_player_raises(tmp_path: Path):
    store = _store(tmp_path)
    with pytest.raises(RecordNotFound):
        store.update_player("nope", level=2)
    with pytest.raises(RecordNotFound):
        store.delete_player("nope")
    with pytest.raises(KeyError):
        store.delete_player("nope")


def test_update_rejects_unknown_fields(tmp_path: Path):
    store = _store(tmp_path)
    created = store.create_player(name="Rafa", position="Zagueiro", level=1)
    with pytest.raises(ValueError):
        store.update_player(created.player_id, shirt=10)


def test_game_round_trip_with_counters(tmp_path: Path):
    store = _store(tmp_path)
    scorer = store.create_player(name="Rafa", position="Pivo", level=1)
    events = [GameEvent(player_id=scorer.player_id, player_name="Rafa", kind=EventKind.GOAL, minute=12)]

    game = store.create_game(
        date=date(2024, 6, 1),
        home_team="Team A",
        away_team="Team B",
        home_goals=1,
        away_goals=0,
        events=events,
        player_counters=[scorer.model_copy(update={"goals": 1, "games_played": 1})],
    )

    assert store.get_game(game.game_id) == game
    assert store.list_games() == [game]
    assert store.get_player(scorer.player_id).goals == 1


def test_update_game_replaces_events(tmp_path: Path):
    store = _store(tmp_path)
    game = store.create_game(
        date=date(2024, 6, 1),
        home_team="Team A",
        away_team="Team B",
        home_goals=0,
        away_goals=0,
        events=[GameEvent(player_id="x", player_name="X", kind=EventKind.ASSIST)],
    )
    updated = store.update_game(
        game.game_id,
        date=date(2024, 6, 2),
        home_team="Team A",
        away_team="Team B",
        home_goals=0,
        away_goals=1,
        events=[],
    )
    assert updated.events == []
    assert updated.date == date(2024, 6, 2)
    with pytest.raises(RecordNotFound):
        store.update_game(
            "missing",
            date=date(2024, 6, 2),
            home_team="A",
            away_team="B",
            home_goals=0,
            away_goals=0,
            events=[],
        )


def test_replace_teams_swaps_whole_batch(tmp_path: Path):
    store = _store(tmp_path)
    keeper = Player(player_id="g", name="Gk", position="Goleiro", level=1)
    pivot = Player(player_id="p", name="Pv", position="Pivo", level=2)
    store.replace_teams([DraftedTeam.assemble("Team A", [keeper]), DraftedTeam.assemble("Team B", [pivot])])
    assert [team.name for team in store.list_teams()] == ["Team A", "Team B"]

    store.replace_teams([DraftedTeam.assemble("Team C", [keeper, pivot])])
    teams = store.list_teams()
    assert [team.name for team in teams] == ["Team C"]
    assert teams[0].goalkeepers == [keeper]
    assert teams[0].level2_count == 1

    store.clear_teams()
    assert store.list_teams() == []


def test_failed_team_write_keeps_previous_batch(tmp_path: Path):
    store = _store(tmp_path)
    keeper = Player(player_id="g", name="Gk", position="Goleiro", level=1)
    store.replace_teams([DraftedTeam.assemble("Team A", [keeper])])

    # The second insert reuses seq 0, so the whole transaction rolls back.
    duplicate = DraftedTeam.assemble("Team B", [keeper])
    with pytest.raises(PersistenceFailure):
        with store._transaction() as conn:
            conn.execute("DELETE FROM drafted_teams")
            conn.execute(
                "INSERT INTO drafted_teams (seq, name, team_json, level1_count, level2_count, created_at) "
                "VALUES (0, ?, ?, 1, 0, 'now')",
                (duplicate.name, duplicate.model_dump_json()),
            )
            conn.execute("INSERT INTO drafted_teams (seq) VALUES (0)")

    assert [team.name for team in store.list_teams()] == ["Team A"]


def test_db_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    target = tmp_path / "env.sqlite"
    monkeypatch.setenv("PELADA_DB_PATH", str(target))
    ClubStore()
    assert target.exists()
