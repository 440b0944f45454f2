from datetime import date
from pathlib import Path

import pytest

from pelada.club import ClubService, EventEntry
from pelada.config_loader import ClubProfile
from pelada.exceptions import InsufficientPlayers, RecordNotFound, RoleMismatch, UnknownRole
from pelada.persistence import ClubStore


POSITIONS = ["Goleiro", "Zagueiro", "Lateral Direito", "Volante", "Meia-atacante", "Ponta Esquerda", "Pivo"]


def _club(tmp_path: Path) -> ClubService:
    return ClubService(ClubStore(tmp_path / "club.sqlite"), profile=ClubProfile(draft_seed=3))


def _seed_roster(club: ClubService, teams: int = 2) -> None:
    for team in range(teams):
        for index, position in enumerate(POSITIONS):
            club.add_player(f"{position} {team}", position, 1 if (team + index) % 2 else 2)


def test_add_player_rejects_unknown_position(tmp_path: Path):
    club = _club(tmp_path)
    with pytest.raises(UnknownRole):
        club.add_player("Rafa", "Libero", 1)
    assert club.list_players() == []


def test_draft_persists_teams(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)

    teams = club.draft_teams()

    assert [team.name for team in club.list_teams()] == ["Team A", "Team B"]
    assert club.list_teams() == teams
    assert club.reserve_pool().is_empty()


def test_profile_prefix_names_teams(tmp_path: Path):
    club = ClubService(ClubStore(tmp_path / "club.sqlite"), profile=ClubProfile(team_name_prefix="Time"))
    _seed_roster(club)
    assert [team.name for team in club.draft_teams(seed=1)] == ["Time A", "Time B"]


def test_failed_draft_keeps_previous_batch(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    before = club.draft_teams()

    for player in club.list_players():
        if player.position == "Goleiro":
            club.update_player(player.player_id, available_for_draft=False)

    with pytest.raises(InsufficientPlayers):
        club.draft_teams()
    assert club.list_teams() == before


def test_swap_between_teams_is_stored(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    teams = club.draft_teams()
    a = teams[0].pivots[0]
    b = teams[1].pivots[0]

    result = club.swap(a.player_id, 0, b.player_id, 1)

    assert result.changed
    stored = club.list_teams()
    assert stored[0].has_player(b.player_id)
    assert stored[1].has_player(a.player_id)


def test_swap_with_reserve_and_noop(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    club.add_player("Reserva", "Centroavante", 1)
    teams = club.draft_teams()
    spare = club.reserve_pool().pivots[0]
    drafted = teams[0].pivots[0]
    index = 0

    noop = club.swap(drafted.player_id, index, drafted.player_id, index)
    assert not noop.changed
    assert club.list_teams() == teams

    result = club.swap(drafted.player_id, index, spare.player_id, None)
    assert result.changed
    assert [p.player_id for p in club.reserve_pool().pivots] == [drafted.player_id]


def test_swap_role_mismatch_leaves_teams(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    teams = club.draft_teams()
    with pytest.raises(RoleMismatch):
        club.swap(teams[0].goalkeepers[0].player_id, 0, teams[1].pivots[0].player_id, 1)
    assert club.list_teams() == teams


def test_record_game_derives_score_and_counters(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    teams = club.draft_teams()
    home, away = teams
    scorer = home.pivots[0]
    helper = home.midfielders[0]
    unlucky = away.defenders[0]

    game = club.record_game(
        date(2024, 7, 6),
        home.name,
        away.name,
        [
            EventEntry(scorer.player_id, "goal", 10),
            EventEntry(helper.player_id, "assist", 10),
            EventEntry(unlucky.player_id, "own_goal", 30),
        ],
    )

    assert (game.home_goals, game.away_goals) == (2, 0)
    assert game.events[0].player_name == scorer.name
    stats = {row.player_id: row for row in club.player_stats()}
    assert stats[scorer.player_id].goals == 1
    assert stats[helper.player_id].assists == 1
    assert stats[unlucky.player_id].games_played == 1
    assert club.game_dates() == [date(2024, 7, 6)]


def test_record_game_validation(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    club.draft_teams()
    with pytest.raises(ValueError):
        club.record_game(date(2024, 7, 6), "Team A", "Team A", [])
    with pytest.raises(RecordNotFound):
        club.record_game(date(2024, 7, 6), "Team A", "Team B", [EventEntry("ghost", "goal")])
    assert club.list_games() == []


def test_update_game_recounts_players(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    home, away = club.draft_teams()
    player = home.pivots[0]
    game = club.record_game(date(2024, 7, 6), home.name, away.name, [EventEntry(player.player_id, "goal")])

    updated = club.update_game(
        game.game_id,
        date=game.date,
        home_team=home.name,
        away_team=away.name,
        events=[EventEntry(player.player_id, "assist")],
    )

    assert (updated.home_goals, updated.away_goals) == (0, 0)
    refreshed = club.get_player(player.player_id)
    assert (refreshed.goals, refreshed.assists, refreshed.games_played) == (0, 1, 1)
    with pytest.raises(RecordNotFound):
        club.update_game("missing", date=game.date, home_team="A", away_team="B", events=[])


def test_reset_and_recount(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    home, away = club.draft_teams()
    player = home.pivots[0]
    club.record_game(date(2024, 7, 6), home.name, away.name, [EventEntry(player.player_id, "goal")])

    club.reset_all_statistics()
    assert club.get_player(player.player_id).goals == 0

    club.recount_statistics()
    assert club.get_player(player.player_id).goals == 1


def test_stats_for_one_day(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    home, away = club.draft_teams()
    first = home.pivots[0]
    second = away.pivots[0]
    club.record_game(date(2024, 7, 6), home.name, away.name, [EventEntry(first.player_id, "goal")])
    club.record_game(date(2024, 7, 13), home.name, away.name, [EventEntry(second.player_id, "goal")])

    day_rows = club.player_stats(date(2024, 7, 13))
    assert [row.player_id for row in day_rows] == [second.player_id]
    assert [entry.stats.player_id for entry in club.scorers(date(2024, 7, 6))] == [first.player_id]
    assert len(club.list_games(date(2024, 7, 6))) == 1

    keepers = club.goalkeeper_ranking()
    assert len(keepers) == 2
    assert all(entry.stats.games_played == 0 for entry in keepers)


def test_export_sheets(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    club.draft_teams()
    names = [sheet.name for sheet in club.export_sheets()]
    assert names == ["Player Stats", "Top Scorers", "Top Assists", "Goalkeepers", "Game History", "Teams"]


def test_edit_after_reset_keeps_counters_reset(tmp_path: Path):
    club = _club(tmp_path)
    _seed_roster(club)
    home, away = club.draft_teams()
    scorer = home.pivots[0]
    helper = home.midfielders[0]
    game = club.record_game(date(2024, 7, 6), home.name, away.name, [EventEntry(scorer.player_id, "goal")])
    club.reset_all_statistics()

    club.update_game(
        game.game_id,
        date=game.date,
        home_team=home.name,
        away_team=away.name,
        events=[EventEntry(scorer.player_id, "goal")],
    )
    refreshed = club.get_player(scorer.player_id)
    assert (refreshed.goals, refreshed.games_played) == (0, 0)

    club.update_game(
        game.game_id,
        date=game.date,
        home_team=home.name,
        away_team=away.name,
        events=[EventEntry(scorer.player_id, "goal"), EventEntry(helper.player_id, "assist")],
    )
    refreshed = club.get_player(scorer.player_id)
    assert (refreshed.goals, refreshed.games_played) == (0, 0)
    assisted = club.get_player(helper.player_id)
    assert (assisted.assists, assisted.games_played) == (1, 1)
