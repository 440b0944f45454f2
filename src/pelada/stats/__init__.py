"""Statistics aggregation and leaderboards."""

from .aggregate import (
    apply_game_edit,
    apply_game_to_players,
    derive_score,
    game_dates,
    games_on,
    goalkeeper_stats,
    player_stats_from_counters,
    rebuild_player_counters,
    replay_player_stats,
)
from .ranking import (
    DEFAULT_TOP_N,
    goalkeeper_ranking,
    points_table,
    rank_entries,
    top_assisters,
    top_scorers,
)

__all__ = [
    "DEFAULT_TOP_N",
    "apply_game_edit",
    "apply_game_to_players",
    "derive_score",
    "game_dates",
    "games_on",
    "goalkeeper_ranking",
    "goalkeeper_stats",
    "player_stats_from_counters",
    "points_table",
    "rank_entries",
    "rebuild_player_counters",
    "replay_player_stats",
    "top_assisters",
    "top_scorers",
]
