"""Team drafting: level balancing, batch orchestration and swaps."""

from .balance import partition_by_level
from .service import (
    BucketSummary,
    generate_teams,
    level_spread,
    position_summary,
    reserve_pool,
    team_lookup,
)
from .swap import Selection, swap_players

__all__ = [
    "BucketSummary",
    "Selection",
    "generate_teams",
    "level_spread",
    "partition_by_level",
    "position_summary",
    "reserve_pool",
    "swap_players",
    "team_lookup",
]
