"""Tie-aware leaderboards over derived stats rows."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, TypeVar, Union

from pelada.models import GoalkeeperStats, PlayerStats, RankedEntry


DEFAULT_TOP_N = 10

Row = TypeVar("Row", PlayerStats, GoalkeeperStats)
Metric = Callable[[Union[PlayerStats, GoalkeeperStats]], Optional[float]]


def rank_entries(
    rows: Sequence[Row],
    metric: Metric,
    *,
    descending: bool = True,
    limit: int | None = None,
    skip_zero: bool = False,
) -> List[RankedEntry]:
    """Order rows by ``metric`` and assign dense-by-value ranks.

    Tied rows share a rank equal to one plus the number of rows with a
    strictly better value, so goals [5, 5, 3, 1] rank as [1, 1, 3, 4]. Rows
    whose metric is None sort last regardless of direction.
    """

    scored = [(row, metric(row)) for row in rows]
    if skip_zero:
        scored = [(row, value) for row, value in scored if value]

    def _sort_key(item: tuple[Row, Optional[float]]) -> tuple:
        row, value = item
        if value is None:
            return (1, 0.0, row.name)
        return (0, -value if descending else value, row.name)

    scored.sort(key=_sort_key)

    ranked: List[RankedEntry] = []
    previous: Optional[float] = None
    rank = 0
    for position, (row, value) in enumerate(scored, start=1):
        if position == 1 or value != previous:
            rank = position
            previous = value
        ranked.append(RankedEntry(rank=rank, value=value, stats=row))

    limit = limit if limit is not None and limit > 0 else None
    return ranked[:limit] if limit is not None else ranked


def top_scorers(stats: Sequence[PlayerStats], limit: int | None = DEFAULT_TOP_N) -> List[RankedEntry]:
    return rank_entries(stats, lambda row: row.goals, limit=limit, skip_zero=True)


def top_assisters(stats: Sequence[PlayerStats], limit: int | None = DEFAULT_TOP_N) -> List[RankedEntry]:
    return rank_entries(stats, lambda row: row.assists, limit=limit, skip_zero=True)


def points_table(stats: Sequence[PlayerStats], limit: int | None = None) -> List[RankedEntry]:
    return rank_entries(stats, lambda row: row.total_points, limit=limit)


def goalkeeper_ranking(
    stats: Sequence[GoalkeeperStats],
    limit: int | None = None,
) -> List[RankedEntry]:
    """Fewest conceded per game first; goalkeepers without games go last."""

    return rank_entries(stats, lambda row: row.average, descending=False, limit=limit)


__all__ = [
    "DEFAULT_TOP_N",
    "goalkeeper_ranking",
    "points_table",
    "rank_entries",
    "top_assisters",
    "top_scorers",
]
