"""Level-balanced partitioning of a single role bucket across teams."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

from pelada.models import Player


def _shuffled(players: Sequence[Player], rng: random.Random) -> List[Player]:
    shuffled = list(players)
    rng.shuffle(shuffled)
    return shuffled


def partition_by_level(
    players: Sequence[Player],
    team_count: int,
    slots_per_team: int,
    *,
    rng: Optional[random.Random] = None,
) -> List[List[Player]]:
    """Split one bucket's players into ``team_count`` lists of at most ``slots_per_team``.

    Level-1 and level-2 players are shuffled independently, then each team is
    filled slot by slot: the level under-represented in the team being filled
    goes first, ties go to whichever level has more remaining supply (level 1
    on equal supply), and an exhausted level falls back to the other. Slots
    stay empty once both levels run out, so trailing teams may be under-filled.

    Level counts differ by at most one between teams only when the bucket has
    at least ``team_count * slots_per_team`` players and ``slots_per_team`` is
    1 or 2; with less supply the leading teams fill first and the rest stay
    short, whatever their levels.
    """

    rng = rng or random.Random()
    level1 = _shuffled([player for player in players if player.level == 1], rng)
    level2 = _shuffled([player for player in players if player.level == 2], rng)
    idx1 = 0
    idx2 = 0

    teams: List[List[Player]] = []
    for _ in range(max(0, team_count)):
        current: List[Player] = []
        in_team1 = 0
        in_team2 = 0
        for _ in range(max(0, slots_per_team)):
            remaining1 = len(level1) - idx1
            remaining2 = len(level2) - idx2
            if remaining1 == 0 and remaining2 == 0:
                break

            if in_team1 < in_team2:
                prefer_level1 = True
            elif in_team1 > in_team2:
                prefer_level1 = False
            else:
                prefer_level1 = remaining1 >= remaining2

            if (prefer_level1 and remaining1) or not remaining2:
                current.append(level1[idx1])
                idx1 += 1
                in_team1 += 1
            else:
                current.append(level2[idx2])
                idx2 += 1
                in_team2 += 1
        teams.append(current)
    return teams


__all__ = ["partition_by_level"]
