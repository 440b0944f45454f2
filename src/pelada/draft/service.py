"""Draft orchestration: bucket the pool, size the batch and assemble teams."""

from __future__ import annotations

import logging
import random
import string
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from pelada.config import BUCKET_ORDER, FORMATION, RoleBucket
from pelada.draft.balance import partition_by_level
from pelada.exceptions import InsufficientPlayers, NoTeamsFormable
from pelada.models import DraftedTeam, Player, ReservePool


logger = logging.getLogger(__name__)

DEFAULT_TEAM_PREFIX = "Team"


@dataclass(frozen=True)
class BucketSummary:
    """Available-player counts for one role bucket."""

    bucket: RoleBucket
    total: int
    level1: int
    level2: int
    required: int


def available_players(players: Iterable[Player]) -> List[Player]:
    return [player for player in players if player.available_for_draft]


def bucket_players(players: Iterable[Player]) -> Dict[RoleBucket, List[Player]]:
    """Group players by role bucket; every bucket is present, possibly empty."""

    by_bucket: Dict[RoleBucket, List[Player]] = {bucket: [] for bucket in BUCKET_ORDER}
    for player in players:
        by_bucket[player.bucket].append(player)
    return by_bucket


def position_summary(players: Iterable[Player]) -> List[BucketSummary]:
    by_bucket = bucket_players(available_players(players))
    return [
        BucketSummary(
            bucket=bucket,
            total=len(members),
            level1=sum(1 for player in members if player.level == 1),
            level2=sum(1 for player in members if player.level == 2),
            required=FORMATION[bucket],
        )
        for bucket, members in by_bucket.items()
    ]


def team_name(index: int, prefix: str = DEFAULT_TEAM_PREFIX) -> str:
    letters = string.ascii_uppercase
    label = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, len(letters))
        label = letters[remainder] + label
    return f"{prefix} {label}"


def max_team_count(by_bucket: Mapping[RoleBucket, Sequence[Player]]) -> int:
    return min(len(by_bucket[bucket]) // required for bucket, required in FORMATION.items())


def generate_teams(
    players: Sequence[Player],
    *,
    rng: Optional[random.Random] = None,
    name_prefix: str = DEFAULT_TEAM_PREFIX,
) -> List[DraftedTeam]:
    """Draft as many complete teams as the available pool allows.

    Raises InsufficientPlayers when a bucket cannot staff a single team and
    NoTeamsFormable when the computed team count is zero.
    """

    rng = rng or random.Random()
    by_bucket = bucket_players(available_players(players))

    shortfall = {
        bucket.value: required - len(by_bucket[bucket])
        for bucket, required in FORMATION.items()
        if len(by_bucket[bucket]) < required
    }
    if shortfall:
        logger.info("Draft rejected, missing players per position: %s", shortfall)
        raise InsufficientPlayers(shortfall)

    team_count = max_team_count(by_bucket)
    if team_count == 0:
        raise NoTeamsFormable()

    partitions: Dict[RoleBucket, List[List[Player]]] = {
        bucket: partition_by_level(by_bucket[bucket], team_count, FORMATION[bucket], rng=rng)
        for bucket in BUCKET_ORDER
    }

    teams: List[DraftedTeam] = []
    for index in range(team_count):
        members = [player for bucket in BUCKET_ORDER for player in partitions[bucket][index]]
        teams.append(DraftedTeam.assemble(team_name(index, name_prefix), members))

    drafted = sum(len(team.players) for team in teams)
    logger.info(
        "Drafted %s teams (%s players, %s in reserve)",
        team_count,
        drafted,
        sum(len(members) for members in by_bucket.values()) - drafted,
    )
    return teams


def reserve_pool(players: Iterable[Player], teams: Sequence[DraftedTeam]) -> ReservePool:
    """Available players not drafted into any team, grouped by role."""

    drafted_ids = {player_id for team in teams for player_id in team.player_ids()}
    return ReservePool.from_players(
        player for player in available_players(players) if player.player_id not in drafted_ids
    )


def team_lookup(teams: Iterable[DraftedTeam]) -> Dict[str, str]:
    """Map player id -> name of the drafted team that player belongs to."""

    lookup: Dict[str, str] = {}
    for team in teams:
        for player_id in team.player_ids():
            lookup.setdefault(player_id, team.name)
    return lookup


def level_spread(teams: Sequence[DraftedTeam]) -> Dict[str, int]:
    """Max-minus-min level counts across teams; zero means perfectly even."""

    if not teams:
        return {"level1": 0, "level2": 0}
    counts: Dict[str, List[int]] = defaultdict(list)
    for team in teams:
        counts["level1"].append(team.level1_count)
        counts["level2"].append(team.level2_count)
    return {key: max(values) - min(values) for key, values in counts.items()}


__all__ = [
    "BucketSummary",
    "DEFAULT_TEAM_PREFIX",
    "available_players",
    "bucket_players",
    "generate_teams",
    "level_spread",
    "max_team_count",
    "position_summary",
    "reserve_pool",
    "team_lookup",
    "team_name",
]
