"""Drafted team aggregate and the derived reserve pool."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Sequence

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pelada.config import BUCKET_ORDER, RoleBucket
from pelada.exceptions import TeamInvariantError
from pelada.models.player import Player


# Role bucket -> attribute holding that bucket's sub-list.
BUCKET_FIELDS: Dict[RoleBucket, str] = {
    RoleBucket.GOALKEEPER: "goalkeepers",
    RoleBucket.DEFENDER: "defenders",
    RoleBucket.MIDFIELDER: "midfielders",
    RoleBucket.ATTACKING_MIDFIELDER: "attacking_midfielders",
    RoleBucket.PIVOT: "pivots",
}


def _bucket_lists(players: Iterable[Player]) -> Dict[str, List[Player]]:
    lists: Dict[str, List[Player]] = {field: [] for field in BUCKET_FIELDS.values()}
    for player in players:
        lists[BUCKET_FIELDS[player.bucket]].append(player)
    return lists


class DraftedTeam(BaseModel):
    """A drafted team: flat member list plus all five role sub-lists.

    Instances are built through :meth:`assemble` so the sub-lists and level
    counts are always derived from the flat member list.
    """

    name: str
    players: List[Player] = Field(default_factory=list)
    goalkeepers: List[Player] = Field(default_factory=list)
    defenders: List[Player] = Field(default_factory=list)
    midfielders: List[Player] = Field(default_factory=list)
    attacking_midfielders: List[Player] = Field(default_factory=list)
    pivots: List[Player] = Field(default_factory=list)
    level1_count: int = 0
    level2_count: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def assemble(cls, name: str, players: Sequence[Player]) -> "DraftedTeam":
        members = list(players)
        return cls(
            name=name,
            players=members,
            level1_count=sum(1 for player in members if player.level == 1),
            level2_count=sum(1 for player in members if player.level == 2),
            **_bucket_lists(members),
        )

    def for_bucket(self, bucket: RoleBucket | str) -> List[Player]:
        return getattr(self, BUCKET_FIELDS[RoleBucket(bucket)])

    def player_ids(self) -> List[str]:
        return [player.player_id for player in self.players]

    def has_player(self, player_id: str) -> bool:
        return any(player.player_id == player_id for player in self.players)

    def check_invariants(self) -> None:
        ids = self.player_ids()
        duplicates = [pid for pid, count in Counter(ids).items() if count > 1]
        if duplicates:
            raise TeamInvariantError(f"{self.name}: duplicate players {duplicates}")

        sub_ids: List[str] = []
        for bucket in BUCKET_ORDER:
            for player in self.for_bucket(bucket):
                if player.bucket is not bucket:
                    raise TeamInvariantError(
                        f"{self.name}: {player.name} ({player.position}) listed under {bucket.value}"
                    )
                sub_ids.append(player.player_id)
        if sorted(sub_ids) != sorted(ids):
            raise TeamInvariantError(f"{self.name}: role sub-lists out of sync with members")

        level1 = sum(1 for player in self.players if player.level == 1)
        level2 = sum(1 for player in self.players if player.level == 2)
        if (level1, level2) != (self.level1_count, self.level2_count):
            raise TeamInvariantError(
                f"{self.name}: level counts {self.level1_count}/{self.level2_count} != {level1}/{level2}"
            )


class ReservePool(BaseModel):
    """Available players outside every drafted team, grouped by role."""

    goalkeepers: List[Player] = Field(default_factory=list)
    defenders: List[Player] = Field(default_factory=list)
    midfielders: List[Player] = Field(default_factory=list)
    attacking_midfielders: List[Player] = Field(default_factory=list)
    pivots: List[Player] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_players(cls, players: Iterable[Player]) -> "ReservePool":
        return cls(**_bucket_lists(players))

    def for_bucket(self, bucket: RoleBucket | str) -> List[Player]:
        return getattr(self, BUCKET_FIELDS[RoleBucket(bucket)])

    def all_players(self) -> List[Player]:
        return [player for bucket in BUCKET_ORDER for player in self.for_bucket(bucket)]

    def is_empty(self) -> bool:
        return not self.all_players()
