"""Post-draft player swaps between teams and the reserve pool."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from pelada.exceptions import BothReserve, InvalidSelection, NoOpSwap, RoleMismatch
from pelada.models import DraftedTeam, Player


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """A player picked for a swap; ``team_index`` is None for the reserve pool."""

    player: Player
    team_index: Optional[int] = None

    @property
    def is_reserve(self) -> bool:
        return self.team_index is None


def _validate(teams: Sequence[DraftedTeam], first: Selection, second: Selection) -> None:
    if first.player.player_id == second.player.player_id:
        raise NoOpSwap(first.player.player_id)

    first_bucket = first.player.bucket
    second_bucket = second.player.bucket
    if first_bucket is not second_bucket:
        raise RoleMismatch(first_bucket.value, second_bucket.value)

    if first.is_reserve and second.is_reserve:
        raise BothReserve()

    for selection in (first, second):
        player_id = selection.player.player_id
        if selection.is_reserve:
            if any(team.has_player(player_id) for team in teams):
                raise InvalidSelection(f"{selection.player.name} is drafted, not a reserve")
            continue
        index = selection.team_index
        if index is None or index < 0 or index >= len(teams):
            raise InvalidSelection(f"Team index {index} out of range")
        if not teams[index].has_player(player_id):
            raise InvalidSelection(f"{selection.player.name} is not on {teams[index].name}")


def swap_players(
    teams: Sequence[DraftedTeam],
    first: Selection,
    second: Selection,
) -> List[DraftedTeam]:
    """Exchange two same-position selections and return the updated team list.

    The input teams are left untouched; touched teams are re-assembled so
    their role sub-lists and level counts are recomputed from the new members.
    """

    _validate(teams, first, second)

    members: Dict[int, List[Player]] = {}
    for selection in (first, second):
        if selection.team_index is not None:
            index = selection.team_index
            current = members.get(index, list(teams[index].players))
            members[index] = [p for p in current if p.player_id != selection.player.player_id]

    for selection, incoming in ((first, second.player), (second, first.player)):
        if selection.team_index is not None:
            members[selection.team_index].append(incoming)

    updated = list(teams)
    for index, players in members.items():
        updated[index] = DraftedTeam.assemble(teams[index].name, players)

    logger.info(
        "Swapped %s (%s) with %s (%s)",
        first.player.name,
        "reserve" if first.is_reserve else teams[first.team_index].name,
        second.player.name,
        "reserve" if second.is_reserve else teams[second.team_index].name,
    )
    return updated


__all__ = ["Selection", "swap_players"]
