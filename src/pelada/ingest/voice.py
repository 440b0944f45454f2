"""Turn transcribed voice commands into game events."""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Iterable, List, Literal, Optional, Pattern, Sequence, Tuple

from pydantic import BaseModel

from pelada.models import EventKind, Player


logger = logging.getLogger(__name__)


class VoiceCommand(BaseModel):
    action: Literal["add_event", "unknown"]
    kind: Optional[EventKind] = None
    player_id: Optional[str] = None
    player_name: Optional[str] = None
    text: str = ""


_OF = r"(?:do|da|de|by|for|from|of)"

# Checked in order: own goals and conceded goals before plain goals, which
# would otherwise swallow "fez gol contra" / "sofreu gol".
_PATTERNS: Tuple[Tuple[EventKind, Tuple[Pattern[str], ...]], ...] = (
    (
        EventKind.OWN_GOAL,
        (
            re.compile(rf"(?:adicionar|add)?\s*gol\s+contra\s+{_OF}\s+(?:jogador\s+)?(.+)"),
            re.compile(r"(.+?)\s+(?:fez|marcou)\s+(?:um\s+)?gol\s+contra"),
            re.compile(rf"own\s+goal\s+{_OF}\s+(?:player\s+)?(.+)"),
            re.compile(r"(.+?)\s+(?:scored|made)\s+(?:an\s+)?own\s+goal"),
        ),
    ),
    (
        EventKind.GOAL_CONCEDED,
        (
            re.compile(rf"(?:adicionar|add)?\s*gol\s+sofrido\s+{_OF}\s+(?:goleiro\s+)?(.+)"),
            re.compile(r"(.+?)\s+sofreu\s+(?:um\s+)?gol"),
            re.compile(rf"goal\s+conceded\s+{_OF}\s+(?:goalkeeper\s+)?(.+)"),
            re.compile(r"(.+?)\s+conceded(?:\s+a\s+goal)?"),
        ),
    ),
    (
        EventKind.ASSIST,
        (
            re.compile(rf"(?:adicionar|add)?\s*(?:uma\s+|an\s+)?assist(?:encia)?\s+{_OF}\s+(?:jogador\s+|player\s+)?(.+)"),
            re.compile(r"(.+?)\s+(?:deu|fez|made|gave)\s+(?:uma\s+|an\s+)?assist(?:encia)?"),
        ),
    ),
    (
        EventKind.GOAL,
        (
            re.compile(rf"(?:adicionar|add|marcar)?\s*(?:um\s+|a\s+)?(?:gol|goal)\s+{_OF}\s+(?:jogador\s+|player\s+)?(.+)"),
            re.compile(r"(.+?)\s+(?:fez|marcou)\s+(?:um\s+)?gol"),
            re.compile(r"(.+?)\s+scored(?:\s+a\s+goal)?"),
        ),
    ),
)


def normalize_text(value: str) -> str:
    """Lowercase, strip accents and collapse whitespace."""

    decomposed = unicodedata.normalize("NFD", value.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", stripped).strip()


def find_best_player_match(search: str, players: Sequence[Player]) -> Optional[Player]:
    """Exact name, then containment either way, then word-prefix match."""

    needle = normalize_text(search)
    if not needle:
        return None
    names: List[Tuple[Player, str]] = [(player, normalize_text(player.name)) for player in players]

    for player, name in names:
        if name == needle:
            return player
    for player, name in names:
        if needle in name:
            return player
    for player, name in names:
        if name and name in needle:
            return player

    search_words = needle.split(" ")
    for player, name in names:
        player_words = name.split(" ")
        if any(
            player_word.startswith(word) or word.startswith(player_word)
            for word in search_words
            for player_word in player_words
            if word and player_word
        ):
            return player
    return None


def parse_voice_command(text: str, players: Iterable[Player]) -> VoiceCommand:
    roster = list(players)
    normalized = normalize_text(text)
    for kind, patterns in _PATTERNS:
        for pattern in patterns:
            match = pattern.search(normalized)
            if not match:
                continue
            candidate = match.group(1).strip()
            player = find_best_player_match(candidate, roster)
            if player is not None:
                logger.debug("Voice command %r -> %s by %s", normalized, kind.value, player.name)
                return VoiceCommand(
                    action="add_event",
                    kind=kind,
                    player_id=player.player_id,
                    player_name=player.name,
                    text=text,
                )
    logger.debug("Voice command not recognized: %r", normalized)
    return VoiceCommand(action="unknown", text=text)


__all__ = ["VoiceCommand", "find_best_player_match", "normalize_text", "parse_voice_command"]
