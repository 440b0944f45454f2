"""Input adapters that normalize free-text input into domain events."""

from .voice import VoiceCommand, find_best_player_match, normalize_text, parse_voice_command

__all__ = [
    "VoiceCommand",
    "find_best_player_match",
    "normalize_text",
    "parse_voice_command",
]
