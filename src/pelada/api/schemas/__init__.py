"""Pydantic models for API I/O."""

from .roster import BucketSummaryResponse, PlayerCreateRequest, PlayerUpdateRequest
from .teams import DraftRequest, SwapRequest, SwapResponse, SwapSide
from .games import GameEventRequest, GameRequest, VoiceParseRequest

__all__ = [
    "BucketSummaryResponse",
    "PlayerCreateRequest",
    "PlayerUpdateRequest",
    "DraftRequest",
    "SwapRequest",
    "SwapResponse",
    "SwapSide",
    "GameEventRequest",
    "GameRequest",
    "VoiceParseRequest",
]
