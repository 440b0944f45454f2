"""Configuration helpers for positions and team formation."""

from .formation import (
    BUCKET_ORDER,
    FORMATION,
    PLAYERS_PER_TEAM,
    POSITION_BUCKETS,
    POSITION_LABELS,
    RoleBucket,
    classify_position,
    labels_for_bucket,
)

__all__ = [
    "BUCKET_ORDER",
    "FORMATION",
    "PLAYERS_PER_TEAM",
    "POSITION_BUCKETS",
    "POSITION_LABELS",
    "RoleBucket",
    "classify_position",
    "labels_for_bucket",
]
