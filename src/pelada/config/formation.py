"""Position labels, role buckets and the fixed team formation."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

from pelada.exceptions import UnknownRole


class RoleBucket(str, Enum):
    GOALKEEPER = "goalkeeper"
    DEFENDER = "defender"
    MIDFIELDER = "midfielder"
    ATTACKING_MIDFIELDER = "attacking_midfielder"
    PIVOT = "pivot"


# Display order; also the order team sub-lists are concatenated into the flat list.
BUCKET_ORDER: Tuple[RoleBucket, ...] = (
    RoleBucket.GOALKEEPER,
    RoleBucket.DEFENDER,
    RoleBucket.MIDFIELDER,
    RoleBucket.ATTACKING_MIDFIELDER,
    RoleBucket.PIVOT,
)

POSITION_BUCKETS: Mapping[str, RoleBucket] = MappingProxyType(
    {
        "Goleiro": RoleBucket.GOALKEEPER,
        "Zagueiro": RoleBucket.DEFENDER,
        "Lateral Direito": RoleBucket.DEFENDER,
        "Lateral Esquerdo": RoleBucket.DEFENDER,
        "Volante": RoleBucket.MIDFIELDER,
        "Meio-campo": RoleBucket.MIDFIELDER,
        "Meia-atacante": RoleBucket.ATTACKING_MIDFIELDER,
        "Ponta Direita": RoleBucket.ATTACKING_MIDFIELDER,
        "Ponta Esquerda": RoleBucket.ATTACKING_MIDFIELDER,
        "Centroavante": RoleBucket.PIVOT,
        "Pivo": RoleBucket.PIVOT,
    }
)

POSITION_LABELS: Tuple[str, ...] = tuple(POSITION_BUCKETS)

FORMATION: Mapping[RoleBucket, int] = MappingProxyType(
    {
        RoleBucket.GOALKEEPER: 1,
        RoleBucket.DEFENDER: 2,
        RoleBucket.MIDFIELDER: 1,
        RoleBucket.ATTACKING_MIDFIELDER: 2,
        RoleBucket.PIVOT: 1,
    }
)

PLAYERS_PER_TEAM = sum(FORMATION.values())


def classify_position(label: str) -> RoleBucket:
    """Map a roster position label to its role bucket, raising UnknownRole if unmapped."""

    bucket = POSITION_BUCKETS.get(label.strip()) if isinstance(label, str) else None
    if bucket is None:
        raise UnknownRole(label)
    return bucket


def labels_for_bucket(bucket: RoleBucket | str) -> Tuple[str, ...]:
    target = RoleBucket(bucket)
    return tuple(label for label, mapped in POSITION_BUCKETS.items() if mapped is target)

