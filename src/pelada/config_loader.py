"""Persist and load club settings profiles."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

_DRAFT_SEED_ENV = "PELADA_DRAFT_SEED"
_TOP_N_ENV = "PELADA_TOP_N"
_TEAM_PREFIX_ENV = "PELADA_TEAM_PREFIX"


def _env_int(name: str, default: Optional[int], *, min_value: int | None = None) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %s", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class ClubProfile:
    team_name_prefix: str = "Team"
    top_n: int = 10
    draft_seed: Optional[int] = None

    @classmethod
    def load(cls, path: Path) -> "ClubProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            team_name_prefix=data.get("team_name_prefix", "Team"),
            top_n=int(data.get("top_n", 10)),
            draft_seed=data.get("draft_seed"),
        )

    def save(self, path: Path) -> None:
        payload = {
            "team_name_prefix": self.team_name_prefix,
            "top_n": self.top_n,
            "draft_seed": self.draft_seed,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def with_env(self) -> "ClubProfile":
        """Overlay PELADA_* environment variables on top of this profile."""

        return replace(
            self,
            team_name_prefix=os.getenv(_TEAM_PREFIX_ENV) or self.team_name_prefix,
            top_n=_env_int(_TOP_N_ENV, self.top_n, min_value=1) or self.top_n,
            draft_seed=_env_int(_DRAFT_SEED_ENV, self.draft_seed),
        )
