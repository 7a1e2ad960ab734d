"""
Centralised settings loader.

Every field can be overridden with a ``NUTRITION_``-prefixed env-var
(or a line in ``.env``), e.g. ``NUTRITION_CALORIE_STEP=100``.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ─────────────────────────────────────────────────────
    env_name: str = "local"

    # ─── +/- controls ───────────────────────────────────────────────
    calorie_step: int = Field(50, gt=0)      # kcal per tap
    macro_step_g: int = Field(50, gt=0)      # grams per tap

    # how macros are seeded whenever the calorie target is re-derived
    macro_strategy: Literal["default_split", "priority"] = "default_split"

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        env_prefix="NUTRITION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
