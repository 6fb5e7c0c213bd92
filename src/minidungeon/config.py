from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from importlib.resources import files as resource_files

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_RESOURCE = "dungeon.yaml"


class EntityCounts(BaseModel):
    """Number of each entity kind placed on every level.

    Ranged mutants are not listed here: their count is the level difficulty.
    """

    gold: int = Field(5, ge=0)
    trap: int = Field(5, ge=0)
    melee_mutant: int = Field(3, ge=0)
    health_potion: int = Field(2, ge=0)
    ladder: int = Field(1, ge=0)


class DungeonConfig(BaseModel):
    """Rules for one MiniDungeon session."""

    map_size: int = Field(10, description="Width and height of the square grid")
    max_steps: int = Field(100, description="Moves allowed per level before a forced loss")
    max_hp: int = Field(10, description="Player health cap")
    max_difficulty: int = Field(10, ge=0)
    difficulty_step: int = Field(2, ge=0, description="Difficulty added when descending to level 2")
    default_difficulty: int = Field(3, ge=0)
    ranged_hit_chance: float = Field(0.5, ge=0.0, le=1.0)
    ranged_damage: int = Field(2, ge=0)
    ranged_range: int = Field(2, ge=1)
    max_top_scores: int = Field(5)
    entity_counts: EntityCounts = Field(default_factory=EntityCounts)

    @field_validator("map_size", "max_steps", "max_hp", "max_top_scores")
    @classmethod
    def ensure_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    def clamp_difficulty(self, difficulty: int) -> int:
        return max(0, min(int(difficulty), self.max_difficulty))


def _read_default_yaml() -> Dict[str, Any]:
    text = resource_files("minidungeon.data").joinpath(DEFAULT_CONFIG_RESOURCE).read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_config(path: Optional[Union[str, Path]] = None) -> DungeonConfig:
    """Load dungeon rules from YAML.

    The embedded default resource at minidungeon/data/dungeon.yaml is always
    read first; if *path* is given its keys override the defaults.
    """
    raw = _read_default_yaml()
    logger.debug("Loaded embedded dungeon config resource")
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                user = yaml.safe_load(f.read()) or {}
        except yaml.YAMLError as e:
            raise InvalidConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(user, dict):
            raise InvalidConfigurationError(f"Config file {path} must contain a mapping")
        raw = _merge(raw, user)
        logger.debug("Loaded dungeon config overrides from path: %s", path)

    try:
        cfg = DungeonConfig.model_validate(raw)
    except ValidationError as e:
        raise InvalidConfigurationError(str(e)) from e
    logger.info("Dungeon config: size=%d max_steps=%d max_hp=%d", cfg.map_size, cfg.max_steps, cfg.max_hp)
    return cfg


__all__ = ["DungeonConfig", "EntityCounts", "load_config"]
