"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    fast_model: str = "claude-haiku-4-5-20251001"
    timeout: int = 60


@dataclass(frozen=True)
class StoreConfig:
    db_path: str = "~/.vanban-assistant/store.db"
    usage_db_path: str = "~/.vanban-assistant/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()

    @property
    def resolved_usage_db_path(self) -> Path:
        return Path(self.usage_db_path).expanduser()


@dataclass(frozen=True)
class QuotaConfig:
    default_total: int = 150
    admin_total: int = 9999


@dataclass(frozen=True)
class ReviewConfig:
    refine_temperature: float = 0.4
    draft_temperature: float = 0.3


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    quota: QuotaConfig = field(default_factory=QuotaConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        store=StoreConfig(**raw.get("store", {})),
        quota=QuotaConfig(**raw.get("quota", {})),
        review=ReviewConfig(**raw.get("review", {})),
    )
