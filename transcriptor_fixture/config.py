import logging
from functools import lru_cache

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FilterConfig(BaseModel):
    path: str | None = None  # Saved-variables style filter file
    ignored_spell_ids: list[int] = []
    ignored_creature_ids: list[int] = []


class RangeConfig(BaseModel):
    # BOSS_KILL lines up to this many lines past ENCOUNTER_END are kept
    boss_kill_window: int = 50


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    debug: bool = False
    log_level: str = "INFO"
    filter: FilterConfig = FilterConfig()
    range: RangeConfig = RangeConfig()

    @model_validator(mode="after")
    def _check_cross_field_deps(self):
        if self.range.boss_kill_window < 0:
            raise ValueError("RANGE__BOSS_KILL_WINDOW must be >= 0")
        if self.debug:
            self.log_level = "DEBUG"
        self.log_level = self.log_level.upper()
        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {self.log_level!r}")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
