from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PKG_DIR = Path(__file__).resolve().parent
ENV_PATH = PKG_DIR / ".env"


class SignalWeights(BaseModel):
    # Base weights; they need not sum to 1, the scorer normalizes per user
    # over the signals that are active for that user.
    model_config = ConfigDict(frozen=True)

    pref: float = 0.35
    sim: float = 0.30
    geo: float = 0.20
    pop: float = 0.15
    cold: float = 0.10  # only applied for cold start


class Settings(BaseSettings):
    # Scoring
    weights: SignalWeights = Field(default_factory=SignalWeights)
    distance_decay_km: float = Field(1000.0, gt=0)
    hard_geo_cutoff_km: float | None = Field(
        default=None, description="Skip events farther than this (km)"
    )

    # Diversity re-rank
    diversity_enabled: bool = True
    diversity_alpha: float = Field(0.08, ge=0)
    diversity_per_category_cap: int | None = Field(3, ge=1)

    # Harness
    default_limit: int = Field(5, ge=0)
    data_path: Path = PKG_DIR / "event_recommendation_data.json"

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        env_prefix="RECO_",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )


settings = Settings()
