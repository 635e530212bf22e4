import yaml
import os
import logging
from typing import Optional
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///chorematch.db"
    echo: bool = False


class WebConfig(BaseModel):
    """Web server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    # "development" exposes internal error detail in 500 responses
    environment: str = "production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev")


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ScoreWeights(BaseModel):
    """Weights of the five component scores in the composite match score."""
    skill: float = 0.35
    preference: float = 0.20
    time: float = 0.25
    environment: float = 0.15
    level: float = 0.05

    @model_validator(mode="after")
    def _check_total(self) -> "ScoreWeights":
        total = self.skill + self.preference + self.time + self.environment + self.level
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Score weights must sum to 1.0, got {total:.4f}")
        return self


class ScorerConfig(BaseModel):
    """
    Configuration for the ScoringService.

    Only the composite weights are configurable; the per-component
    formulas are fixed.
    """
    weights: ScoreWeights = Field(default_factory=ScoreWeights)


class RankingConfig(BaseModel):
    recommendation_limit: int = Field(default=6, ge=1)
    # Number of runner-up users returned by a dry-run batch assignment
    alternatives: int = Field(default=3, ge=1)


class MatchingConfig(BaseModel):
    """
    Top-level matching configuration.
    """
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _apply_env_overrides(data: dict) -> dict:
    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        data.setdefault('database', {})
        data['database']['url'] = env_db_url

    if 'WEB_HOST' in os.environ:
        data.setdefault('web', {})
        data['web']['host'] = os.environ['WEB_HOST']

    if 'WEB_PORT' in os.environ:
        data.setdefault('web', {})
        data['web']['port'] = int(os.environ['WEB_PORT'])

    if 'APP_ENV' in os.environ:
        data.setdefault('web', {})
        data['web']['environment'] = os.environ['APP_ENV']

    if 'LOG_LEVEL' in os.environ:
        data.setdefault('logging', {})
        data['logging']['level'] = os.environ['LOG_LEVEL']

    return data


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
    # If not found at relative path (e.g. running from root), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", os.path.basename(config_path))

    data = {}
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info(f"No config file at {config_path}, using defaults")

    data = _apply_env_overrides(data)
    return AppConfig(**data)


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configure root logging once at an entry point."""
    config = config or LoggingConfig()
    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        format=config.format
    )
