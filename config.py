from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).parent
REGIONS_PATH = BASE_DIR / "database" / "regions.json"


# Closed interval every bounded region attribute is clamped to
BOUNDS: Dict[str, Tuple[float, float]] = {
    "water_volume": (10.0, 4000.0),
    "pollution_level": (5.0, 200.0),
    "ph": (5.2, 9.2),
    "temperature": (-5.0, 45.0),
    "purification_percent": (0.0, 100.0),
}

# Random-walk volatility, as a fraction of the current value per tick
VOLATILITY: Dict[str, float] = {
    "water_volume": 0.02,
    "pollution_level": 0.05,
    "ph": 0.02,
    "temperature": 0.03,
}

# Purification plant dynamics
PLANT_POLLUTION_TRIGGER = 60.0
PLANT_ACTIVATION_PROBABILITY = 0.6
PLANT_MAX_GAIN = 4.0
PLANT_MAX_DECAY = 1.2

# Alert thresholds
SHORTAGE_THRESHOLD = 45.0
POLLUTION_THRESHOLD = 85.0
ALERT_RETENTION_MS = 6 * 60 * 60 * 1000

# Purify defaults
COMMAND_DEFAULT_BOOST = 10.0
COMMAND_CLEAN_FACTOR = 0.8
REQUEST_DEFAULT_BOOST = 8.0
REQUEST_DEFAULT_CLEAN = 6.0


class Settings(BaseSettings):
    """Server settings loaded from ``AQUASYNC_*`` environment variables."""
    model_config = SettingsConfigDict(env_prefix="AQUASYNC_", env_ignore_empty=True, populate_by_name=True)

    host: str = "0.0.0.0"
    # bare PORT is also honoured, as set by most hosting platforms
    port: int = Field(default=3000, validation_alias=AliasChoices("PORT", "AQUASYNC_PORT"))
    tick_interval: float = 1.0
    simulation_enabled: bool = True
    seed: Optional[int] = None
    regions_path: Path = REGIONS_PATH
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()
