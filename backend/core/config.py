"""
Application configuration module.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import DEFAULT_LIGHT_HEIGHT_ANGLE


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes
    ----------
    log_level : str
        Logging level (DEBUG, INFO, WARNING, ERROR)
    hgt_dir : str
        Directory searched for HGT tiles (.hgt or zipped .hgt)
    light_height_angle : float
        Default light source height over the horizon [deg], 0-90
    padding : int
        Default border width left around a shaded tile [px]
    shading_cache_size : int
        Number of shading results kept in memory
    """

    log_level: str = "INFO"
    hgt_dir: str = "data/hgt"

    # Shading
    light_height_angle: float = DEFAULT_LIGHT_HEIGHT_ANGLE
    padding: int = 1
    shading_cache_size: int = 16

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns
    -------
    Settings
        Application settings
    """
    return Settings()
