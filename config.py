"""
Showmatch - Approximate comparison of rendered values
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="SHOWMATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application Info
    APP_NAME: str = "Showmatch"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"

    # Normalization
    SIMPLIFY_SEQUENCES: bool = True  # Keep only first/last items of [ ... ] runs

    # Comparison
    FLOAT_RTOL: float = 1e-3
    RAISE_ON_MISMATCH: bool = True
    REPORT_ON_MISMATCH: bool = True

    # Path detection
    #   separator:  token contains a path separator and some other character
    #   filesystem: token names an existing file or directory on this host
    PATH_DETECTION: str = "separator"
    PATH_SEPARATORS: str = "/\\"


settings = Settings()
