from functools import lru_cache
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BUFFER_SIZE = 4096


class Settings(BaseSettings):
    # Tools
    encoder_path: Optional[str] = Field(
        default=None, description="Encoder filename or path (platform default if unset)"
    )
    decoder_path: Optional[str] = Field(
        default=None, description="Decoder filename or path (platform default if unset)"
    )
    search_path_variables: Union[str, List[str]] = Field(
        default_factory=lambda: ["WEBP_WRAPPER_USER_PATH", "PATH"],
        description="Environment variables listing directories to search, user scope first",
    )

    # I/O
    buffer_size: int = Field(
        default=DEFAULT_BUFFER_SIZE, description="Pipe copy buffer size in bytes"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="WEBP_WRAPPER_",
        extra="ignore",
    )

    @field_validator("buffer_size")
    @classmethod
    def validate_buffer_size(cls, v):
        if v < 1:
            raise ValueError("buffer_size must be a positive number of bytes")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("search_path_variables", mode="before")
    @classmethod
    def parse_comma_separated_list(cls, v):
        """Parse comma-separated string into list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        elif isinstance(v, (list, tuple)):
            return list(v)
        else:
            return cls.parse_comma_separated_list(str(v))


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Settings loaded once from the environment."""
    return Settings()
