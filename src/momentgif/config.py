"""Application configuration using Pydantic BaseSettings."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """MomentGif configuration loaded from environment variables."""

    model_config = {"env_prefix": "MOMENTGIF_", "env_file": ".env", "extra": "ignore"}

    # Photo library
    library_dir: Path = Path("/tmp/momentgif/library")
    saved_dir: Path = Path("/tmp/momentgif/library/Saved")
    still_extensions: list[str] = ["heic", "jpg", "jpeg", "png"]
    video_extensions: list[str] = ["mov", "mp4"]

    # Redis / Celery
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"

    # Directories
    temp_dir: Path = Path("/tmp/momentgif/temp")
    keep_source_files: bool = False
    temp_file_ttl_seconds: int = 3600

    # Transfer
    transfer_chunk_size: int = 256 * 1024

    # Conversion defaults
    base_size: int = 480
    default_frame_rate: int = 10
    default_loop_count: int = 0
    default_quality: float = 0.7
    default_scale: float = 1.0


def get_settings() -> Settings:
    """Return settings instance."""
    return Settings()
