"""Configuration management for the StyleMorph try-on studio."""

import logging
from enum import Enum

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ComfyUIConfig(BaseModel):
    """ComfyUI connection settings."""
    host: str = "127.0.0.1"
    port: int = 8188

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


class GenerationConfig(BaseModel):
    """Image generation settings shared by both ComfyUI workflows."""
    steps: int = 4  # distilled FLUX model
    cfg: float = 1.0
    seed: int | None = None  # None = random
    width: int = 1024  # text-to-image only; try-on follows the model photo
    height: int = 1024


class BatchPolicy(str, Enum):
    """How a multi-angle batch treats a failing angle."""
    ALL_OR_NOTHING = "all_or_nothing"
    SETTLE_ALL = "settle_all"


class StudioConfig(BaseSettings):
    """Main studio configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Sub-configs
    comfyui: ComfyUIConfig = Field(default_factory=ComfyUIConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)

    batch_policy: BatchPolicy = BatchPolicy.ALL_OR_NOTHING
    request_timeout: float = 300.0  # seconds per ComfyUI generation
    log_level: str = "info"

    # Azure OpenAI (loaded from .env)
    azure_openai_endpoint: str | None = None
    azure_openai_deployment: str | None = None


def load_config() -> StudioConfig:
    """Load configuration from environment and defaults."""
    return StudioConfig()


def configure_logging(level: str = "info") -> None:
    """Install a basic log format for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
