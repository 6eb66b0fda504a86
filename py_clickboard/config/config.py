from pathlib import Path
from typing import List

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: str = Field(default="*", description="CORS allowed origins")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Board Generation Configuration
    default_board_size: float = Field(default=1000.0, description="Default board side length")
    default_piece_count: int = Field(default=20, description="Default number of pieces")
    default_relax_iters: int = Field(default=1, description="Default Lloyd relaxation iterations")
    supported_piece_counts: str = Field(default="12,20,50,100", description="Piece counts offered to players")
    max_piece_count: int = Field(default=500, description="Max piece count accepted by the API")

    @property
    def piece_count_options(self) -> List[int]:
        """Parse supported piece counts."""
        return [int(v) for v in self.supported_piece_counts.split(",") if v.strip()]

    @property
    def effective_log_level(self) -> str:
        """Debug mode forces debug logging."""
        return "DEBUG" if self.debug else self.log_level

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    class Config:
        env_prefix = "CLICKBOARD_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
