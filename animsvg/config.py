"""Library configuration from environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    animsvg_env: str = "development"
    animsvg_log_level: str = "info"

    # Defaults for the public operations
    animsvg_id_prefix: str = "anim_"
    animsvg_morph_point_count: int = 100

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Install the root handler used by command-line and worker hosts."""
    name = (level or settings.animsvg_log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
