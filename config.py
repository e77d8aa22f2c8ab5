from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECIPE_HARMONIZER_")

    log_dir: Path = Path("logs")
    log_level: str = "INFO"
    output_dir: Path = Path("output")
    scripts_dir: Path = Path("kubejs/server_scripts")
    registry_file: Optional[Path] = None
    max_rename_attempts: int = 10000
