import json
import os
from functools import cached_property
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ._utils.constants import CONFIG_FILE, DEFAULT_CONFIG_DIR, ENV_CONFIG_DIR
from .models.errors import XhttpError


class Config(BaseModel):
    model_config = ConfigDict(extra="ignore")

    default_options: list[str] = Field(
        default_factory=list,
        description="Options inserted before the command line arguments",
    )


class ConfigurationManager:
    """Singleton configuration manager."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @cached_property
    def config_dir(self) -> Path:
        return Path(os.getenv(ENV_CONFIG_DIR) or DEFAULT_CONFIG_DIR).expanduser()

    @cached_property
    def config_file_path(self) -> Path:
        return self.config_dir / CONFIG_FILE

    def load(self) -> Config:
        """Read the config file, falling back to defaults when it is absent."""
        path = self.config_file_path
        if not path.is_file():
            return Config()
        try:
            with open(path, "r", encoding="utf-8") as f:
                return Config.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            raise XhttpError(f"Invalid config file {path}: {e}") from e

    def reset(self) -> None:
        """Forget cached paths, e.g. after the environment changed."""
        for name in ("config_dir", "config_file_path"):
            self.__dict__.pop(name, None)


XhttpConfig = ConfigurationManager()
