import logging
import os
from pathlib import Path
from typing import TypeVar

import yaml  # type: ignore
from pydantic import BaseModel

from src.config.models import ServerConfig
from src.core.exceptions import ConfigError

CONFIG_DIR = Path("resources/config")

ConfigType = TypeVar("ConfigType", bound=BaseModel)


def _merge(base: dict, overrides: dict, path: str = "") -> None:
    """Deep-merge `overrides` into `base` in place. Nested sections are merged key by key."""
    for key, value in overrides.items():
        section = f"{path}.{key}" if path else str(key)
        current = base.get(key)
        if not isinstance(current, dict) or not current:
            base[key] = value
        elif isinstance(value, dict):
            _merge(current, value, section)
        else:
            raise ConfigError(f"Stage config replaces section '{section}' with a {type(value).__name__}")


def load(
    name: str, config_type: type[ConfigType], config_dir: Path = CONFIG_DIR
) -> ConfigType:
    """Read `<config_dir>/<name>.yaml`: the `common` section, overridden by the section named by $STAGE."""
    raw_config_content: dict = yaml.safe_load((config_dir / f"{name}.yaml").read_text()) or {}
    cooked_config = raw_config_content.get("common") or {}
    _merge(cooked_config, raw_config_content.get(os.getenv("STAGE"), {}) or {})
    return config_type.model_validate(cooked_config)


def load_server_config(config_dir: Path = CONFIG_DIR) -> ServerConfig:
    return load("server", ServerConfig, config_dir)


def configure_logging(config: ServerConfig) -> None:
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
