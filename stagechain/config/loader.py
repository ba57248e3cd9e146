"""Configuration loading utilities."""

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from stagechain.config.schema import Config

# Values under these keys are user data and keep their keys verbatim.
_VERBATIM_VALUES = frozenset({"args", "kwargs"})
# Keys of mappings under these keys are user-chosen names.
_VERBATIM_KEYS = frozenset({"chains"})


def get_config_path() -> Path:
    """Get the default configuration file path."""
    from stagechain.utils.helpers import get_data_path

    return get_data_path() / "config.json"


def load_config(config_path: Path | None = None, *, strict: bool = False) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.
        strict: Re-raise parse and validation errors instead of falling back
            to the default configuration.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                raise ValueError("Config root must be a JSON object")
            return Config.model_validate(convert_keys(raw))
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            if strict:
                raise
            logger.warning("Failed to load config from {}: {}", path, e)
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    _atomic_write_config(path, config)


def _atomic_write_config(path: Path, config: Config) -> None:
    """Atomically write config as camelCase JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = convert_to_camel(config.model_dump())
    tmp_path = path.with_name(f".{path.name}.tmp-{os.getpid()}")
    with open(tmp_path, "w") as f:
        json.dump(data, f, indent=2)
    os.replace(tmp_path, path)


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    return _convert(data, camel_to_snake)


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    return _convert(data, snake_to_camel)


def _convert(data: Any, rename: Callable[[str], str], *, keep_keys: bool = False) -> Any:
    if isinstance(data, dict):
        converted = {}
        for key, value in data.items():
            new_key = key if keep_keys else rename(key)
            if not keep_keys and new_key in _VERBATIM_VALUES:
                converted[new_key] = value
            else:
                converted[new_key] = _convert(value, rename, keep_keys=new_key in _VERBATIM_KEYS)
        return converted
    if isinstance(data, list):
        return [_convert(item, rename) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
