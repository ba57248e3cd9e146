"""Configuration module for stagechain."""

from stagechain.config.loader import get_config_path, load_config, save_config
from stagechain.config.schema import ChainConfig, Config, StageConfig

__all__ = ["ChainConfig", "Config", "StageConfig", "get_config_path", "load_config", "save_config"]
