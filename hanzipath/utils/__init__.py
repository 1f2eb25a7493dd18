"""HanziPath utilities."""

from .config import load_settings, load_config_file, env_overrides, DEFAULT_CONFIG_PATH

__all__ = ["load_settings", "load_config_file", "env_overrides", "DEFAULT_CONFIG_PATH"]
