"""
Settings loader for HanziPath.

Loads YAML settings files and applies HANZIPATH_* environment overrides
(a .env file in the working directory is honoured via python-dotenv).
"""

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from hanzipath.schemas import Settings

# Picked up automatically when present in the working directory
DEFAULT_CONFIG_PATH = Path("hanzipath.yaml")
ENV_PREFIX = "HANZIPATH_"


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML settings file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        ValueError: If the top level is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def env_overrides(env: Mapping[str, str]) -> dict[str, str]:
    """Settings fields found in env as HANZIPATH_<FIELD>."""
    return {
        name: env[ENV_PREFIX + name.upper()]
        for name in Settings.model_fields
        if ENV_PREFIX + name.upper() in env
    }


def load_settings(
    config_path: Optional[str | Path] = None,
    env: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> Settings:
    """
    Build Settings from defaults, a YAML file and the environment.

    Args:
        config_path: YAML file; hanzipath.yaml is used if present and none given
        env: Environment mapping (default: os.environ)
        use_dotenv: Load .env into os.environ first

    Returns:
        Validated Settings (pydantic.ValidationError on bad values)
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(load_config_file(Path(config_path)))
    elif DEFAULT_CONFIG_PATH.exists():
        values.update(load_config_file(DEFAULT_CONFIG_PATH))

    values.update(env_overrides(os.environ if env is None else env))
    return Settings(**values)
