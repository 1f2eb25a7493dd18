"""
Settings schema for HanziPath.

Values come from (lowest to highest priority) the defaults below, an optional
YAML file, and HANZIPATH_* environment variables. See hanzipath.utils.config.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_STATE_DIR = Path.home() / ".hanzipath"
DEFAULT_STATE_PATH = DEFAULT_STATE_DIR / "learner-state.json"


class Settings(BaseModel):
    data_dir: Path = Path("data")
    state_path: Path = DEFAULT_STATE_PATH
    mode: str = Field(default="lenient", pattern=r'^(strict|lenient)$')
    sentence_threshold: float = Field(default=0.90, gt=0.0, le=1.0)
    top_n: int = Field(default=5, ge=1)
    parallel_loading: bool = False
    log_level: str = "INFO"

    @field_validator('mode', 'log_level', mode='before')
    @classmethod
    def normalize_case(cls, v, info):
        if isinstance(v, str):
            return v.lower() if info.field_name == 'mode' else v.upper()
        return v
