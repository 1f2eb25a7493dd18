"""
HanziPath Schemas - Pydantic models for data that leaves the process.

This module exports all schema classes for:
- Progress: persisted learner state
- Config: runtime settings
"""

# Progress schemas
from .progress import (
    ReviewRecord,
    LearnerStateSnapshot,
    KnownCharactersFile,
)

# Config schemas
from .config import (
    Settings,
    DEFAULT_STATE_DIR,
    DEFAULT_STATE_PATH,
)

__all__ = [
    # Progress
    'ReviewRecord',
    'LearnerStateSnapshot',
    'KnownCharactersFile',
    # Config
    'Settings',
    'DEFAULT_STATE_DIR',
    'DEFAULT_STATE_PATH',
]
