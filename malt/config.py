from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional


# Defaults
_DEFAULT_PROMPT = 'user> '
_DEFAULT_LOG_LEVEL = 'WARNING'


def value_from_env(var: str, default: Optional[str]) -> Optional[str]:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    return raw


def get_prompt() -> str:
    # Trailing whitespace in the prompt is significant, so no strip here
    return value_from_env('MALT_PROMPT', _DEFAULT_PROMPT)


def get_history_file() -> Optional[Path]:
    raw = value_from_env('MALT_HISTORY_FILE', None)
    if raw is None:
        return None
    return Path(raw.strip()).expanduser()


def get_log_level() -> int:
    name = value_from_env('MALT_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for names it does not know
    return level if isinstance(level, int) else logging.WARNING
