from __future__ import annotations
import os


# Defaults
_DEFAULT_MAX_PARSE_DEPTH = 32
_DEFAULT_MAX_EVALUATION_DEPTH = 100
_DEFAULT_LOG_LEVEL = 'WARNING'


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def get_max_parse_depth() -> int:
    return int_from_env('SAVAGE_MAX_PARSE_DEPTH', _DEFAULT_MAX_PARSE_DEPTH)


def get_max_evaluation_depth() -> int:
    return int_from_env('SAVAGE_MAX_EVALUATION_DEPTH', _DEFAULT_MAX_EVALUATION_DEPTH)


def get_log_level() -> str:
    raw = os.environ.get('SAVAGE_LOG_LEVEL', '').strip().upper()
    return raw or _DEFAULT_LOG_LEVEL
