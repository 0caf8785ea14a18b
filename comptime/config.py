from __future__ import annotations
import os
from typing import Optional

from comptime.errors import ConfigError

# Defaults
_DEFAULT_MAX_MACRO_DEPTH = 128


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f'{var} must be an integer, got {raw!r}') from None
    if value < 1:
        raise ConfigError(f'{var} must be positive, got {value}')
    return value


def get_max_macro_depth(override: Optional[int] = None) -> int:
    # an explicit argument wins over the environment
    if override is not None:
        if not isinstance(override, int) or isinstance(override, bool):
            raise ConfigError(f'max_depth must be an integer, got {override!r}')
        if override < 1:
            raise ConfigError(f'max_depth must be positive, got {override}')
        return override
    return int_from_env('COMPTIME_MAX_MACRO_DEPTH', _DEFAULT_MAX_MACRO_DEPTH)
