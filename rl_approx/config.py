"""
Configuration for the rl_approx library.

Settings are read from environment variables, optionally seeded from a
``.env`` file, and cached for the lifetime of the process.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "RL_APPROX_"

LOG_LEVELS = ("debug", "info", "warning", "error")
FLOAT_DTYPES = ("float32", "float64")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class Settings:
    """
    Library-wide settings.

    The defaults apply when the corresponding environment variable is unset.
    """

    debug: bool = False
    """Whether debug logging is enabled"""

    log_level: str = "info"
    """Log level used when debug is enabled"""

    log_file: Optional[str] = None
    """Custom log file name or path"""

    log_dir: str = "logs"
    """Directory for log files, relative to the working directory"""

    float_dtype: str = "float64"
    """Canonical float type binners compute in"""


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_choice(name: str, raw: str, choices) -> str:
    value = raw.strip().lower()
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}, got {raw!r}")
    return value


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from the environment.

    Variables already present in the environment take precedence over those
    in the ``.env`` file.

    Args:
        env_file: Optional path to a ``.env`` file; by default python-dotenv
            searches for one starting from the working directory

    Returns:
        Settings instance

    Raises:
        ValueError: If a variable holds an invalid value
    """
    load_dotenv(env_file if env_file is not None else find_dotenv(usecwd=True))
    defaults = Settings()

    def env(key: str) -> Optional[str]:
        return os.getenv(ENV_PREFIX + key)

    debug = env("DEBUG")
    log_level = env("LOG_LEVEL")
    log_dir = env("LOG_DIR")
    float_dtype = env("FLOAT_DTYPE")

    return Settings(
        debug=defaults.debug if debug is None else _parse_bool(ENV_PREFIX + "DEBUG", debug),
        log_level=(
            defaults.log_level if log_level is None
            else _parse_choice(ENV_PREFIX + "LOG_LEVEL", log_level, LOG_LEVELS)
        ),
        log_file=env("LOG_FILE") or None,
        log_dir=log_dir or defaults.log_dir,
        float_dtype=(
            defaults.float_dtype if float_dtype is None
            else _parse_choice(ENV_PREFIX + "FLOAT_DTYPE", float_dtype, FLOAT_DTYPES)
        ),
    )


# Cached settings
_settings = None


def get_settings() -> Settings:
    """
    Get the process-wide settings, loading them on first use.

    Returns:
        Settings instance
    """
    global _settings

    if _settings is None:
        _settings = load_settings()

    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next ``get_settings`` reloads them."""
    global _settings
    _settings = None
