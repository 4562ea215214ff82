"""Configuration management."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv
from loguru import logger

load_dotenv()


def _load_toml_defaults() -> dict:
    """Load defaults from config.toml (if exists)."""
    try:
        from .config_manager import load_config_file
        return load_config_file()
    except Exception as e:
        logger.warning(f"Ignoring unreadable config file: {e}")
        return {}


_file_cfg = _load_toml_defaults()


def _get(key: str, env_key: str | None = None):
    """Get config value: env var > toml file."""
    env = env_key or key.upper()
    val = os.getenv(env)
    if val is not None:
        return val
    return _file_cfg.get(key)


def parse_ignore(value) -> list[str]:
    """``"a.b, c"`` or ``["a.b", "c"]`` -> ``["a.b", "c"]``"""
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(v).strip() for v in value if str(v).strip()]


def parse_debug(value) -> bool | str:
    """Debug option from env/toml: a flag, or a DEBUG namespace pattern."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip()
    if text.lower() in ("", "0", "false", "no", "off"):
        return False
    if text.lower() in ("1", "true", "yes", "on", "*"):
        return True
    return text


@dataclass
class Config:
    log_level: str = field(
        default_factory=lambda: str(_get("log_level", "CONSOLELOG_LOG_LEVEL") or "DEBUG").upper()
    )

    # Attribution base; None means "directory of whoever calls install()"
    root: str | None = field(default_factory=lambda: _get("root", "CONSOLELOG_ROOT") or None)

    # Logger-name prefixes that keep writing to the plain console
    ignore: list[str] = field(
        default_factory=lambda: parse_ignore(_get("ignore", "CONSOLELOG_IGNORE"))
    )

    debug: bool | str = field(
        default_factory=lambda: parse_debug(_get("debug", "CONSOLELOG_DEBUG"))
    )


config = Config()
