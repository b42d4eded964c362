"""
Runtime configuration: search depth, UCI identity and log level.

Defaults come from engine.constants. An optional TOML file and then
environment variables override them:

    XANADU_CONFIG_TOML   path of the TOML file (default: xanadu.toml)
    XANADU_SEARCH_DEPTH  search depth in plies
    XANADU_LOG_LEVEL     logging level name for the stderr log

TOML layout:

    log_level = "DEBUG"

    [search]
    depth = 3

    [uci]
    name = "xanadu"
    author = "Max Morehead"
"""

import logging
import os
import tomllib
from dataclasses import dataclass

from engine.constants import ENGINE_AUTHOR, ENGINE_NAME, SEARCH_DEPTH

_log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "xanadu.toml"


def _parse_depth(value: object, source: str) -> int | None:
    """Return a usable search depth, or None after logging why it was rejected."""
    try:
        depth = int(value)
    except (TypeError, ValueError) as exc:
        _log.warning("ignoring %s=%r: %s", source, value, exc)
        return None
    if depth < 0:
        _log.warning("ignoring %s=%r: depth must not be negative", source, value)
        return None
    return depth


def _parse_level(value: object, source: str) -> str | None:
    """Return an upper-case logging level name, or None if logging does not know it."""
    name = str(value).upper()
    if not isinstance(logging.getLevelName(name), int):
        _log.warning("ignoring %s=%r: unknown level", source, value)
        return None
    return name


@dataclass
class EngineConfig:
    search_depth: int = SEARCH_DEPTH
    engine_name: str = ENGINE_NAME
    engine_author: str = ENGINE_AUTHOR
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str) -> "EngineConfig":
        """Read a TOML file; a missing file yields the defaults."""
        cfg = EngineConfig()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)

        search = raw.get("search", {})
        if "depth" in search:
            depth = _parse_depth(search["depth"], f"{path}: search.depth")
            if depth is not None:
                cfg.search_depth = depth
        uci = raw.get("uci", {})
        if "name" in uci:
            cfg.engine_name = str(uci["name"])
        if "author" in uci:
            cfg.engine_author = str(uci["author"])
        if "log_level" in raw:
            level = _parse_level(raw["log_level"], f"{path}: log_level")
            if level is not None:
                cfg.log_level = level
        return cfg

    def apply_env(self, environ: dict[str, str]) -> "EngineConfig":
        """Apply XANADU_* overrides in place; invalid values are logged and skipped."""
        depth = environ.get("XANADU_SEARCH_DEPTH")
        if depth:
            value = _parse_depth(depth, "XANADU_SEARCH_DEPTH")
            if value is not None:
                self.search_depth = value

        level = environ.get("XANADU_LOG_LEVEL")
        if level:
            level = _parse_level(level, "XANADU_LOG_LEVEL")
            if level is not None:
                self.log_level = level
        return self


def load_config(environ: dict[str, str] | None = None) -> EngineConfig:
    """Build the effective configuration from TOML and the environment."""
    env = dict(os.environ) if environ is None else environ
    path = env.get("XANADU_CONFIG_TOML", DEFAULT_CONFIG_PATH)
    return EngineConfig.load_from_toml(path).apply_env(env)
