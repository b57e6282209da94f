"""
Configuration via Pydantic BaseSettings and JSON policy files.

Environment variables (ZLOG_ prefix):
- ZLOG_OUTPUT: comma-separated destinations ("stdout", "stderr", file paths)
- ZLOG_CONFIG_FILE: path to a JSON policy file

Policy file format, keyed by level name::

    {
      "error": {"autoSource": true, "autoCallStack": true, "maxCallStackDepth": 8},
      "debug": {"autoCallStack": true}
    }
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings

from zlog.errors import ConfigError
from zlog.policy import DepthPolicy, Level, LevelConfig, set_config
from zlog.sink import parse_destinations, set_output


class ZLogSettings(BaseSettings):
    """Process-level logging settings."""

    output: str = "stdout"
    config_file: Optional[str] = None

    model_config = {"env_prefix": "ZLOG_"}


class LevelConfigModel(BaseModel):
    """One level's entry in a policy file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    auto_source: bool = Field(default=False, alias="autoSource")
    auto_callstack: bool = Field(default=False, alias="autoCallStack")
    max_depth: Optional[int] = Field(default=None, alias="maxCallStackDepth")

    def to_level_config(self) -> LevelConfig:
        return LevelConfig(
            auto_source=self.auto_source,
            auto_callstack=self.auto_callstack,
            max_depth=self.max_depth,
        )


def policy_from_dict(data: Dict[str, Any], path: Optional[Union[str, Path]] = None) -> DepthPolicy:
    """Build a policy from a mapping keyed by level name."""
    if not isinstance(data, dict):
        raise ConfigError("Policy must be a JSON object keyed by level name", path)

    levels: Dict[Level, LevelConfig] = {}
    for name, entry in data.items():
        try:
            level = Level.parse(name)
        except ValueError:
            logger.warning(f"Ignoring unknown level {name!r} in log policy")
            continue
        try:
            levels[level] = LevelConfigModel.model_validate(entry or {}).to_level_config()
        except ValidationError as e:
            raise ConfigError(f"Invalid settings for level {name!r}: {e}", path) from e

    return DepthPolicy(levels)


def load_config(path: Union[str, Path]) -> DepthPolicy:
    """Load a policy from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise ConfigError("Policy file not found", path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Policy file is not valid JSON: {e}", path) from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Policy file is not valid UTF-8: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Policy file could not be read: {e}", path) from e

    policy = policy_from_dict(data, path)
    logger.info(f"Loaded log policy from {path}")
    return policy


def init_from_env(settings: Optional[ZLogSettings] = None) -> ZLogSettings:
    """
    Apply output and policy settings from the environment.

    Nothing is applied unless both the destinations and the policy file are valid.
    """
    if settings is None:
        settings = ZLogSettings()

    destinations = parse_destinations(settings.output)
    policy = load_config(settings.config_file) if settings.config_file else None

    set_output(*destinations)
    if policy is not None:
        set_config(policy)

    return settings
