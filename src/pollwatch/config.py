"""Configuration loading utilities for the file poller."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml # type: ignore


logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


@dataclass
class WatchConfig:
    """Options describing which file to poll and how often."""

    path: Path
    poll_interval: float = DEFAULT_POLL_INTERVAL
    ignore_change_if_empty: bool = False


@dataclass
class ActionConfig:
    """On-change hook definition loaded from the configuration file."""

    name: str
    module: str
    function: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AppConfig:
    """Top-level configuration structure."""

    watch: WatchConfig
    actions: List[ActionConfig] = field(default_factory=list)


def load_config(path: Path, *, watch_path: Optional[Path] = None) -> AppConfig:
    """Load and validate the YAML configuration file.

    ``watch_path`` takes precedence over ``watch.path`` from the file, which
    then becomes optional.
    """

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML configuration: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    watch_cfg = _parse_watch_config(data.get("watch", {}), config_path=path, override=watch_path)
    actions_cfg = _parse_actions_config(data.get("actions", []))

    return AppConfig(watch=watch_cfg, actions=actions_cfg)


def default_config(watch_path: Path) -> AppConfig:
    """Configuration used when only a path is given on the command line."""

    return AppConfig(watch=WatchConfig(path=watch_path))


def _parse_watch_config(raw: Any, *, config_path: Path, override: Optional[Path]) -> WatchConfig:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("'watch' section must be a mapping")

    if override is not None:
        watch_path = override
    else:
        path_raw = raw.get("path")
        if not isinstance(path_raw, str) or not path_raw:
            raise ConfigError("watch.path must be a non-empty string")
        watch_path = Path(path_raw)
        if not watch_path.is_absolute():
            watch_path = config_path.parent / watch_path

    poll_interval = raw.get("poll_interval", DEFAULT_POLL_INTERVAL)
    if isinstance(poll_interval, bool):
        raise ConfigError("watch.poll_interval must be numeric")
    try:
        poll_interval_val = float(poll_interval)
    except (TypeError, ValueError) as exc:
        raise ConfigError("watch.poll_interval must be numeric") from exc
    if not math.isfinite(poll_interval_val) or poll_interval_val <= 0:
        raise ConfigError("watch.poll_interval must be a positive, finite number")

    ignore_empty = raw.get("ignore_change_if_empty", False)
    if not isinstance(ignore_empty, bool):
        raise ConfigError("watch.ignore_change_if_empty must be a boolean")

    return WatchConfig(
        path=watch_path,
        poll_interval=poll_interval_val,
        ignore_change_if_empty=ignore_empty,
    )


def _parse_actions_config(raw: Any) -> List[ActionConfig]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("'actions' section must be a list")

    actions = [_parse_action(item, where=f"actions[{index}]") for index, item in enumerate(raw)]
    for action in actions:
        logger.info("Loaded action '%s' (%s.%s)", action.name, action.module, action.function)
    return actions


def _parse_action(item: Any, *, where: str) -> ActionConfig:
    """Parse one hook, given either as ``callback: pkg.mod:func`` or split keys."""

    if isinstance(item, str):
        item = {"callback": item}
    if not isinstance(item, dict):
        raise ConfigError(f"{where} must be a mapping or a 'module:function' string")

    callback = item.get("callback")
    if callback is not None:
        if "module" in item or "function" in item:
            raise ConfigError(f"{where} must not combine 'callback' with 'module'/'function'")
        module, _, function = str(callback).partition(":")
    else:
        module, function = item.get("module"), item.get("function")

    if not module or not function or not isinstance(module, str) or not isinstance(function, str):
        raise ConfigError(f"{where} must name a callback as 'module:function' or 'module' and 'function' strings")

    options = item.get("options") or {}
    if not isinstance(options, dict):
        raise ConfigError(f"{where}.options must be a mapping if provided")

    return ActionConfig(
        name=str(item.get("name") or function),
        module=module,
        function=function,
        options=options,
    )
