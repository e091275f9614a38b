"""Dynamic action loading and dispatch helpers."""
from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, Iterator, List, cast

from .config import ActionConfig

logger = logging.getLogger(__name__)


ActionCallback = Callable[["ChangeContext", Dict[str, Any]], None]

@dataclass(frozen=True)
class ChangeContext:
    """Context passed to action callbacks."""

    path: Path
    modification_time: int
    poll_count: int


@dataclass
class Action:
    """Callable wrapper associated with configuration metadata."""

    name: str
    callback: ActionCallback
    options: Dict[str, Any]

    def invoke(self, context: ChangeContext) -> None:
        logger.debug("Dispatching action %s for %s", self.name, context.path)
        self.callback(context, self.options)


class ActionRegistry:
    """Loads and stores configured actions."""

    def __init__(self, actions: Iterable[ActionConfig]):
        self._actions: List[Action] = [self._load_action(cfg) for cfg in actions]

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def dispatch_change(self, context: ChangeContext) -> None:
        for action in self._actions:
            self._safe_invoke(action, context)

    def _load_action(self, config: ActionConfig) -> Action:
        module = _import_module(config.module)
        try:
            callback = getattr(module, config.function)
        except AttributeError as exc:
            raise RuntimeError(
                f"Action '{config.name}' could not find function '{config.function}' in {config.module}"
            ) from exc

        if not callable(callback):
            raise RuntimeError(
                f"Action '{config.name}' attribute '{config.function}' in {config.module} is not callable"
            )

        options = dict(config.options or {})
        callback_fn = cast(ActionCallback, callback)
        return Action(name=config.name, callback=callback_fn, options=options)

    def _safe_invoke(self, action: Action, context: ChangeContext) -> None:
        try:
            action.invoke(context)
        except Exception:
            logger.exception("Action %s failed for %s", action.name, context.path)


def _import_module(module_path: str) -> ModuleType:
    try:
        return importlib.import_module(module_path)
    except ImportError as exc:
        raise RuntimeError(f"Unable to import action module '{module_path}'") from exc
