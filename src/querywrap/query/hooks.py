"""Lifecycle hooks run around insert, update, find and delete.

Each phase has a "before" and an "after" list. Hooks receive the operation's
result buffer (the payload for writes, the materialized rows for finds) and
may mutate its contents in place. Their return value is ignored: a hook
cannot veto the operation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from querywrap.core.types import HookPhase

logger = logging.getLogger(__name__)

Hook = Callable[[list[Any]], object]


class HookRegistry:
    """Ordered hook lists keyed by phase and by before/after."""

    def __init__(self) -> None:
        self._before: dict[HookPhase, list[Hook]] = {phase: [] for phase in HookPhase}
        self._after: dict[HookPhase, list[Hook]] = {phase: [] for phase in HookPhase}

    def set_before(self, phase: HookPhase, hooks: Iterable[Hook]) -> None:
        """Replace the before-hooks of ``phase``."""
        self._before[phase] = list(hooks)

    def set_after(self, phase: HookPhase, hooks: Iterable[Hook]) -> None:
        """Replace the after-hooks of ``phase``."""
        self._after[phase] = list(hooks)

    def before(self, phase: HookPhase) -> list[Hook]:
        return list(self._before[phase])

    def after(self, phase: HookPhase) -> list[Hook]:
        return list(self._after[phase])

    def run_before(self, phase: HookPhase, buffer: list[Any]) -> None:
        self._run(self._before[phase], f"before_{phase}", buffer)

    def run_after(self, phase: HookPhase, buffer: list[Any]) -> None:
        self._run(self._after[phase], f"after_{phase}", buffer)

    @staticmethod
    def _run(hooks: list[Hook], label: str, buffer: list[Any]) -> None:
        if hooks:
            logger.debug(f"Running {len(hooks)} {label} hook(s)")
        for hook in hooks:
            hook(buffer)
