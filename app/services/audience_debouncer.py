"""
Debounced audience recompute for live rule builders.

The builder shows a live audience size while the user edits rules.
Recounting on every keystroke is wasteful, so a recompute is scheduled
after the rule set has been idle for a short interval; any newer edit
cancels the pending one. The engine itself knows nothing about this.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence

from app.config import settings

logger = logging.getLogger(__name__)


class AudienceRecomputeDebouncer:
    """
    Schedule a recompute after an idle period; later edits supersede it.

    Usage:
        debouncer = AudienceRecomputeDebouncer(service.audience_size, on_result=show)
        debouncer.schedule(rules)   # on every edit
        await debouncer.flush()     # wait for the pending recompute, if any
    """

    def __init__(
        self,
        compute: Callable[[Sequence[Any]], Any],
        on_result: Callable[[Any], None],
        delay_seconds: Optional[float] = None,
    ):
        self.compute = compute
        self.on_result = on_result
        self.delay_seconds = settings.debounce_seconds if delay_seconds is None else delay_seconds
        self.latest_result: Any = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def schedule(self, rules: Sequence[Any]) -> None:
        """Schedule a recompute for ``rules``, cancelling any pending one."""
        self.cancel()
        if not rules:
            # Builder keeps at least one rule; nothing to count
            return
        snapshot = tuple(rules)
        self._pending = asyncio.get_running_loop().create_task(self._run(snapshot))

    def cancel(self) -> None:
        """Drop the pending recompute, if any."""
        if self.pending:
            self._pending.cancel()
            logger.debug("Superseded pending audience recompute")
        self._pending = None

    async def flush(self) -> None:
        """Wait until the pending recompute (if any) has delivered its result."""
        task = self._pending
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(self, rules: Sequence[Any]) -> None:
        await asyncio.sleep(self.delay_seconds)
        try:
            result = self.compute(rules)
            self.latest_result = result
            self.on_result(result)
        except Exception:
            logger.exception("Audience recompute failed for %d rules", len(rules))
