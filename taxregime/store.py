"""
store.py — in-memory calculation history.

Keeps the most recent regime comparisons, newest first. When the limit is
reached the oldest entry is dropped (FIFO). Nothing is written to disk; the
history lives as long as the process.

  - One CalculationHistory per app, created in main.py and stored on app.state.history
  - Logs only counts and timestamps — never salary values
  - Returns frozen Pydantic objects so callers cannot mutate stored entries
"""
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict

from taxregime.config import settings
from taxregime.engine.schemas import RegimeComparison, TaxResult
from taxregime.profile.schemas import TaxpayerProfile

logger = logging.getLogger(__name__)


class HistoryEntry(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    old_result: TaxResult
    new_result: TaxResult
    profile: TaxpayerProfile
    timestamp: datetime


class CalculationHistory:
    """Bounded newest-first list of HistoryEntry."""

    def __init__(self, limit: Optional[int] = None) -> None:
        if limit is None:
            limit = settings.history_limit
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = limit
        self._entries: deque[HistoryEntry] = deque(maxlen=self.limit)

    def record(
        self,
        profile: TaxpayerProfile,
        comparison: RegimeComparison,
        timestamp: Optional[datetime] = None,
    ) -> HistoryEntry:
        """Prepend a comparison; evicts the oldest entry once the limit is hit."""
        entry = HistoryEntry(
            old_result=comparison.old_regime,
            new_result=comparison.new_regime,
            profile=profile,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        self._entries.appendleft(entry)
        logger.info("Recorded comparison at=%s history_size=%d", entry.timestamp.isoformat(), len(self._entries))
        return entry

    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        logger.info("Calculation history cleared")

    def __len__(self) -> int:
        return len(self._entries)
