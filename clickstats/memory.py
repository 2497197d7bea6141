"""プロセス内カウントストア.

ロック1本で increment を直列化する。テストと単一プロセス運用向け。
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from clickstats.models import ClickRecord, SiteTotals
from clickstats.ranking import rank_sites

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryClickStore:
    """dict[(user_id, site_id)] -> ClickRecord を保持するストア."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._records: dict[tuple[str, str], ClickRecord] = {}
        self._lock = threading.Lock()

    def increment(self, user_id: str, site_id: str) -> ClickRecord:
        with self._lock:
            now = self._clock()
            key = (user_id, site_id)
            record = self._records.get(key)
            if record is None:
                record = ClickRecord(
                    user_id=user_id,
                    site_id=site_id,
                    click_count=1,
                    last_click_at=now,
                )
            else:
                record = replace(record, click_count=record.click_count + 1, last_click_at=now)
            self._records[key] = record
        logger.debug("クリック記録: user=%s, site=%s, count=%d", user_id, site_id, record.click_count)
        return replace(record)

    def user_counts(self, user_id: str) -> dict[str, int]:
        with self._lock:
            return {
                r.site_id: r.click_count
                for r in self._records.values()
                if r.user_id == user_id
            }

    def click_count(self, user_id: str, site_id: str) -> int:
        with self._lock:
            record = self._records.get((user_id, site_id))
        return record.click_count if record else 0

    def site_totals(self, site_id: str) -> SiteTotals:
        with self._lock:
            rows = [r for r in self._records.values() if r.site_id == site_id]
        return SiteTotals(
            site_id=site_id,
            global_clicks=sum(r.click_count for r in rows),
            unique_users=len({r.user_id for r in rows}),
        )

    def all_site_totals(self) -> list[SiteTotals]:
        with self._lock:
            rows = list(self._records.values())

        clicks: dict[str, int] = {}
        users: dict[str, set[str]] = {}
        for r in rows:
            clicks[r.site_id] = clicks.get(r.site_id, 0) + r.click_count
            users.setdefault(r.site_id, set()).add(r.user_id)

        return [
            SiteTotals(site_id=site_id, global_clicks=total, unique_users=len(users[site_id]))
            for site_id, total in clicks.items()
        ]

    def top_site_totals(self, limit: int) -> list[SiteTotals]:
        return rank_sites(self.all_site_totals())[:limit]
