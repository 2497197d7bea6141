"""カウントストアのインターフェースと生成.

ClickRecord の書き込みは increment() だけが行う。
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from clickstats.config import CLICKSTATS_BACKEND
from clickstats.models import ClickRecord, SiteTotals

logger = logging.getLogger(__name__)

_store: ClickStore | None = None
_store_lock = threading.Lock()


class ClickStore(Protocol):
    """(user_id, site_id) 単位のクリックカウンタを保持するストア."""

    def increment(self, user_id: str, site_id: str) -> ClickRecord:
        """無ければ click_count=1 で作成、有れば原子的に +1 する."""
        ...

    def user_counts(self, user_id: str) -> dict[str, int]:
        ...

    def click_count(self, user_id: str, site_id: str) -> int:
        ...

    def site_totals(self, site_id: str) -> SiteTotals:
        ...

    def top_site_totals(self, limit: int) -> list[SiteTotals]:
        """(global_clicks 降順, unique_users 降順, site_id 昇順) で上位 limit 件."""
        ...


def get_store() -> ClickStore:
    """CLICKSTATS_BACKEND に応じたプロセス共有のストアを返す."""
    global _store
    with _store_lock:
        if _store is None:
            _store = _create_store(CLICKSTATS_BACKEND)
        return _store


def set_store(store: ClickStore | None) -> None:
    """共有ストアを差し替える（None で次回 get_store() 時に再生成）."""
    global _store
    with _store_lock:
        _store = store


def _create_store(backend: str) -> ClickStore:
    logger.info("カウントストア生成: backend=%s", backend)
    if backend == "memory":
        from clickstats.memory import MemoryClickStore

        return MemoryClickStore()
    if backend == "supabase":
        from clickstats.db import SupabaseClickStore

        return SupabaseClickStore()
    raise ValueError(f"未知のストア backend: {backend}")
