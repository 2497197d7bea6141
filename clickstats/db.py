"""Supabase データベース操作モジュール.

click_stats テーブルは CLICKSTATS_SCHEMA スキーマに配置（定義は sql/click_stats.sql）。
Supabase client のスキーマ指定は .schema() で行う。
加算と集計は Postgres 関数を .rpc() で呼び、1 往復で完結させる。
"""

from __future__ import annotations

import logging
from datetime import datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from clickstats.config import (
    CLICKSTATS_SCHEMA,
    CLICKSTATS_TABLE,
    SUPABASE_SECRET_KEY,
    SUPABASE_URL,
)
from clickstats.errors import LedgerUnavailable
from clickstats.models import ClickRecord, SiteTotals

logger = logging.getLogger(__name__)

_STORE_ERRORS = (APIError, httpx.HTTPError)

# PostgREST の db-max-rows（Supabase 既定 1000）以下にする
PAGE_SIZE = 1000


class SupabaseClickStore:
    """Supabase (PostgREST) をシステムオブレコードとするカウントストア."""

    def __init__(self, client: Client | None = None, schema: str = CLICKSTATS_SCHEMA) -> None:
        if client is None:
            if not SUPABASE_URL or not SUPABASE_SECRET_KEY:
                raise LedgerUnavailable("SUPABASE_URL / SUPABASE_SECRET_KEY が未設定です")
            client = create_client(SUPABASE_URL, SUPABASE_SECRET_KEY)
        self._client = client
        self._schema = schema

    def _table(self):
        """スキーマ内の click_stats テーブルを参照する."""
        return self._client.schema(self._schema).table(CLICKSTATS_TABLE)

    def _rpc(self, fn: str, params: dict):
        return self._client.schema(self._schema).rpc(fn, params)

    def increment(self, user_id: str, site_id: str) -> ClickRecord:
        """record_click 関数で upsert + 加算を1文で実行する."""
        try:
            resp = self._rpc(
                "record_click", {"p_user_id": user_id, "p_site_id": site_id}
            ).execute()
        except _STORE_ERRORS as e:
            logger.error("クリック記録失敗: user=%s, site=%s, error=%s", user_id, site_id, e)
            raise LedgerUnavailable(f"クリック記録失敗: {e}") from e

        rows = resp.data if isinstance(resp.data, list) else [resp.data]
        if not rows or not rows[0]:
            raise LedgerUnavailable("record_click が行を返しませんでした")

        record = _to_record(rows[0])
        logger.debug("クリック記録: user=%s, site=%s, count=%d", user_id, site_id, record.click_count)
        return record

    def user_counts(self, user_id: str) -> dict[str, int]:
        """ユーザーの全レコードを PAGE_SIZE 件ずつ取得する."""
        counts: dict[str, int] = {}
        start = 0
        while True:
            try:
                resp = (
                    self._table()
                    .select("site_id, click_count")
                    .eq("user_id", user_id)
                    .order("site_id")
                    .range(start, start + PAGE_SIZE - 1)
                    .execute()
                )
            except _STORE_ERRORS as e:
                logger.error("ユーザー統計取得失敗: user=%s, error=%s", user_id, e)
                raise LedgerUnavailable(f"ユーザー統計取得失敗: {e}") from e

            rows = resp.data or []
            for row in rows:
                counts[row["site_id"]] = int(row["click_count"])
            if len(rows) < PAGE_SIZE:
                return counts
            start += PAGE_SIZE

    def click_count(self, user_id: str, site_id: str) -> int:
        try:
            resp = (
                self._table()
                .select("click_count")
                .eq("user_id", user_id)
                .eq("site_id", site_id)
                .limit(1)
                .execute()
            )
        except _STORE_ERRORS as e:
            logger.error("クリック数取得失敗: user=%s, site=%s, error=%s", user_id, site_id, e)
            raise LedgerUnavailable(f"クリック数取得失敗: {e}") from e

        if not resp.data:
            return 0
        return int(resp.data[0]["click_count"])

    def site_totals(self, site_id: str) -> SiteTotals:
        rows = self._site_click_totals(site_id)
        if not rows:
            return SiteTotals(site_id=site_id, global_clicks=0, unique_users=0)
        return rows[0]

    def top_site_totals(self, limit: int) -> list[SiteTotals]:
        """heat_ranking 関数で DB 側で並べ替え・件数制限した上位サイトを得る."""
        rows = self._totals_rpc("heat_ranking", {"p_limit": limit})
        logger.info("サイト集計取得: %d 件 (limit=%d)", len(rows), limit)
        return rows

    def _site_click_totals(self, site_id: str) -> list[SiteTotals]:
        return self._totals_rpc("site_click_totals", {"p_site_id": site_id})

    def _totals_rpc(self, fn: str, params: dict) -> list[SiteTotals]:
        """サイト単位の合計と UU を返す関数を呼ぶ."""
        try:
            resp = self._rpc(fn, params).execute()
        except _STORE_ERRORS as e:
            logger.error("サイト集計取得失敗: fn=%s, params=%s, error=%s", fn, params, e)
            raise LedgerUnavailable(f"サイト集計取得失敗: {e}") from e

        return [
            SiteTotals(
                site_id=row["site_id"],
                global_clicks=int(row["global_clicks"] or 0),
                unique_users=int(row["unique_users"] or 0),
            )
            for row in resp.data or []
        ]


def _to_record(row: dict) -> ClickRecord:
    return ClickRecord(
        user_id=row["user_id"],
        site_id=row["site_id"],
        click_count=int(row["click_count"]),
        last_click_at=datetime.fromisoformat(row["last_click_at"]),
    )
