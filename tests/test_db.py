"""db モジュールのモックテスト."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, call

import httpx
import pytest
from postgrest.exceptions import APIError

from clickstats.db import PAGE_SIZE, SupabaseClickStore
from clickstats.errors import LedgerUnavailable


def _make_store():
    """モッククライアントを差し込んだストアと、スキーマ側モックを返す."""
    client = MagicMock()
    schema = MagicMock()
    client.schema.return_value = schema
    return SupabaseClickStore(client=client, schema="start_page"), client, schema


def _table_chain(schema, data):
    chain = MagicMock()
    schema.table.return_value = chain
    chain.select.return_value = chain
    chain.eq.return_value = chain
    chain.limit.return_value = chain
    chain.order.return_value = chain
    chain.range.return_value = chain
    chain.execute.return_value = MagicMock(data=data)
    return chain


class TestIncrement:
    """increment のテスト."""

    def test_calls_record_click_rpc(self):
        store, client, schema = _make_store()
        schema.rpc.return_value.execute.return_value = MagicMock(data=[{
            "id": "uuid-1",
            "user_id": "user-1",
            "site_id": "https://example.com",
            "click_count": 3,
            "last_click_at": "2026-01-14T21:56:03.123+00:00",
        }])

        record = store.increment("user-1", "https://example.com")

        client.schema.assert_called_with("start_page")
        schema.rpc.assert_called_once_with(
            "record_click", {"p_user_id": "user-1", "p_site_id": "https://example.com"}
        )
        assert record.click_count == 3
        assert record.user_id == "user-1"
        assert record.last_click_at == datetime(2026, 1, 14, 21, 56, 3, 123000, tzinfo=timezone.utc)

    def test_api_error_becomes_ledger_unavailable(self):
        store, _, schema = _make_store()
        schema.rpc.return_value.execute.side_effect = APIError(
            {"message": "connection refused", "code": "500"}
        )

        with pytest.raises(LedgerUnavailable):
            store.increment("user-1", "https://example.com")

    def test_http_error_becomes_ledger_unavailable(self):
        store, _, schema = _make_store()
        schema.rpc.return_value.execute.side_effect = httpx.ConnectError("boom")

        with pytest.raises(LedgerUnavailable):
            store.increment("user-1", "https://example.com")

    def test_empty_response(self):
        store, _, schema = _make_store()
        schema.rpc.return_value.execute.return_value = MagicMock(data=[])

        with pytest.raises(LedgerUnavailable):
            store.increment("user-1", "https://example.com")


class TestUserCounts:
    """user_counts のテスト."""

    def test_maps_site_to_count(self):
        store, _, schema = _make_store()
        chain = _table_chain(schema, [
            {"site_id": "https://a.com", "click_count": 2},
            {"site_id": "https://b.com", "click_count": 1},
        ])

        assert store.user_counts("user-1") == {"https://a.com": 2, "https://b.com": 1}
        schema.table.assert_called_once_with("click_stats")
        chain.select.assert_called_once_with("site_id, click_count")
        chain.eq.assert_called_once_with("user_id", "user-1")
        chain.range.assert_called_once_with(0, PAGE_SIZE - 1)

    def test_pages_past_row_cap(self, monkeypatch):
        """行数上限を超えるユーザーは .range() でページ送りして全件取得すること."""
        monkeypatch.setattr("clickstats.db.PAGE_SIZE", 2)
        store, _, schema = _make_store()
        chain = _table_chain(schema, [])
        chain.execute.side_effect = [
            MagicMock(data=[
                {"site_id": "https://a.com", "click_count": 1},
                {"site_id": "https://b.com", "click_count": 2},
            ]),
            MagicMock(data=[
                {"site_id": "https://c.com", "click_count": 3},
            ]),
        ]

        assert store.user_counts("user-1") == {
            "https://a.com": 1,
            "https://b.com": 2,
            "https://c.com": 3,
        }
        assert chain.range.call_args_list == [call(0, 1), call(2, 3)]
        chain.order.assert_called_with("site_id")

    def test_empty(self):
        store, _, schema = _make_store()
        _table_chain(schema, [])

        assert store.user_counts("nobody") == {}

    def test_store_error(self):
        store, _, schema = _make_store()
        chain = _table_chain(schema, [])
        chain.execute.side_effect = httpx.ReadTimeout("timeout")

        with pytest.raises(LedgerUnavailable):
            store.user_counts("user-1")


class TestClickCount:
    """click_count のテスト."""

    def test_existing(self):
        store, _, schema = _make_store()
        chain = _table_chain(schema, [{"click_count": 4}])

        assert store.click_count("user-1", "https://a.com") == 4
        chain.limit.assert_called_once_with(1)

    def test_missing_is_zero(self):
        store, _, schema = _make_store()
        _table_chain(schema, [])

        assert store.click_count("user-1", "https://a.com") == 0


class TestSiteTotals:
    """site_totals / top_site_totals のテスト."""

    def test_single_site(self):
        store, _, schema = _make_store()
        schema.rpc.return_value.execute.return_value = MagicMock(data=[
            {"site_id": "https://a.com", "global_clicks": 10, "unique_users": 3},
        ])

        totals = store.site_totals("https://a.com")

        schema.rpc.assert_called_once_with("site_click_totals", {"p_site_id": "https://a.com"})
        assert totals.global_clicks == 10
        assert totals.unique_users == 3

    def test_single_site_without_rows(self):
        store, _, schema = _make_store()
        schema.rpc.return_value.execute.return_value = MagicMock(data=[])

        totals = store.site_totals("https://none.com")

        assert totals.site_id == "https://none.com"
        assert totals.global_clicks == 0
        assert totals.unique_users == 0

    def test_top_sites_limit_passed_to_rpc(self):
        """並べ替えと件数制限を DB 側の heat_ranking 関数に任せること."""
        store, _, schema = _make_store()
        schema.rpc.return_value.execute.return_value = MagicMock(data=[
            {"site_id": "https://a.com", "global_clicks": 10, "unique_users": 3},
            {"site_id": "https://b.com", "global_clicks": 7, "unique_users": 1},
        ])

        totals = store.top_site_totals(5)

        schema.rpc.assert_called_once_with("heat_ranking", {"p_limit": 5})
        assert [t.site_id for t in totals] == ["https://a.com", "https://b.com"]

    def test_store_error(self):
        store, _, schema = _make_store()
        schema.rpc.return_value.execute.side_effect = APIError({"message": "timeout", "code": "57014"})

        with pytest.raises(LedgerUnavailable):
            store.top_site_totals(10)


class TestConstruction:
    """クライアント未指定時のテスト."""

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setattr("clickstats.db.SUPABASE_URL", "")
        monkeypatch.setattr("clickstats.db.SUPABASE_SECRET_KEY", "")

        with pytest.raises(LedgerUnavailable):
            SupabaseClickStore()
