"""クリック台帳モジュール.

(user_id, site_id) 単位のクリック数を記録・参照する。
書き込みはストアの increment() だけを通す（アプリ側で read-modify-write しない）。
site_id の妥当性は上流の normalizer で検査済みとし、ここでは任意の文字列を受け付ける。
"""

from __future__ import annotations

from clickstats.errors import InvalidUrl
from clickstats.models import ClickRecord, SiteTotals
from clickstats.normalizer import site_id_from_url
from clickstats.store import ClickStore, get_store


def record_click(user_id: str, site_id: str, store: ClickStore | None = None) -> ClickRecord:
    """クリックを1回記録し、更新後のレコードを返す."""
    store = store or get_store()
    return store.increment(user_id, site_id)


def record_click_by_url(
    user_id: str, bookmark_url: str, store: ClickStore | None = None
) -> ClickRecord:
    """URL を正規化してからクリックを記録する.

    Raises:
        InvalidUrl: 正規化できない URL。ストアへの書き込みは行わない。
    """
    site_id = site_id_from_url(bookmark_url)
    if site_id is None:
        raise InvalidUrl(bookmark_url)
    return record_click(user_id, site_id, store)


def get_user_stats(user_id: str, store: ClickStore | None = None) -> dict[str, int]:
    """ユーザーの site_id -> click_count. 未クリックなら空 dict."""
    store = store or get_store()
    return store.user_counts(user_id)


def get_global_stats(site_id: str, store: ClickStore | None = None) -> SiteTotals:
    """サイトの全ユーザー合計クリック数とユニークユーザー数. 記録なしは 0."""
    store = store or get_store()
    return store.site_totals(site_id)


def get_user_click_count(user_id: str, site_id: str, store: ClickStore | None = None) -> int:
    store = store or get_store()
    return store.click_count(user_id, site_id)
