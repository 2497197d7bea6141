"""リクエスト単位の操作.

HTTP ルーティング・認証は外側の責務。ここではブックマークの種別確認と
URL 正規化を台帳への書き込み前に行い、JSON 化できる dict を返す。
"""

from __future__ import annotations

import logging

from clickstats import ledger, ranking
from clickstats.config import (
    HEAT_RANKING_DEFAULT_LIMIT,
    HEAT_RANKING_MAX_LIMIT,
    LINK_BOOKMARK_TYPE,
)
from clickstats.errors import InvalidUrl, UnsupportedBookmark
from clickstats.models import Bookmark
from clickstats.normalizer import site_id_from_url
from clickstats.store import ClickStore

logger = logging.getLogger(__name__)


def click(user_id: str, bookmark: Bookmark, store: ClickStore | None = None) -> dict:
    """ブックマークのクリックを記録する.

    Returns:
        {"siteId": str, "userClicks": int, "globalClicks": int}

    Raises:
        UnsupportedBookmark: LINK 以外、または URL なし
        InvalidUrl: URL を正規化できない
    """
    if bookmark.type != LINK_BOOKMARK_TYPE or not bookmark.url:
        raise UnsupportedBookmark(bookmark.id)

    site_id = site_id_from_url(bookmark.url)
    if site_id is None:
        raise InvalidUrl(bookmark.url)

    result = record_site_click(user_id, site_id, store)
    logger.info(
        "クリック: user=%s, bookmark=%s, site=%s → %d/%d",
        user_id, bookmark.id, site_id, result["userClicks"], result["globalClicks"],
    )
    return result


def record_site_click(user_id: str, site_id: str, store: ClickStore | None = None) -> dict:
    """正規化済み site_id へのクリックを記録し、click のレスポンスを組み立てる."""
    record = ledger.record_click(user_id, site_id, store)
    totals = ledger.get_global_stats(site_id, store)
    return {
        "siteId": site_id,
        "userClicks": record.click_count,
        "globalClicks": totals.global_clicks,
    }


def stats(user_id: str, store: ClickStore | None = None) -> dict:
    """{"stats": {siteId: clickCount}} を返す."""
    return {"stats": ledger.get_user_stats(user_id, store)}


def heat_ranking(limit=None, store: ClickStore | None = None) -> dict:
    """{"ranking": [...]} を返す. 管理者権限の確認は呼び出し側で行う."""
    items = ranking.get_heat_ranking(clamp_limit(limit), store)
    return {"ranking": [item.to_dict() for item in items]}


def clamp_limit(raw) -> int:
    """クエリ文字列などの limit を [1, HEAT_RANKING_MAX_LIMIT] に丸める.

    解釈できない値は HEAT_RANKING_DEFAULT_LIMIT。
    """
    if raw is None or raw == "":
        return HEAT_RANKING_DEFAULT_LIMIT
    try:
        limit = int(str(raw).strip())
    except ValueError:
        return HEAT_RANKING_DEFAULT_LIMIT
    return max(1, min(HEAT_RANKING_MAX_LIMIT, limit))
