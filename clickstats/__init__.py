"""clickstats: ブックマークのクリック統計と熱度ランキング."""

from .errors import ClickStatsError, InvalidUrl, LedgerUnavailable, UnsupportedBookmark
from .ledger import (
    get_global_stats,
    get_user_click_count,
    get_user_stats,
    record_click,
    record_click_by_url,
)
from .models import Bookmark, ClickRecord, HeatRankingItem, SiteTotals
from .normalizer import normalize_site, site_display_name, site_id_from_url
from .ranking import get_heat_ranking

__all__ = [
    "Bookmark",
    "ClickRecord",
    "ClickStatsError",
    "HeatRankingItem",
    "InvalidUrl",
    "LedgerUnavailable",
    "SiteTotals",
    "UnsupportedBookmark",
    "get_global_stats",
    "get_heat_ranking",
    "get_user_click_count",
    "get_user_stats",
    "normalize_site",
    "record_click",
    "record_click_by_url",
    "site_display_name",
    "site_id_from_url",
]
