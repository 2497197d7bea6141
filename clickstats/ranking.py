"""熱度ランキングモジュール.

処理フロー:
  1. ストアから (global_clicks 降順, unique_users 降順, site_id 昇順) の上位 limit 件を取得
     （Supabase は DB 側で、メモリストアは rank_sites で並べる）
  2. 表示名を付けて返す
"""

from __future__ import annotations

from clickstats.models import HeatRankingItem, SiteTotals
from clickstats.store import ClickStore, get_store


def get_heat_ranking(limit: int, store: ClickStore | None = None) -> list[HeatRankingItem]:
    """全体クリック数上位のサイトを返す.

    Args:
        limit: 最大件数（1 以上）

    Returns:
        人気順の HeatRankingItem リスト。記録が無ければ空リスト。
    """
    if limit < 1:
        raise ValueError(f"limit は 1 以上: {limit}")

    store = store or get_store()
    ranked = store.top_site_totals(limit)

    return [
        HeatRankingItem(
            site_id=t.site_id,
            site_name=t.site_name,
            global_clicks=t.global_clicks,
            unique_users=t.unique_users,
        )
        for t in ranked
    ]


def rank_sites(totals: list[SiteTotals]) -> list[SiteTotals]:
    """集計値を人気順に並べる. 完全に同点なら site_id の辞書順."""
    return sorted(totals, key=_sort_key)


def _sort_key(t: SiteTotals) -> tuple[int, int, str]:
    return (-t.global_clicks, -t.unique_users, t.site_id)
