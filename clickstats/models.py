"""データモデル定義."""

from dataclasses import dataclass
from datetime import datetime

from clickstats.normalizer import site_display_name


@dataclass
class ClickRecord:
    """1ユーザー × 1サイトの累計クリックを表す."""

    user_id: str  # ユーザーアカウント側の不透明な ID
    site_id: str  # 例: https://fanyi.baidu.com
    click_count: int  # 1 以上
    last_click_at: datetime  # 最終クリック日時 (UTC)


@dataclass
class SiteTotals:
    """サイト単位の集計値."""

    site_id: str
    global_clicks: int  # 全ユーザーの click_count 合計
    unique_users: int  # レコードを持つユーザー数

    @property
    def site_name(self) -> str:
        """表示用 host[:port]."""
        return site_display_name(self.site_id)


@dataclass
class HeatRankingItem:
    """熱度ランキングの1行（永続化しない）."""

    site_id: str
    site_name: str  # 表示用 host[:port]
    global_clicks: int
    unique_users: int

    def to_dict(self) -> dict:
        """API レスポンス用の dict に変換する."""
        return {
            "siteId": self.site_id,
            "siteName": self.site_name,
            "globalClicks": self.global_clicks,
            "uniqueUsers": self.unique_users,
        }


@dataclass
class Bookmark:
    """ブックマークストアから受け取る最小限の情報."""

    id: str
    url: str | None
    type: str  # "LINK" or "FOLDER"
