"""クリック統計の例外定義."""


class ClickStatsError(Exception):
    """クリック統計の基底例外."""


class InvalidUrl(ClickStatsError):
    """サイト識別子に正規化できない URL."""

    def __init__(self, url):
        super().__init__(f"無効な URL: {url!r}")
        self.url = url


class UnsupportedBookmark(ClickStatsError):
    """クリック統計の対象外ブックマーク（LINK 以外、または URL なし）."""

    def __init__(self, bookmark_id: str):
        super().__init__(f"クリック統計非対応のブックマーク: {bookmark_id}")
        self.bookmark_id = bookmark_id


class LedgerUnavailable(ClickStatsError):
    """カウントストアが読み書きを完了できない."""
