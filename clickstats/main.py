"""クリック統計のコマンドラインエントリーポイント.

サブコマンド:
  click    USER URL     クリックを1回記録
  stats    USER         ユーザーのサイト別クリック数
  site     URL          サイトの全体クリック数・UU
  ranking  [--limit N]  熱度ランキング
  normalize URL         サイト識別子を表示
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime

from clickstats import api, ledger
from clickstats.config import LOG_DIR
from clickstats.errors import ClickStatsError, InvalidUrl
from clickstats.normalizer import normalize_site, site_display_name


def setup_logging(verbose: bool = False) -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"clickstats_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clickstats",
        description="ブックマークのクリック統計と熱度ランキング",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="DEBUG ログを出力")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("click", help="クリックを1回記録")
    p.add_argument("user_id")
    p.add_argument("url")

    p = sub.add_parser("stats", help="ユーザーのサイト別クリック数")
    p.add_argument("user_id")

    p = sub.add_parser("site", help="サイトの全体クリック数とユニークユーザー数")
    p.add_argument("url")

    p = sub.add_parser("ranking", help="熱度ランキング")
    p.add_argument("--limit", default=None, help="件数 1〜100 (default: 20)")

    p = sub.add_parser("normalize", help="URL をサイト識別子に変換")
    p.add_argument("url")

    return parser


def run(args: argparse.Namespace) -> dict:
    """サブコマンドを実行し、出力する dict を返す."""
    if args.command == "click":
        site_id = normalize_site(args.url)
        if site_id is None:
            raise InvalidUrl(args.url)
        return api.record_site_click(args.user_id, site_id)

    if args.command == "stats":
        return api.stats(args.user_id)

    if args.command == "site":
        site_id = normalize_site(args.url)
        if site_id is None:
            raise InvalidUrl(args.url)
        totals = ledger.get_global_stats(site_id)
        return {
            "siteId": site_id,
            "siteName": totals.site_name,
            "globalClicks": totals.global_clicks,
            "uniqueUsers": totals.unique_users,
        }

    if args.command == "ranking":
        return api.heat_ranking(args.limit)

    site_id = normalize_site(args.url)
    if site_id is None:
        raise InvalidUrl(args.url)
    return {"siteId": site_id, "siteName": site_display_name(site_id)}


def main(argv: list[str] | None = None) -> int:
    """メイン処理."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        result = run(args)
    except InvalidUrl as e:
        logger.warning("%s", e)
        return 2
    except ClickStatsError as e:
        logger.error("処理失敗: %s", e)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
