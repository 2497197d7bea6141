"""設定モジュール: 環境変数と定数."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- Supabase ---
# supabase バックエンドを生成する時点で必須になる
SUPABASE_URL: str = os.environ.get("SUPABASE_URL", "")
SUPABASE_SECRET_KEY: str = os.environ.get("SUPABASE_SECRET_KEY", "")

CLICKSTATS_SCHEMA: str = os.environ.get("CLICKSTATS_SCHEMA", "start_page")
CLICKSTATS_TABLE: str = os.environ.get("CLICKSTATS_TABLE", "click_stats")

# --- ストア ---
# "supabase" or "memory"
CLICKSTATS_BACKEND: str = os.environ.get("CLICKSTATS_BACKEND", "supabase")

# --- 熱度ランキング ---
HEAT_RANKING_DEFAULT_LIMIT = 20
HEAT_RANKING_MAX_LIMIT = 100

# --- ブックマーク ---
LINK_BOOKMARK_TYPE = "LINK"

# --- URL ---
DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}

# --- ログ ---
LOG_DIR = Path(os.environ.get("CLICKSTATS_LOG_DIR", _PROJECT_ROOT / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
