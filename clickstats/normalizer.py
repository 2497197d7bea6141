"""サイト正規化モジュール.

任意の URL 文字列をクリック集計用のサイト識別子 scheme://host[:port] に変換する。
  - サブドメイン・非デフォルトポートは区別する
  - パス・クエリ・フラグメントは捨てる
"""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

import idna

from clickstats.config import DEFAULT_PORTS

# "scheme://" 形式の接頭辞（ftp:// 等も含む）
_SCHEME_PREFIX = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
# パーセントデコード後のホストに現れてはならない文字
_FORBIDDEN_HOST_CHARS = re.compile(r"[\s<>\\^|%\"`{}/?#@\[\]]")


def normalize_site(url) -> str | None:
    """URL からサイト識別子を取り出す.

    Examples:
        normalize_site("https://www.baidu.com/search?q=test") -> "https://www.baidu.com"
        normalize_site("http://localhost:3000/api") -> "http://localhost:3000"
        normalize_site("baidu.com") -> "https://baidu.com"

    Returns:
        サイト識別子。文字列でない・空・解析不能・http(s) 以外は None。
    """
    if not isinstance(url, str):
        return None

    trimmed = url.strip()
    if not trimmed:
        return None

    # スキーム無しのホスト名には https:// を補う
    if not _SCHEME_PREFIX.match(trimmed):
        trimmed = "https://" + trimmed

    parsed = _split(trimmed)
    if parsed is None:
        return None

    scheme, host, port = parsed
    if scheme not in DEFAULT_PORTS or not host:
        return None

    return f"{scheme}://{_host_port(scheme, host, port)}"


def site_id_from_url(bookmark_url) -> str | None:
    """ブックマーク URL からサイト識別子を得る（normalize_site の別名）."""
    return normalize_site(bookmark_url)


def site_display_name(site_id: str) -> str:
    """サイト識別子から表示名 host[:port] を得る.

    解析できない場合は入力をそのまま返す。
    """
    parsed = _split(site_id) if isinstance(site_id, str) else None
    if parsed is None or not parsed[1]:
        return site_id

    scheme, host, port = parsed
    return _host_port(scheme, host, port)


def _split(url: str) -> tuple[str, str, int | None] | None:
    """(scheme, host, port) に分解する. 失敗時は None.

    ブラウザの URL 解析に合わせて "\\" は "/" として扱い、ホストはパーセントデコード後に
    非 ASCII なら IDNA (punycode) に変換する。
    """
    try:
        parts = urlsplit(url.replace("\\", "/"))
        port = parts.port
    except ValueError:
        # 不正な IPv6 表記・数値でないポート・範囲外ポート
        return None

    raw_host = parts.hostname or ""
    host = unquote(raw_host).lower()
    if _FORBIDDEN_HOST_CHARS.search(host):
        return None
    if ":" in host and ":" not in raw_host:
        # %3A 由来のコロン
        return None

    if not host.isascii():
        try:
            host = idna.encode(host, uts46=True).decode("ascii")
        except idna.IDNAError:
            return None
    return parts.scheme.lower(), host, port


def _host_port(scheme: str, host: str, port: int | None) -> str:
    """host と非デフォルトポートを連結する."""
    if ":" in host:
        # IPv6 リテラル
        host = f"[{host}]"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        return f"{host}:{port}"
    return host
