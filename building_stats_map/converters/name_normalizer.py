"""
地名正規化モジュール

都道府県名・市区町村名から結合キーを生成します。

統計CSVと行政区域GeoJSONは別々に作成されているため、
空白（全角スペースを含む）の有無だけで結合が外れないようにします。
大文字小文字の統一やローマ字化は行いません。
"""

import re
from typing import Any, Optional


# 結合キーの区切り文字。空白文字なので正規化後の各要素には現れない
KEY_SEPARATOR = "\t"

# \s は全角スペース(U+3000)にもマッチするが、明示しておく
_WHITESPACE_PATTERN = re.compile(r"[\s　]+")


def normalize(text: Optional[Any]) -> str:
    """
    地名を正規化

    Args:
        text: 地名（例: " 東京都　 千代田区 "）

    Returns:
        空白を全て除去した文字列（例: "東京都千代田区"）。
        None・空文字の場合は空文字
    """
    if text is None:
        return ""

    text = str(text)
    if not text:
        return ""

    return _WHITESPACE_PATTERN.sub("", text.strip())


def build_key(prefecture: Optional[Any], city: Optional[Any],
              year: Any, month: Any) -> str:
    """
    市区町村データの結合キーを生成

    Args:
        prefecture: 都道府県名
        city: 市区町村名
        year: 年（例: "2025"）
        month: 月（例: "9"）

    Returns:
        結合キー（例: "東京都\\t千代田区\\t2025\\t9"）
    """
    parts = [normalize(prefecture), normalize(city), normalize(year), normalize(month)]
    return KEY_SEPARATOR.join(parts)
