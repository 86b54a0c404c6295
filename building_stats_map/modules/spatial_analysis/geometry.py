"""
Point-in-Polygon判定と延床面積の数値化

緯度・経度を平面座標としてそのまま扱います（投影・楕円体補正なし）。
"""
import re
from typing import Any, Sequence

from building_stats_map.core.models import LatLng

_NON_NUMERIC_PATTERN = re.compile(r'[^0-9.]')
_LEADING_FLOAT_PATTERN = re.compile(r'[0-9]+(?:\.[0-9]*)?|\.[0-9]+')


def is_inside(lat: float, lng: float, ring: Sequence[LatLng]) -> bool:
    """
    点がポリゴン内にあるか（Ray Casting / 偶奇規則）

    Args:
        lat: 緯度
        lng: 経度
        ring: 外周リングの頂点 [(lat, lng), ...]

    Returns:
        内側ならTrue。頂点が3未満のリングは判定対象外で常にFalse。
        辺上・頂点上の点の結果は不定
    """
    n = len(ring)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        lat_i, lng_i = ring[i]
        lat_j, lng_j = ring[j]

        # 経度方向に辺をまたぎ、交点の緯度が点より大きい場合に交差
        if (lng_i > lng) != (lng_j > lng):
            crossing_lat = (lat_j - lat_i) * (lng - lng_i) / (lng_j - lng_i) + lat_i
            if lat < crossing_lat:
                inside = not inside
        j = i

    return inside


def parse_floor_area(text: Any) -> float:
    """
    延床面積の文字列を数値に変換

    数字と小数点以外を除去してから先頭の数値部分を読む。
    読めない場合は0（例: "1,234.56 ㎡" -> 1234.56, "未定" -> 0）
    数値が渡された場合も文字列にしてから同じ規則で読む（-5 -> 5.0, inf -> 0）
    """
    if text is None:
        return 0.0

    cleaned = _NON_NUMERIC_PATTERN.sub('', str(text))
    match = _LEADING_FLOAT_PATTERN.match(cleaned)
    if not match:
        return 0.0
    return float(match.group(0))
