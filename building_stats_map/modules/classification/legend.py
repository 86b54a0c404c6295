"""
指標の表示用ヘルパー（凡例・数値フォーマット・フィーチャー情報）
"""
from typing import Dict, Any, List, Optional, Sequence

from building_stats_map.core.models import GeometryFeature, is_number
from .classifier import DEFAULT_PALETTE, NO_DATA_COLOR

INDICATORS = {
    'building_count': {'label': '着工件数', 'unit': '棟'},
    'floor_area_total': {'label': '全建物床面積', 'unit': '㎡'},
    'estimated_amount': {'label': '見込み工事額', 'unit': '円'},
}

NO_DATA_LABEL = 'データなし'


def format_number(num: float) -> str:
    """
    数値をK/M表記に変換

    Examples:
        1234567 -> "1.2M", 3400 -> "3.4K", 999.6 -> "1,000"
    """
    if num >= 1000000:
        return f"{num / 1000000:.1f}M"
    if num >= 1000:
        return f"{num / 1000:.1f}K"
    return f"{round(num):,}"


def build_legend(breaks: Sequence[float], unit: str,
                 palette: Sequence[str] = DEFAULT_PALETTE,
                 no_data_color: str = NO_DATA_COLOR) -> List[Dict[str, str]]:
    """
    凡例項目を生成（上位の階級から順に、最後にデータなし）

    Returns:
        [{'color': '#006837', 'label': '1.2K 棟 以上'}, ...,
         {'color': '#cccccc', 'label': 'データなし'}]
    """
    items = []
    for i in range(len(palette) - 1, -1, -1):
        items.append({
            'color': palette[i],
            'label': f"{format_number(breaks[i])} {unit} 以上",
        })
    items.append({'color': no_data_color, 'label': NO_DATA_LABEL})
    return items


def feature_summary(feature: GeometryFeature, year: Any, month: Any) -> Dict[str, Any]:
    """
    フィーチャーの表示情報を取得

    Returns:
        {'title': '東京都 千代田区', 'period': '2025年9月', 'has_data': True,
         'building_count': 12, 'floor_area_total': 3400.0, 'estimated_amount': 1156000000}
    """
    summary: Dict[str, Any] = {
        'title': f"{feature.prefecture or ''} {feature.city or ''}",
        'period': f"{year}年{month}月",
        'has_data': feature.has_data,
    }
    if feature.has_data:
        amount: Optional[float] = feature.estimated_amount
        summary.update({
            'building_count': feature.building_count,
            'floor_area_total': feature.floor_area_total,
            'estimated_amount': round(amount) if is_number(amount) else None,
        })
    return summary
