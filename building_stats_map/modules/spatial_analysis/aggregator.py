"""
ポリゴン内の建築計画を集計

延床面積の合計・平均、用途別・工事種別の件数を算出します。
"""
import logging
from typing import Callable, Iterable, List, Optional

from building_stats_map.core.models import AnalysisResult, Polygon, ProjectPoint, OTHER_LABEL
from .geometry import is_inside, parse_floor_area
from .usage_categorizer import UsageCategorizer

logger = logging.getLogger(__name__)


def default_area_field(point: ProjectPoint) -> Optional[str]:
    return point.floor_area_text


def points_in_polygon(points: Iterable[ProjectPoint], polygon: Polygon) -> List[ProjectPoint]:
    """ポリゴン内のポイントを抽出（入力順を保持）"""
    return [p for p in points if is_inside(p.lat, p.lng, polygon.vertices)]


def aggregate(points: Iterable[ProjectPoint], polygon: Polygon,
              area_field_extractor: Optional[Callable[[ProjectPoint], object]] = None,
              categorizer: Optional[UsageCategorizer] = None) -> AnalysisResult:
    """
    ポリゴン内のポイントを集計

    Args:
        points: 建築計画ポイント
        polygon: 集計範囲（頂点数の検証は呼び出し側で行う）
        area_field_extractor: ポイントから延床面積テキストを取り出す関数
        categorizer: 用途分類器（省略時はデフォルト分類）

    Returns:
        AnalysisResult。該当なしの場合は件数・面積0、内訳は空
    """
    extractor = area_field_extractor or default_area_field
    categorizer = categorizer or UsageCategorizer()

    matched = points_in_polygon(points, polygon)
    if not matched:
        logger.info(f"No points inside polygon {polygon.name or ''}".rstrip())
        return AnalysisResult()

    total_area = sum(parse_floor_area(extractor(p)) for p in matched)

    usage_breakdown = {}
    construction_type_breakdown = {}
    for p in matched:
        category = categorizer.categorize(p.usage)
        usage_breakdown[category] = usage_breakdown.get(category, 0) + 1

        # 工事種別は表記をそのまま使う
        construction_type = p.construction_type or OTHER_LABEL
        construction_type_breakdown[construction_type] = \
            construction_type_breakdown.get(construction_type, 0) + 1

    count = len(matched)
    logger.info(f"Analyzed {count} points inside polygon: total area {total_area:,.1f}㎡")

    return AnalysisResult(
        count=count,
        total_area=total_area,
        avg_area=total_area / count,
        usage_breakdown=usage_breakdown,
        construction_type_breakdown=construction_type_breakdown,
        matched_points=matched,
    )
