"""
完成年月・着工年月による建築計画の絞り込み
"""
import logging
from typing import Iterable, List, Optional

from building_stats_map.core.models import ProjectPoint

logger = logging.getLogger(__name__)

PERIOD_KINDS = ('completion', 'start')


def _month_of(point: ProjectPoint, kind: str) -> Optional[str]:
    if kind == 'completion':
        return point.completion_month
    if kind == 'start':
        return point.start_month
    raise ValueError(f"Unknown period kind: {kind}")


def _within(month: Optional[str], month_from: Optional[str], month_to: Optional[str]) -> bool:
    if not month_from and not month_to:
        return True
    if not month:
        return False
    if month_from and month < month_from:
        return False
    if month_to and month > month_to:
        return False
    return True


def filter_by_period(points: Iterable[ProjectPoint],
                     completion_from: Optional[str] = None,
                     completion_to: Optional[str] = None,
                     start_from: Optional[str] = None,
                     start_to: Optional[str] = None) -> List[ProjectPoint]:
    """
    期間で絞り込み

    Args:
        points: 建築計画ポイント
        completion_from / completion_to: 完成年月の範囲（"YYYY/MM"、両端含む）
        start_from / start_to: 着工年月の範囲（"YYYY/MM"、両端含む）

    Returns:
        条件を満たすポイント。範囲を指定した項目の年月がないポイントは除外
    """
    result = [
        p for p in points
        if _within(p.completion_month, completion_from, completion_to)
        and _within(p.start_month, start_from, start_to)
    ]
    logger.debug(f"Period filter: completion={completion_from}~{completion_to}, "
                 f"start={start_from}~{start_to}: {len(result)} points")
    return result


def available_months(points: Iterable[ProjectPoint], kind: str = 'completion') -> List[str]:
    """データに含まれる年月の一覧（昇順）"""
    months = {_month_of(p, kind) for p in points}
    months.discard(None)
    return sorted(months)


def describe_period(month_from: Optional[str], month_to: Optional[str]) -> str:
    """期間の表示文字列（例: "2025/01～2025/06", "2025/01以降", "すべて"）"""
    if month_from and month_to:
        return f"{month_from}～{month_to}"
    if month_from:
        return f"{month_from}以降"
    if month_to:
        return f"{month_to}以前"
    return 'すべて'
