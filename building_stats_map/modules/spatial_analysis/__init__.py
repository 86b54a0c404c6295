"""
エリア分析モジュール

描画・保存したポリゴン内の建築計画を集計する。
"""
from .geometry import is_inside, parse_floor_area
from .usage_categorizer import UsageCategorizer
from .aggregator import aggregate, points_in_polygon
from .period_filter import filter_by_period, available_months

__all__ = [
    'is_inside',
    'parse_floor_area',
    'UsageCategorizer',
    'aggregate',
    'points_in_polygon',
    'filter_by_period',
    'available_months',
]
