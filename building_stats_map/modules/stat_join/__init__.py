"""
統計データ結合モジュール

都道府県別単価で見込み工事額を計算し、行政区域フィーチャーに統計値を付与する。
"""
from .unit_cost import UnitCostResolver
from .join_index import StatJoinIndex, attach

__all__ = ['UnitCostResolver', 'StatJoinIndex', 'attach']
