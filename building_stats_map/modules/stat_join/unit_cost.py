"""
都道府県別平均工事単価

見込み工事額（居住専用住宅の床面積 × 単価）の計算に使用します。
統計インデックスの構築前に読み込んでおく必要があります。
"""
import logging
from typing import Dict, Any, Iterable, Tuple, Optional

from building_stats_map.converters.name_normalizer import normalize
from building_stats_map.core.models import to_number, is_number

logger = logging.getLogger(__name__)

# 埋め込みデータ（円/㎡）
DEFAULT_UNIT_COSTS = [
    ('千葉県', 280000),
    ('東京都', 340000),
    ('埼玉県', 270000),
]


class UnitCostResolver:
    """都道府県名 -> 単価の参照テーブル"""

    def __init__(self, pairs: Optional[Iterable[Tuple[str, float]]] = None):
        """
        Args:
            pairs: (都道府県名, 単価) のリスト。省略時は埋め込みデータ
        """
        self.table: Dict[str, float] = {}
        if pairs is None:
            pairs = DEFAULT_UNIT_COSTS

        for prefecture, unit_cost in pairs:
            self.table[normalize(prefecture)] = float(unit_cost)

        logger.info(f"Loaded {len(self.table)} prefecture unit costs")

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, Any]],
                  name_column: str = 'pref_name',
                  cost_column: str = 'unit_cost_per_m2') -> 'UnitCostResolver':
        """
        CSV行から生成

        都道府県名が空、または単価が数値でない行は読み飛ばす
        """
        pairs = []
        for row in rows:
            prefecture = row.get(name_column)
            unit_cost = to_number(row.get(cost_column))
            if prefecture and is_number(unit_cost):
                pairs.append((prefecture, unit_cost))
            else:
                logger.debug(f"Skipped unit cost row: {row}")
        return cls(pairs)

    def lookup(self, prefecture: Optional[str]) -> float:
        """
        単価を取得

        未登録の都道府県は0を返す（見込み工事額も0になる）
        """
        return self.table.get(normalize(prefecture), 0)

    def __contains__(self, prefecture: Optional[str]) -> bool:
        return normalize(prefecture) in self.table

    def __len__(self) -> int:
        return len(self.table)
