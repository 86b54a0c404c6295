"""
市区町村別統計インデックス

統計CSVの行を結合キーで索引化し、行政区域フィーチャーに付与します。
統計データと行政区域データの結合はここだけで行います。
"""
import dataclasses
import logging
from typing import Dict, Any, Iterable, List, Optional

from building_stats_map.converters.name_normalizer import build_key, normalize
from building_stats_map.core.models import StatRecord, GeometryFeature, JoinStats, to_number
from .unit_cost import UnitCostResolver

logger = logging.getLogger(__name__)

# 統計CSVの列名
DEFAULT_STAT_COLUMNS = {
    'prefecture': 'pref_name',
    'city': 'city_name',
    'year': 'year',
    'month': 'month',
    'building_count': 'building_count_A_Residence',
    'floor_area_total': 'floor_area_total',
    'residence_area': 'A_Residence_Area',
}

# 同一キーの行が複数ある場合の扱い
DUPLICATE_POLICIES = ('last', 'first', 'error')

KEY_FIELDS = ('prefecture', 'city', 'year', 'month')


class StatJoinIndex:
    """結合キー -> StatRecord の索引"""

    def __init__(self, records: Dict[str, StatRecord], stats: Optional[JoinStats] = None):
        self.records = records
        self.stats = stats or JoinStats()

    @classmethod
    def build(cls, rows: Iterable[Dict[str, Any]], resolver: UnitCostResolver,
              columns: Optional[Dict[str, str]] = None,
              duplicate_policy: str = 'last') -> 'StatJoinIndex':
        """
        統計行から索引を構築

        Args:
            rows: 統計CSVの行（辞書）
            resolver: 都道府県別単価（構築前に読み込み済みであること）
            columns: 列名の対応表（省略時は DEFAULT_STAT_COLUMNS）
            duplicate_policy: 'last'=後勝ち, 'first'=先勝ち, 'error'=ValueError

        Returns:
            StatJoinIndex

        Note:
            都道府県・市区町村・年・月のいずれかが空の行はエラーにせず除外し、
            stats.rows_dropped に件数を記録する
        """
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy: {duplicate_policy}")

        columns = {**DEFAULT_STAT_COLUMNS, **(columns or {})}
        records: Dict[str, StatRecord] = {}
        stats = JoinStats()
        unknown = set()

        for row in rows:
            stats.rows_read += 1
            values = {name: row.get(columns[name]) for name in KEY_FIELDS}

            if any(_is_blank(values[name]) for name in KEY_FIELDS):
                stats.rows_dropped += 1
                logger.debug(f"Dropped row with missing key fields: {values}")
                continue

            prefecture = str(values['prefecture'])
            unit_cost = resolver.lookup(prefecture)
            if prefecture not in resolver:
                stats.unknown_prefectures += 1
                if normalize(prefecture) not in unknown:
                    unknown.add(normalize(prefecture))
                    logger.debug(f"No unit cost for prefecture: {prefecture}")

            residence_area = to_number(row.get(columns['residence_area']))
            # 単価0の場合は床面積に関係なく0
            estimated_amount = residence_area * unit_cost if unit_cost else 0.0

            record = StatRecord(
                prefecture=prefecture,
                city=str(values['city']),
                year=str(values['year']).strip(),
                month=str(values['month']).strip(),
                building_count=to_number(row.get(columns['building_count'])),
                floor_area_total=to_number(row.get(columns['floor_area_total'])),
                residence_area=residence_area,
                estimated_amount=estimated_amount,
            )
            key = build_key(record.prefecture, record.city, record.year, record.month)

            if key in records:
                stats.duplicate_keys += 1
                if duplicate_policy == 'error':
                    raise ValueError(f"Duplicate statistic row for key: {key}")
                if duplicate_policy == 'first':
                    continue

            records[key] = record

        if stats.rows_dropped:
            logger.warning(f"Dropped {stats.rows_dropped} of {stats.rows_read} rows "
                           f"with missing prefecture/city/year/month")
        if unknown:
            logger.warning(f"Unit cost not found for {len(unknown)} prefectures, "
                           f"estimated amount set to 0: {sorted(unknown)}")
        if stats.duplicate_keys:
            logger.warning(f"Found {stats.duplicate_keys} duplicate keys "
                           f"(policy: {duplicate_policy})")

        logger.info(f"Built statistic index: {len(records)} records")
        return cls(records, stats)

    def lookup(self, prefecture: Optional[str], city: Optional[str],
               year: Any, month: Any) -> Optional[StatRecord]:
        """結合キーで統計レコードを取得"""
        return self.records.get(build_key(prefecture, city, year, month))

    def attach(self, features: Iterable[GeometryFeature],
               year: Any, month: Any) -> List[GeometryFeature]:
        """指定年月の統計値を付与した新しいフィーチャーを返す"""
        return attach(features, self, year, month)

    def __len__(self) -> int:
        return len(self.records)


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def attach(features: Iterable[GeometryFeature], index: StatJoinIndex,
           year: Any, month: Any) -> List[GeometryFeature]:
    """
    フィーチャーに統計値を付与

    入力のフィーチャーは変更せず、指標フィールドを設定したコピーを返す。
    一致する統計がないフィーチャーは指標をNone（データなし）にする。

    Args:
        features: 行政区域フィーチャー
        index: 統計インデックス
        year: 対象年
        month: 対象月

    Returns:
        指標付きフィーチャーのリスト（入力と同じ順序）
    """
    enriched = []
    matched = 0

    for feature in features:
        record = None
        if feature.prefecture and feature.city:
            record = index.lookup(feature.prefecture, feature.city, year, month)

        if record:
            matched += 1
            enriched.append(dataclasses.replace(
                feature,
                building_count=record.building_count,
                floor_area_total=record.floor_area_total,
                estimated_amount=record.estimated_amount,
                year=record.year,
                month=record.month,
            ))
        else:
            enriched.append(dataclasses.replace(
                feature,
                building_count=None,
                floor_area_total=None,
                estimated_amount=None,
                year=None,
                month=None,
            ))

    logger.info(f"Attached statistics for {year}/{month}: "
                f"{matched} of {len(enriched)} features matched")
    return enriched
