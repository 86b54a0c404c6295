import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Dict, Any, List, Tuple

# (緯度, 経度)
LatLng = Tuple[float, float]

# 指標フィールド名
INDICATOR_FIELDS = ('building_count', 'floor_area_total', 'estimated_amount')

# 工事種別が未設定の場合のラベル
OTHER_LABEL = 'その他'


def to_number(value: Any) -> float:
    """
    統計値を数値に変換

    None・空文字・数値として解釈できない文字列はNaN（データなし）を返す。
    桁区切りのカンマは除去する（例: "1,234" -> 1234.0）
    """
    if value is None or isinstance(value, bool):
        return float('nan')
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip().replace(',', '')
    if not text:
        return float('nan')
    try:
        return float(text)
    except ValueError:
        return float('nan')


def is_number(value: Any) -> bool:
    """有効な数値か（None・NaN・bool・文字列は対象外）"""
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


@dataclass(frozen=True)
class StatRecord:
    """市区町村別統計レコード"""
    prefecture: str
    city: str
    year: str
    month: str
    building_count: float
    floor_area_total: float
    residence_area: float
    estimated_amount: float

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式に変換"""
        return {
            'prefecture': self.prefecture,
            'city': self.city,
            'year': self.year,
            'month': self.month,
            'building_count': self.building_count,
            'floor_area_total': self.floor_area_total,
            'residence_area': self.residence_area,
            'estimated_amount': self.estimated_amount,
        }


@dataclass(frozen=True)
class GeometryFeature:
    """行政区域フィーチャー

    指標フィールドのNoneは「データなし」を表し、0とは区別する。
    """
    prefecture: Optional[str]
    city: Optional[str]
    ring: Tuple[LatLng, ...]
    building_count: Optional[float] = None
    floor_area_total: Optional[float] = None
    estimated_amount: Optional[float] = None
    year: Optional[str] = None
    month: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)

    def indicator(self, name: str) -> Optional[float]:
        """指標値を取得"""
        if name not in INDICATOR_FIELDS:
            raise ValueError(f"Unknown indicator: {name}")
        return getattr(self, name)

    @property
    def has_data(self) -> bool:
        """統計と結合済みか（いずれかの指標が設定されていればTrue）"""
        return any(getattr(self, name) is not None for name in INDICATOR_FIELDS)


@dataclass(frozen=True)
class Polygon:
    """分析用ポリゴン（外周リングのみ、穴なし）

    保存済みポリゴンと描画中のポリゴンは同じ型で扱う。
    """
    vertices: Tuple[LatLng, ...]
    name: Optional[str] = None
    polygon_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def is_valid(self) -> bool:
        return len(self.vertices) >= 3

    def validate(self):
        """頂点数を検証（包含判定の前に呼び出し側で使用する）"""
        if not self.is_valid():
            raise ValueError(
                f"Polygon requires at least 3 vertices, got {len(self.vertices)}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Polygon':
        """
        保存形式の辞書から生成

        Args:
            data: {'id': 1, 'name': 'エリア 1',
                   'latlngs': [{'lat': 35.6, 'lng': 139.7}, ...],
                   'createdAt': '2025-10-01T00:00:00.000Z'}
        """
        vertices = []
        for point in data.get('latlngs', []):
            if isinstance(point, dict):
                vertices.append((float(point['lat']), float(point['lng'])))
            else:
                vertices.append((float(point[0]), float(point[1])))

        created_at = data.get('createdAt') or data.get('created_at')
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace('Z', '+00:00'))

        return cls(
            vertices=tuple(vertices),
            name=data.get('name'),
            polygon_id=data.get('id'),
            created_at=created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """保存形式の辞書に変換"""
        return {
            'id': self.polygon_id,
            'name': self.name,
            'latlngs': [{'lat': lat, 'lng': lng} for lat, lng in self.vertices],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


_YEAR_MONTH_PATTERN = re.compile(r'(\d{4})/(\d{2})')


def extract_year_month(date_text: Optional[str]) -> Optional[str]:
    """
    日付文字列から年月を抽出

    Args:
        date_text: 日付（例: "2025/03/15"）

    Returns:
        年月（例: "2025/03"）。抽出できない場合はNone
    """
    if not date_text or date_text == 'nan':
        return None
    match = _YEAR_MONTH_PATTERN.search(str(date_text))
    if not match:
        return None
    return f"{match.group(1)}/{match.group(2)}"


# ProjectPoint.from_record で参照するキー（先に見つかった方を使用）
PROJECT_FIELD_KEYS = {
    'lat': ('緯度', 'latitude', 'lat'),
    'lng': ('経度', 'longitude', 'lng'),
    'usage': ('主要用途', 'usage'),
    'construction_type': ('工事種別', 'structure', 'construction_type'),
    'floor_area_text': ('延床面積', 'area', 'floor_area'),
    'name': ('件名', 'name'),
    'address': ('住所', 'address'),
    'start_date': ('着工日', 'start_date'),
    'completion_date': ('完成日', 'completion_date'),
}


def _pick(record: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != '':
            return value
    return None


@dataclass(frozen=True)
class ProjectPoint:
    """建築計画ポイント

    用途・工事種別・延床面積は自由記述テキストのまま保持する。
    """
    lat: float
    lng: float
    usage: Optional[str] = None
    construction_type: Optional[str] = None
    floor_area_text: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    start_date: Optional[str] = None
    completion_date: Optional[str] = None

    @property
    def start_month(self) -> Optional[str]:
        return extract_year_month(self.start_date)

    @property
    def completion_month(self) -> Optional[str]:
        return extract_year_month(self.completion_date)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Optional['ProjectPoint']:
        """
        建築計画データのレコードから生成

        座標がない・数値でないレコードはNoneを返す
        """
        lat = to_number(_pick(record, PROJECT_FIELD_KEYS['lat']))
        lng = to_number(_pick(record, PROJECT_FIELD_KEYS['lng']))
        if math.isnan(lat) or math.isnan(lng):
            return None

        def text(key: str) -> Optional[str]:
            value = _pick(record, PROJECT_FIELD_KEYS[key])
            return None if value is None else str(value)

        return cls(
            lat=lat,
            lng=lng,
            usage=text('usage'),
            construction_type=text('construction_type'),
            floor_area_text=text('floor_area_text'),
            name=text('name'),
            address=text('address'),
            start_date=text('start_date'),
            completion_date=text('completion_date'),
        )


@dataclass
class JoinStats:
    """統計インデックス構築時の件数"""
    rows_read: int = 0
    rows_dropped: int = 0
    duplicate_keys: int = 0
    unknown_prefectures: int = 0

    @property
    def rows_indexed(self) -> int:
        return self.rows_read - self.rows_dropped

    def to_dict(self) -> Dict[str, int]:
        return {
            'rows_read': self.rows_read,
            'rows_dropped': self.rows_dropped,
            'duplicate_keys': self.duplicate_keys,
            'unknown_prefectures': self.unknown_prefectures,
        }


def _round_half_up(value: float, digits: str = '0.1') -> float:
    """小数1桁に四捨五入（例: 6.25 -> 6.3）"""
    return float(Decimal(value).quantize(Decimal(digits), rounding=ROUND_HALF_UP))


@dataclass
class AnalysisResult:
    """ポリゴン内集計結果（都度再計算し、保存しない）"""
    count: int = 0
    total_area: float = 0.0
    avg_area: float = 0.0
    usage_breakdown: Dict[str, int] = field(default_factory=dict)
    construction_type_breakdown: Dict[str, int] = field(default_factory=dict)
    matched_points: List[ProjectPoint] = field(default_factory=list)

    def breakdown_rows(self, kind: str = 'usage') -> List[Dict[str, Any]]:
        """
        内訳を件数の降順で取得

        Args:
            kind: 'usage'（用途別）または 'construction_type'（工事種別）

        Returns:
            [{'label': '住宅系', 'count': 3, 'percentage': 60.0}, ...]
        """
        if kind == 'usage':
            breakdown = self.usage_breakdown
        elif kind == 'construction_type':
            breakdown = self.construction_type_breakdown
        else:
            raise ValueError(f"Unknown breakdown kind: {kind}")

        rows = []
        for label, count in sorted(breakdown.items(), key=lambda item: item[1], reverse=True):
            percentage = _round_half_up(count / self.count * 100) if self.count else 0.0
            rows.append({'label': label, 'count': count, 'percentage': percentage})
        return rows

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式に変換（matched_pointsは件名のみ）"""
        return {
            'count': self.count,
            'total_area': self.total_area,
            'avg_area': self.avg_area,
            'usage_breakdown': dict(self.usage_breakdown),
            'construction_type_breakdown': dict(self.construction_type_breakdown),
            'matched_points': [p.name for p in self.matched_points],
        }
