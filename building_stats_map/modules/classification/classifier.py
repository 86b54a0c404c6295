"""
コロプレス階級区分

等間隔5段階で階級の境界値を計算し、値を色に対応付けます。
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from building_stats_map.core.models import GeometryFeature, is_number

logger = logging.getLogger(__name__)

# 5段階の配色（低 -> 高）
DEFAULT_PALETTE = ['#ffffcc', '#c2e699', '#78c679', '#31a354', '#006837']
NO_DATA_COLOR = '#cccccc'

FILL_OPACITY = 0.7
NO_DATA_FILL_OPACITY = 0.1

# 境界値の位置（最小値からの割合）
BREAK_FRACTIONS = (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)


def compute_breaks(features: Iterable[Any], field: str) -> List[float]:
    """
    等間隔の境界値を計算

    Args:
        features: GeometryFeature または辞書のリスト
        field: 指標フィールド名

    Returns:
        6個の境界値 [最小値, ..., 最大値]。
        有効な値がない場合は [0, 0, 0, 0, 0, 0]
    """
    values = []
    for feature in features:
        if isinstance(feature, GeometryFeature):
            value = feature.indicator(field)
        else:
            value = feature.get(field)
        if is_number(value):
            values.append(value)

    if not values:
        logger.debug(f"No numeric values for {field}, returning zero breaks")
        return [0] * len(BREAK_FRACTIONS)

    min_value = min(values)
    max_value = max(values)
    value_range = max_value - min_value

    breaks = [min_value + value_range * f for f in BREAK_FRACTIONS[:-1]]
    breaks.append(max_value)
    return breaks


def bucket_for(value: Any, breaks: Sequence[float], palette_size: int = 5) -> Optional[int]:
    """
    値の階級番号を取得

    境界値と等しい値は、その境界値を下限とする（上側の）階級に入る。

    Returns:
        0 から palette_size - 1 の階級番号。データなしの場合はNone
    """
    if not is_number(value):
        return None

    # 上の境界値から順に判定する
    for i in range(len(breaks) - 1, -1, -1):
        if value >= breaks[i]:
            return min(i, palette_size - 1)
    return 0


def color_for(value: Any, breaks: Sequence[float],
              palette: Sequence[str] = DEFAULT_PALETTE,
              no_data_color: str = NO_DATA_COLOR) -> str:
    """
    値から色を取得

    Args:
        value: 指標値（None・NaNはデータなし）
        breaks: compute_breaks の結果
        palette: 5色の配色
        no_data_color: データなしの色
    """
    bucket = bucket_for(value, breaks, len(palette))
    if bucket is None:
        return no_data_color
    return palette[bucket]


@dataclass(frozen=True)
class FeatureStyle:
    """フィーチャーの塗り分け結果"""
    prefecture: Optional[str]
    city: Optional[str]
    value: Optional[float]
    bucket: Optional[int]
    fill_color: str
    fill_opacity: float


class ChoroplethClassifier:
    """指標ごとの塗り分け"""

    def __init__(self, palette: Optional[Sequence[str]] = None,
                 no_data_color: str = NO_DATA_COLOR):
        self.palette = list(palette or DEFAULT_PALETTE)
        if len(self.palette) != 5:
            raise ValueError(f"Palette must have 5 colors, got {len(self.palette)}")
        self.no_data_color = no_data_color
        logger.info("Initialized ChoroplethClassifier")

    def compute_breaks(self, features: Iterable[Any], indicator: str) -> List[float]:
        return compute_breaks(features, indicator)

    def color_for(self, value: Any, breaks: Sequence[float]) -> str:
        return color_for(value, breaks, self.palette, self.no_data_color)

    def style(self, feature: GeometryFeature, indicator: str,
              breaks: Sequence[float]) -> FeatureStyle:
        value = feature.indicator(indicator)
        bucket = bucket_for(value, breaks, len(self.palette))
        return FeatureStyle(
            prefecture=feature.prefecture,
            city=feature.city,
            value=value,
            bucket=bucket,
            fill_color=self.palette[bucket] if bucket is not None else self.no_data_color,
            fill_opacity=FILL_OPACITY if value is not None else NO_DATA_FILL_OPACITY,
        )

    def classify(self, features: Sequence[GeometryFeature], indicator: str):
        """
        境界値と全フィーチャーの塗り分けを計算

        Returns:
            (breaks, [FeatureStyle, ...])
        """
        breaks = self.compute_breaks(features, indicator)
        styles = [self.style(feature, indicator, breaks) for feature in features]

        no_data = sum(1 for s in styles if s.bucket is None)
        logger.info(f"Classified {len(styles)} features by {indicator} "
                    f"(no data: {no_data})")
        logger.debug(f"Breaks for {indicator}: {breaks}")
        return breaks, styles
