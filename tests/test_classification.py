"""
コロプレス階級区分・凡例の単体テスト
"""

import bisect
import math

import pytest
from hypothesis import given, strategies as st

from building_stats_map.core.models import GeometryFeature
from building_stats_map.modules.classification.classifier import (
    ChoroplethClassifier,
    compute_breaks,
    color_for,
    bucket_for,
    NO_DATA_COLOR,
    FILL_OPACITY,
    NO_DATA_FILL_OPACITY,
)
from building_stats_map.modules.classification.legend import (
    format_number,
    build_legend,
    feature_summary,
)

PALETTE = ['c0', 'c1', 'c2', 'c3', 'c4']
BREAKS = [10, 18, 26, 34, 42, 50]


def make_feature(value, city='X'):
    return GeometryFeature(prefecture='東京都', city=city, ring=(), building_count=value)


class TestComputeBreaks:
    """境界値計算のテスト"""

    def test_equal_interval(self):
        """等間隔5段階"""
        features = [make_feature(v) for v in [10, 20, 30, 40, 50]]
        assert compute_breaks(features, 'building_count') == pytest.approx(BREAKS)

    def test_empty(self):
        assert compute_breaks([], 'building_count') == [0, 0, 0, 0, 0, 0]

    def test_all_null(self):
        """全てデータなし"""
        features = [make_feature(None), make_feature(float('nan'))]
        assert compute_breaks(features, 'building_count') == [0, 0, 0, 0, 0, 0]

    def test_non_numeric_excluded(self):
        """数値でない値は除外"""
        features = [{'v': 0}, {'v': None}, {'v': '100'}, {'v': 10}, {'v': True}]
        assert compute_breaks(features, 'v') == pytest.approx([0, 2, 4, 6, 8, 10])

    def test_single_value(self):
        """値が1種類なら全て同じ境界値"""
        features = [make_feature(7), make_feature(7)]
        assert compute_breaks(features, 'building_count') == [7, 7, 7, 7, 7, 7]

    def test_order_independent(self):
        features = [make_feature(v) for v in [50, 10, 30]]
        assert compute_breaks(features, 'building_count') == pytest.approx([10, 18, 26, 34, 42, 50])

    def test_unknown_indicator(self):
        with pytest.raises(ValueError):
            compute_breaks([make_feature(1)], 'population')


class TestColorFor:
    """色の対応付けのテスト"""

    def test_value_on_break_goes_to_upper_bucket(self):
        """境界値と等しい値は上側の階級"""
        assert color_for(34, BREAKS, PALETTE) == 'c3'

    def test_each_bucket(self):
        assert color_for(10, BREAKS, PALETTE) == 'c0'
        assert color_for(17.9, BREAKS, PALETTE) == 'c0'
        assert color_for(18, BREAKS, PALETTE) == 'c1'
        assert color_for(30, BREAKS, PALETTE) == 'c2'
        assert color_for(42, BREAKS, PALETTE) == 'c4'

    def test_top_break_shares_top_color(self):
        """最大値と上から2番目の境界値は同じ色"""
        assert color_for(50, BREAKS, PALETTE) == 'c4'
        assert color_for(999, BREAKS, PALETTE) == 'c4'

    def test_below_min(self):
        assert color_for(-5, BREAKS, PALETTE) == 'c0'

    @pytest.mark.parametrize('value', [None, float('nan'), 'abc'])
    def test_no_data(self, value):
        """データなしは専用の色"""
        assert color_for(value, BREAKS, PALETTE, 'gray') == 'gray'
        assert color_for(value, [0] * 6, PALETTE) == NO_DATA_COLOR

    def test_degenerate_breaks(self):
        """境界値が全て0なら0以上は最上位の色"""
        assert color_for(0, [0] * 6, PALETTE) == 'c4'

    @given(value=st.floats(min_value=-100, max_value=200, allow_nan=False))
    def test_property_matches_bisect(self, value):
        """二分探索（bisect_right - 1）と同じ階級になる"""
        expected = min(max(bisect.bisect_right(BREAKS, value) - 1, 0), 4)
        assert bucket_for(value, BREAKS) == expected

    @given(values=st.lists(st.floats(min_value=0, max_value=1e9, allow_nan=False), min_size=1, max_size=30))
    def test_property_breaks_monotonic_and_bounded(self, values):
        """境界値は昇順で、全ての値はいずれかの階級に入る"""
        breaks = compute_breaks([make_feature(v) for v in values], 'building_count')
        assert len(breaks) == 6
        assert all(a <= b for a, b in zip(breaks, breaks[1:]))
        assert breaks[0] == min(values)
        assert breaks[-1] == max(values)
        for v in values:
            assert bucket_for(v, breaks) in range(5)


class TestChoroplethClassifier:
    """塗り分けのテスト"""

    def test_classify(self):
        classifier = ChoroplethClassifier(PALETTE, 'gray')
        features = [make_feature(v, city=str(i)) for i, v in enumerate([10, 20, 30, 40, 50, None])]
        breaks, styles = classifier.classify(features, 'building_count')

        assert breaks == pytest.approx(BREAKS)
        assert [s.fill_color for s in styles] == ['c0', 'c1', 'c2', 'c3', 'c4', 'gray']
        assert styles[0].fill_opacity == FILL_OPACITY
        assert styles[5].fill_opacity == NO_DATA_FILL_OPACITY
        assert styles[5].bucket is None

    def test_palette_size(self):
        with pytest.raises(ValueError):
            ChoroplethClassifier(['a', 'b'])


class TestLegend:
    """凡例・表示用ヘルパーのテスト"""

    def test_format_number(self):
        assert format_number(1234567) == '1.2M'
        assert format_number(3400) == '3.4K'
        assert format_number(12) == '12'
        assert format_number(0) == '0'

    def test_build_legend(self):
        legend = build_legend(BREAKS, '棟', PALETTE, 'gray')
        assert len(legend) == 6
        assert legend[0] == {'color': 'c4', 'label': '42 棟 以上'}
        assert legend[4] == {'color': 'c0', 'label': '10 棟 以上'}
        assert legend[5] == {'color': 'gray', 'label': 'データなし'}

    def test_feature_summary(self):
        feature = GeometryFeature(prefecture='東京都', city='港区', ring=(),
                                  building_count=3, floor_area_total=100.0,
                                  estimated_amount=1234.6)
        summary = feature_summary(feature, '2025', '9')
        assert summary['title'] == '東京都 港区'
        assert summary['period'] == '2025年9月'
        assert summary['has_data'] is True
        assert summary['estimated_amount'] == 1235

    def test_feature_summary_no_data(self):
        summary = feature_summary(make_feature(None), '2025', '9')
        assert summary['has_data'] is False
        assert 'building_count' not in summary

    def test_feature_summary_without_building_count(self):
        """棟数がなくても床面積があればデータありとして表示"""
        feature = GeometryFeature(prefecture='東京都', city='港区', ring=(),
                                  floor_area_total=100.0, estimated_amount=0.0)
        summary = feature_summary(feature, '2025', '9')
        assert summary['has_data'] is True
        assert summary['building_count'] is None
        assert summary['floor_area_total'] == 100.0

    def test_feature_summary_nan_amount(self):
        feature = GeometryFeature(prefecture='東京都', city='港区', ring=(),
                                  building_count=3, estimated_amount=math.nan)
        assert feature_summary(feature, '2025', '9')['estimated_amount'] is None
