"""
共通フィクスチャ
"""

import pytest

from building_stats_map.core.models import GeometryFeature, Polygon, ProjectPoint
from building_stats_map.modules.stat_join.unit_cost import UnitCostResolver


SQUARE = ((0.0, 0.0), (0.0, 10.0), (10.0, 10.0), (10.0, 0.0))


@pytest.fixture
def resolver():
    return UnitCostResolver([('東京都', 340000), ('千葉県', 280000)])


@pytest.fixture
def stat_rows():
    return [
        {
            'pref_name': '東京都', 'city_name': '千代田区', 'year': '2025', 'month': '9',
            'building_count_A_Residence': '12', 'floor_area_total': '3400.5',
            'A_Residence_Area': '1000',
        },
        {
            'pref_name': '東京都', 'city_name': '港区', 'year': '2025', 'month': '9',
            'building_count_A_Residence': '30', 'floor_area_total': '8000',
            'A_Residence_Area': '2000',
        },
        {
            'pref_name': '千葉県', 'city_name': '千葉市中央区', 'year': '2025', 'month': '8',
            'building_count_A_Residence': '5', 'floor_area_total': '900',
            'A_Residence_Area': '100',
        },
    ]


@pytest.fixture
def features():
    return [
        GeometryFeature(prefecture='東京都', city='千代田区', ring=SQUARE),
        GeometryFeature(prefecture='東京都 ', city='港　区', ring=SQUARE),
        GeometryFeature(prefecture='東京都', city='新宿区', ring=SQUARE),
    ]


@pytest.fixture
def square_polygon():
    return Polygon(vertices=SQUARE, name='テストエリア', polygon_id=1)


@pytest.fixture
def projects():
    return [
        ProjectPoint(lat=5.0, lng=5.0, usage='共同住宅', construction_type='新築',
                     floor_area_text='1,200.5 ㎡', name='A',
                     start_date='2025/01/10', completion_date='2025/06/30'),
        ProjectPoint(lat=2.0, lng=3.0, usage='店舗', construction_type='新築',
                     floor_area_text='300㎡', name='B',
                     start_date='2025/02/01', completion_date='2025/09/15'),
        ProjectPoint(lat=8.0, lng=1.0, usage='事務所', construction_type=None,
                     floor_area_text='未定', name='C',
                     start_date='nan', completion_date='2025/12/01'),
        ProjectPoint(lat=15.0, lng=15.0, usage='工場', construction_type='増築',
                     floor_area_text='5000', name='D',
                     start_date='2025/03/01', completion_date='2025/10/01'),
    ]
