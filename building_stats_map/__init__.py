"""
市区町村別建築統計マップ

統計データと行政区域の結合、コロプレス階級区分、ポリゴン内集計
"""

__version__ = '1.0.0'
