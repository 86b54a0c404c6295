from pathlib import Path
import json
import pandas as pd
from typing import List, Optional, Dict, Any
from building_stats_map.core.models import GeometryFeature, Polygon, ProjectPoint, AnalysisResult
import logging

logger = logging.getLogger(__name__)


class DataManager:
    """CSV / GeoJSON / JSON ファイルの読み書き"""

    def __init__(self, data_dir: Path, output_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir)
        self.output_dir = Path(output_dir) if output_dir else self.data_dir / 'output'

    def _resolve(self, path: Optional[Path], default: str) -> Path:
        return Path(path) if path else self.data_dir / default

    def load_csv_rows(self, path: Path) -> List[Dict[str, Any]]:
        """
        CSVを文字列のまま辞書のリストで読み込み

        空セルは空文字になる（数値変換は結合処理で行う）
        """
        df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding='utf-8')
        logger.info(f"Loaded {len(df)} rows from {path}")
        return df.to_dict(orient='records')

    def load_stat_rows(self, path: Optional[Path] = None) -> List[Dict[str, Any]]:
        """市区町村別統計データを読み込み"""
        return self.load_csv_rows(self._resolve(path, 'stats.csv'))

    def load_features(self, path: Optional[Path] = None) -> List[GeometryFeature]:
        """
        行政区域GeoJSONを読み込み

        Polygon / MultiPolygon の最初の外周リングのみ使用する。
        GeoJSONの [経度, 緯度] は (緯度, 経度) に並べ替える
        """
        path = self._resolve(path, 'municipalities.geojson')
        with open(path, 'r', encoding='utf-8') as f:
            geojson = json.load(f)

        features = []
        skipped = 0
        for item in geojson.get('features', []):
            properties = dict(item.get('properties') or {})
            geometry = item.get('geometry') or {}
            coordinates = geometry.get('coordinates') or []

            if geometry.get('type') == 'Polygon' and coordinates:
                outer = coordinates[0]
            elif geometry.get('type') == 'MultiPolygon' and coordinates and coordinates[0]:
                outer = coordinates[0][0]
            else:
                skipped += 1
                continue

            features.append(GeometryFeature(
                prefecture=properties.get('pref_name'),
                city=properties.get('city_name'),
                ring=tuple((float(lat), float(lng)) for lng, lat, *_ in outer),
                properties=properties,
            ))

        if skipped:
            logger.warning(f"Skipped {skipped} features without polygon geometry")
        logger.info(f"Loaded {len(features)} features from {path}")
        return features

    def load_projects(self, path: Optional[Path] = None) -> List[ProjectPoint]:
        """
        建築計画データを読み込み

        {"projects": [...]} 形式とリスト形式の両方に対応。座標のないレコードは除外
        """
        path = self._resolve(path, 'construction_projects.json')
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        records = data.get('projects', []) if isinstance(data, dict) else data

        points = []
        for record in records:
            point = ProjectPoint.from_record(record)
            if point is not None:
                points.append(point)

        if len(points) < len(records):
            logger.warning(f"Skipped {len(records) - len(points)} projects without coordinates")
        logger.info(f"Loaded {len(points)} projects from {path}")
        return points

    def load_polygons(self, path: Path) -> List[Polygon]:
        """保存済みポリゴン（単体またはリスト）を読み込み"""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = [data]
        polygons = [Polygon.from_dict(item) for item in data]
        logger.info(f"Loaded {len(polygons)} polygons from {path}")
        return polygons

    def save_analysis(self, result: AnalysisResult, name: str) -> Path:
        """集計結果をJSONで保存"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / f"analysis_{name}.json"

        payload = result.to_dict()
        payload['usage_rows'] = result.breakdown_rows('usage')
        payload['construction_type_rows'] = result.breakdown_rows('construction_type')

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

        logger.info(f"Saved analysis to {output_path}")
        return output_path
