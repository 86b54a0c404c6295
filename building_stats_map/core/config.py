from pathlib import Path
import yaml
from typing import Dict, Any, List, Tuple
from dotenv import load_dotenv
import os

from building_stats_map.modules.classification.classifier import DEFAULT_PALETTE, NO_DATA_COLOR
from building_stats_map.modules.spatial_analysis.usage_categorizer import DEFAULT_USAGE_TAXONOMY
from building_stats_map.modules.stat_join.join_index import DEFAULT_STAT_COLUMNS, DUPLICATE_POLICIES
from building_stats_map.modules.stat_join.unit_cost import DEFAULT_UNIT_COSTS


class ProjectConfig:
    """プロジェクト設定管理"""

    def __init__(self, config_path: str):
        load_dotenv()
        self.config_path = Path(config_path)
        self.project_dir = self.config_path.parent
        self._config = self._load_config()
        self._validate()

    def _load_config(self) -> Dict[str, Any]:
        """YAML設定ファイルを読み込み"""
        with open(self.config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def _validate(self):
        if len(self.palette) != 5:
            raise ValueError(f"colors.scale must have 5 colors, got {len(self.palette)}")
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy: {self.duplicate_policy}")

    @property
    def project_name(self) -> str:
        return self._config.get('project', {}).get('name', 'building_stats_map')

    @property
    def data_dir(self) -> Path:
        env_dir = os.getenv('BSM_DATA_DIR')
        if env_dir:
            return Path(env_dir)
        data_dir = self._config.get('data', {}).get('dir', 'data')
        return self.project_dir / data_dir

    @property
    def output_dir(self) -> Path:
        path = self.project_dir / 'output'
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _data_file(self, key: str, default: str) -> Path:
        return self.data_dir / self._config.get('data', {}).get(key, default)

    @property
    def stats_path(self) -> Path:
        return self._data_file('stats', 'stats.csv')

    @property
    def geojson_path(self) -> Path:
        return self._data_file('geojson', 'municipalities.geojson')

    @property
    def projects_path(self) -> Path:
        return self._data_file('projects', 'construction_projects.json')

    @property
    def palette(self) -> List[str]:
        return list(self._config.get('colors', {}).get('scale', DEFAULT_PALETTE))

    @property
    def no_data_color(self) -> str:
        return self._config.get('colors', {}).get('no_data', NO_DATA_COLOR)

    @property
    def unit_cost_pairs(self) -> List[Tuple[str, float]]:
        """都道府県別単価 [(都道府県名, 単価), ...]"""
        costs = self._config.get('unit_costs')
        if not costs:
            return list(DEFAULT_UNIT_COSTS)
        return [(name, float(cost)) for name, cost in costs.items()]

    @property
    def usage_taxonomy(self) -> List[Tuple[str, Tuple[str, ...]]]:
        """用途分類テーブル（記載順が判定順）"""
        rules = self._config.get('usage_taxonomy')
        if not rules:
            return list(DEFAULT_USAGE_TAXONOMY)
        return [(rule['category'], tuple(rule['keywords'])) for rule in rules]

    @property
    def stats_columns(self) -> Dict[str, str]:
        return {**DEFAULT_STAT_COLUMNS, **self._config.get('stats', {}).get('columns', {})}

    @property
    def duplicate_policy(self) -> str:
        return os.getenv(
            'BSM_DUPLICATE_POLICY',
            self._config.get('stats', {}).get('duplicate_policy', 'last')
        )

    @property
    def default_period(self) -> Tuple[str, str]:
        """初期表示の (年, 月)"""
        period = self._config.get('default_period', {})
        return str(period.get('year', '2025')), str(period.get('month', '9'))

    @property
    def default_indicator(self) -> str:
        return self._config.get('default_indicator', 'building_count')
