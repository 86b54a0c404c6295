import logging
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from building_stats_map.core.config import ProjectConfig
from building_stats_map.core.data_manager import DataManager
from building_stats_map.core.models import GeometryFeature, JoinStats, Polygon, ProjectPoint, AnalysisResult
from building_stats_map.modules.classification.classifier import ChoroplethClassifier, FeatureStyle
from building_stats_map.modules.classification.legend import INDICATORS, build_legend
from building_stats_map.modules.spatial_analysis.aggregator import aggregate
from building_stats_map.modules.spatial_analysis.period_filter import filter_by_period
from building_stats_map.modules.spatial_analysis.usage_categorizer import UsageCategorizer
from building_stats_map.modules.stat_join.join_index import StatJoinIndex
from building_stats_map.modules.stat_join.unit_cost import UnitCostResolver

logger = logging.getLogger(__name__)


@dataclass
class ClassificationRun:
    """塗り分け1回分の結果"""
    year: str
    month: str
    indicator: str
    features: List[GeometryFeature]
    breaks: List[float]
    styles: List[FeatureStyle]
    legend: List[Dict[str, str]]
    join_stats: JoinStats = field(default_factory=JoinStats)


class Orchestrator:
    """データ読み込み・結合・塗り分け・エリア分析の制御

    各コンポーネントはここで一度だけ生成し、参照を渡して使う。
    """

    def __init__(self, config: ProjectConfig, data_manager: Optional[DataManager] = None):
        self.config = config
        self.data_manager = data_manager or DataManager(config.data_dir, config.output_dir)
        self.classifier = ChoroplethClassifier(config.palette, config.no_data_color)
        self.categorizer = UsageCategorizer(config.usage_taxonomy)

        self.resolver: Optional[UnitCostResolver] = None
        self.index: Optional[StatJoinIndex] = None
        self.features: List[GeometryFeature] = []
        self.projects: List[ProjectPoint] = []

    def load(self, with_projects: bool = True):
        """全データを読み込み（単価 -> 統計 -> 行政区域 -> 建築計画の順）"""
        # 単価は統計インデックスの構築に必要なため先に読み込む
        self.resolver = UnitCostResolver(self.config.unit_cost_pairs)

        rows = self.data_manager.load_stat_rows(self.config.stats_path)
        self.load_index(rows)

        self.features = self.data_manager.load_features(self.config.geojson_path)

        if with_projects and self.config.projects_path.exists():
            self.projects = self.data_manager.load_projects(self.config.projects_path)

        logger.info("All data loaded")

    def load_index(self, rows: List[Dict[str, Any]]) -> StatJoinIndex:
        """統計行から索引を構築"""
        if self.resolver is None:
            self.resolver = UnitCostResolver(self.config.unit_cost_pairs)

        self.index = StatJoinIndex.build(
            rows,
            self.resolver,
            columns=self.config.stats_columns,
            duplicate_policy=self.config.duplicate_policy,
        )
        return self.index

    def classify(self, year: Optional[str] = None, month: Optional[str] = None,
                 indicator: Optional[str] = None) -> ClassificationRun:
        """
        指定年月・指標で塗り分け

        Args:
            year: 対象年（省略時は設定の初期値）
            month: 対象月（省略時は設定の初期値）
            indicator: building_count / floor_area_total / estimated_amount
        """
        if self.index is None:
            raise RuntimeError("Statistic index is not loaded. Call load() first.")

        default_year, default_month = self.config.default_period
        year = str(year or default_year)
        month = str(month or default_month)
        indicator = indicator or self.config.default_indicator
        if indicator not in INDICATORS:
            raise ValueError(f"Unknown indicator: {indicator}")

        features = self.index.attach(self.features, year, month)
        breaks, styles = self.classifier.classify(features, indicator)
        legend = build_legend(
            breaks,
            INDICATORS[indicator]['unit'],
            self.classifier.palette,
            self.classifier.no_data_color,
        )

        logger.info(f"Classification completed: {year}年{month}月 - {INDICATORS[indicator]['label']}")
        return ClassificationRun(
            year=year,
            month=month,
            indicator=indicator,
            features=features,
            breaks=breaks,
            styles=styles,
            legend=legend,
            join_stats=self.index.stats,
        )

    def analyze(self, polygon: Polygon, points: Optional[List[ProjectPoint]] = None,
                completion_from: Optional[str] = None, completion_to: Optional[str] = None,
                start_from: Optional[str] = None, start_to: Optional[str] = None) -> AnalysisResult:
        """
        ポリゴン内の建築計画を集計

        期間を指定した場合は、期間で絞り込んだ建築計画のみを対象にする
        """
        polygon.validate()

        if points is None:
            points = self.projects
        points = filter_by_period(points, completion_from, completion_to, start_from, start_to)

        return aggregate(points, polygon, categorizer=self.categorizer)
