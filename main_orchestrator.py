#!/usr/bin/env python3
"""
市区町村別建築統計マップ - Main Orchestrator

統計データを行政区域に結合して塗り分け、
指定ポリゴン内の建築計画を集計します
"""

import argparse
import json
import logging
from pathlib import Path
import sys

from building_stats_map.core.config import ProjectConfig
from building_stats_map.core.orchestrator import Orchestrator
from building_stats_map.modules.classification.legend import INDICATORS
from building_stats_map.modules.spatial_analysis.period_filter import describe_period


def setup_logging(log_level=logging.INFO):
    """ログ設定"""
    log_dir = Path('logs')
    log_dir.mkdir(exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_dir / 'building_stats_map.log', encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Municipal building statistics choropleth and area analysis'
    )
    parser.add_argument(
        '--project',
        required=True,
        help='プロジェクト設定ファイルパス (例: config/project.yml)'
    )
    parser.add_argument('--year', help='対象年（例: 2025）')
    parser.add_argument('--month', help='対象月（例: 9）')
    parser.add_argument(
        '--indicator',
        choices=list(INDICATORS.keys()),
        help='塗り分け指標'
    )
    parser.add_argument(
        '--polygon',
        help='集計するポリゴンのJSONファイル（保存形式: id, name, latlngs, createdAt）'
    )
    parser.add_argument('--completion-from', help='完成年月の開始（YYYY/MM）')
    parser.add_argument('--completion-to', help='完成年月の終了（YYYY/MM）')
    parser.add_argument('--start-from', help='着工年月の開始（YYYY/MM）')
    parser.add_argument('--start-to', help='着工年月の終了（YYYY/MM）')
    parser.add_argument(
        '--debug',
        action='store_true',
        help='デバッグモードで実行'
    )
    return parser


def main():
    args = build_parser().parse_args()

    # ログ設定
    log_level = logging.DEBUG if args.debug else logging.INFO
    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("市区町村別建築統計マップ")
    logger.info("=" * 60)
    logger.info(f"Project: {args.project}")

    config = ProjectConfig(args.project)
    orchestrator = Orchestrator(config)
    orchestrator.load(with_projects=bool(args.polygon))

    run = orchestrator.classify(args.year, args.month, args.indicator)
    logger.info(f"Join stats: {run.join_stats.to_dict()}")
    for item in run.legend:
        logger.info(f"  {item['color']}  {item['label']}")

    output_path = config.output_dir / f"classification_{run.year}_{run.month}_{run.indicator}.json"
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump({
            'year': run.year,
            'month': run.month,
            'indicator': run.indicator,
            'breaks': run.breaks,
            'legend': run.legend,
            'join_stats': run.join_stats.to_dict(),
            'features': [
                {
                    'pref_name': s.prefecture,
                    'city_name': s.city,
                    'value': s.value,
                    'fill_color': s.fill_color,
                    'fill_opacity': s.fill_opacity,
                }
                for s in run.styles
            ],
        }, f, ensure_ascii=False, indent=2)
    logger.info(f"Saved classification to {output_path}")

    if args.polygon:
        logger.info(f"完成年月: {describe_period(args.completion_from, args.completion_to)}, "
                    f"着工年月: {describe_period(args.start_from, args.start_to)}")

        polygons = orchestrator.data_manager.load_polygons(Path(args.polygon))
        for number, polygon in enumerate(polygons, start=1):
            if not polygon.is_valid():
                logger.warning(f"Skipped polygon {polygon.name}: fewer than 3 vertices")
                continue

            result = orchestrator.analyze(
                polygon,
                completion_from=args.completion_from,
                completion_to=args.completion_to,
                start_from=args.start_from,
                start_to=args.start_to,
            )
            logger.info(f"[{polygon.name}] {result.count}件, "
                        f"延床面積 {result.total_area:,.1f}㎡ (平均 {result.avg_area:,.1f}㎡)")
            for row in result.breakdown_rows('usage'):
                logger.info(f"  {row['label']}: {row['count']}件 ({row['percentage']}%)")

            # id・名前がなければファイル内の順番
            name = polygon.polygon_id if polygon.polygon_id is not None else (polygon.name or number)
            orchestrator.data_manager.save_analysis(result, str(name))

    logger.info("Completed")


if __name__ == '__main__':
    main()
