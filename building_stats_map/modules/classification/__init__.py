from .classifier import ChoroplethClassifier, FeatureStyle, compute_breaks, color_for, bucket_for
from .legend import INDICATORS, format_number, build_legend, feature_summary

__all__ = [
    'ChoroplethClassifier',
    'FeatureStyle',
    'compute_breaks',
    'color_for',
    'bucket_for',
    'INDICATORS',
    'format_number',
    'build_legend',
    'feature_summary',
]
