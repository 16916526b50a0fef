from .change_classifier import ChangeClassifier, classify_change, months_ago
from .interval_analyzer import IntervalAnalyzer, detect_experiment_windows
from .timeline_summary import summarize_timeline, describe_time_span

__all__ = [
    'ChangeClassifier', 'classify_change', 'months_ago',
    'IntervalAnalyzer', 'detect_experiment_windows',
    'summarize_timeline', 'describe_time_span',
]
