"""
Utilities package for Discussion Coach.

This package contains the scoring engine: semantic analysis, the optional
sequence scorer, emotion mapping, the per-session metrics accumulator and the
end-of-session report aggregator.
"""

from .semantic_analyzer import SemanticAnalyzer, SemanticSignals, Turn
from .sequence_scorer import SequenceScorer, SequenceScores, build_default_scorer
from .emotion_mapper import EmotionSignalMapper, EmotionObservation, FacialSignals, estimate_emotions
from .metrics_accumulator import FinalMetrics, MetricsAccumulator, MetricsSnapshot, ScoreVector, SessionNotActiveError
from .report_aggregator import ReportAggregator, PerformanceReport, AnalysisDetail

__all__ = [
    'SemanticAnalyzer',
    'SemanticSignals',
    'Turn',
    'SequenceScorer',
    'SequenceScores',
    'build_default_scorer',
    'EmotionSignalMapper',
    'EmotionObservation',
    'FacialSignals',
    'estimate_emotions',
    'MetricsAccumulator',
    'MetricsSnapshot',
    'FinalMetrics',
    'ScoreVector',
    'SessionNotActiveError',
    'ReportAggregator',
    'PerformanceReport',
    'AnalysisDetail',
]
