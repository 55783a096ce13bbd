"""
Report Aggregator

Turns the final score vector and the snapshot history into a PerformanceReport:
overall score, strengths, weaknesses, improvement recommendations and a
per-metric detailed analysis for the five core metrics.

Overall score (0-100) is a two-tier weighted sum:
- Core tier (70%):       confidence .14, fluency .14, originality .105, teamwork .14, reasoning .175
- Supporting tier (30%): normalized wpm .08, normalized fillers .08, pause pattern .05,
                         sentiment .04, participation .05

Sessions where the user never spoke take the non-participation path: metrics
zeroed, score 0, fixed feedback.
"""

import math
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import config
from utils.metrics_accumulator import FinalMetrics, MetricsSnapshot, ScoreVector, SessionNotActiveError
from utils import report_text
from utils.report_text import AnalysisText, CORE_METRICS
from utils.topic_catalog import recommendations_for_topic

CORE_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "confidence": 0.14,
    "fluency": 0.14,
    "originality": 0.105,
    "teamwork": 0.14,
    "reasoning": 0.175,
})
SUPPORTING_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "words_per_minute": 0.08,
    "filler_words": 0.08,
    "pause_pattern": 0.05,
    "sentiment": 0.04,
    "participation": 0.05,
})

# Speaking-rate curve (words per minute)
WPM_HARD_MIN = 60.0
WPM_IDEAL_MIN = 110.0
WPM_IDEAL_MAX = 160.0
WPM_HARD_MAX = 220.0
WPM_FLOOR_SCORE = 20.0
# Filler count at which the filler score reaches 0
FILLER_MAX_BAD = 20.0

# Fields checked for strengths/weaknesses, in report order
ASSESSED_FIELDS: Tuple[str, ...] = ("confidence", "fluency", "originality", "teamwork", "reasoning", "participation")
# Metrics whose recommendation lists are pulled in below the threshold, in report order
RECOMMENDATION_FIELDS: Tuple[str, ...] = (
    "confidence", "fluency", "originality", "teamwork", "reasoning", "emotional_engagement",
)

BAND_EXCELLENT_MIN = 85.0
BAND_GOOD_MIN = 70.0


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def _finite_or_zero(v) -> float:
    try:
        v = float(v)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


def normalize_wpm(wpm: float) -> float:
    """
    Speaking rate -> 0..100. Ideal band 110-160 scores 100; at or beyond
    60/220 scores 20; linear between 20 and 100 in the transition bands.
    """
    wpm = _finite_or_zero(wpm)
    if wpm <= WPM_HARD_MIN or wpm >= WPM_HARD_MAX:
        return WPM_FLOOR_SCORE
    if wpm < WPM_IDEAL_MIN:
        ratio = (wpm - WPM_HARD_MIN) / (WPM_IDEAL_MIN - WPM_HARD_MIN)  # 0..1
        return _clamp(WPM_FLOOR_SCORE + ratio * 80.0, 0.0, 100.0)
    if wpm > WPM_IDEAL_MAX:
        ratio = (WPM_HARD_MAX - wpm) / (WPM_HARD_MAX - WPM_IDEAL_MAX)  # 0..1
        return _clamp(WPM_FLOOR_SCORE + ratio * 80.0, 0.0, 100.0)
    return 100.0


def normalize_filler_words(count: float) -> float:
    """0 fillers -> 100, 20 or more -> 0, linear in between."""
    count = _finite_or_zero(count)
    return 100.0 - _clamp(count / FILLER_MAX_BAD * 100.0, 0.0, 100.0)


def calculate_overall_score(metrics: ScoreVector) -> int:
    """Weighted core + supporting score, rounded half up and clamped to 0..100."""
    core = sum(_clamp(_finite_or_zero(getattr(metrics, name)), 0.0, 100.0) * w for name, w in CORE_WEIGHTS.items())
    supporting = (
        normalize_wpm(metrics.words_per_minute) * SUPPORTING_WEIGHTS["words_per_minute"]
        + normalize_filler_words(metrics.filler_words) * SUPPORTING_WEIGHTS["filler_words"]
        + _clamp(_finite_or_zero(metrics.pause_pattern), 0.0, 100.0) * SUPPORTING_WEIGHTS["pause_pattern"]
        + _clamp(_finite_or_zero(metrics.sentiment), 0.0, 100.0) * SUPPORTING_WEIGHTS["sentiment"]
        + _clamp(_finite_or_zero(metrics.participation), 0.0, 100.0) * SUPPORTING_WEIGHTS["participation"]
    )
    return int(_clamp(math.floor(core + supporting + 0.5), 0, 100))


def analysis_band(score: float) -> str:
    if score >= BAND_EXCELLENT_MIN:
        return report_text.BAND_EXCELLENT
    if score >= BAND_GOOD_MIN:
        return report_text.BAND_GOOD
    return report_text.BAND_DEVELOPING


def _format_number(x: float) -> str:
    x = float(x)
    return str(int(x)) if x.is_integer() else str(round(x, 2))


@dataclass(frozen=True)
class AnalysisDetail:
    """Per-metric narrative feedback."""
    score: float
    feedback: str
    examples: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()

    @classmethod
    def from_text(cls, score: float, text: AnalysisText, **fmt) -> "AnalysisDetail":
        return cls(
            score=score,
            feedback=text.feedback.format(**fmt) if fmt else text.feedback,
            examples=tuple(text.examples),
            improvements=tuple(text.improvements),
        )

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "feedback": self.feedback,
            "examples": list(self.examples),
            "improvements": list(self.improvements),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisDetail":
        return cls(
            score=data["score"],
            feedback=data["feedback"],
            examples=tuple(data.get("examples", ())),
            improvements=tuple(data.get("improvements", ())),
        )


@dataclass(frozen=True)
class PerformanceReport:
    """End-of-session report. Built once, never mutated."""
    session_id: str
    user_id: str
    topic: str
    difficulty: str
    duration: float  # seconds
    final_metrics: FinalMetrics
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    improvements: Tuple[str, ...]
    overall_score: int
    detailed_analysis: Mapping[str, AnalysisDetail] = field(hash=False)
    progress_over_time: Tuple[MetricsSnapshot, ...] = ()
    generated_at: float = field(default_factory=time.time)

    def __post_init__(self):
        # Freeze nested containers so the whole report is read-only
        if isinstance(self.final_metrics, ScoreVector):
            object.__setattr__(self, "final_metrics", FinalMetrics.from_vector(self.final_metrics))
        object.__setattr__(self, "detailed_analysis", MappingProxyType(dict(self.detailed_analysis)))
        object.__setattr__(self, "strengths", tuple(self.strengths))
        object.__setattr__(self, "weaknesses", tuple(self.weaknesses))
        object.__setattr__(self, "improvements", tuple(self.improvements))
        object.__setattr__(self, "progress_over_time", tuple(self.progress_over_time))

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "topic": self.topic,
            "difficulty": self.difficulty,
            "duration": self.duration,
            "final_metrics": self.final_metrics.to_dict(),
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "improvements": list(self.improvements),
            "overall_score": self.overall_score,
            "detailed_analysis": {k: v.to_dict() for k, v in self.detailed_analysis.items()},
            "progress_over_time": [s.to_dict() for s in self.progress_over_time],
            "generated_at": self.generated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PerformanceReport":
        return cls(
            session_id=data["session_id"],
            user_id=data["user_id"],
            topic=data["topic"],
            difficulty=data["difficulty"],
            duration=data["duration"],
            final_metrics=FinalMetrics.from_dict(data["final_metrics"]),
            strengths=tuple(data.get("strengths", ())),
            weaknesses=tuple(data.get("weaknesses", ())),
            improvements=tuple(data.get("improvements", ())),
            overall_score=int(data["overall_score"]),
            detailed_analysis={k: AnalysisDetail.from_dict(v) for k, v in data.get("detailed_analysis", {}).items()},
            progress_over_time=tuple(MetricsSnapshot.from_dict(s) for s in data.get("progress_over_time", ())),
            generated_at=data.get("generated_at", 0.0),
        )


class ReportAggregator:
    """
    Builds PerformanceReports from final metrics and snapshot history.

    Usage:
        aggregator = ReportAggregator()
        report = aggregator.generate_report("s1", "u1", "ai-ethics", "advanced", 600.0,
                                            acc.current_state(), snapshots, user_message_count=7)
    """

    def __init__(self):
        """Initialize thresholds from config."""
        self.thresholds = {
            "strength": config.STRENGTH_THRESHOLD,
            "weakness": config.WEAKNESS_THRESHOLD,
            "recommendation": config.RECOMMENDATION_THRESHOLD,
            "filler_weakness": config.FILLER_WEAKNESS_THRESHOLD,
            "filler_recommendation": config.FILLER_RECOMMENDATION_THRESHOLD,
        }

    def generate_report(
        self,
        session_id: str,
        user_id: str,
        topic: str,
        difficulty: str,
        duration_seconds: float,
        final_vector: Optional[Any],
        snapshot_history: Optional[Iterable[MetricsSnapshot]] = None,
        user_message_count: int = 0,
        generated_at: Optional[float] = None,
    ) -> PerformanceReport:
        """
        Build the report.

        Args:
            final_vector: ScoreVector (or its dict form) at session end
            snapshot_history: Per-message snapshots, kept verbatim in the report
            user_message_count: 0 selects the non-participation path

        Raises:
            SessionNotActiveError: if final_vector is None (no session was started)
        """
        if final_vector is None:
            raise SessionNotActiveError("cannot generate a report without a started session")
        if isinstance(final_vector, dict):
            final_vector = ScoreVector.from_dict(final_vector)
        metrics = final_vector.copy()
        metrics.clamp()
        history = tuple(snapshot_history or ())
        stamp = time.time() if generated_at is None else generated_at
        count = int(user_message_count) if isinstance(user_message_count, (int, float)) else 0

        if count <= 0:
            return PerformanceReport(
                session_id=session_id,
                user_id=user_id,
                topic=topic,
                difficulty=difficulty,
                duration=float(duration_seconds),
                final_metrics=FinalMetrics.from_vector(ScoreVector.zeroed()),
                strengths=(report_text.GENERIC_STRENGTH,),
                weaknesses=(report_text.NO_PARTICIPATION_WEAKNESS,),
                improvements=report_text.NON_PARTICIPATION_IMPROVEMENTS + recommendations_for_topic(topic),
                overall_score=0,
                detailed_analysis=self.non_participation_analysis(),
                progress_over_time=history,
                generated_at=stamp,
            )

        return PerformanceReport(
            session_id=session_id,
            user_id=user_id,
            topic=topic,
            difficulty=difficulty,
            duration=float(duration_seconds),
            final_metrics=FinalMetrics.from_vector(metrics),
            strengths=self.identify_strengths(metrics),
            weaknesses=self.identify_weaknesses(metrics),
            improvements=self.generate_improvements(metrics, topic),
            overall_score=calculate_overall_score(metrics),
            detailed_analysis=self.detailed_analysis(metrics),
            progress_over_time=history,
            generated_at=stamp,
        )

    def identify_strengths(self, metrics: ScoreVector) -> Tuple[str, ...]:
        threshold = self.thresholds["strength"]
        strengths = [report_text.STRENGTH_TEXT[name] for name in ASSESSED_FIELDS if getattr(metrics, name) >= threshold]
        return tuple(strengths) or (report_text.GENERIC_STRENGTH,)

    def identify_weaknesses(self, metrics: ScoreVector) -> Tuple[str, ...]:
        threshold = self.thresholds["weakness"]
        weaknesses = [report_text.WEAKNESS_TEXT[name] for name in ASSESSED_FIELDS if getattr(metrics, name) < threshold]
        if metrics.filler_words > self.thresholds["filler_weakness"]:
            weaknesses.append(report_text.FILLER_WEAKNESS)
        return tuple(weaknesses)

    def generate_improvements(self, metrics: ScoreVector, topic: Optional[str]) -> Tuple[str, ...]:
        """Topic recommendations followed by every triggered metric list (no de-duplication)."""
        threshold = self.thresholds["recommendation"]
        improvements: List[str] = list(recommendations_for_topic(topic))
        for name in RECOMMENDATION_FIELDS:
            if getattr(metrics, name) < threshold:
                improvements.extend(report_text.METRIC_RECOMMENDATIONS[name])
        if metrics.filler_words > self.thresholds["filler_recommendation"]:
            improvements.extend(report_text.METRIC_RECOMMENDATIONS["filler_words"])
        if metrics.participation < threshold:
            improvements.extend(report_text.METRIC_RECOMMENDATIONS["participation"])
        return tuple(improvements)

    def detailed_analysis(self, metrics: ScoreVector) -> Dict[str, AnalysisDetail]:
        analysis = {}
        for name in CORE_METRICS:
            score = getattr(metrics, name)
            text = report_text.ANALYSIS_BANDS[name][analysis_band(score)]
            if name == "fluency":
                analysis[name] = AnalysisDetail.from_text(
                    score, text,
                    wpm=_format_number(metrics.words_per_minute),
                    fillers=_format_number(metrics.filler_words),
                )
            else:
                analysis[name] = AnalysisDetail.from_text(score, text)
        return analysis

    @staticmethod
    def non_participation_analysis() -> Dict[str, AnalysisDetail]:
        return {
            name: AnalysisDetail.from_text(0.0, report_text.NON_PARTICIPATION_ANALYSIS[name])
            for name in CORE_METRICS
        }
