"""
Metrics Accumulator

The per-session running score vector. Each user message applies, in order:
  1. word and filler counts (filler count is cumulative and never decreases)
  2. heuristic deltas (confident long message, long message, causal connective)
  3. words-per-minute over the whole session, clamped to a plausible range
  4. small uniform jitter from an injectable, seedable generator
  5. optional sequence-model blend (exponential smoothing, alpha 0.35)
  6. semantic adjustments from the conversation history
  7. clamp of every bounded field to 0..100
and returns an immutable MetricsSnapshot. Emotion observations update the live
vector out of band and never emit a snapshot.

One accumulator per session; nothing here is shared between instances.
"""

import logging
import math
import re
import time
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence

import numpy as np

import config
from utils.emotion_mapper import EmotionEffect, EmotionObservation, EmotionSignalMapper
from utils.semantic_analyzer import SemanticAnalyzer, SemanticSignals
from utils.sequence_scorer import SequenceScorer

logger = logging.getLogger(__name__)

FILLER_PATTERN = re.compile(
    r"\b(uh+|um+|erm+|like|you know|actually|basically|literally|sort of|kind of|I mean)\b",
    re.IGNORECASE,
)
# Causal connectives that earn a reasoning bump (case-sensitive substring)
REASONING_MARKERS = ("because", "therefore")

CONFIDENT_MESSAGE_CHARS = 50
FLUENT_MESSAGE_WORDS = 20
CONFIDENCE_BONUS = 2.0
FLUENCY_BONUS = 1.0
REASONING_BONUS = 1.0

# Semantic adjustment gains
ORIGINALITY_GAIN = 10.0
COHERENCE_GAIN = 8.0
REPETITION_GAIN = 5.0
REPETITION_THRESHOLD = 0.2

BOUNDED_FIELDS = (
    "confidence", "fluency", "originality", "teamwork", "reasoning",
    "emotional_engagement", "pause_pattern", "sentiment", "participation",
)
JITTERED_FIELDS = ("confidence", "fluency", "originality", "teamwork", "reasoning")


class SessionNotActiveError(RuntimeError):
    """Raised when a session operation is called before the session was started."""


class AccumulatorState(Enum):
    IDLE = "IDLE"      # no session
    ACTIVE = "ACTIVE"  # session running


@dataclass
class ScoreVector:
    """Running performance scores. Bounded fields are 0..100."""
    confidence: float = 75.0
    fluency: float = 70.0
    originality: float = 65.0
    teamwork: float = 80.0
    reasoning: float = 72.0
    words_per_minute: float = 0.0  # clamped 30-230 once time has elapsed
    filler_words: int = 0  # cumulative for the session
    pause_pattern: float = 8.0
    sentiment: float = 75.0
    participation: float = 85.0
    emotional_engagement: float = 70.0
    dominant_emotion: str = "neutral"
    emotion_confidence: float = 0.5  # 0..1

    def copy(self) -> "ScoreVector":
        return replace(self)

    def clamp(self) -> None:
        for name in BOUNDED_FIELDS:
            value = getattr(self, name)
            if not math.isfinite(value):
                value = 0.0
            setattr(self, name, max(0.0, min(100.0, float(value))))
        self.emotion_confidence = max(0.0, min(1.0, float(self.emotion_confidence)))
        self.words_per_minute = max(0.0, float(self.words_per_minute))
        self.filler_words = max(0, int(self.filler_words))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ScoreVector":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    @classmethod
    def zeroed(cls) -> "ScoreVector":
        """All-zero vector used for sessions without participation."""
        return cls(
            confidence=0.0, fluency=0.0, originality=0.0, teamwork=0.0, reasoning=0.0,
            words_per_minute=0.0, filler_words=0, pause_pattern=0.0, sentiment=0.0,
            participation=0.0, emotional_engagement=0.0, dominant_emotion="neutral",
            emotion_confidence=0.0,
        )


@dataclass(frozen=True)
class FinalMetrics:
    """Immutable score vector as frozen into a report."""
    confidence: float
    fluency: float
    originality: float
    teamwork: float
    reasoning: float
    words_per_minute: float
    filler_words: int
    pause_pattern: float
    sentiment: float
    participation: float
    emotional_engagement: float
    dominant_emotion: str
    emotion_confidence: float

    @classmethod
    def from_vector(cls, vector: ScoreVector) -> "FinalMetrics":
        return cls(**asdict(vector))

    def to_score_vector(self) -> ScoreVector:
        return ScoreVector(**asdict(self))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "FinalMetrics":
        return cls.from_vector(ScoreVector.from_dict(data))


@dataclass(frozen=True)
class MetricsSnapshot:
    """Immutable copy of the score vector at one user message."""
    confidence: float
    fluency: float
    originality: float
    teamwork: float
    reasoning: float
    words_per_minute: float
    filler_words: int
    pause_pattern: float
    sentiment: float
    participation: float
    emotional_engagement: float
    dominant_emotion: str
    emotion_confidence: float
    timestamp: float  # Unix seconds
    message_count: int  # cumulative, as supplied by the host
    total_duration: float  # elapsed session seconds

    @classmethod
    def capture(cls, vector: ScoreVector, timestamp: float, message_count: int, total_duration: float) -> "MetricsSnapshot":
        return cls(
            **asdict(vector),
            timestamp=float(timestamp),
            message_count=int(message_count),
            total_duration=float(total_duration),
        )

    def to_score_vector(self) -> ScoreVector:
        names = {f.name for f in fields(ScoreVector)}
        return ScoreVector(**{k: v for k, v in asdict(self).items() if k in names})

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "MetricsSnapshot":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


def count_words(text: str) -> int:
    return len(text.split())


def count_fillers(text: str) -> int:
    return len(FILLER_PATTERN.findall(text))


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


class MetricsAccumulator:
    """
    Stateful per-session scoring engine.

    Collaborators and the jitter source are injected; rng needs a random()
    method returning floats in [0, 1) (numpy Generator or random.Random).

    Usage:
        acc = MetricsAccumulator(rng=np.random.default_rng(7))
        snap = acc.record_user_message("I agree because ...", elapsed_seconds=42.0,
                                       message_count=3, history=turns)
        acc.record_emotion_observation(observation)
        state = acc.current_state()
    """

    def __init__(
        self,
        sequence_scorer: Optional[SequenceScorer] = None,
        semantic_analyzer: Optional[SemanticAnalyzer] = None,
        emotion_mapper: Optional[EmotionSignalMapper] = None,
        rng: Any = None,
        seed: Optional[int] = None,
        blend_alpha: Optional[float] = None,
        start: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            sequence_scorer: Optional scorer; skipped unless is_ready()
            semantic_analyzer: Defaults to SemanticAnalyzer()
            emotion_mapper: Defaults to EmotionSignalMapper()
            rng: Jitter source; defaults to numpy default_rng(seed or JITTER_SEED)
            seed: Seed for the default generator
            blend_alpha: Smoothing factor for the model blend (default BLEND_ALPHA)
            start: If False the accumulator starts Idle until reset() is called
            clock: Timestamp source for snapshots
        """
        self.sequence_scorer = sequence_scorer
        self.semantic_analyzer = semantic_analyzer or SemanticAnalyzer()
        self.emotion_mapper = emotion_mapper or EmotionSignalMapper()
        if rng is None:
            rng = np.random.default_rng(seed if seed is not None else config.JITTER_SEED)
        self.rng = rng
        self.blend_alpha = float(config.BLEND_ALPHA if blend_alpha is None else blend_alpha)
        self._clock = clock
        self._jitter_amplitudes = {
            "confidence": config.JITTER_AMPLITUDE,
            "fluency": config.JITTER_AMPLITUDE,
            "originality": config.ORIGINALITY_JITTER_AMPLITUDE,
            "teamwork": config.JITTER_AMPLITUDE,
            "reasoning": config.JITTER_AMPLITUDE,
        }
        self.state = AccumulatorState.IDLE
        self._vector = ScoreVector()
        self._total_words = 0
        self._utterances: List[str] = []
        if start:
            self.reset()

    @property
    def is_active(self) -> bool:
        return self.state is AccumulatorState.ACTIVE

    @property
    def total_words(self) -> int:
        return self._total_words

    @property
    def messages_recorded(self) -> int:
        return len(self._utterances)

    def reset(self) -> None:
        """Start a fresh session with seed values."""
        self._vector = ScoreVector()
        self._total_words = 0
        self._utterances = []
        self.state = AccumulatorState.ACTIVE

    def current_state(self) -> ScoreVector:
        """Read-only copy of the live vector."""
        return self._vector.copy()

    def _require_active(self) -> None:
        if not self.is_active:
            raise SessionNotActiveError("accumulator is idle; call reset() to start a session")

    def record_user_message(
        self,
        text: str,
        is_voice: bool = False,
        elapsed_seconds: float = 0.0,
        message_count: Optional[int] = None,
        history: Optional[Iterable] = None,
    ) -> MetricsSnapshot:
        """
        Apply one user utterance and return the resulting snapshot.

        Args:
            text: The utterance; non-strings are treated as empty
            is_voice: Whether the text came from speech recognition
            elapsed_seconds: Session time so far (for words per minute)
            message_count: Cumulative message count to tag the snapshot with
                (defaults to the number of user messages recorded)
            history: Prior conversation turns for semantic analysis

        Raises:
            SessionNotActiveError: if the accumulator is idle
        """
        self._require_active()
        text = text if isinstance(text, str) else ""
        elapsed = float(elapsed_seconds) if isinstance(elapsed_seconds, (int, float)) and math.isfinite(elapsed_seconds) else 0.0
        has_content = bool(text.strip())
        v = self._vector

        words = count_words(text)
        fillers = count_fillers(text)
        v.filler_words += fillers

        if len(text) > CONFIDENT_MESSAGE_CHARS and fillers == 0:
            v.confidence += CONFIDENCE_BONUS
        if words > FLUENT_MESSAGE_WORDS:
            v.fluency += FLUENCY_BONUS
        if any(marker in text for marker in REASONING_MARKERS):
            v.reasoning += REASONING_BONUS

        self._total_words += words
        if elapsed > 0:
            wpm = _round_half_up(self._total_words / elapsed * 60.0)
            v.words_per_minute = float(max(config.WPM_MIN, min(config.WPM_MAX, wpm)))

        self._apply_jitter()

        if has_content:
            self._utterances.append(text)
            self._blend_sequence_scores()
            self._apply_semantics(self.semantic_analyzer.analyze(history or [], text))

        v.clamp()
        count = self.messages_recorded if message_count is None else message_count
        logger.debug("Recorded user message (voice=%s, words=%d, fillers=%d)", is_voice, words, fillers)
        return MetricsSnapshot.capture(v, self._clock(), count, elapsed)

    def _apply_jitter(self) -> None:
        v = self._vector
        for name in JITTERED_FIELDS:
            amplitude = self._jitter_amplitudes[name]
            value = getattr(v, name) + (float(self.rng.random()) - 0.5) * amplitude
            setattr(v, name, max(0.0, min(100.0, value)))

    def _blend_sequence_scores(self) -> None:
        scorer = self.sequence_scorer
        if scorer is None:
            return
        try:
            if not scorer.is_ready():
                return
            scores = scorer.score(self._recent_utterances(scorer))
        except Exception as e:
            logger.warning("Sequence scorer raised, skipping blend: %s", e)
            return
        if scores is None:
            return
        a = self.blend_alpha
        v = self._vector
        v.confidence = (1 - a) * v.confidence + a * scores.confidence
        v.fluency = (1 - a) * v.fluency + a * scores.fluency

    def _recent_utterances(self, scorer: SequenceScorer) -> Sequence[str]:
        limit = getattr(scorer, "max_time_steps", None) or len(self._utterances)
        return self._utterances[-limit:]

    def _apply_semantics(self, signals: SemanticSignals) -> None:
        v = self._vector
        v.originality += (signals.originality - 0.5) * ORIGINALITY_GAIN
        v.reasoning += (signals.coherence - 0.5) * COHERENCE_GAIN
        if signals.repetition > REPETITION_THRESHOLD:
            v.fluency -= signals.repetition * REPETITION_GAIN

    def record_emotion_observation(self, observation: Optional[EmotionObservation]) -> EmotionEffect:
        """
        Apply an emotion observation to the live vector (no snapshot).

        Raises:
            SessionNotActiveError: if the accumulator is idle
        """
        self._require_active()
        v = self._vector
        effect = self.emotion_mapper.apply(observation, v.emotional_engagement)
        if not effect.applied:
            return effect
        v.emotional_engagement = effect.engagement
        v.dominant_emotion = effect.dominant_emotion
        if effect.confidence is not None:
            v.emotion_confidence = effect.confidence
        v.confidence = v.confidence * effect.confidence_multiplier
        v.clamp()
        return effect
