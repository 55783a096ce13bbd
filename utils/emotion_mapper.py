"""
Emotion Signal Mapper

Turns emotion observations from the vision pipeline into score adjustments:
- engagement delta: (engagement - 0.5) * 20, added to emotionalEngagement then clamped
- dominant emotion: arg-max of the observation's distribution
- confidence multiplier: fixed per-emotion factor applied to the running confidence

Also estimates an observation from raw facial signals (smile, frown, lip bite,
eye contact) when the host has no emotion classifier, optionally fusing a
classifier distribution (0.7 classifier / 0.3 facial signals).
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

EMOTION_LABELS: Tuple[str, ...] = ("happy", "sad", "angry", "surprised", "nervous", "neutral")

# Multiplier applied to the running confidence score for the dominant emotion
EMOTION_CONFIDENCE_MULTIPLIERS: Mapping[str, float] = MappingProxyType({
    "happy": 1.10,      # positive affect lifts confidence
    "surprised": 1.05,
    "neutral": 1.00,
    "nervous": 0.90,
    "sad": 0.85,
    "angry": 0.95,
})

# Engagement 0.5 is neutral; each 0.1 away moves emotionalEngagement by 2 points
ENGAGEMENT_GAIN = 20.0

# Distribution reported when there is no face to analyze
NO_FACE_DISTRIBUTION: Mapping[str, float] = MappingProxyType({
    "happy": 0.2, "sad": 0.1, "angry": 0.1, "surprised": 0.1, "nervous": 0.2, "neutral": 0.3,
})

# Fusion weights when a classifier distribution is available
CLASSIFIER_WEIGHT = 0.7
FACIAL_SIGNAL_WEIGHT = 0.3


@dataclass(frozen=True)
class EmotionObservation:
    """One reading from the vision/audio pipeline."""
    probabilities: Dict[str, float] = field(default_factory=dict)  # label -> probability
    has_face: bool = False
    engagement: float = 0.5  # 0..1
    confidence: Optional[float] = None  # 0..1, as reported by the pipeline


@dataclass(frozen=True)
class EmotionEffect:
    """Result of mapping one observation. applied=False means no-op."""
    applied: bool = False
    engagement_delta: float = 0.0
    engagement: Optional[float] = None  # previous engagement + delta, clamped 0..100
    dominant_emotion: Optional[str] = None
    confidence: Optional[float] = None
    confidence_multiplier: float = 1.0


NO_EFFECT = EmotionEffect()


@dataclass(frozen=True)
class FacialSignals:
    """Blendshape-style facial cues, each 0..1."""
    has_face: bool = False
    eye_contact: float = 0.5
    smile: float = 0.0
    frown: float = 0.0
    lip_bite: float = 0.0


def _finite(x) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(x)


def confidence_multiplier(emotion: Optional[str]) -> float:
    """Multiplier for a dominant emotion; unknown labels -> 1.0."""
    return EMOTION_CONFIDENCE_MULTIPLIERS.get(emotion or "", 1.0)


def dominant_emotion(probabilities: Optional[Mapping[str, float]]) -> str:
    """Arg-max label (first wins on ties); 'neutral' for an empty distribution."""
    best, best_value = "neutral", -math.inf
    for label, value in (probabilities or {}).items():
        if _finite(value) and value > best_value:
            best, best_value = label, value
    return best


class EmotionSignalMapper:
    """
    Maps an EmotionObservation onto score adjustments.

    Usage:
        mapper = EmotionSignalMapper()
        effect = mapper.apply(observation, previous_engagement=70.0)
        if effect.applied:
            ...
    """

    def apply(self, observation: Optional[EmotionObservation], previous_engagement: float) -> EmotionEffect:
        if observation is None or not getattr(observation, "has_face", False):
            return NO_EFFECT
        engagement = getattr(observation, "engagement", None)
        if not _finite(engagement):
            return NO_EFFECT

        delta = (float(engagement) - 0.5) * ENGAGEMENT_GAIN
        prev = float(previous_engagement) if _finite(previous_engagement) else 0.0
        new_engagement = max(0.0, min(100.0, prev + delta))

        probabilities = getattr(observation, "probabilities", None)
        label = dominant_emotion(probabilities if isinstance(probabilities, Mapping) else None)

        conf = getattr(observation, "confidence", None)
        conf = max(0.0, min(1.0, float(conf))) if _finite(conf) else None

        return EmotionEffect(
            applied=True,
            engagement_delta=delta,
            engagement=new_engagement,
            dominant_emotion=label,
            confidence=conf,
            confidence_multiplier=confidence_multiplier(label),
        )


def _normalize(dist: Dict[str, float]) -> Dict[str, float]:
    total = sum(dist.values())
    if total > 0:
        return {k: v / total for k, v in dist.items()}
    return dist


def heuristic_distribution(signals: FacialSignals) -> Dict[str, float]:
    """Emotion distribution from facial cues alone (normalized when non-zero)."""
    smile, frown, lip_bite = signals.smile, signals.frown, signals.lip_bite
    return _normalize({
        "happy": max(0.0, smile - frown),
        "sad": max(0.0, frown - smile),
        "angry": max(0.0, frown * 0.8),
        "surprised": max(0.0, signals.eye_contact * 0.3),
        "nervous": max(0.0, lip_bite * 0.7),
        "neutral": max(0.0, 1.0 - smile - frown - lip_bite),
    })


def fuse_distributions(signals: FacialSignals, classifier: Mapping[str, float]) -> Dict[str, float]:
    """Blend a classifier distribution with facial cues for happy/sad/nervous, then renormalize."""
    combined = {label: float(classifier.get(label, 0.0)) for label in EMOTION_LABELS}
    combined["happy"] = combined["happy"] * CLASSIFIER_WEIGHT + signals.smile * FACIAL_SIGNAL_WEIGHT
    combined["sad"] = combined["sad"] * CLASSIFIER_WEIGHT + signals.frown * FACIAL_SIGNAL_WEIGHT
    combined["nervous"] = combined["nervous"] * CLASSIFIER_WEIGHT + signals.lip_bite * FACIAL_SIGNAL_WEIGHT
    return _normalize(combined)


def distribution_confidence(dist: Mapping[str, float]) -> float:
    """Margin between the top two probabilities plus 0.1, capped at 1."""
    values = sorted(dist.values(), reverse=True)
    top = values[0] if values else 0.5
    second = values[1] if len(values) > 1 else 0.5
    return min(1.0, max(0.0, top - second) + 0.1)


def estimate_engagement(signals: FacialSignals, dist: Mapping[str, float]) -> float:
    expression = dist.get("happy", 0.0) + dist.get("surprised", 0.0) - dist.get("sad", 0.0) - dist.get("nervous", 0.0)
    return (signals.eye_contact + (expression + 1.0) / 2.0) / 2.0


def estimate_emotions(
    signals: Optional[FacialSignals],
    classifier_probs: Optional[Mapping[str, float]] = None,
) -> EmotionObservation:
    """
    Build an EmotionObservation from facial cues (and an optional classifier distribution).

    No face -> the fixed no-face distribution with has_face=False, which the
    mapper treats as a no-op.
    """
    if signals is None or not signals.has_face:
        return EmotionObservation(
            probabilities=dict(NO_FACE_DISTRIBUTION), has_face=False, engagement=0.5, confidence=0.3,
        )
    if classifier_probs:
        dist = fuse_distributions(signals, classifier_probs)
    else:
        dist = heuristic_distribution(signals)
    return EmotionObservation(
        probabilities=dist,
        has_face=True,
        engagement=estimate_engagement(signals, dist),
        confidence=distribution_confidence(dist),
    )
