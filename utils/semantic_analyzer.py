"""
Semantic Analyzer

Lightweight bag-of-words similarity between the user's latest utterance and the
recent conversation. No external models: text is lower-cased, stripped of
non-alphanumerics and counted; cosine similarity of the counts approximates
semantic overlap.

Signals (each 0..1):
- originality: 1 - max similarity to the last 3 agent turns (new content vs. what agents said)
- coherence:   1 - |similarity to last user turn - 0.6| (peak when building on the previous turn)
- repetition:  max(0, similarity to last user turn - 0.7) (near-duplicate follow-ups)
"""

import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

SPEAKER_USER = "user"
SPEAKER_AGENT = "agent"

# Number of most recent agent turns compared for originality
AGENT_WINDOW = 3
# Similarity to the last user turn where coherence peaks
COHERENCE_PEAK = 0.6
# Similarity above this counts as repetition
REPETITION_FLOOR = 0.7
# Used when there is no earlier user turn to compare against
NO_PRIOR_USER_SIMILARITY = 0.5

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


@dataclass(frozen=True)
class Turn:
    """One conversation turn as supplied by the host."""
    speaker: str  # "user" | "agent"
    text: str
    timestamp: float = 0.0  # Unix seconds


@dataclass(frozen=True)
class SemanticSignals:
    """Per-call semantic signals, each in [0, 1]."""
    originality: float = 0.0
    coherence: float = 0.0
    repetition: float = 0.0


def tokenize(text: str) -> List[str]:
    """Lower-case, replace non-alphanumerics with spaces, split on whitespace."""
    if not text:
        return []
    return _NON_ALNUM.sub(" ", text.lower()).split()


def bag_of_words(tokens: Iterable[str]) -> Dict[str, int]:
    return dict(Counter(tokens))


def cosine_similarity(a: Dict[str, int], b: Dict[str, int]) -> float:
    """Cosine similarity of two token-count bags; 0 when either is empty."""
    a_mag = math.sqrt(sum(v * v for v in a.values()))
    b_mag = math.sqrt(sum(v * v for v in b.values()))
    if a_mag == 0 or b_mag == 0:
        return 0.0
    dot = sum(va * b.get(k, 0) for k, va in a.items())
    return dot / (a_mag * b_mag)


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def _turn_fields(turn) -> Optional[tuple]:
    """(speaker, text) for a Turn or a {"speaker", "text"} dict; None when malformed."""
    if turn is None:
        return None
    if isinstance(turn, dict):
        speaker, text = turn.get("speaker"), turn.get("text")
    else:
        speaker, text = getattr(turn, "speaker", None), getattr(turn, "text", None)
    if not isinstance(text, str):
        return None
    return speaker, text


class SemanticAnalyzer:
    """
    Pure function object: analyze(history, current_text) -> SemanticSignals.

    Usage:
        analyzer = SemanticAnalyzer()
        signals = analyzer.analyze(turns, "I think remote work helps because ...")
    """

    def analyze(self, history: Optional[Iterable], current_text: str) -> SemanticSignals:
        turns = [t for t in (_turn_fields(x) for x in (history or [])) if t is not None]
        current = bag_of_words(tokenize(current_text if isinstance(current_text, str) else ""))

        agent_texts = [text for speaker, text in turns if speaker == SPEAKER_AGENT][-AGENT_WINDOW:]
        agent_sims = [cosine_similarity(current, bag_of_words(tokenize(t))) for t in agent_texts]
        max_agent_sim = max(agent_sims) if agent_sims else 0.0
        originality = 1.0 - min(1.0, max_agent_sim)

        last_user = next((text for speaker, text in reversed(turns) if speaker == SPEAKER_USER), None)
        if last_user is None:
            user_sim = NO_PRIOR_USER_SIMILARITY
        else:
            user_sim = cosine_similarity(current, bag_of_words(tokenize(last_user)))

        coherence = 1.0 - abs(user_sim - COHERENCE_PEAK)
        repetition = max(0.0, user_sim - REPETITION_FLOOR)

        return SemanticSignals(
            originality=_clamp01(originality),
            coherence=_clamp01(coherence),
            repetition=_clamp01(repetition),
        )
