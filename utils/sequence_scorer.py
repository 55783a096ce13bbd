"""
Sequence Scorer

Maps the last N utterances to a (confidence, fluency) pair in 0..100, using
whichever backend was resolved when the scorer was configured:

- CustomModel:       encoder -> [1, T, F] tensor (right-aligned to max_time_steps)
                     -> model.predict -> two raw values. A value already inside
                     [0, 1] is used as a probability; a value outside is treated as
                     a logit and squashed. Non-finite values become 0.5.
- EmbeddingFallback: sentence embeddings of the last 4 utterances. Confidence from
                     the average embedding norm (scale 20.0), fluency from the
                     cosine similarity of the two most recent embeddings.
- Unavailable:       score() returns None and the caller skips blending.

Any failure during scoring (encoder error, shape mismatch, model or embedding
call failure) is logged and reported as None, never raised.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

import numpy as np

import config
from utils.sequence_encoder import SequenceEncoder, create_default_encoder

logger = logging.getLogger(__name__)

# Sentences sent to the embedding fallback
EMBEDDING_WINDOW = 4
DEFAULT_MAX_TIME_STEPS = 64


@dataclass(frozen=True)
class SequenceScores:
    """Model confidence and fluency, each 0..100."""
    confidence: float
    fluency: float


@dataclass(frozen=True)
class Unavailable:
    """No model and no embedding provider."""
    name: str = "unavailable"


@dataclass(frozen=True)
class CustomModel:
    """A trained model fed by an encoder. model needs predict(array) -> array-like."""
    model: Any
    encoder: SequenceEncoder
    name: str = "custom_model"


@dataclass(frozen=True)
class EmbeddingFallback:
    """Sentence embeddings. embedder needs embed(list[str]) -> list of vectors."""
    embedder: Any
    scale: float = 20.0
    name: str = "embedding_fallback"


ScorerBackend = Union[Unavailable, CustomModel, EmbeddingFallback]


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def squash(value: float) -> float:
    """
    Map one raw model output to [0, 1].

    In-range values are probabilities and pass through; out-of-range values are
    logits and go through the logistic function. Non-finite -> 0.5.
    """
    v = float(value)
    if not math.isfinite(v):
        return 0.5
    if v < 0.0 or v > 1.0:
        v = 1.0 / (1.0 + math.exp(-v)) if v > -700 else 0.0
    return _clamp01(v)


def right_align(tensor: np.ndarray, max_time_steps: int) -> np.ndarray:
    """Zero-pad at the front or keep the last max_time_steps steps of a [B, T, F] tensor."""
    b, t, f = tensor.shape
    if t == max_time_steps:
        return tensor
    if t > max_time_steps:
        return tensor[:, t - max_time_steps:, :]
    pad = np.zeros((b, max_time_steps - t, f), dtype=tensor.dtype)
    return np.concatenate([pad, tensor], axis=1)


class SequenceScorer:
    """
    Optional learned/heuristic confidence and fluency scorer.

    The backend is resolved once by configure(); score() never checks for a
    different backend at call time.

    Usage:
        scorer = SequenceScorer()
        scorer.configure(create_default_encoder(), 64, model=load_readout_model())
        if scorer.is_ready():
            scores = scorer.score(["I think remote work helps because ..."])
    """

    def __init__(self):
        self.backend: ScorerBackend = Unavailable()
        self.max_time_steps: int = DEFAULT_MAX_TIME_STEPS

    def configure(
        self,
        encoder: Optional[SequenceEncoder] = None,
        max_time_steps: int = DEFAULT_MAX_TIME_STEPS,
        model: Any = None,
        embedder: Any = None,
        embedding_scale: Optional[float] = None,
    ) -> ScorerBackend:
        """
        Resolve the backend: model (with encoder) first, then embedder, else Unavailable.

        Raises:
            ValueError: if max_time_steps < 1
        """
        if int(max_time_steps) < 1:
            raise ValueError("max_time_steps must be >= 1")
        self.max_time_steps = int(max_time_steps)
        if model is not None and encoder is not None:
            self.backend = CustomModel(model=model, encoder=encoder)
        elif embedder is not None:
            scale = embedding_scale if embedding_scale is not None else config.EMBEDDING_SCALE
            self.backend = EmbeddingFallback(embedder=embedder, scale=float(scale))
        else:
            self.backend = Unavailable()
        return self.backend

    def is_ready(self) -> bool:
        return not isinstance(self.backend, Unavailable)

    def score(self, utterances: Sequence[str]) -> Optional[SequenceScores]:
        """Return SequenceScores, or None when unavailable or when inference fails."""
        backend = self.backend
        if isinstance(backend, Unavailable):
            return None
        texts = [u for u in (utterances or []) if isinstance(u, str)]
        try:
            if isinstance(backend, CustomModel):
                return self._score_model(backend, texts)
            return self._score_embeddings(backend, texts)
        except Exception as e:
            logger.warning("Sequence scoring failed (%s): %s", backend.name, e)
            return None

    def _score_model(self, backend: CustomModel, texts: Sequence[str]) -> SequenceScores:
        encoded = np.asarray(backend.encoder(texts), dtype=np.float32)
        if encoded.ndim != 3 or encoded.shape[0] != 1:
            raise ValueError(f"encoder must return shape (1, T, F), got {encoded.shape}")
        shaped = right_align(encoded, self.max_time_steps)
        out = backend.model.predict(shaped)
        if isinstance(out, (list, tuple)) and out and not np.isscalar(out[0]):
            out = out[0]
        values = np.asarray(out, dtype=np.float64).ravel()
        v0 = values[0] if values.size > 0 else 0.5
        v1 = values[1] if values.size > 1 else 0.5
        return SequenceScores(confidence=squash(v0) * 100.0, fluency=squash(v1) * 100.0)

    def _score_embeddings(self, backend: EmbeddingFallback, texts: Sequence[str]) -> SequenceScores:
        sentences = list(texts)[-EMBEDDING_WINDOW:]
        vectors = [np.asarray(v, dtype=np.float64) for v in (backend.embedder.embed(sentences) if sentences else [])]
        norms = [float(np.linalg.norm(v)) for v in vectors]
        avg_norm = sum(norms) / max(1, len(norms))
        sim = 0.5
        if len(vectors) >= 2:
            a, b = vectors[-1], vectors[-2]
            na, nb = np.linalg.norm(a), np.linalg.norm(b)
            cos = float(np.dot(a, b) / (na * nb)) if na and nb else 0.0
            sim = (cos + 1.0) / 2.0
        confidence = _clamp01(0.4 + 0.6 * (avg_norm / backend.scale)) * 100.0
        fluency = _clamp01(0.4 + 0.6 * sim) * 100.0
        return SequenceScores(confidence=confidence, fluency=fluency)


def build_default_scorer(max_time_steps: Optional[int] = None) -> SequenceScorer:
    """
    Scorer wired from config: readout weights (URL, then file) with the default
    encoder, else Azure OpenAI embeddings when enabled, else unavailable.
    """
    from utils.sequence_weights import load_readout_model

    scorer = SequenceScorer()
    steps = max_time_steps if max_time_steps is not None else config.SEQUENCE_MAX_TIME_STEPS
    model = load_readout_model()
    embedder = None
    if model is None and config.is_embedding_configured():
        try:
            from services.embedding_service import get_embedding_service
            embedder = get_embedding_service()
        except Exception as e:
            logger.warning("Embedding fallback init failed: %s", e)
    backend = scorer.configure(create_default_encoder(), steps, model=model, embedder=embedder)
    logger.info("Sequence scorer backend: %s", backend.name)
    return scorer
