"""
Default utterance encoder for the sequence scorer.

Turns the most recent utterances into a [1, T, F] feature tensor: one time step
per utterance, F = len(vocab) + 3 features per step:
  - normalized character counts over vocab (counts / truncated length)
  - is_pause:    1 if the text contains "..." or a run of 2+ whitespace
  - has_filler:  1 if a filler/hedge appears anywhere in the text (substring match)
  - length_norm: min(1, length / 120)

Swap in a different encoder to match whatever model you train; the scorer only
relies on the [1, T, F] shape.
"""

import re
from typing import Callable, Sequence

import numpy as np

DEFAULT_VOCAB = "abcdefghijklmnopqrstuvwxyz "
# Only the most recent utterances are encoded
MAX_UTTERANCES = 16
# Per-utterance character limit
MAX_CHARS = 200
# Length (chars) at which length_norm saturates
LENGTH_NORM_CHARS = 120

_PAUSE_RE = re.compile(r"\.\.\.|\s{2,}")
_FILLER_RE = re.compile(r"(uh|um|like|you know|actually|so\s|i guess|maybe)")

SequenceEncoder = Callable[[Sequence[str]], np.ndarray]


def create_default_encoder(vocab: str = DEFAULT_VOCAB) -> SequenceEncoder:
    """
    Build a character-bucket encoder over vocab.

    Returns:
        encoder(utterances) -> np.ndarray of shape (1, T, len(vocab) + 3), float32.
        Empty input yields a single all-zero step.
    """
    char_to_index = {c: i for i, c in enumerate(vocab)}
    vocab_size = len(vocab)
    features_per_step = vocab_size + 3

    def encode(utterances: Sequence[str]) -> np.ndarray:
        steps = []
        for utt in list(utterances or [])[-MAX_UTTERANCES:]:
            text = (utt or "").lower()
            length = min(len(text), MAX_CHARS)
            counts = np.zeros(vocab_size, dtype=np.float32)
            for ch in text[:length]:
                idx = char_to_index.get(ch)
                if idx is not None:
                    counts[idx] += 1
            counts /= max(1, length)
            is_pause = 1.0 if _PAUSE_RE.search(text) else 0.0
            has_filler = 1.0 if _FILLER_RE.search(text) else 0.0
            length_norm = min(1.0, length / LENGTH_NORM_CHARS)
            steps.append(np.concatenate([counts, [is_pause, has_filler, length_norm]]))
        if not steps:
            steps.append(np.zeros(features_per_step, dtype=np.float32))
        return np.asarray(steps, dtype=np.float32)[np.newaxis, :, :]

    return encode
