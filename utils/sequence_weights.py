"""
Sequence Model Weights Loader

Loads trained readout weights for the sequence scorer from an ML backend (URL)
or a local JSON file. When neither is available there is no model and the
scorer falls back to embeddings or reports itself unavailable.

JSON format:
  {"weights": [[w_conf, w_flu], ... F rows ...], "bias": [b_conf, b_flu]}

F must match the encoder's features per step (30 for the default encoder).
Outputs may be probabilities (already 0..1) or logits; the scorer handles both.
"""

import json
import logging
import os
from typing import Optional

import numpy as np
import requests

import config

logger = logging.getLogger(__name__)


class LinearReadoutModel:
    """
    Masked mean-pool over time followed by a linear layer with two outputs.

    Padding steps (all-zero rows) are excluded from the mean so right-aligned
    padding does not dilute short conversations.
    """

    def __init__(self, weights, bias=None):
        w = np.asarray(weights, dtype=np.float64)
        if w.ndim != 2 or w.shape[1] != 2:
            raise ValueError("weights must be an F x 2 matrix")
        b = np.zeros(2) if bias is None else np.asarray(bias, dtype=np.float64).ravel()
        if b.shape != (2,):
            raise ValueError("bias must have 2 elements")
        self.weights = w
        self.bias = b

    @property
    def features(self) -> int:
        return int(self.weights.shape[0])

    def predict(self, inputs: np.ndarray) -> np.ndarray:
        """inputs: (1, T, F) -> (1, 2) raw outputs."""
        x = np.asarray(inputs, dtype=np.float64)
        if x.ndim != 3 or x.shape[2] != self.features:
            raise ValueError(f"expected input (1, T, {self.features}), got {x.shape}")
        mask = np.any(x != 0, axis=2)
        counts = np.maximum(mask.sum(axis=1, keepdims=True), 1)
        pooled = (x * mask[..., np.newaxis]).sum(axis=1) / counts
        return pooled @ self.weights + self.bias

    def to_dict(self) -> dict:
        return {"weights": self.weights.tolist(), "bias": self.bias.tolist()}


def _from_payload(data) -> Optional[LinearReadoutModel]:
    if not isinstance(data, dict) or "weights" not in data:
        return None
    return LinearReadoutModel(data["weights"], data.get("bias"))


def load_readout_model(
    url: Optional[str] = None,
    path: Optional[str] = None,
) -> Optional[LinearReadoutModel]:
    """
    Load from url (or SEQUENCE_MODEL_WEIGHTS_URL), else path (or
    SEQUENCE_MODEL_WEIGHTS_PATH), else None. Never raises.
    """
    # 1) URL
    url = url if url is not None else getattr(config, "SEQUENCE_MODEL_WEIGHTS_URL", None)
    if url:
        try:
            r = requests.get(url, timeout=5)
            if r.ok:
                model = _from_payload(r.json())
                if model is not None:
                    return model
            logger.warning("Sequence model weights at %s unusable (status %s)", url, r.status_code)
        except Exception as e:
            logger.warning("Sequence model weights download failed: %s", e)

    # 2) File
    path = path if path is not None else getattr(config, "SEQUENCE_MODEL_WEIGHTS_PATH", None)
    if path and os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                model = _from_payload(json.load(f))
            if model is not None:
                return model
            logger.warning("Sequence model weights file %s has no 'weights'", path)
        except Exception as e:
            logger.warning("Sequence model weights file %s failed to load: %s", path, e)

    # 3) No model
    return None
