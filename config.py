"""
=============================================================================
CONFIGURATION FOR DISCUSSION COACH (config.py)
=============================================================================

WHAT THIS FILE DOES (in plain language):
----------------------------------------
This file holds ALL tunable settings for the scoring engine in one place.
Other modules read from it instead of hard-coding numbers. Values come from
the environment (e.g. your .env file or system variables) so a host app can
tune scoring or point at a trained model without changing code.

MAIN GROUPS OF SETTINGS:
------------------------
  1. Accumulator     : Smoothing factor, jitter amplitude/seed, speaking-rate clamp.
  2. Sequence scorer : Time steps, where to load the readout model from, embedding fallback.
  3. Azure OpenAI    : Optional embedding deployment used when no trained model is present.
  4. Report          : Thresholds for strengths, weaknesses and recommendations.

HOW VALUES ARE CHOSEN:
---------------------
  - Environment variables (e.g. BLEND_ALPHA) override everything.
  - If an env var is not set, we use the documented default.
  - We never put real API keys or secrets as defaults in code.
=============================================================================
"""

import os
from typing import Optional


def _strip_quotes(s: str) -> str:
    if not s:
        return s
    s = s.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        return s[1:-1].strip()
    return s


def _optional_int(name: str) -> Optional[int]:
    raw = _strip_quotes(os.getenv(name, ""))
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


# ============================================================================
# ACCUMULATOR (running score vector, one per session)
# ============================================================================
# Each user message nudges the scores with small heuristics, a little random
# jitter (natural variance) and, when a model is available, a smoothed blend
# of the model's confidence/fluency.
# ----------------------------------------------------------------------------
# Exponential smoothing factor for blending sequence-model output: new = (1-a)*old + a*model
BLEND_ALPHA: float = float(os.getenv("BLEND_ALPHA", "0.35"))
# Uniform jitter amplitude for confidence, fluency, teamwork, reasoning
JITTER_AMPLITUDE: float = float(os.getenv("JITTER_AMPLITUDE", "1.0"))
# Originality jitters slightly more
ORIGINALITY_JITTER_AMPLITUDE: float = float(os.getenv("ORIGINALITY_JITTER_AMPLITUDE", "1.5"))
# Seed for the jitter generator; unset means a fresh nondeterministic generator per accumulator
JITTER_SEED: Optional[int] = _optional_int("JITTER_SEED")
# Speaking rate is clamped to a human-plausible range so one quick message can't spike it
WPM_MIN: float = float(os.getenv("WPM_MIN", "30"))
WPM_MAX: float = float(os.getenv("WPM_MAX", "230"))

# ============================================================================
# SEQUENCE SCORER (optional learned confidence/fluency)
# ============================================================================
# Order of preference, decided once when the scorer is configured:
#   1. A trained readout model (URL, then local JSON file)
#   2. Sentence embeddings from Azure OpenAI (if enabled and configured)
#   3. Unavailable (the accumulator simply skips the blend step)
# ----------------------------------------------------------------------------
SEQUENCE_MAX_TIME_STEPS: int = int(os.getenv("SEQUENCE_MAX_TIME_STEPS", "64"))
# Optional: fetch readout weights from an ML backend (JSON body)
SEQUENCE_MODEL_WEIGHTS_URL: str = _strip_quotes(os.getenv("SEQUENCE_MODEL_WEIGHTS_URL", ""))
# Local fallback file: {"weights": [[w_conf, w_flu], ...], "bias": [b_conf, b_flu]}
SEQUENCE_MODEL_WEIGHTS_PATH: str = _strip_quotes(
    os.getenv("SEQUENCE_MODEL_WEIGHTS_PATH", "weights/sequence_model.json")
)
SEQUENCE_EMBEDDING_ENABLED: bool = os.getenv("SEQUENCE_EMBEDDING_ENABLED", "false").lower() == "true"
# Empirical embedding-norm scale used to map magnitude to confidence
EMBEDDING_SCALE: float = float(os.getenv("EMBEDDING_SCALE", "20.0"))

# ============================================================================
# AZURE OPENAI (embedding fallback only)
# ============================================================================
# No default secrets; set AZURE_OPENAI_KEY and AZURE_OPENAI_ENDPOINT in env.
AZURE_OPENAI_KEY: str = _strip_quotes(os.getenv("AZURE_OPENAI_KEY", ""))
AZURE_OPENAI_ENDPOINT: str = _strip_quotes(os.getenv("AZURE_OPENAI_ENDPOINT", "")).rstrip("/")
AZURE_OPENAI_API_VERSION: str = _strip_quotes(os.getenv("AZURE_OPENAI_API_VERSION", "2024-10-21"))
EMBEDDING_DEPLOYMENT_NAME: str = _strip_quotes(
    os.getenv("EMBEDDING_DEPLOYMENT_NAME", "text-embedding-3-small")
)
# Per-request timeout (seconds); scoring holds the session lock while embedding
EMBEDDING_TIMEOUT_SECONDS: float = float(os.getenv("EMBEDDING_TIMEOUT_SECONDS", "5"))
EMBEDDING_MAX_RETRIES: int = int(os.getenv("EMBEDDING_MAX_RETRIES", "0"))

# ============================================================================
# REPORT (end-of-session feedback)
# ============================================================================
# Field >= STRENGTH_THRESHOLD -> strength; field < WEAKNESS_THRESHOLD -> weakness
STRENGTH_THRESHOLD: float = float(os.getenv("STRENGTH_THRESHOLD", "75"))
WEAKNESS_THRESHOLD: float = float(os.getenv("WEAKNESS_THRESHOLD", "65"))
# Metric below this pulls in its recommendation list
RECOMMENDATION_THRESHOLD: float = float(os.getenv("RECOMMENDATION_THRESHOLD", "60"))
FILLER_WEAKNESS_THRESHOLD: int = int(os.getenv("FILLER_WEAKNESS_THRESHOLD", "10"))
FILLER_RECOMMENDATION_THRESHOLD: int = int(os.getenv("FILLER_RECOMMENDATION_THRESHOLD", "8"))


def is_embedding_configured() -> bool:
    """True when the Azure OpenAI embedding fallback can be used."""
    return bool(SEQUENCE_EMBEDDING_ENABLED and AZURE_OPENAI_KEY and AZURE_OPENAI_ENDPOINT)


def get_scoring_config() -> dict:
    """Return accumulator and report settings as a dict (for hosts and diagnostics)."""
    return {
        "blend_alpha": BLEND_ALPHA,
        "jitter_amplitude": JITTER_AMPLITUDE,
        "originality_jitter_amplitude": ORIGINALITY_JITTER_AMPLITUDE,
        "jitter_seed": JITTER_SEED,
        "wpm_min": WPM_MIN,
        "wpm_max": WPM_MAX,
        "strength_threshold": STRENGTH_THRESHOLD,
        "weakness_threshold": WEAKNESS_THRESHOLD,
        "recommendation_threshold": RECOMMENDATION_THRESHOLD,
        "filler_weakness_threshold": FILLER_WEAKNESS_THRESHOLD,
        "filler_recommendation_threshold": FILLER_RECOMMENDATION_THRESHOLD,
    }


def get_sequence_model_config() -> dict:
    """Return sequence scorer settings. Never includes the API key."""
    return {
        "max_time_steps": SEQUENCE_MAX_TIME_STEPS,
        "weights_url": SEQUENCE_MODEL_WEIGHTS_URL or None,
        "weights_path": SEQUENCE_MODEL_WEIGHTS_PATH or None,
        "embedding_enabled": SEQUENCE_EMBEDDING_ENABLED,
        "embedding_configured": is_embedding_configured(),
        "embedding_deployment": EMBEDDING_DEPLOYMENT_NAME,
        "embedding_scale": EMBEDDING_SCALE,
        "embedding_timeout_seconds": EMBEDDING_TIMEOUT_SECONDS,
    }
