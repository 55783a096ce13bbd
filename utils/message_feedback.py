"""Per-message coaching tips shown next to a user's chat message."""

import re
from typing import List

from utils import report_text

SHORT_MESSAGE_CHARS = 20
_FILLER_TIP_RE = re.compile(r"\b(uh|um|like|you know)\b", re.IGNORECASE)
_REASONING_WORDS = ("because", "since", "therefore")


def message_suggestions(text: str) -> List[str]:
    """Return zero or more fixed tips for one message, in a stable order."""
    if not isinstance(text, str):
        return []
    tips = []
    if len(text) < SHORT_MESSAGE_CHARS:
        tips.append(report_text.TIP_ELABORATE)
    if _FILLER_TIP_RE.search(text):
        tips.append(report_text.TIP_FILLERS)
    if not any(word in text for word in _REASONING_WORDS):
        tips.append(report_text.TIP_REASONING)
    # Only flag shouting when there are letters to shout
    if text == text.upper() and any(c.isalpha() for c in text):
        tips.append(report_text.TIP_TONE)
    return tips
