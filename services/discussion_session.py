"""
Discussion session host.

Owns one MetricsAccumulator plus everything the host needs around it: the turn
history fed to semantic analysis, the message-keyed snapshot history and the
user message count used by the report. Every mutating call takes the session
lock, so a host may call it from a web handler thread and a vision polling
thread at the same time.
"""

import logging
import threading
import time
from typing import Callable, List, Optional

from utils.emotion_mapper import EmotionEffect, EmotionObservation
from utils.metrics_accumulator import MetricsAccumulator, MetricsSnapshot, ScoreVector, SessionNotActiveError
from utils.report_aggregator import PerformanceReport, ReportAggregator
from utils.semantic_analyzer import SPEAKER_AGENT, SPEAKER_USER, Turn
from utils.sequence_scorer import SequenceScorer

logger = logging.getLogger(__name__)


class DiscussionSession:
    """
    One user's discussion: turns in, snapshots out, report at the end.

    Usage:
        session = DiscussionSession(session_id="s1", user_id="u1", topic="ai-ethics")
        session.start()
        session.add_agent_turn("Welcome! Who would like to start?")
        snap = session.submit_user_message("I think bias audits matter because ...", elapsed_seconds=30)
        session.observe_emotion(observation)
        report = session.generate_report()
    """

    def __init__(
        self,
        session_id: str,
        user_id: str,
        topic: str = "",
        difficulty: str = "intermediate",
        accumulator: Optional[MetricsAccumulator] = None,
        sequence_scorer: Optional[SequenceScorer] = None,
        aggregator: Optional[ReportAggregator] = None,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.session_id = session_id
        self.user_id = user_id
        self.topic = topic
        self.difficulty = difficulty
        self._clock = clock
        self.accumulator = accumulator or MetricsAccumulator(
            sequence_scorer=sequence_scorer, seed=seed, start=False, clock=clock,
        )
        self.aggregator = aggregator or ReportAggregator()
        self._lock = threading.Lock()
        self._turns: List[Turn] = []
        self._snapshots: List[MetricsSnapshot] = []
        self._user_messages = 0
        self._started_at: Optional[float] = None
        self._last_elapsed = 0.0

    @property
    def started(self) -> bool:
        return self._started_at is not None

    @property
    def user_message_count(self) -> int:
        with self._lock:
            return self._user_messages

    def start(self) -> None:
        """Begin (or restart) the session with fresh seed metrics."""
        with self._lock:
            self._reset_locked()
            self._started_at = self._clock()
        logger.info("Discussion session %s started (topic=%r)", self.session_id, self.topic)

    def reset(self) -> None:
        """Discard all progress; the session stays started."""
        with self._lock:
            self._reset_locked()
            if self._started_at is not None:
                self._started_at = self._clock()

    def _reset_locked(self) -> None:
        self.accumulator.reset()
        self._turns = []
        self._snapshots = []
        self._user_messages = 0
        self._last_elapsed = 0.0

    def _require_started(self) -> None:
        if self._started_at is None:
            raise SessionNotActiveError(f"session {self.session_id} has not been started")

    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return max(0.0, self._clock() - self._started_at)

    def add_agent_turn(self, text: str) -> None:
        """Record what an agent said (context for originality). Empty text is ignored."""
        if not isinstance(text, str) or not text.strip():
            return
        with self._lock:
            self._require_started()
            self._turns.append(Turn(SPEAKER_AGENT, text, self._clock()))

    def submit_user_message(
        self,
        text: str,
        is_voice: bool = False,
        elapsed_seconds: Optional[float] = None,
    ) -> MetricsSnapshot:
        """
        Score one user message and append its snapshot to the history.

        Semantic analysis sees the conversation before this message. The
        snapshot's message_count is the number of turns including this one.

        Raises:
            SessionNotActiveError: if start() was never called
        """
        with self._lock:
            self._require_started()
            elapsed = self.elapsed_seconds() if elapsed_seconds is None else elapsed_seconds
            prior = list(self._turns)
            message_count = len(prior) + 1
            snapshot = self.accumulator.record_user_message(
                text, is_voice=is_voice, elapsed_seconds=elapsed,
                message_count=message_count, history=prior,
            )
            if isinstance(text, str) and text.strip():
                self._turns.append(Turn(SPEAKER_USER, text, self._clock()))
                self._user_messages += 1
            self._snapshots.append(snapshot)
            if isinstance(elapsed, (int, float)):
                self._last_elapsed = max(self._last_elapsed, float(elapsed))
            return snapshot

    def observe_emotion(self, observation: Optional[EmotionObservation]) -> EmotionEffect:
        """Apply a vision-pipeline observation to the live scores (no snapshot)."""
        with self._lock:
            self._require_started()
            return self.accumulator.record_emotion_observation(observation)

    def current_state(self) -> ScoreVector:
        with self._lock:
            return self.accumulator.current_state()

    def history(self) -> List[MetricsSnapshot]:
        with self._lock:
            return list(self._snapshots)

    def turns(self) -> List[Turn]:
        with self._lock:
            return list(self._turns)

    def generate_report(self, duration_seconds: Optional[float] = None) -> PerformanceReport:
        """
        Freeze the current state into a PerformanceReport.

        Raises:
            SessionNotActiveError: if start() was never called
        """
        with self._lock:
            self._require_started()
            if duration_seconds is None:
                duration_seconds = max(self._last_elapsed, self.elapsed_seconds())
            report = self.aggregator.generate_report(
                self.session_id,
                self.user_id,
                self.topic,
                self.difficulty,
                duration_seconds,
                self.accumulator.current_state(),
                list(self._snapshots),
                self._user_messages,
            )
        logger.info("Report for session %s: overall score %d", self.session_id, report.overall_score)
        return report
