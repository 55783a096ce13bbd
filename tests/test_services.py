"""
Service layer tests.

Tests discussion session host, embedding service, default scorer wiring, etc.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import threading
import unittest
from types import SimpleNamespace
from unittest.mock import patch, MagicMock


def _session(**kwargs):
    from services.discussion_session import DiscussionSession
    from tests.fixtures.synthetic_sessions import FixedRandom
    from utils.metrics_accumulator import MetricsAccumulator
    clock = kwargs.pop("clock", lambda: 1000.0)
    kwargs.setdefault("accumulator", MetricsAccumulator(rng=FixedRandom(0.5), start=False, clock=clock))
    return DiscussionSession("s1", "u1", topic=kwargs.pop("topic", "remote-work-future"), clock=clock, **kwargs)


class TestDiscussionSession(unittest.TestCase):
    """Test the per-session host around the accumulator."""

    def test_requires_start(self):
        """Submitting or reporting before start() raises SessionNotActiveError."""
        from utils.metrics_accumulator import SessionNotActiveError
        session = _session()
        self.assertFalse(session.started)
        with self.assertRaises(SessionNotActiveError):
            session.submit_user_message("hello")
        with self.assertRaises(SessionNotActiveError):
            session.generate_report()

    def test_message_count_includes_agent_turns(self):
        """Snapshot message_count counts every turn up to and including the new message."""
        session = _session()
        session.start()
        session.add_agent_turn("Welcome! Who would like to start?")
        self.assertEqual(session.submit_user_message("I would like to start with focus").message_count, 2)
        self.assertEqual(session.submit_user_message("and then collaboration").message_count, 3)
        self.assertEqual(session.user_message_count, 2)
        self.assertEqual(len(session.history()), 2)
        self.assertEqual([t.speaker for t in session.turns()], ["agent", "user", "user"])

    def test_empty_message_snapshot_without_turn(self):
        """Empty messages still produce a snapshot but not a turn."""
        session = _session()
        session.start()
        session.submit_user_message("   ")
        self.assertEqual(len(session.history()), 1)
        self.assertEqual(session.turns(), [])
        self.assertEqual(session.user_message_count, 0)

    def test_agent_history_feeds_originality(self):
        """Echoing the agent lowers originality through the session's history."""
        session = _session()
        session.start()
        session.add_agent_turn("What do you think?")
        snap = session.submit_user_message("what do you think")
        self.assertAlmostEqual(snap.originality, 60.0)

    def test_report_after_participation(self):
        """A session where the user spoke gets a real score and keeps its snapshots."""
        session = _session(topic="Mental health in schools")
        session.start()
        session.add_agent_turn("Let's discuss mental health support in schools.")
        session.submit_user_message("Counselors matter because students need someone to talk to", elapsed_seconds=20.0)
        report = session.generate_report()
        self.assertGreater(report.overall_score, 0)
        self.assertEqual(len(report.progress_over_time), 1)
        self.assertEqual(report.duration, 20.0)
        self.assertEqual(report.improvements[0], "Read WHO and UNESCO briefs on school-based mental health programs")

    def test_report_without_participation(self):
        """Only agents spoke: the non-participation report."""
        from utils import report_text
        session = _session()
        session.start()
        session.add_agent_turn("Anyone?")
        report = session.generate_report(duration_seconds=120.0)
        self.assertEqual(report.overall_score, 0)
        self.assertEqual(report.weaknesses, (report_text.NO_PARTICIPATION_WEAKNESS,))
        self.assertEqual(report.duration, 120.0)

    def test_observe_emotion(self):
        """Emotion observations update the live state without a snapshot."""
        from utils.emotion_mapper import EmotionObservation
        session = _session()
        session.start()
        effect = session.observe_emotion(EmotionObservation({"happy": 0.9}, has_face=True, engagement=0.8))
        self.assertTrue(effect.applied)
        state = session.current_state()
        self.assertEqual(state.dominant_emotion, "happy")
        self.assertAlmostEqual(state.emotional_engagement, 76.0)
        self.assertEqual(session.history(), [])

    def test_reset_clears_progress(self):
        """reset() discards turns, snapshots and counts."""
        from utils.metrics_accumulator import ScoreVector
        session = _session()
        session.start()
        session.submit_user_message("I think so because it works")
        session.reset()
        self.assertEqual(session.history(), [])
        self.assertEqual(session.user_message_count, 0)
        self.assertEqual(session.current_state(), ScoreVector())

    def test_concurrent_submissions(self):
        """Submissions from several threads are all recorded."""
        session = _session()
        session.start()

        def worker(n):
            for i in range(25):
                session.submit_user_message(f"thread {n} message {i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(session.user_message_count, 100)
        self.assertEqual(len(session.history()), 100)
        self.assertEqual(sorted(s.message_count for s in session.history()), list(range(1, 101)))

    def test_default_accumulator_uses_seed(self):
        """Sessions built with the same seed score identically."""
        from services.discussion_session import DiscussionSession
        snaps = []
        for _ in range(2):
            session = DiscussionSession("s", "u", seed=11, clock=lambda: 5.0)
            session.start()
            snaps.append(session.submit_user_message("A reasonable answer because of evidence"))
        self.assertEqual(snaps[0], snaps[1])


class TestEmbeddingService(unittest.TestCase):
    """Test the Azure OpenAI embedding wrapper."""

    def test_embed_orders_by_index(self):
        """Vectors come back in input order even if the API reorders them."""
        from services.embedding_service import AzureEmbeddingService
        client = MagicMock()
        client.embeddings.create.return_value = SimpleNamespace(data=[
            SimpleNamespace(index=1, embedding=[0.0, 1.0]),
            SimpleNamespace(index=0, embedding=[1.0, 0.0]),
        ])
        service = AzureEmbeddingService(client=client, deployment_name="emb")
        self.assertEqual(service.embed(["first", ""]), [[1.0, 0.0], [0.0, 1.0]])
        client.embeddings.create.assert_called_once_with(model="emb", input=["first", " "])

    def test_embed_empty_makes_no_request(self):
        """Empty input returns [] without calling the API."""
        from services.embedding_service import AzureEmbeddingService
        client = MagicMock()
        self.assertEqual(AzureEmbeddingService(client=client, deployment_name="emb").embed([]), [])
        client.embeddings.create.assert_not_called()

    @patch("services.embedding_service.AzureOpenAI")
    def test_get_embedding_service_returns_singleton(self, mock_client):
        """get_embedding_service should return same instance on subsequent calls."""
        import services.embedding_service as mod
        mod._embedding_service = None
        a = mod.get_embedding_service()
        b = mod.get_embedding_service()
        self.assertIs(a, b)
        mock_client.assert_called_once()
        mod._embedding_service = None

    @patch("services.embedding_service.AzureOpenAI")
    def test_client_uses_bounded_timeout(self, mock_client):
        """The Azure client is built with the configured timeout and retry limit."""
        import config
        from services.embedding_service import AzureEmbeddingService
        AzureEmbeddingService(deployment_name="emb")
        kwargs = mock_client.call_args.kwargs
        self.assertEqual(kwargs["timeout"], config.EMBEDDING_TIMEOUT_SECONDS)
        self.assertEqual(kwargs["max_retries"], config.EMBEDDING_MAX_RETRIES)
        self.assertLessEqual(kwargs["timeout"], 30)

    def test_embedding_timeout_does_not_fail_message(self):
        """A timed-out embedding request skips the blend and the session keeps working."""
        from utils.sequence_scorer import SequenceScorer
        embedder = MagicMock()
        embedder.embed.side_effect = TimeoutError("request timed out")
        scorer = SequenceScorer()
        scorer.configure(embedder=embedder)
        session = _session(accumulator=None, sequence_scorer=scorer)
        session.start()
        snap = session.submit_user_message("hello there")
        self.assertEqual(snap.message_count, 1)
        embedder.embed.assert_called_once()
        self.assertIn("confidence", session.generate_report().to_dict()["final_metrics"])


class TestBuildDefaultScorer(unittest.TestCase):
    """Test config-driven scorer wiring."""

    @patch("utils.sequence_weights.load_readout_model")
    def test_weights_select_custom_model(self, mock_load):
        """Loaded readout weights give a CustomModel backend."""
        import numpy as np
        from utils.sequence_scorer import build_default_scorer, CustomModel
        from utils.sequence_weights import LinearReadoutModel
        mock_load.return_value = LinearReadoutModel(np.zeros((30, 2)), [0.5, 0.5])
        scorer = build_default_scorer(max_time_steps=8)
        self.assertIsInstance(scorer.backend, CustomModel)
        self.assertEqual(scorer.max_time_steps, 8)
        scores = scorer.score(["hello there"])
        self.assertAlmostEqual(scores.confidence, 50.0)

    @patch("services.embedding_service.get_embedding_service")
    @patch("config.is_embedding_configured", return_value=True)
    @patch("utils.sequence_weights.load_readout_model", return_value=None)
    def test_embeddings_when_no_weights(self, mock_load, mock_configured, mock_service):
        """Without weights, configured embeddings give an EmbeddingFallback backend."""
        from utils.sequence_scorer import build_default_scorer, EmbeddingFallback
        from tests.fixtures.synthetic_sessions import StubEmbedder
        mock_service.return_value = StubEmbedder([[3.0, 4.0]])
        scorer = build_default_scorer()
        self.assertIsInstance(scorer.backend, EmbeddingFallback)
        self.assertTrue(scorer.is_ready())

    @patch("config.is_embedding_configured", return_value=False)
    @patch("utils.sequence_weights.load_readout_model", return_value=None)
    def test_nothing_configured_is_unavailable(self, mock_load, mock_configured):
        """No weights and no embeddings leave the scorer unavailable."""
        from utils.sequence_scorer import build_default_scorer, Unavailable
        scorer = build_default_scorer()
        self.assertIsInstance(scorer.backend, Unavailable)
        self.assertFalse(scorer.is_ready())


class TestConfig(unittest.TestCase):
    """Test config helpers."""

    def test_scoring_config_keys(self):
        """get_scoring_config exposes the tunables used by the accumulator and report."""
        import config
        cfg = config.get_scoring_config()
        for key in ("blend_alpha", "jitter_amplitude", "wpm_min", "wpm_max", "strength_threshold"):
            self.assertIn(key, cfg)

    def test_strip_quotes(self):
        """Quoted env values are unquoted."""
        import config
        self.assertEqual(config._strip_quotes('"abc"'), "abc")
        self.assertEqual(config._strip_quotes("'abc'"), "abc")
        self.assertEqual(config._strip_quotes("abc"), "abc")


if __name__ == "__main__":
    unittest.main()
