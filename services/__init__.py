"""
Services package for Discussion Coach.

This package contains the host-facing pieces around the scoring engine:
- Discussion session: per-user session with locking, turn and snapshot history
- Azure OpenAI embeddings: optional fallback for the sequence scorer
"""
