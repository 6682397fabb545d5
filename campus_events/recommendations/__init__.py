"""
Event recommendation engine.

Responsibilities:
- Rank campus events against a user's major and interests.
- Prefer the external language model when a credential is configured.
- Fall back to deterministic tag-matching scores on any model failure.
- Filter clubs whose categories overlap the user's interests.
"""
