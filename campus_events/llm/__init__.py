"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build prompts from the user profile and the campus event list.
- Call Groq LLM to score events and generate match reasons.
- Validate the reply and raise typed errors so callers can fall back.
"""
